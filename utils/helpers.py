from __future__ import annotations

"""Helper utilities for the grievance portal.

This module provides:

* Bilingual category splitting and category -> department lookup.
* Keyword based priority derivation for new complaints.
* Simulated geotags around the Kanpur city centre.
"""

import random
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from config.config import CITY_CENTER, DEVICE_INFO, GEOTAG_JITTER_DEGREES
from portal.models import Geotag, Priority

DEFAULT_DEPARTMENT = "General Administration"

# Static category -> department table. The backend may apply its own
# mapping; a department sent by the backend always wins over this one.
CATEGORY_TO_DEPARTMENT: Dict[str, str] = {
    "कचरा और गंदगी": "Public Works",
    "Garbage & Waste": "Public Works",
    "ट्रैफिक और सड़क": "Public Works",
    "Traffic & Roads": "Public Works",
    "प्रदूषण": "Environment",
    "Pollution": "Environment",
    "नालियां और सीवर": "Public Works",
    "Drainage & Sewage": "Public Works",
    "सार्वजनिक स्थान": "Public Works",
    "Public Spaces": "Public Works",
    "आवास और झुग्गियां": "Urban Development",
    "Housing & Slums": "Urban Development",
    "पानी की समस्या": "Water Works",
    "Water Issues": "Water Works",
    "बिजली की समस्या": "Electricity",
    "Electricity Issues": "Electricity",
    "शिक्षा": "Education",
    "Education": "Education",
    "स्वास्थ्य": "Health",
    "Health": "Health",
    "अन्य समस्याएं": "General Administration",
    "Other Issues": "General Administration",
}

# Bilingual choices offered by the complaint form.
CATEGORY_CHOICES: List[str] = [
    "कचरा और गंदगी / Garbage & Waste",
    "ट्रैफिक और सड़क / Traffic & Roads",
    "प्रदूषण / Pollution",
    "नालियां और सीवर / Drainage & Sewage",
    "सार्वजनिक स्थान / Public Spaces",
    "आवास और झुग्गियां / Housing & Slums",
    "पानी की समस्या / Water Issues",
    "बिजली की समस्या / Electricity Issues",
    "शिक्षा / Education",
    "स्वास्थ्य / Health",
    "अन्य समस्याएं / Other Issues",
]

DEPARTMENTS: List[str] = sorted(set(CATEGORY_TO_DEPARTMENT.values()))

URGENT_KEYWORDS: Tuple[str, ...] = (
    "आपातकाल",
    "emergency",
    "तत्काल",
    "urgent",
    "दुर्घटना",
    "accident",
    "बंद",
    "stopped",
    "leak",
)

HIGH_PRIORITY_CATEGORIES = frozenset(
    {"पानी की समस्या", "Water Issues", "बिजली की समस्या", "Electricity Issues"}
)


def split_category(category: Optional[str]) -> List[str]:
    """Split a possibly bilingual ``"<hindi> / <english>"`` category.

    Empty parts are dropped, so ``None``, ``""`` and ``" / "`` all give an
    empty list and a plain category gives a one-element list.
    """
    if not category:
        return []
    return [part.strip() for part in str(category).split("/") if part.strip()]


def department_for_category(category: Optional[str]) -> str:
    """Look up the department responsible for ``category``.

    The full string is tried first, then each half of a bilingual pair.
    """
    if category and category in CATEGORY_TO_DEPARTMENT:
        return CATEGORY_TO_DEPARTMENT[category]
    for part in split_category(category):
        if part in CATEGORY_TO_DEPARTMENT:
            return CATEGORY_TO_DEPARTMENT[part]
    return DEFAULT_DEPARTMENT


def derive_priority(description: str, category: str) -> Priority:
    """Derive a report priority from its text and category.

    ``high`` when the description or category contains any urgent keyword
    (case-insensitive) or the category is a high-priority one, otherwise
    ``medium``. Nothing is ever derived as ``low``.
    """
    description_lower = (description or "").lower()
    category_lower = (category or "").lower()
    for keyword in URGENT_KEYWORDS:
        kw = keyword.lower()
        if kw in description_lower or kw in category_lower:
            return Priority.HIGH

    if category in HIGH_PRIORITY_CATEGORIES:
        return Priority.HIGH
    if any(part in HIGH_PRIORITY_CATEGORIES for part in split_category(category)):
        return Priority.HIGH
    return Priority.MEDIUM


def simulate_geotag(
    address: str,
    captured_by: str,
    captured_by_phone: str,
    rng: Optional[random.Random] = None,
) -> Geotag:
    """Build a placeholder geotag near the city centre.

    Latitude and longitude are jittered by up to ``GEOTAG_JITTER_DEGREES``
    in each direction; accuracy is 5-25 metres. This is not a real GPS fix.
    """
    rng = rng or random.Random()
    lat0, lon0 = CITY_CENTER
    return Geotag(
        latitude=lat0 + rng.uniform(-GEOTAG_JITTER_DEGREES, GEOTAG_JITTER_DEGREES),
        longitude=lon0 + rng.uniform(-GEOTAG_JITTER_DEGREES, GEOTAG_JITTER_DEGREES),
        accuracy=float(rng.randint(5, 25)),
        address=address,
        captured_by=captured_by or "Unknown",
        captured_by_phone=captured_by_phone or "N/A",
        captured_at=datetime.now(),
        device_info=DEVICE_INFO,
    )


__all__ = [
    "DEFAULT_DEPARTMENT",
    "CATEGORY_TO_DEPARTMENT",
    "CATEGORY_CHOICES",
    "DEPARTMENTS",
    "URGENT_KEYWORDS",
    "HIGH_PRIORITY_CATEGORIES",
    "split_category",
    "department_for_category",
    "derive_priority",
    "simulate_geotag",
]
