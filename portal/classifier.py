"""Simple keyword-based category classifier used by the demo backend."""

from typing import Dict, List, Tuple

# English name -> keywords (English, Hindi and transliterated Hindi).
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "Garbage & Waste": ["garbage", "kachra", "कचरा", "कूड़ा", "dustbin", "waste", "smell", "badbu", "बदबू", "trash"],
    "Traffic & Roads": ["road", "sadak", "सड़क", "pothole", "traffic", "accident", "दुर्घटना", "गड्ढे", "footpath"],
    "Drainage & Sewage": ["drain", "nali", "नाली", "नालियां", "sewer", "sewage", "overflow", "clog"],
    "Water Issues": ["water", "pani", "पानी", "supply", "pipeline", "leak", "tank", "tanki", "टंकी"],
    "Electricity Issues": ["electric", "bijli", "बिजली", "streetlight", "light", "wire", "transformer", "power"],
    "Pollution": ["smoke", "pollution", "प्रदूषण", "dhuan", "noise", "dust"],
    "Public Spaces": ["park", "bench", "toilet", "market", "encroachment"],
}


def classify_complaint_simple(text: str) -> Tuple[str, float]:
    """
    Simple keyword-based classification for complaints.
    Returns (category, confidence).
    """
    text_lower = text.lower()

    scores = {
        category: sum(1 for kw in keywords if kw in text_lower)
        for category, keywords in CATEGORY_KEYWORDS.items()
    }

    category = max(scores, key=scores.get)
    max_score = scores[category]
    total = sum(scores.values())

    if total == 0:
        return "Other Issues", 0.0

    return category, max_score / total


def detect_categories(text: str) -> List[str]:
    """Return every category with at least one keyword hit, best first."""
    text_lower = text.lower()
    hits = []
    for category, keywords in CATEGORY_KEYWORDS.items():
        score = sum(1 for kw in keywords if kw in text_lower)
        if score:
            hits.append((score, category))
    hits.sort(key=lambda pair: -pair[0])
    return [category for _, category in hits]
