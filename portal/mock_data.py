from __future__ import annotations

"""Seed data: the demo complaint set and the municipal staff directory.

The report cache starts from :func:`mock_reports` and the staff directory
from :func:`mock_users`; the demo backend serves the same records. Both
functions return fresh objects on every call so callers may mutate them.
"""

from datetime import datetime
from typing import Dict, List

from config.config import DEVICE_INFO
from portal.models import Geotag, Priority, Report, ReportStatus, Role, StatusEntry, User
from portal.normalize import PLACEHOLDER_IMAGE

# Demo passwords for the seeded accounts (demo backend only).
DEMO_PASSWORDS: Dict[str, str] = {
    "ram.kumar@example.com": "citizen123",
    "priya.sharma@kanpur.gov.in": "dm123",
    "rajesh.kumar@kanpur.gov.in": "head123",
    "sunita.gupta@kanpur.gov.in": "head123",
    "amit.patel@kanpur.gov.in": "head123",
    "vikas.yadav@kanpur.gov.in": "worker123",
    "ramesh.singh@kanpur.gov.in": "worker123",
    "sanjay.kumar@kanpur.gov.in": "worker123",
}


def mock_users() -> List[User]:
    return [
        User("user1", "राम कुमार", "ram.kumar@example.com", "9876543210", "aadhaar", "123456789012",
             Role.CITIZEN, address="Mall Road, Kanpur"),
        User("admin1", "डॉ. प्रिया शर्मा", "priya.sharma@kanpur.gov.in", "9876543213", "aadhaar", "123456789013",
             Role.DISTRICT_MAGISTRATE, department="District Administration"),
        User("depthead1", "राजेश कुमार", "rajesh.kumar@kanpur.gov.in", "9876543215", "aadhaar", "123456789015",
             Role.DEPARTMENT_HEAD, department="Public Works"),
        User("depthead2", "सुनीता गुप्ता", "sunita.gupta@kanpur.gov.in", "9876543217", "aadhaar", "123456789017",
             Role.DEPARTMENT_HEAD, department="Water Works"),
        User("depthead3", "अमित पटेल", "amit.patel@kanpur.gov.in", "9876543219", "aadhaar", "123456789019",
             Role.DEPARTMENT_HEAD, department="Electricity"),
        User("worker1", "विकास यादव", "vikas.yadav@kanpur.gov.in", "9876543214", "aadhaar", "123456789014",
             Role.FIELD_WORKER, department="Public Works"),
        User("worker2", "रामेश सिंह", "ramesh.singh@kanpur.gov.in", "9876543216", "aadhaar", "123456789016",
             Role.FIELD_WORKER, department="Water Works"),
        User("worker3", "संजय कुमार", "sanjay.kumar@kanpur.gov.in", "9876543218", "aadhaar", "123456789018",
             Role.FIELD_WORKER, department="Electricity"),
    ]


def _geotag(lat: float, lon: float, accuracy: float, address: str, name: str, phone: str, at: datetime) -> Geotag:
    return Geotag(
        latitude=lat,
        longitude=lon,
        accuracy=accuracy,
        address=address,
        captured_by=name,
        captured_by_phone=phone,
        captured_at=at,
        device_info=DEVICE_INFO,
    )


def mock_reports() -> List[Report]:
    r1_at = datetime(2024, 1, 15, 10, 30)
    r2_at = datetime(2024, 1, 14, 14, 20)
    r3_at = datetime(2024, 1, 12, 16, 45)
    r4_at = datetime(2024, 1, 13, 8, 15)
    r5_at = datetime(2024, 1, 16, 19, 30)
    return [
        Report(
            id="report-001",
            image=PLACEHOLDER_IMAGE,
            description="सड़क पर कूड़ा फैला हुआ है और बदबू आ रही है",
            category="कचरा और गंदगी / Garbage & Waste",
            location="Mall Road, Kanpur (GPS: 26.4499, 80.3319)",
            submitted_at=r1_at,
            status=ReportStatus.PENDING,
            citizen_name="राम कुमार",
            citizen_phone="9876543210",
            assigned_department="Public Works",
            priority=Priority.HIGH,
            geotag=_geotag(26.4499, 80.3319, 8, "Mall Road, Kanpur", "राम कुमार", "9876543210", r1_at),
            status_history=[
                StatusEntry(ReportStatus.PENDING, r1_at, "System", "शिकायत प्राप्त हुई और Public Works विभाग को भेजी गई"),
            ],
        ),
        Report(
            id="report-002",
            image=PLACEHOLDER_IMAGE,
            description="सड़क में बड़े गड्ढे हैं जो दुर्घटना का कारण बन सकते हैं",
            category="ट्रैफिक और सड़क / Traffic & Roads",
            location="Civil Lines, Kanpur (GPS: 26.4648, 80.3318)",
            submitted_at=r2_at,
            status=ReportStatus.IN_PROGRESS,
            citizen_name="सुनीता शर्मा",
            citizen_phone="9876543211",
            assigned_worker="worker1",
            assigned_department="Public Works",
            priority=Priority.MEDIUM,
            geotag=_geotag(26.4648, 80.3318, 12, "Civil Lines, Kanpur", "सुनीता शर्मा", "9876543211", r2_at),
            status_history=[
                StatusEntry(ReportStatus.PENDING, r2_at, "System", "शिकायत प्राप्त हुई"),
                StatusEntry(ReportStatus.IN_PROGRESS, datetime(2024, 1, 15, 9, 15), "राजेश कुमार (Dept Head)",
                            "विकास यादव को कार्य सौंपा गया"),
            ],
        ),
        Report(
            id="report-003",
            image=PLACEHOLDER_IMAGE,
            description="नालियां बंद हैं और बारिश का पानी जमा हो रहा है",
            category="नालियां और सीवर / Drainage & Sewage",
            location="Swaroop Nagar, Kanpur (GPS: 26.4721, 80.3431)",
            submitted_at=r3_at,
            status=ReportStatus.RESOLVED,
            citizen_name="अजय गुप्ता",
            citizen_phone="9876543212",
            assigned_worker="worker1",
            assigned_department="Public Works",
            priority=Priority.HIGH,
            proof_image=PLACEHOLDER_IMAGE,
            geotag=_geotag(26.4721, 80.3431, 15, "Swaroop Nagar, Kanpur", "अजय गुप्ता", "9876543212", r3_at),
            status_history=[
                StatusEntry(ReportStatus.PENDING, r3_at, "System", "शिकायत प्राप्त हुई"),
                StatusEntry(ReportStatus.IN_PROGRESS, datetime(2024, 1, 13, 10, 30), "राजेश कुमार (Dept Head)",
                            "विकास यादव को भेजा गया"),
                StatusEntry(ReportStatus.RESOLVED, datetime(2024, 1, 14, 15, 20), "विकास यादव (Field Worker)",
                            "नाली की सफाई पूरी, प्रमाण फोटो अपलोड की गई"),
            ],
        ),
        Report(
            id="report-004",
            image=PLACEHOLDER_IMAGE,
            description="पानी की आपूर्ति पिछले 3 दिनों से बंद है",
            category="पानी की समस्या / Water Issues",
            location="Govind Nagar, Kanpur (GPS: 26.4889, 80.3167)",
            submitted_at=r4_at,
            status=ReportStatus.PENDING,
            citizen_name="मोहन शर्मा",
            citizen_phone="9876543214",
            assigned_department="Water Works",
            priority=Priority.HIGH,
            geotag=_geotag(26.4889, 80.3167, 10, "Govind Nagar, Kanpur", "मोहन शर्मा", "9876543214", r4_at),
            status_history=[
                StatusEntry(ReportStatus.PENDING, r4_at, "System", "शिकायत प्राप्त हुई और Water Works विभाग को भेजी गई"),
            ],
        ),
        Report(
            id="report-005",
            image=PLACEHOLDER_IMAGE,
            description="स्ट्रीट लाइट काम नहीं कर रही, रात में अंधेरा रहता है",
            category="बिजली की समस्या / Electricity Issues",
            location="Kalyanpur, Kanpur (GPS: 26.5125, 80.2392)",
            submitted_at=r5_at,
            status=ReportStatus.IN_PROGRESS,
            citizen_name="प्रिया वर्मा",
            citizen_phone="9876543213",
            assigned_worker="worker3",
            assigned_department="Electricity",
            priority=Priority.MEDIUM,
            geotag=_geotag(26.5125, 80.2392, 18, "Kalyanpur, Kanpur", "प्रिया वर्मा", "9876543213", r5_at),
            status_history=[
                StatusEntry(ReportStatus.PENDING, r5_at, "System", "शिकायत प्राप्त हुई"),
                StatusEntry(ReportStatus.IN_PROGRESS, datetime(2024, 1, 17, 10, 0), "अमित पटेल (Dept Head)",
                            "इलेक्ट्रिशियन भेजा गया"),
            ],
        ),
    ]


__all__ = ["DEMO_PASSWORDS", "mock_users", "mock_reports"]
