from __future__ import annotations

"""Conversion of backend payloads into portal domain objects.

The backend speaks its own vocabulary (``not completed`` / ``completed``,
``phone_number``, ``aadhar``, base64 images with a separate mimetype, and
coordinates that may arrive as strings). Everything the report cache and
session store hold passes through the functions here first.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from config.config import DEVICE_INFO
from portal.messages import t
from portal.models import Geotag, Priority, Report, ReportStatus, Role, StatusEntry, User
from utils.helpers import department_for_category

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMjAwIiBoZWlnaHQ9IjIwMCIgeG1sbnM9Imh0dHA6Ly93d3cudzMu"
    "b3JnLzIwMDAvc3ZnIj48cmVjdCB3aWR0aD0iMjAwIiBoZWlnaHQ9IjIwMCIgZmlsbD0iI2RkZGRkZCIvPjx0ZXh0IHg9IjUw"
    "JSIgeT0iNTAlIiBmb250LXNpemU9IjE4IiBmaWxsPSIjOTk5OTk5IiBkeT0iLjNlbSIgdGV4dC1hbmNob3I9Im1pZGRsZSI+"
    "Tm8gSW1hZ2U8L3RleHQ+PC9zdmc+"
)

DEFAULT_CATEGORY = "Other Issues"

_STATUS_MAP = {
    "not completed": ReportStatus.PENDING,
    "in-progress": ReportStatus.IN_PROGRESS,
    "completed": ReportStatus.RESOLVED,
}

# Portal status -> backend status, for updates sent back to the gateway.
BACKEND_STATUS = {
    ReportStatus.PENDING: "not completed",
    ReportStatus.IN_PROGRESS: "in-progress",
    ReportStatus.RESOLVED: "completed",
}


def normalize_status(raw: Any) -> ReportStatus:
    """Map a backend status string onto :class:`ReportStatus`.

    Unknown or missing values default to ``pending``.
    """
    return _STATUS_MAP.get(str(raw).strip().lower() if raw is not None else "", ReportStatus.PENDING)


def normalize_priority(raw: Any) -> Priority:
    try:
        return Priority(str(raw).lower())
    except ValueError:
        return Priority.MEDIUM


def parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 timestamp, tolerating a trailing ``Z``.

    Missing or malformed values fall back to "now" so a bad record still
    renders.
    """
    if isinstance(raw, datetime):
        return raw
    if raw:
        text = str(raw).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Unparseable timestamp %r, using current time", raw)
        else:
            # Keep all cached timestamps naive so they stay comparable.
            return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    return datetime.now()


def _coerce_float(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning("Non-numeric coordinate %r", raw)
        return None


def image_data_uri(base64_data: Optional[str], mimetype: Optional[str]) -> Optional[str]:
    if not base64_data:
        return None
    return f"data:{mimetype or 'image/jpeg'};base64,{base64_data}"


_STATUS_VALUES = {s.value for s in ReportStatus}


def _history_status(raw: Any) -> ReportStatus:
    # History rows may already use portal values ("pending", "resolved").
    if raw in _STATUS_VALUES:
        return ReportStatus(raw)
    return normalize_status(raw)


def _history_from_backend(entries: List[Mapping[str, Any]]) -> List[StatusEntry]:
    history = [
        StatusEntry(
            status=_history_status(entry.get("status")),
            timestamp=parse_timestamp(entry.get("timestamp") or entry.get("created_at")),
            updated_by=str(entry.get("updated_by") or entry.get("updatedBy") or "System"),
            notes=entry.get("notes"),
        )
        for entry in entries
    ]
    history.sort(key=lambda e: e.timestamp)
    return history


def normalize_problem(
    problem: Mapping[str, Any],
    language: str = "english",
    fallback_user: Optional[User] = None,
) -> Report:
    """Convert a backend problem record into a :class:`Report`.

    Args:
        problem: Backend record (``id``, ``problem_categories``,
            ``others_text``, ``latitude``/``longitude``, image fields,
            ``created_at``, ``status``, assignment and ``priority``).
        language: Language for the synthetic history note.
        fallback_user: Owner used for citizen name/phone when the backend
            omits ``user_name``/``user_email`` (user-scoped listings).

    Returns:
        Report: The normalised report.
    """
    categories = problem.get("problem_categories")
    categories = list(categories) if isinstance(categories, (list, tuple)) else []
    category = str(categories[0]) if categories else DEFAULT_CATEGORY

    latitude = _coerce_float(problem.get("latitude"))
    longitude = _coerce_float(problem.get("longitude"))
    created_at = parse_timestamp(problem.get("created_at"))
    status = normalize_status(problem.get("status"))

    citizen_name = problem.get("user_name") or (fallback_user.name if fallback_user else None) or "Unknown"
    citizen_contact = problem.get("user_email") or (fallback_user.phone if fallback_user else None) or "N/A"

    location = f"{latitude}, {longitude}"
    geotag = None
    if latitude is not None and longitude is not None:
        geotag = Geotag(
            latitude=latitude,
            longitude=longitude,
            accuracy=10.0,
            address=location,
            captured_by=citizen_name,
            captured_by_phone=citizen_contact,
            captured_at=created_at,
            device_info=DEVICE_INFO,
        )

    raw_history = problem.get("history")
    if isinstance(raw_history, list) and raw_history:
        history = _history_from_backend(raw_history)
    else:
        history = [
            StatusEntry(
                status=status,
                timestamp=created_at,
                updated_by="System",
                notes=t(language, "complaint_received"),
            )
        ]

    assigned_worker = problem.get("assigned_worker_id")
    estimated = problem.get("estimated_completion")

    return Report(
        id=str(problem.get("id")),
        image=image_data_uri(problem.get("user_image_base64"), problem.get("user_image_mimetype")) or PLACEHOLDER_IMAGE,
        description=problem.get("others_text") or "No description",
        category=category,
        location=location,
        submitted_at=created_at,
        status=status,
        assigned_worker=str(assigned_worker) if assigned_worker else None,
        assigned_department=problem.get("assigned_department") or department_for_category(category),
        citizen_name=citizen_name,
        citizen_phone=citizen_contact,
        proof_image=image_data_uri(problem.get("admin_image_base64"), problem.get("admin_image_mimetype")),
        priority=normalize_priority(problem.get("priority")),
        estimated_resolution=parse_timestamp(estimated) if estimated else None,
        geotag=geotag,
        status_history=history,
    )


def normalize_user(payload: Mapping[str, Any]) -> User:
    """Convert a backend user record into a :class:`User`."""
    return User(
        id=str(payload.get("id")),
        name=str(payload.get("name") or ""),
        email=str(payload.get("email") or ""),
        phone=str(payload.get("phone_number") or payload.get("phone") or ""),
        auth_type=str(payload.get("auth_type") or "aadhaar"),
        auth_number=str(payload.get("aadhar") or payload.get("auth_number") or ""),
        role=Role.parse(payload.get("role")),
        department=payload.get("department"),
        address=payload.get("address"),
        avatar_url=payload.get("avatar_url"),
    )


_USER_TO_BACKEND = {
    "name": "name",
    "phone": "phone_number",
    "address": "address",
    "avatar_url": "avatar_url",
}


def user_to_backend(updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate profile updates into backend field names.

    Only the editable profile fields are forwarded; ``None`` values are
    dropped.
    """
    return {
        _USER_TO_BACKEND[key]: value
        for key, value in updates.items()
        if key in _USER_TO_BACKEND and value is not None
    }


__all__ = [
    "PLACEHOLDER_IMAGE",
    "DEFAULT_CATEGORY",
    "BACKEND_STATUS",
    "normalize_status",
    "normalize_priority",
    "parse_timestamp",
    "image_data_uri",
    "normalize_problem",
    "normalize_user",
    "user_to_backend",
]
