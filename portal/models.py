from __future__ import annotations

"""Domain types for the grievance portal.

* :class:`User` - a citizen or a member of municipal staff.
* :class:`Report` - a complaint with its geotag and status history.
* :class:`ReportDraft` / :class:`ImageUpload` - what the citizen form hands
  to the report cache on submission.

Role, status and priority values are plain strings constrained by the
``str`` enums below, so they compare equal to the strings the backend
sends (``Role.CITIZEN == "citizen"``).
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    CITIZEN = "citizen"
    FIELD_WORKER = "field-worker"
    DEPARTMENT_HEAD = "department-head"
    DISTRICT_MAGISTRATE = "district-magistrate"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Return the matching role or ``None`` for unknown/missing values."""
        if value is None:
            return None
        try:
            return cls(str(value))
        except ValueError:
            return None


STAFF_ROLES = frozenset({Role.FIELD_WORKER, Role.DEPARTMENT_HEAD, Role.DISTRICT_MAGISTRATE})


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class User:
    """Authenticated portal user."""

    id: str
    name: str
    email: str
    phone: str = ""
    auth_type: str = "aadhaar"
    auth_number: str = ""
    role: Optional[Role] = None
    department: Optional[str] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def merged(self, updates: Dict[str, Any]) -> "User":
        """Return a copy with ``updates`` applied over the known fields.

        ``None`` values in ``updates`` leave the existing field untouched.
        """
        known = {k: v for k, v in updates.items() if k in self.__dataclass_fields__ and v is not None}
        return replace(self, **known)


@dataclass
class Geotag:
    latitude: float
    longitude: float
    captured_by: str
    captured_by_phone: str
    captured_at: datetime
    accuracy: Optional[float] = None
    address: Optional[str] = None
    device_info: Optional[str] = None


@dataclass
class StatusEntry:
    status: ReportStatus
    timestamp: datetime
    updated_by: str
    notes: Optional[str] = None


@dataclass
class Report:
    """A single complaint as held by the report cache."""

    id: str
    image: str
    description: str
    category: str
    location: str
    submitted_at: datetime
    status: ReportStatus = ReportStatus.PENDING
    assigned_worker: Optional[str] = None
    assigned_department: Optional[str] = None
    citizen_name: Optional[str] = None
    citizen_phone: Optional[str] = None
    proof_image: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_resolution: Optional[datetime] = None
    geotag: Optional[Geotag] = None
    status_history: List[StatusEntry] = field(default_factory=list)

    def history_consistent(self) -> bool:
        """Check the intended history invariants.

        Timestamps must be non-decreasing and the last entry must match
        :attr:`status`. An empty history is considered consistent.
        """
        if not self.status_history:
            return True
        stamps = [entry.timestamp for entry in self.status_history]
        if any(later < earlier for earlier, later in zip(stamps, stamps[1:])):
            return False
        return self.status_history[-1].status == self.status


@dataclass
class ReportDraft:
    """Citizen form contents prior to submission."""

    description: str
    category: str = ""
    location: str = ""
    categories: List[str] = field(default_factory=list)
    others_text: Optional[str] = None


@dataclass
class ImageUpload:
    filename: str
    content: bytes
    mimetype: str = "image/jpeg"


__all__ = [
    "Role",
    "STAFF_ROLES",
    "ReportStatus",
    "Priority",
    "User",
    "Geotag",
    "StatusEntry",
    "Report",
    "ReportDraft",
    "ImageUpload",
]
