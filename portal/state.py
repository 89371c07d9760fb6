from __future__ import annotations

"""Application state and the actions that change it.

All mutable portal state lives in one :class:`AppState`. Screens never set
fields on it directly; they hand an action (one of the frozen dataclasses
below) to :meth:`portal.app.PortalApp.dispatch`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from config.config import DEFAULT_LANGUAGE
from portal.mock_data import mock_reports, mock_users
from portal.models import ImageUpload, Report, ReportDraft, User
from portal.router import Page, PageLike, Router
from utils.notifications import Notifier


class MutationStatus(str, Enum):
    PENDING = "pending"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class MutationRecord:
    """Outcome of one report mutation that was sent to the backend."""

    report_id: str
    updates: Dict[str, Any]
    status: MutationStatus = MutationStatus.PENDING
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class AppState:
    router: Router = field(default_factory=Router)
    user: Optional[User] = None
    language: str = DEFAULT_LANGUAGE
    reports: List[Report] = field(default_factory=mock_reports)
    users: List[User] = field(default_factory=mock_users)
    mutations: List[MutationRecord] = field(default_factory=list)
    notifier: Notifier = field(default_factory=Notifier)
    last_activity: Optional[datetime] = None

    @property
    def page(self) -> Page:
        return self.router.current


# ----------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Login:
    email: str
    password: str


@dataclass(frozen=True)
class AdminLogin:
    email: str
    password: str
    role: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Register:
    user_data: Dict[str, Any]


@dataclass(frozen=True)
class UpdateProfile:
    updates: Dict[str, Any]


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class Navigate:
    page: PageLike


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class SetLanguage:
    language: str


@dataclass(frozen=True)
class LoadUserReports:
    pass


@dataclass(frozen=True)
class LoadAllReports:
    pass


@dataclass(frozen=True)
class SubmitReport:
    draft: ReportDraft
    image: Optional[ImageUpload]


@dataclass(frozen=True)
class UpdateReport:
    report_id: str
    updates: Dict[str, Any]
    persist: bool = False


@dataclass(frozen=True)
class AssignWorker:
    report_id: str
    worker_id: str
    persist: bool = False


@dataclass(frozen=True)
class CompleteReport:
    report_id: str
    proof: ImageUpload
    notes: Optional[str] = None


Action = Union[
    Login,
    AdminLogin,
    Register,
    UpdateProfile,
    Logout,
    Navigate,
    Back,
    SetLanguage,
    LoadUserReports,
    LoadAllReports,
    SubmitReport,
    UpdateReport,
    AssignWorker,
    CompleteReport,
]


__all__ = [
    "MutationStatus",
    "MutationRecord",
    "AppState",
    "Login",
    "AdminLogin",
    "Register",
    "UpdateProfile",
    "Logout",
    "Navigate",
    "Back",
    "SetLanguage",
    "LoadUserReports",
    "LoadAllReports",
    "SubmitReport",
    "UpdateReport",
    "AssignWorker",
    "CompleteReport",
    "Action",
]
