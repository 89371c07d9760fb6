from __future__ import annotations

"""Portal application: wires state, gateway, session store and report cache.

:class:`PortalApp` is the single entry point used by the Streamlit layer.
State changes go through :meth:`PortalApp.dispatch` with one of the action
types from :mod:`portal.state`; the same operations are also available as
plain methods.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from config import config
from portal.demo_backend import DemoGateway
from portal.gateway import BackendGateway
from portal.models import ImageUpload, Report, ReportDraft, User
from portal.report_cache import ReportCache
from portal.router import Page, PageLike
from portal.session import SessionStore
from portal.state import (
    Action,
    AdminLogin,
    AppState,
    AssignWorker,
    Back,
    CompleteReport,
    LoadAllReports,
    LoadUserReports,
    Login,
    Logout,
    Navigate,
    Register,
    SetLanguage,
    SubmitReport,
    UpdateProfile,
    UpdateReport,
)
from portal.view_selector import ViewSelection, select_view
from utils.database import TokenStore

logger = logging.getLogger(__name__)


class PortalApp:
    """Application facade over one :class:`AppState`."""

    def __init__(self, gateway: Any, state: Optional[AppState] = None) -> None:
        self.state = state or AppState()
        self.gateway = gateway
        self.reports = ReportCache(self.state, gateway)
        self.session = SessionStore(self.state, gateway, self.reports)
        self._handlers: Dict[type, Callable[[Any], Any]] = {
            Login: lambda a: self.session.login(a.email, a.password),
            AdminLogin: lambda a: self.session.admin_login(a.email, a.password, a.role, a.department),
            Register: lambda a: self.session.register(a.user_data),
            UpdateProfile: lambda a: self.session.update_profile(a.updates),
            Logout: lambda a: self.session.logout(),
            Navigate: lambda a: self.navigate(a.page),
            Back: lambda a: self.back(),
            SetLanguage: lambda a: self.set_language(a.language),
            LoadUserReports: lambda a: self.reports.load_user_reports(self.state.user),
            LoadAllReports: lambda a: self.reports.load_all_reports(self.state.user),
            SubmitReport: lambda a: self.reports.submit_report(self.state.user, a.draft, a.image),
            UpdateReport: lambda a: self.reports.update_report(a.report_id, a.updates, persist=a.persist),
            AssignWorker: lambda a: self.reports.assign_worker(a.report_id, a.worker_id, persist=a.persist),
            CompleteReport: lambda a: self.reports.complete_report(a.report_id, a.proof, a.notes),
        }

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, action: Action) -> Any:
        """Apply ``action`` and return the handler's result."""
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Unknown action: {type(action).__name__}")
        logger.debug("Dispatch %s", type(action).__name__)
        return handler(action)

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def page(self) -> Page:
        return self.state.page

    @property
    def language(self) -> str:
        return self.state.language

    @property
    def notifier(self):
        return self.state.notifier

    def view(self) -> ViewSelection:
        return select_view(self.state.page, self.state.user)

    def navigate(self, page: PageLike) -> Page:
        return self.state.router.navigate(page)

    def back(self) -> Page:
        return self.state.router.back(self.state.user)

    def set_language(self, language: str) -> str:
        if language not in config.LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.state.language = language
        return language

    # Operation shortcuts mirror the action types.

    def login(self, email: str, password: str) -> bool:
        return self.dispatch(Login(email, password))

    def admin_login(self, email: str, password: str, role: Optional[str] = None, department: Optional[str] = None) -> bool:
        return self.dispatch(AdminLogin(email, password, role, department))

    def register(self, user_data: Dict[str, Any]) -> bool:
        return self.dispatch(Register(user_data))

    def update_profile(self, updates: Dict[str, Any]) -> bool:
        return self.dispatch(UpdateProfile(updates))

    def logout(self) -> None:
        self.dispatch(Logout())

    def submit_report(self, draft: ReportDraft, image: Optional[ImageUpload]) -> Optional[Report]:
        return self.dispatch(SubmitReport(draft, image))

    def update_report(self, report_id: str, updates: Dict[str, Any], persist: bool = False) -> bool:
        return self.dispatch(UpdateReport(report_id, updates, persist))

    def assign_worker(self, report_id: str, worker_id: str, persist: bool = False) -> bool:
        return self.dispatch(AssignWorker(report_id, worker_id, persist))

    def complete_report(self, report_id: str, proof: ImageUpload, notes: Optional[str] = None) -> bool:
        return self.dispatch(CompleteReport(report_id, proof, notes))


def build_app(settings: Optional[Mapping[str, Any]] = None, token_store: Optional[TokenStore] = None) -> PortalApp:
    """Create a :class:`PortalApp` for the configured backend.

    Args:
        settings: Overrides for ``API_BASE_URL``, ``API_TIMEOUT_SECONDS`` and
            ``DEFAULT_LANGUAGE``; anything missing comes from
            :mod:`config.config`.
        token_store: Token persistence for the HTTP gateway.

    Returns:
        PortalApp: App bound to the HTTP gateway when a base URL is set,
        otherwise to the in-process demo backend.
    """
    settings = dict(settings or {})
    base_url = settings.get("API_BASE_URL", config.API_BASE_URL)
    timeout = settings.get("API_TIMEOUT_SECONDS", config.API_TIMEOUT_SECONDS)
    language = settings.get("DEFAULT_LANGUAGE", config.DEFAULT_LANGUAGE)

    if base_url:
        logger.info("Using backend at %s", base_url)
        gateway: Any = BackendGateway(base_url=base_url, token_store=token_store or TokenStore(), timeout=timeout)
    else:
        logger.info("No backend configured; using the demo backend")
        gateway = DemoGateway()

    return PortalApp(gateway, AppState(language=language))


__all__ = ["PortalApp", "build_app"]
