from __future__ import annotations

"""Session and identity store.

Handles authentication against the backend and keeps the current
:class:`~portal.models.User` on :class:`~portal.state.AppState`. Every
operation returns a success flag and reports failures as toasts; nothing
is raised to the caller.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional

from config.config import SESSION_TIMEOUT_MINUTES
from portal.errors import GatewayError, ValidationError
from portal.messages import t
from portal.mock_data import mock_reports, mock_users
from portal.models import Role, STAFF_ROLES, User
from portal.normalize import normalize_user, user_to_backend
from portal.report_cache import ReportCache
from portal.router import Page, ROLE_HOME
from portal.state import AppState
from utils.auth import validate_registration

logger = logging.getLogger(__name__)


def _user_from(result: Mapping[str, Any]) -> User:
    payload = result.get("user") if isinstance(result, Mapping) else None
    if not payload:
        raise GatewayError("Malformed response: missing user")
    return normalize_user(payload)


class SessionStore:
    """Login, registration, profile update and logout."""

    def __init__(self, state: AppState, gateway: Any, cache: ReportCache) -> None:
        self.state = state
        self.gateway = gateway
        self.cache = cache

    def _t(self, key: str, **kwargs: object) -> str:
        return t(self.state.language, key, **kwargs)

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    def touch(self) -> None:
        """Record activity for the inactivity timeout."""
        self.state.last_activity = datetime.now()

    def expired(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` when a signed-in session has been idle too long."""
        if self.state.user is None or self.state.last_activity is None:
            return False
        now = now or datetime.now()
        return now - self.state.last_activity > timedelta(minutes=SESSION_TIMEOUT_MINUTES)

    def login(self, email: str, password: str) -> bool:
        """Citizen login; lands on the citizen dashboard."""
        try:
            user = _user_from(self.gateway.login(email, password))
        except GatewayError as exc:
            logger.error("Login failed for %s: %s", email, exc)
            self.state.notifier.error(self._t("login_error", error=str(exc)))
            return False

        self.state.user = user
        self.touch()
        self.state.router.navigate(Page.DASHBOARD)
        logger.info("User %s logged in", user.id)
        self.state.notifier.success(self._t("login_success"))
        self.cache.load_user_reports(user)
        return True

    def admin_login(
        self,
        email: str,
        password: str,
        role: Optional[str] = None,
        department: Optional[str] = None,
    ) -> bool:
        """Staff login.

        The role returned by the backend decides the landing page; the
        requested ``role`` and ``department`` are only logged. A non-staff
        account is rejected without touching state. On success the full
        report list and staff directory are refreshed, in that order.

        Args:
            email: Staff email.
            password: Staff password.
            role: Role chosen on the login form.
            department: Department chosen on the login form.

        Returns:
            bool: ``True`` when a staff user is now signed in.
        """
        logger.info("Admin login attempt for %s (requested role=%s, department=%s)", email, role, department)
        try:
            user = _user_from(self.gateway.admin_login(email, password))
        except GatewayError as exc:
            logger.error("Admin login failed for %s: %s", email, exc)
            self.state.notifier.error(self._t("admin_login_error", error=str(exc)))
            return False

        if user.role not in STAFF_ROLES:
            logger.warning("Rejected admin login for %s with role %s", email, user.role.value if user.role else None)
            self.gateway.logout()
            self.state.notifier.error(self._t("admin_no_privileges"))
            return False

        if role and role != user.role.value:
            logger.warning("Requested role %s differs from account role %s", role, user.role.value)

        self.state.user = user
        self.touch()
        self.state.router.navigate(ROLE_HOME[user.role])
        logger.info("Staff user %s logged in as %s", user.id, user.role.value)
        self.state.notifier.success(self._t("admin_welcome", name=user.name))

        self.cache.refresh_all(user)
        return True

    def register(self, user_data: Dict[str, Any]) -> bool:
        """Create a citizen account and sign it in."""
        try:
            errors = validate_registration(user_data)
            if errors:
                raise ValidationError("; ".join(errors))
            payload = {
                "name": user_data.get("name"),
                "email": user_data.get("email"),
                "phone_number": user_data.get("phone"),
                "aadhar": user_data.get("auth_number"),
                "password": user_data.get("password"),
                "address": user_data.get("address"),
                "role": Role.CITIZEN.value,
            }
            user = _user_from(self.gateway.register(payload))
        except (ValidationError, GatewayError) as exc:
            logger.error("Registration failed for %s: %s", user_data.get("email"), exc)
            self.state.notifier.error(self._t("register_error", error=str(exc)))
            return False

        user = user.merged(
            {
                "role": user.role or Role.CITIZEN,
                "auth_type": user_data.get("auth_type"),
                "auth_number": user.auth_number or user_data.get("auth_number"),
            }
        )
        self.state.user = user
        self.touch()
        self.state.router.navigate(Page.DASHBOARD)
        logger.info("Registered user %s", user.id)
        self.state.notifier.success(self._t("register_success"))
        self.cache.load_user_reports(user)
        return True

    def update_profile(self, updates: Dict[str, Any]) -> bool:
        """Send profile edits to the backend and merge the server copy locally."""
        user = self.state.user
        if user is None:
            logger.warning("update_profile called without a signed-in user")
            return False
        try:
            server = _user_from(self.gateway.update_user(user.id, user_to_backend(updates)))
        except GatewayError as exc:
            logger.error("Profile update failed for %s: %s", user.id, exc)
            self.state.notifier.error(self._t("profile_error", error=str(exc)))
            return False

        self.state.user = user.merged(
            {
                "name": server.name or None,
                "phone": server.phone or None,
                "address": server.address,
                "avatar_url": server.avatar_url,
            }
        )
        self.touch()
        self.state.notifier.success(self._t("profile_updated"))
        return True

    def logout(self) -> None:
        user = self.state.user
        self.gateway.logout()
        self.state.user = None
        self.state.last_activity = None
        self.state.reports = mock_reports()
        self.state.users = mock_users()
        self.state.mutations.clear()
        self.state.router.reset()
        logger.info("User %s logged out", user.id if user else None)
        self.state.notifier.success(self._t("logout_success"))


__all__ = ["SessionStore"]
