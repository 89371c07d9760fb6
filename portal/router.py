from __future__ import annotations

"""Navigation router: the closed set of screens and how to move between them.

The router itself is deliberately permissive: :meth:`Router.navigate` sets
any known page, and whether that page can actually be shown to the current
user is decided by :func:`portal.view_selector.select_view`. The access
table below is shared by both so that "can I go there?" and "what renders
there?" never disagree.

There is no URL integration and no back stack; "back" follows a fixed
target per screen.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Union

from portal.models import Role, User

logger = logging.getLogger(__name__)


class Page(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"
    HISTORY = "history"
    MAP = "map"
    PROFILE = "profile"
    ADMIN_LOGIN = "admin-login"
    ADMIN_DASHBOARD = "admin-dashboard"
    ADMIN_COMPLAINTS = "admin-complaints"
    ADMIN_DEPARTMENTS = "admin-departments"
    ADMIN_WORKERS = "admin-workers"
    ADMIN_MAP = "admin-map"
    ADMIN_ANALYTICS = "admin-analytics"
    ADMIN_NOTIFICATIONS = "admin-notifications"
    ADMIN_SETTINGS = "admin-settings"
    FIELD_WORKER_DASHBOARD = "field-worker-dashboard"
    FIELD_WORKER_NOTIFICATIONS = "field-worker-notifications"
    FIELD_WORKER_PROFILE = "field-worker-profile"
    DEPARTMENT_HEAD_DASHBOARD = "department-head-dashboard"
    DEPARTMENT_HEAD_NOTIFICATIONS = "department-head-notifications"
    DEPARTMENT_HEAD_PROFILE = "department-head-profile"
    DISTRICT_MAGISTRATE_NOTIFICATIONS = "district-magistrate-notifications"
    DISTRICT_MAGISTRATE_PROFILE = "district-magistrate-profile"


PageLike = Union[Page, str]
Guard = Callable[[Optional[User]], bool]


def _public(user: Optional[User]) -> bool:
    return True


def _any_user(user: Optional[User]) -> bool:
    return user is not None


def _not_citizen(user: Optional[User]) -> bool:
    return user is not None and user.role != Role.CITIZEN


def _role(role: Role) -> Guard:
    def guard(user: Optional[User]) -> bool:
        return user is not None and user.role == role

    guard.__name__ = f"role_is_{role.value}"
    return guard


# Page -> guard deciding whether the page's screen may render for a user.
ACCESS_RULES: Dict[Page, Guard] = {
    Page.LOGIN: _public,
    Page.REGISTER: _public,
    Page.ADMIN_LOGIN: _public,
    Page.DASHBOARD: _any_user,
    Page.HISTORY: _any_user,
    Page.MAP: _any_user,
    Page.PROFILE: _any_user,
    Page.ADMIN_DASHBOARD: _not_citizen,
    Page.ADMIN_COMPLAINTS: _not_citizen,
    Page.ADMIN_DEPARTMENTS: _not_citizen,
    Page.ADMIN_WORKERS: _not_citizen,
    Page.ADMIN_MAP: _not_citizen,
    Page.ADMIN_ANALYTICS: _not_citizen,
    Page.ADMIN_NOTIFICATIONS: _not_citizen,
    Page.ADMIN_SETTINGS: _not_citizen,
    Page.FIELD_WORKER_DASHBOARD: _role(Role.FIELD_WORKER),
    Page.FIELD_WORKER_NOTIFICATIONS: _role(Role.FIELD_WORKER),
    Page.FIELD_WORKER_PROFILE: _role(Role.FIELD_WORKER),
    Page.DEPARTMENT_HEAD_DASHBOARD: _role(Role.DEPARTMENT_HEAD),
    Page.DEPARTMENT_HEAD_NOTIFICATIONS: _role(Role.DEPARTMENT_HEAD),
    Page.DEPARTMENT_HEAD_PROFILE: _role(Role.DEPARTMENT_HEAD),
    Page.DISTRICT_MAGISTRATE_NOTIFICATIONS: _role(Role.DISTRICT_MAGISTRATE),
    Page.DISTRICT_MAGISTRATE_PROFILE: _role(Role.DISTRICT_MAGISTRATE),
}

ROLE_HOME: Dict[Role, Page] = {
    Role.CITIZEN: Page.DASHBOARD,
    Role.FIELD_WORKER: Page.FIELD_WORKER_DASHBOARD,
    Role.DEPARTMENT_HEAD: Page.DEPARTMENT_HEAD_DASHBOARD,
    Role.DISTRICT_MAGISTRATE: Page.ADMIN_DASHBOARD,
}

# Fixed "back" target per screen. ``None`` means "the user's home page".
BACK_TARGETS: Dict[Page, Optional[Page]] = {
    Page.LOGIN: Page.LOGIN,
    Page.REGISTER: Page.LOGIN,
    Page.ADMIN_LOGIN: Page.LOGIN,
    Page.DASHBOARD: Page.DASHBOARD,
    Page.HISTORY: Page.DASHBOARD,
    Page.MAP: Page.DASHBOARD,
    Page.PROFILE: Page.DASHBOARD,
    Page.ADMIN_DASHBOARD: None,
    Page.ADMIN_COMPLAINTS: None,
    Page.ADMIN_DEPARTMENTS: None,
    Page.ADMIN_WORKERS: None,
    Page.ADMIN_MAP: None,
    Page.ADMIN_ANALYTICS: None,
    Page.ADMIN_NOTIFICATIONS: None,
    Page.ADMIN_SETTINGS: None,
    Page.FIELD_WORKER_DASHBOARD: Page.FIELD_WORKER_DASHBOARD,
    Page.FIELD_WORKER_NOTIFICATIONS: Page.FIELD_WORKER_DASHBOARD,
    Page.FIELD_WORKER_PROFILE: Page.FIELD_WORKER_DASHBOARD,
    Page.DEPARTMENT_HEAD_DASHBOARD: Page.DEPARTMENT_HEAD_DASHBOARD,
    Page.DEPARTMENT_HEAD_NOTIFICATIONS: Page.DEPARTMENT_HEAD_DASHBOARD,
    Page.DEPARTMENT_HEAD_PROFILE: Page.DEPARTMENT_HEAD_DASHBOARD,
    Page.DISTRICT_MAGISTRATE_NOTIFICATIONS: Page.ADMIN_DASHBOARD,
    Page.DISTRICT_MAGISTRATE_PROFILE: Page.ADMIN_DASHBOARD,
}


def to_page(value: PageLike) -> Page:
    """Coerce a page identifier; unknown identifiers raise ``ValueError``."""
    if isinstance(value, Page):
        return value
    return Page(str(value))


def home_page_for(user: Optional[User]) -> Page:
    if user is None or user.role is None:
        return Page.LOGIN if user is None else Page.DASHBOARD
    return ROLE_HOME[user.role]


def can_navigate(page: PageLike, user: Optional[User]) -> bool:
    """Return ``True`` when ``page`` would render a screen for ``user``."""
    return ACCESS_RULES[to_page(page)](user)


class Router:
    """Holds the current page. Starts at :attr:`Page.LOGIN`."""

    def __init__(self, initial: PageLike = Page.LOGIN) -> None:
        self.current: Page = to_page(initial)

    def navigate(self, next_page: PageLike) -> Page:
        """Set the current page unconditionally and return it."""
        page = to_page(next_page)
        if page != self.current:
            logger.debug("Navigate %s -> %s", self.current.value, page.value)
        self.current = page
        return page

    def navigate_checked(self, next_page: PageLike, user: Optional[User]) -> bool:
        """Navigate only when the target is viewable by ``user``."""
        page = to_page(next_page)
        if not can_navigate(page, user):
            logger.warning(
                "Rejected navigation to %s for role %s",
                page.value,
                user.role.value if user is not None and user.role else None,
            )
            return False
        self.navigate(page)
        return True

    def back(self, user: Optional[User]) -> Page:
        target = BACK_TARGETS[self.current]
        return self.navigate(target if target is not None else home_page_for(user))

    def reset(self) -> Page:
        return self.navigate(Page.LOGIN)


__all__ = [
    "Page",
    "PageLike",
    "ACCESS_RULES",
    "ROLE_HOME",
    "BACK_TARGETS",
    "to_page",
    "home_page_for",
    "can_navigate",
    "Router",
]
