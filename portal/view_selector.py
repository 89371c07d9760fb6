from __future__ import annotations

"""Role-gated view selection.

:func:`select_view` is a pure function of ``(page, user)``. It answers
which screen renders for the current page, or returns an explicit
unauthorized selection when the user's role fails the page's guard. An
unauthorized selection has no ``screen``; the UI renders a fallback in its
place instead of leaving the page blank.
"""

from dataclasses import dataclass
from typing import Optional

from portal.models import Role, User
from portal.router import ACCESS_RULES, Page, PageLike, home_page_for, to_page

DISTRICT_MAGISTRATE_DASHBOARD = "district-magistrate-dashboard"


@dataclass(frozen=True)
class ViewSelection:
    page: Page
    screen: Optional[str]
    fallback_page: Optional[Page] = None

    @property
    def authorized(self) -> bool:
        return self.screen is not None


def select_view(page: PageLike, user: Optional[User]) -> ViewSelection:
    """Decide which screen renders for ``page`` and ``user``.

    The admin dashboard is split by role: the district magistrate gets the
    district-level dashboard, other staff get the general one. Every other
    authorised page renders the screen of the same name.
    """
    page = to_page(page)
    if not ACCESS_RULES[page](user):
        return ViewSelection(page=page, screen=None, fallback_page=home_page_for(user))

    if page == Page.ADMIN_DASHBOARD and user is not None and user.role == Role.DISTRICT_MAGISTRATE:
        return ViewSelection(page=page, screen=DISTRICT_MAGISTRATE_DASHBOARD)
    return ViewSelection(page=page, screen=page.value)


__all__ = [
    "DISTRICT_MAGISTRATE_DASHBOARD",
    "ViewSelection",
    "select_view",
]
