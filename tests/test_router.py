from __future__ import annotations

"""Tests for navigation and role-gated view selection."""

from typing import Optional

import pytest

from portal import view_selector
from portal.models import Role, User
from portal.router import ACCESS_RULES, BACK_TARGETS, Page, Router, can_navigate, home_page_for
from portal.view_selector import DISTRICT_MAGISTRATE_DASHBOARD, select_view


def make_user(role: Optional[Role], department: Optional[str] = None) -> User:
    return User(id="u", name="Test", email="t@example.com", role=role, department=department)


CITIZEN = make_user(Role.CITIZEN)
WORKER = make_user(Role.FIELD_WORKER, "Public Works")
HEAD = make_user(Role.DEPARTMENT_HEAD, "Water Works")
DM = make_user(Role.DISTRICT_MAGISTRATE, "District Administration")


def test_every_page_has_guard_and_back_target() -> None:
    assert len(Page) == 23
    assert set(ACCESS_RULES) == set(Page)
    assert set(BACK_TARGETS) == set(Page)


def test_router_starts_at_login_and_navigation_is_idempotent() -> None:
    router = Router()
    assert router.current == Page.LOGIN

    router.navigate("history")
    router.navigate(Page.HISTORY)

    assert router.current == Page.HISTORY


def test_navigate_is_unconditional() -> None:
    router = Router()
    router.navigate(Page.ADMIN_DASHBOARD)
    assert router.current == Page.ADMIN_DASHBOARD


def test_navigate_rejects_unknown_page() -> None:
    with pytest.raises(ValueError):
        Router().navigate("nowhere")


def test_navigate_checked() -> None:
    router = Router(Page.DASHBOARD)

    assert router.navigate_checked(Page.ADMIN_DASHBOARD, CITIZEN) is False
    assert router.current == Page.DASHBOARD

    assert router.navigate_checked(Page.MAP, CITIZEN) is True
    assert router.current == Page.MAP


@pytest.mark.parametrize(
    "start, user, expected",
    [
        (Page.HISTORY, CITIZEN, Page.DASHBOARD),
        (Page.REGISTER, None, Page.LOGIN),
        (Page.ADMIN_LOGIN, None, Page.LOGIN),
        (Page.ADMIN_COMPLAINTS, HEAD, Page.DEPARTMENT_HEAD_DASHBOARD),
        (Page.ADMIN_MAP, WORKER, Page.FIELD_WORKER_DASHBOARD),
        (Page.ADMIN_WORKERS, DM, Page.ADMIN_DASHBOARD),
        (Page.FIELD_WORKER_PROFILE, WORKER, Page.FIELD_WORKER_DASHBOARD),
    ],
)
def test_back_targets(start: Page, user: Optional[User], expected: Page) -> None:
    router = Router(start)
    assert router.back(user) == expected
    assert router.current == expected


def test_home_page_for_roles() -> None:
    assert home_page_for(None) == Page.LOGIN
    assert home_page_for(CITIZEN) == Page.DASHBOARD
    assert home_page_for(WORKER) == Page.FIELD_WORKER_DASHBOARD
    assert home_page_for(HEAD) == Page.DEPARTMENT_HEAD_DASHBOARD
    assert home_page_for(DM) == Page.ADMIN_DASHBOARD
    assert home_page_for(make_user(None)) == Page.DASHBOARD


def test_public_pages_render_without_user() -> None:
    for page in (Page.LOGIN, Page.REGISTER, Page.ADMIN_LOGIN):
        selection = select_view(page, None)
        assert selection.authorized
        assert selection.screen == page.value


def test_citizen_cannot_see_admin_dashboard() -> None:
    selection = select_view(Page.ADMIN_DASHBOARD, CITIZEN)

    assert selection.screen is None
    assert not selection.authorized
    assert selection.fallback_page == Page.DASHBOARD


def test_admin_dashboard_split_by_role() -> None:
    assert select_view(Page.ADMIN_DASHBOARD, DM).screen == DISTRICT_MAGISTRATE_DASHBOARD
    assert select_view(Page.ADMIN_DASHBOARD, HEAD).screen == Page.ADMIN_DASHBOARD.value
    assert select_view(Page.ADMIN_DASHBOARD, WORKER).screen == Page.ADMIN_DASHBOARD.value


def test_role_specific_pages() -> None:
    assert select_view(Page.FIELD_WORKER_DASHBOARD, WORKER).authorized
    assert not select_view(Page.FIELD_WORKER_DASHBOARD, HEAD).authorized
    assert select_view(Page.DEPARTMENT_HEAD_DASHBOARD, HEAD).authorized
    assert not select_view(Page.DEPARTMENT_HEAD_DASHBOARD, DM).authorized
    assert select_view(Page.DISTRICT_MAGISTRATE_PROFILE, DM).authorized
    assert not select_view(Page.DISTRICT_MAGISTRATE_PROFILE, WORKER).authorized


def test_staff_subpages_open_to_every_staff_role() -> None:
    for user in (WORKER, HEAD, DM):
        assert select_view(Page.ADMIN_COMPLAINTS, user).authorized
        assert can_navigate(Page.ADMIN_SETTINGS, user)
    assert not can_navigate(Page.ADMIN_SETTINGS, CITIZEN)


def test_signed_out_user_falls_back_to_login() -> None:
    selection = select_view(Page.DASHBOARD, None)

    assert selection.screen is None
    assert selection.fallback_page == Page.LOGIN


def test_select_view_is_deterministic() -> None:
    for page in Page:
        for user in (None, CITIZEN, WORKER, HEAD, DM):
            assert select_view(page, user) == select_view(page.value, user)


def test_unauthorized_is_marked_only_by_missing_screen() -> None:
    assert view_selector.__all__ == ["DISTRICT_MAGISTRATE_DASHBOARD", "ViewSelection", "select_view"]
    assert select_view(Page.ADMIN_SETTINGS, CITIZEN).screen is None
