from __future__ import annotations

"""Tests for login, staff login, registration, profile update and logout."""

from datetime import datetime, timedelta

import pytest

from config.config import SESSION_TIMEOUT_MINUTES
from conftest import FakeGateway, backend_problem, backend_user
from portal.models import Role
from portal.report_cache import ReportCache
from portal.router import Page
from portal.session import SessionStore
from portal.state import AppState


def staff_gateway(role: str, department: str = "Water Works") -> FakeGateway:
    return FakeGateway(
        admin_login={"user": backend_user(role, department=department), "token": "t"},
        get_all_problems={"problems": [backend_problem("a")]},
        get_all_users={"users": [backend_user("field-worker", id="w1", department=department)]},
    )


@pytest.mark.parametrize(
    "role, landing",
    [
        ("field-worker", Page.FIELD_WORKER_DASHBOARD),
        ("department-head", Page.DEPARTMENT_HEAD_DASHBOARD),
        ("district-magistrate", Page.ADMIN_DASHBOARD),
    ],
)
def test_admin_login_routes_by_returned_role(role: str, landing: Page) -> None:
    state = AppState(language="english")
    gateway = staff_gateway(role)
    session = SessionStore(state, gateway, ReportCache(state, gateway))

    assert session.admin_login("staff@kanpur.gov.in", "secret", role="department-head")

    assert state.page == landing
    assert state.user.role == Role(role)


def test_department_head_login_refreshes_reports_once_then_users(state: AppState) -> None:
    gateway = staff_gateway("department-head")
    session = SessionStore(state, gateway, ReportCache(state, gateway))

    assert session.admin_login("head@kanpur.gov.in", "secret", role="department-head", department="Water Works")

    assert state.page == Page.DEPARTMENT_HEAD_DASHBOARD
    assert gateway.count("get_all_problems") == 1
    assert gateway.names() == ["admin_login", "get_all_problems", "get_all_users"]
    assert [r.id for r in state.reports] == ["a"]
    assert [u.id for u in state.users] == ["w1"]


def test_admin_login_rejects_citizen_account(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["admin_login"] = {"user": backend_user("citizen"), "token": "t"}
    reports_before = [r.id for r in state.reports]

    assert session.admin_login("ram@example.com", "secret", role="district-magistrate") is False

    assert state.user is None
    assert state.page == Page.LOGIN
    assert [r.id for r in state.reports] == reports_before
    assert "get_all_problems" not in gateway.names()
    assert "logout" in gateway.names()
    assert [n.level for n in state.notifier.pending] == ["error"]


def test_admin_login_failure(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.fail("admin_login", "Invalid email or password", 401)

    assert session.admin_login("x@y.z", "bad") is False
    assert state.user is None
    assert state.page == Page.LOGIN


def test_login_success_navigates_and_loads_reports(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["login"] = {"user": backend_user("citizen"), "token": "t"}
    gateway.responses["get_user_problems"] = {"problems": [backend_problem("mine")]}

    assert session.login("citizen@example.com", "secret")

    assert state.user.id == "citizen-1"
    assert state.page == Page.DASHBOARD
    assert gateway.names() == ["login", "get_user_problems"]
    assert [r.id for r in state.reports] == ["mine"]


def test_login_failure_leaves_state(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.fail("login", "Invalid email or password", 401)

    assert session.login("x@y.z", "bad") is False
    assert state.user is None
    assert state.page == Page.LOGIN
    assert state.notifier.pending[0].message == "Login error: Invalid email or password"


def test_login_with_malformed_response(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["login"] = {"token": "t"}

    assert session.login("x@y.z", "pw") is False
    assert state.user is None


VALID_REGISTRATION = {
    "name": "Sita Devi",
    "email": "sita@example.com",
    "phone": "9876501234",
    "auth_type": "aadhaar",
    "auth_number": "123412341234",
    "password": "secret1",
    "confirm_password": "secret1",
}


def test_register_validates_before_network(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    data = dict(VALID_REGISTRATION, auth_number="123", confirm_password="other")

    assert session.register(data) is False
    assert gateway.calls == []
    assert "Aadhaar number should be 12 digits" in state.notifier.pending[0].message


def test_register_creates_citizen(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["register"] = {"user": backend_user("citizen", id="new"), "token": "t"}

    assert session.register(VALID_REGISTRATION)

    payload = gateway.calls[0][1][0]
    assert payload["phone_number"] == "9876501234"
    assert payload["aadhar"] == "123412341234"
    assert payload["role"] == "citizen"
    assert state.user.id == "new"
    assert state.user.role == Role.CITIZEN
    assert state.page == Page.DASHBOARD


def test_update_profile_merges_server_copy(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["login"] = {"user": backend_user("citizen", address="Old Road"), "token": "t"}
    session.login("citizen@example.com", "secret")
    gateway.responses["update_user"] = {
        "user": backend_user("citizen", name="New Name", phone_number="9000000001", address="New Road")
    }

    assert session.update_profile({"name": "New Name", "phone": "9000000001", "address": "New Road"})

    assert gateway.calls[-1] == (
        "update_user",
        ("citizen-1", {"name": "New Name", "phone_number": "9000000001", "address": "New Road"}),
    )
    assert state.user.name == "New Name"
    assert state.user.phone == "9000000001"
    assert state.user.address == "New Road"
    assert state.user.email == "citizen@example.com"


def test_update_profile_requires_user(session: SessionStore, gateway: FakeGateway) -> None:
    assert session.update_profile({"name": "x"}) is False
    assert gateway.calls == []


def test_logout_resets_session(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["login"] = {"user": backend_user("citizen"), "token": "t"}
    gateway.responses["get_user_problems"] = {"problems": []}
    session.login("citizen@example.com", "secret")
    assert state.reports == []

    session.logout()

    assert state.user is None
    assert state.page == Page.LOGIN
    assert len(state.reports) == 5
    assert gateway.names()[-1] == "logout"


def test_session_expiry(session: SessionStore, gateway: FakeGateway, state: AppState) -> None:
    assert session.expired() is False

    gateway.responses["login"] = {"user": backend_user("citizen"), "token": "t"}
    session.login("citizen@example.com", "secret")
    now = datetime.now()

    assert session.expired(now) is False
    assert session.expired(now + timedelta(minutes=SESSION_TIMEOUT_MINUTES + 1)) is True
