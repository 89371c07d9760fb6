from __future__ import annotations

"""End-to-end flows against the in-process demo backend."""

import pytest

from portal.app import PortalApp
from portal.demo_backend import DemoGateway
from portal.errors import AuthenticationRequired, GatewayError
from portal.models import ImageUpload, ReportDraft, ReportStatus, Role
from portal.router import Page
from portal.state import AppState, AssignWorker, Login
from utils.database import MemoryTokenStore


@pytest.fixture(scope="module")
def demo() -> DemoGateway:
    """Shared backend for read-only checks; hashing the seed users is slow."""
    return DemoGateway()


@pytest.fixture
def app() -> PortalApp:
    return PortalApp(DemoGateway(), AppState(language="english"))


def test_login_with_demo_password(demo: DemoGateway) -> None:
    result = demo.login("ram.kumar@example.com", "citizen123")

    assert result["user"]["id"] == "user1"
    assert "password_hash" not in result["user"]
    assert demo.token_store.get() == result["token"]


def test_wrong_password_is_rejected(demo: DemoGateway) -> None:
    with pytest.raises(GatewayError) as excinfo:
        demo.login("ram.kumar@example.com", "nope")
    assert excinfo.value.status_code == 401


def test_citizen_cannot_list_all_problems(demo: DemoGateway) -> None:
    demo.login("ram.kumar@example.com", "citizen123")

    with pytest.raises(GatewayError) as excinfo:
        demo.get_all_problems()
    assert excinfo.value.status_code == 403


def test_calls_without_token_need_authentication() -> None:
    gateway = DemoGateway(token_store=MemoryTokenStore())

    with pytest.raises(AuthenticationRequired):
        gateway.get_user_problems("user1")


def test_duplicate_registration(demo: DemoGateway) -> None:
    with pytest.raises(GatewayError) as excinfo:
        demo.register({"email": "ram.kumar@example.com", "password": "x"})
    assert excinfo.value.status_code == 409


def test_citizen_flow(app: PortalApp) -> None:
    assert app.dispatch(Login("ram.kumar@example.com", "citizen123"))
    assert app.page == Page.DASHBOARD
    assert len(app.state.reports) == 5

    draft = ReportDraft(
        category="पानी की समस्या / Water Issues",
        description="Pipe leak flooding the lane",
        location="Swaroop Nagar",
    )
    report = app.submit_report(draft, ImageUpload("water_leak.jpg", b"JPEG"))

    assert report is not None
    assert app.state.reports[0] is report
    assert report.priority.value == "high"
    assert report.assigned_department == "Water Works"
    assert report.status == ReportStatus.PENDING

    app.logout()
    assert app.user is None
    assert app.page == Page.LOGIN


def test_staff_assignment_and_completion(app: PortalApp) -> None:
    assert app.admin_login("priya.sharma@kanpur.gov.in", "dm123", role="district-magistrate")
    assert app.user.role == Role.DISTRICT_MAGISTRATE
    assert app.page == Page.ADMIN_DASHBOARD
    assert any(u.id == "worker2" for u in app.state.users)

    assert app.dispatch(AssignWorker("report-004", "worker2", persist=True))
    report = app.reports.find("report-004")
    assert report.status == ReportStatus.IN_PROGRESS
    assert report.assigned_worker == "worker2"
    assert app.state.mutations[-1].status.value == "applied"
    app.logout()

    assert app.admin_login("ramesh.singh@kanpur.gov.in", "worker123")
    assert app.page == Page.FIELD_WORKER_DASHBOARD
    assert [r.id for r in app.reports.reports_for(app.user)] == ["report-004"]

    assert app.complete_report("report-004", ImageUpload("fixed.png", b"PNG", "image/png"), "Valve replaced")
    report = app.reports.find("report-004")
    assert report.status == ReportStatus.RESOLVED
    assert report.proof_image.startswith("data:image/png;base64,")
    assert report.status_history[-1].notes == "Valve replaced"


def test_citizen_cannot_use_staff_login(app: PortalApp) -> None:
    assert app.admin_login("ram.kumar@example.com", "citizen123") is False
    assert app.user is None
    assert app.gateway.token_store.get() is None
