from __future__ import annotations

"""Tests for the report cache: fetching, submission and the status lifecycle."""

import random
from datetime import datetime, timedelta

import pytest

from config.config import AI_DETECTION_TOAST_DELAY, CITY_CENTER, GEOTAG_JITTER_DEGREES, WORKER_NOTIFIED_TOAST_DELAY
from conftest import FakeGateway, backend_problem, backend_user
from portal.models import ImageUpload, Priority, ReportDraft, ReportStatus, Role, StatusEntry, User
from portal.report_cache import DATAFRAME_COLUMNS, ReportCache, status_counts, to_dataframe
from portal.state import AppState, MutationStatus

CITIZEN = User(id="user1", name="राम कुमार", email="ram.kumar@example.com", phone="9876543210", role=Role.CITIZEN)
HEAD = User(id="depthead2", name="सुनीता गुप्ता", email="s@kanpur.gov.in", role=Role.DEPARTMENT_HEAD, department="Water Works")
IMAGE = ImageUpload(filename="pothole.jpg", content=b"\xff\xd8fake-jpeg")


def levels(state: AppState):
    return [(n.level, n.delay) for n in state.notifier.pending]


# ----------------------------------------------------------------------
# update_report / assign_worker
# ----------------------------------------------------------------------


def test_status_update_appends_exactly_one_history_entry(cache: ReportCache, state: AppState) -> None:
    report = cache.find("report-001")
    before = list(report.status_history)

    assert cache.update_report("report-001", {"status": "resolved"}, updated_by="Head")

    assert report.status == ReportStatus.RESOLVED
    assert len(report.status_history) == len(before) + 1
    new_entry = report.status_history[-1]
    assert new_entry.status == ReportStatus.RESOLVED
    assert new_entry.updated_by == "Head"
    assert all(new_entry.timestamp >= e.timestamp for e in before)
    assert report.history_consistent()
    assert ("success", 0.0) in levels(state)


def test_update_without_status_leaves_history_alone(cache: ReportCache) -> None:
    report = cache.find("report-001")
    count = len(report.status_history)

    assert cache.update_report("report-001", {"priority": "low"})

    assert report.priority == Priority.LOW
    assert len(report.status_history) == count


def test_history_timestamp_never_goes_backwards(cache: ReportCache) -> None:
    report = cache.find("report-004")
    future = datetime.now() + timedelta(days=1)
    report.status_history.append(StatusEntry(ReportStatus.PENDING, future, "Clock skew"))

    cache.update_report("report-004", {"status": ReportStatus.IN_PROGRESS})

    assert report.status_history[-1].timestamp >= future
    assert report.history_consistent()


def test_update_unknown_report_returns_false(cache: ReportCache, state: AppState, gateway: FakeGateway) -> None:
    assert cache.update_report("missing", {"status": "resolved"}, persist=True) is False
    assert gateway.calls == []
    assert levels(state) == [("warning", 0.0)]


def test_update_rejects_unknown_fields(cache: ReportCache) -> None:
    with pytest.raises(ValueError):
        cache.update_report("report-001", {"colour": "red"})


@pytest.mark.parametrize(
    "updates",
    [
        {"assigned_worker": "worker9", "status": "done"},
        {"assigned_worker": "worker9", "priority": "urgent"},
    ],
)
def test_invalid_value_leaves_report_untouched(
    cache: ReportCache, gateway: FakeGateway, state: AppState, updates
) -> None:
    report = cache.find("report-001")
    history_len = len(report.status_history)

    assert cache.update_report("report-001", updates, persist=True) is False

    assert report.assigned_worker is None
    assert report.status == ReportStatus.PENDING
    assert report.priority == Priority.HIGH
    assert len(report.status_history) == history_len
    assert gateway.calls == []
    assert state.mutations == []
    assert levels(state) == [("warning", 0.0)]


def test_update_is_local_by_default(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    cache.update_report("report-001", {"status": "in-progress"})

    assert gateway.calls == []
    assert state.mutations == []


def test_persisted_update_round_trips(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    assert cache.update_report("report-001", {"status": "resolved", "notes": "Fixed"}, persist=True)

    assert gateway.calls == [("update_problem", ("report-001", {"status": "completed", "notes": "Fixed"}))]
    assert [m.status for m in state.mutations] == [MutationStatus.APPLIED]
    assert cache.find("report-001").status_history[-1].notes == "Fixed"


def test_failed_persisted_update_rolls_back(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.fail("update_problem", "Admin access required", 403)
    report = cache.find("report-001")
    history_len = len(report.status_history)

    assert cache.update_report("report-001", {"status": "resolved"}, persist=True) is False

    restored = cache.find("report-001")
    assert restored.status == ReportStatus.PENDING
    assert len(restored.status_history) == history_len
    assert state.mutations[-1].status == MutationStatus.FAILED
    assert state.mutations[-1].error == "Admin access required"
    assert ("error", 0.0) in levels(state)


def test_assign_worker_sets_department_and_progress(cache: ReportCache, state: AppState) -> None:
    report = cache.find("report-003")
    assert report.status == ReportStatus.RESOLVED

    assert cache.assign_worker("report-003", "worker2", updated_by="Head")

    assert report.assigned_worker == "worker2"
    assert report.assigned_department == "Water Works"
    assert report.status == ReportStatus.IN_PROGRESS
    assert report.status_history[-1].status == ReportStatus.IN_PROGRESS
    assert ("info", WORKER_NOTIFIED_TOAST_DELAY) in levels(state)


def test_assign_worker_persists_through_assign_endpoint(cache: ReportCache, gateway: FakeGateway) -> None:
    assert cache.assign_worker("report-001", "worker1", persist=True)

    assert gateway.calls == [
        ("assign_worker", ("report-001", {"worker_id": "worker1", "department": "Public Works"}))
    ]


def test_assignment_with_priority_and_notes_sends_both(cache: ReportCache, gateway: FakeGateway) -> None:
    updates = {
        "assigned_worker": "worker1",
        "assigned_department": "Public Works",
        "status": "in-progress",
        "priority": "low",
        "notes": "Urgent before monsoon",
    }

    assert cache.update_report("report-001", updates, persist=True)

    assert gateway.calls == [
        ("assign_worker", ("report-001", {"worker_id": "worker1", "department": "Public Works"})),
        ("update_problem", ("report-001", {"priority": "low", "notes": "Urgent before monsoon"})),
    ]
    assert cache.find("report-001").priority == Priority.LOW


def test_assign_unknown_worker(cache: ReportCache, state: AppState) -> None:
    before = cache.find("report-001").status

    assert cache.assign_worker("report-001", "nobody") is False
    assert cache.find("report-001").status == before
    assert levels(state) == [("warning", 0.0)]


def test_complete_report(cache: ReportCache, gateway: FakeGateway) -> None:
    gateway.responses["complete_problem"] = {
        "problem": backend_problem("report-002", admin_image_base64="QUJD", admin_image_mimetype="image/png")
    }
    proof = ImageUpload(filename="done.png", content=b"ABC", mimetype="image/png")

    assert cache.complete_report("report-002", proof, notes="Patched", updated_by="Vikas")

    report = cache.find("report-002")
    assert report.status == ReportStatus.RESOLVED
    assert report.proof_image == "data:image/png;base64,QUJD"
    assert report.status_history[-1].notes == "Patched"
    assert gateway.calls[0][0] == "complete_problem"


def test_complete_report_failure_keeps_status(cache: ReportCache, gateway: FakeGateway) -> None:
    gateway.fail("complete_problem")

    assert cache.complete_report("report-002", IMAGE) is False
    assert cache.find("report-002").status == ReportStatus.IN_PROGRESS


# ----------------------------------------------------------------------
# submit_report
# ----------------------------------------------------------------------


def submitting_gateway() -> FakeGateway:
    def submit(payload, image):
        return {"problem": backend_problem("p-new", problem_categories=payload["problem_categories"],
                                           others_text=payload["others_text"], priority=payload["priority"])}

    return FakeGateway(submit_problem=submit, analyze_image={"categories": ["Water Issues"]})


def test_submit_requires_user_and_image(state: AppState) -> None:
    gateway = submitting_gateway()
    cache = ReportCache(state, gateway)
    draft = ReportDraft(description="Leak", category="Water Issues")

    assert cache.submit_report(None, draft, IMAGE) is None
    assert cache.submit_report(CITIZEN, draft, None) is None

    assert gateway.calls == []
    assert [n.level for n in state.notifier.pending] == ["error", "error"]


def test_submit_with_explicit_categories(state: AppState) -> None:
    gateway = submitting_gateway()
    cache = ReportCache(state, gateway, rng=random.Random(3))
    draft = ReportDraft(
        description="Emergency! water everywhere",
        category="पानी की समस्या / Water Issues",
        location="Swaroop Nagar",
        categories=["Water Issues", "Drainage & Sewage"],
    )

    report = cache.submit_report(CITIZEN, draft, IMAGE)

    assert report is not None
    assert "analyze_image" not in gateway.names()
    payload = gateway.calls[0][1][0]
    assert payload["problem_categories"] == ["Water Issues", "Drainage & Sewage"]
    assert payload["priority"] == "high"
    assert abs(payload["latitude"] - CITY_CENTER[0]) <= GEOTAG_JITTER_DEGREES
    assert abs(payload["longitude"] - CITY_CENTER[1]) <= GEOTAG_JITTER_DEGREES

    assert state.reports[0] is report
    assert report.category == "Water Issues"
    assert report.location == "Swaroop Nagar"
    assert report.citizen_name == CITIZEN.name
    assert report.priority == Priority.HIGH
    assert report.status == ReportStatus.PENDING
    assert len(report.status_history) == 1
    assert levels(state) == [("success", 0.0), ("info", AI_DETECTION_TOAST_DELAY)]


def test_submit_uses_image_analysis(state: AppState) -> None:
    gateway = submitting_gateway()
    cache = ReportCache(state, gateway)

    cache.submit_report(CITIZEN, ReportDraft(description="Pipe", category="Other Issues"), IMAGE)

    assert gateway.names() == ["analyze_image", "submit_problem"]
    assert gateway.calls[1][1][0]["problem_categories"] == ["Water Issues"]


@pytest.mark.parametrize(
    "category, expected",
    [("Traffic & Roads", ["Traffic & Roads"]), ("Others", [])],
)
def test_submit_falls_back_when_analysis_fails(state: AppState, category: str, expected) -> None:
    gateway = submitting_gateway()
    gateway.fail("analyze_image")
    cache = ReportCache(state, gateway)

    report = cache.submit_report(CITIZEN, ReportDraft(description="Road", category=category), IMAGE)

    assert report is not None
    assert gateway.calls[-1][1][0]["problem_categories"] == expected
    infos = [n for n in state.notifier.pending if n.level == "info"]
    assert len(infos) == (1 if expected else 0)


def test_submit_failure_leaves_cache_unchanged(state: AppState) -> None:
    gateway = submitting_gateway()
    gateway.fail("submit_problem", "Problem submission failed", 500)
    cache = ReportCache(state, gateway)
    before = [r.id for r in state.reports]

    assert cache.submit_report(CITIZEN, ReportDraft(description="x", categories=["Pollution"]), IMAGE) is None
    assert [r.id for r in state.reports] == before


# ----------------------------------------------------------------------
# Fetching
# ----------------------------------------------------------------------


def test_load_all_reports_skips_citizens(cache: ReportCache, gateway: FakeGateway) -> None:
    assert cache.load_all_reports(CITIZEN) is False
    assert cache.load_all_reports(None) is False
    assert gateway.calls == []


def test_load_all_reports_empty_keeps_demo_data(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["get_all_problems"] = {"problems": []}
    before = [r.id for r in state.reports]

    assert cache.load_all_reports(HEAD) is False
    assert [r.id for r in state.reports] == before
    assert levels(state) == [("info", 0.0)]


def test_load_all_reports_replaces_cache(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["get_all_problems"] = {"problems": [backend_problem("a"), backend_problem("b")]}

    assert cache.load_all_reports(HEAD)
    assert [r.id for r in state.reports] == ["a", "b"]


def test_load_all_reports_failure_keeps_previous(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.fail("get_all_problems")
    before = [r.id for r in state.reports]

    assert cache.load_all_reports(HEAD) is False
    assert [r.id for r in state.reports] == before
    assert levels(state) == [("error", 0.0)]


def test_load_user_reports_uses_user_contact(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["get_user_problems"] = {"problems": [backend_problem("mine")]}

    assert cache.load_user_reports(CITIZEN)

    assert gateway.calls == [("get_user_problems", ("user1",))]
    assert [r.id for r in state.reports] == ["mine"]
    assert state.reports[0].citizen_name == CITIZEN.name
    assert state.reports[0].citizen_phone == CITIZEN.phone


def test_load_all_users(cache: ReportCache, gateway: FakeGateway, state: AppState) -> None:
    gateway.responses["get_all_users"] = {
        "users": [backend_user("field-worker", id="w9", department="Water Works")]
    }

    assert cache.load_all_users()
    assert [w.id for w in cache.workers_in("Water Works")] == ["w9"]


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------


def test_reports_for_roles(cache: ReportCache) -> None:
    worker = User(id="worker1", name="Vikas", email="v@k.in", role=Role.FIELD_WORKER, department="Public Works")
    dm = User(id="admin1", name="DM", email="dm@k.in", role=Role.DISTRICT_MAGISTRATE)

    assert {r.id for r in cache.reports_for(worker)} == {"report-002", "report-003"}
    assert {r.id for r in cache.reports_for(HEAD)} == {"report-004"}
    assert len(cache.reports_for(dm)) == 5
    assert len(cache.reports_for(CITIZEN)) == 5
    assert cache.reports_for(None) == []


def test_status_counts_and_dataframe(state: AppState) -> None:
    counts = status_counts(state.reports)
    assert counts == {"pending": 2, "in-progress": 2, "resolved": 1}
    assert status_counts([]) == {"pending": 0, "in-progress": 0, "resolved": 0}

    df = to_dataframe(state.reports)
    assert list(df.columns) == DATAFRAME_COLUMNS
    assert len(df) == 5
    assert df.loc[df["id"] == "report-004", "assigned_department"].item() == "Water Works"
    assert to_dataframe([]).empty
