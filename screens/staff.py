from __future__ import annotations

"""Staff screens: dashboards, complaint management, workers, analytics."""

import logging
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from config.config import API_BASE_URL, SESSION_TIMEOUT_MINUTES, USE_DEMO_BACKEND
from portal.app import PortalApp
from portal.errors import GatewayError
from portal.messages import status_label
from portal.models import Priority, Report, ReportStatus, Role
from portal.report_cache import status_counts, to_dataframe
from portal.state import AssignWorker, CompleteReport, LoadAllReports, UpdateReport
from utils.helpers import DEPARTMENTS
from utils.ui import status_badge, to_image_upload

logger = logging.getLogger(__name__)

LABELS = {
    "english": {
        "dashboard": "Staff dashboard",
        "dm_dashboard": "District Magistrate dashboard",
        "total": "Total",
        "high_priority": "High priority",
        "refresh": "Refresh complaints",
        "recent": "Recent complaints",
        "complaints": "Complaint management",
        "select": "Select complaint",
        "status": "Status",
        "priority": "Priority",
        "notes": "Notes",
        "update": "Update status",
        "assign": "Assign worker",
        "worker": "Field worker",
        "no_workers": "No field workers available for this department.",
        "no_reports": "No complaints to show.",
        "departments": "Departments",
        "workers": "Field workers",
        "active_tasks": "Active tasks",
        "map": "Complaint map",
        "analytics": "Analytics",
        "by_category": "Complaints by category",
        "by_status": "Complaints by status",
        "by_priority": "Complaints by priority",
        "notifications": "Recent activity",
        "settings": "Settings",
        "backend": "Backend",
        "demo_backend": "In-process demo backend",
        "timeout": "Session timeout (minutes)",
        "health": "Check backend health",
        "tasks": "My tasks",
        "proof": "Proof of completed work",
        "complete": "Mark as resolved",
        "department_dashboard": "Department dashboard",
    },
    "hindi": {
        "dashboard": "कर्मचारी डैशबोर्ड",
        "dm_dashboard": "जिलाधिकारी डैशबोर्ड",
        "total": "कुल",
        "high_priority": "उच्च प्राथमिकता",
        "refresh": "शिकायतें रीफ्रेश करें",
        "recent": "हाल की शिकायतें",
        "complaints": "शिकायत प्रबंधन",
        "select": "शिकायत चुनें",
        "status": "स्थिति",
        "priority": "प्राथमिकता",
        "notes": "टिप्पणी",
        "update": "स्थिति अपडेट करें",
        "assign": "कार्यकर्ता नियुक्त करें",
        "worker": "फील्ड कार्यकर्ता",
        "no_workers": "इस विभाग के लिए कोई फील्ड कार्यकर्ता उपलब्ध नहीं है।",
        "no_reports": "दिखाने के लिए कोई शिकायत नहीं।",
        "departments": "विभाग",
        "workers": "फील्ड कार्यकर्ता",
        "active_tasks": "सक्रिय कार्य",
        "map": "शिकायत नक्शा",
        "analytics": "विश्लेषण",
        "by_category": "श्रेणी अनुसार शिकायतें",
        "by_status": "स्थिति अनुसार शिकायतें",
        "by_priority": "प्राथमिकता अनुसार शिकायतें",
        "notifications": "हाल की गतिविधि",
        "settings": "सेटिंग्स",
        "backend": "बैकएंड",
        "demo_backend": "डेमो बैकएंड",
        "timeout": "सत्र समय सीमा (मिनट)",
        "health": "बैकएंड की स्थिति जांचें",
        "tasks": "मेरे कार्य",
        "proof": "पूर्ण कार्य का प्रमाण",
        "complete": "हल के रूप में चिह्नित करें",
        "department_dashboard": "विभाग डैशबोर्ड",
    },
}


def _labels(app: PortalApp) -> dict:
    return LABELS.get(app.language, LABELS["english"])


def _visible(app: PortalApp) -> List[Report]:
    return app.reports.reports_for(app.user)


def _metrics(app: PortalApp, reports: List[Report]) -> None:
    L = _labels(app)
    counts = status_counts(reports)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric(L["total"], len(reports))
    c2.metric(status_label(app.language, "pending"), counts["pending"])
    c3.metric(status_label(app.language, "in-progress"), counts["in-progress"])
    c4.metric(status_label(app.language, "resolved"), counts["resolved"])
    c5.metric(L["high_priority"], sum(1 for r in reports if r.priority == Priority.HIGH))


def _refresh_button(app: PortalApp) -> None:
    if st.button(f"🔄 {_labels(app)['refresh']}"):
        app.dispatch(LoadAllReports())
        st.rerun()


def _report_table(reports: List[Report]) -> None:
    df = to_dataframe(reports)
    st.dataframe(
        df[["id", "category", "status", "priority", "assigned_department", "assigned_worker", "submitted_at"]],
        use_container_width=True,
    )


def status_form_updates(report: Report, status: str, priority: str, notes: str = "") -> Dict[str, Any]:
    """Fields the status form actually changes; status only when it moved."""
    updates: Dict[str, Any] = {}
    if status != report.status.value:
        updates["status"] = status
    current_priority = report.priority.value if report.priority else None
    if priority != current_priority:
        updates["priority"] = priority
    if notes.strip():
        updates["notes"] = notes.strip()
    return updates


def _status_form(app: PortalApp, report: Report) -> None:
    L = _labels(app)
    statuses = [s.value for s in ReportStatus]
    with st.form(f"status_form_{report.id}"):
        status = st.selectbox(
            L["status"],
            options=statuses,
            index=statuses.index(report.status.value),
            format_func=lambda s: status_label(app.language, s),
        )
        priorities = [p.value for p in Priority]
        priority = st.selectbox(
            L["priority"],
            options=priorities,
            index=priorities.index(report.priority.value if report.priority else Priority.MEDIUM.value),
        )
        notes = st.text_input(L["notes"])
        submitted = st.form_submit_button(L["update"])

    if submitted:
        updates = status_form_updates(report, status, priority, notes)
        if not updates:
            return
        if app.dispatch(UpdateReport(report.id, updates, persist=True)):
            st.rerun()


def _assign_form(app: PortalApp, report: Report) -> None:
    L = _labels(app)
    workers = app.reports.workers_in(report.assigned_department) or app.reports.workers_in()
    if not workers:
        st.info(L["no_workers"])
        return
    with st.form(f"assign_form_{report.id}"):
        worker_id = st.selectbox(
            L["worker"],
            options=[w.id for w in workers],
            format_func=lambda wid: next(f"{w.name} ({w.department})" for w in workers if w.id == wid),
        )
        submitted = st.form_submit_button(L["assign"])
    if submitted and app.dispatch(AssignWorker(report.id, worker_id, persist=True)):
        st.rerun()


def _select_report(app: PortalApp, reports: List[Report], key: str) -> Report:
    L = _labels(app)
    report_id = st.selectbox(
        L["select"],
        options=[r.id for r in reports],
        format_func=lambda rid: next(
            f"{status_badge(r.status.value)} {r.id} · {r.category}" for r in reports if r.id == rid
        ),
        key=key,
    )
    return next(r for r in reports if r.id == report_id)


def _report_details(app: PortalApp, report: Report) -> None:
    with st.expander(report.id, expanded=True):
        c1, c2 = st.columns([1, 2])
        with c1:
            st.image(report.image, use_container_width=True)
        with c2:
            st.write(report.description)
            st.caption(f"📍 {report.location}")
            st.caption(f"👤 {report.citizen_name} · {report.citizen_phone}")
            st.caption(f"🏢 {report.assigned_department} · 👷 {report.assigned_worker or '-'}")
        for entry in report.status_history:
            st.write(
                f"{status_badge(entry.status.value)} {entry.timestamp:%d %b %Y %H:%M} · "
                f"{status_label(app.language, entry.status)} · {entry.updated_by}"
            )


def admin_dashboard_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"📊 {L['dashboard']}")
    _refresh_button(app)
    reports = _visible(app)
    _metrics(app, reports)
    st.subheader(L["recent"])
    _report_table(reports[:10])


def district_magistrate_dashboard_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🏛️ {L['dm_dashboard']}")
    _refresh_button(app)
    reports = app.state.reports
    _metrics(app, reports)

    df = to_dataframe(reports)
    if df.empty:
        st.info(L["no_reports"])
        return
    st.subheader(L["departments"])
    by_department = pd.crosstab(df["assigned_department"], df["status"])
    st.dataframe(by_department, use_container_width=True)

    st.subheader(L["high_priority"])
    _report_table([r for r in reports if r.priority == Priority.HIGH])


def complaints_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"📋 {L['complaints']}")
    reports = _visible(app)
    if not reports:
        st.info(L["no_reports"])
        return
    _report_table(reports)
    report = _select_report(app, reports, key="complaints_select")
    _report_details(app, report)
    c1, c2 = st.columns(2)
    with c1:
        _status_form(app, report)
    with c2:
        _assign_form(app, report)


def departments_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🏢 {L['departments']}")
    df = to_dataframe(app.state.reports)
    rows = []
    for department in DEPARTMENTS:
        subset = df[df["assigned_department"] == department]
        rows.append(
            {
                "department": department,
                "total": len(subset),
                "pending": int((subset["status"] == "pending").sum()),
                "in-progress": int((subset["status"] == "in-progress").sum()),
                "resolved": int((subset["status"] == "resolved").sum()),
                "workers": len(app.reports.workers_in(department)),
            }
        )
    st.dataframe(pd.DataFrame(rows), use_container_width=True)


def workers_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"👷 {L['workers']}")
    user = app.user
    department = user.department if user.role == Role.DEPARTMENT_HEAD else None
    rows = []
    for worker in app.reports.workers_in(department):
        assigned = [r for r in app.state.reports if r.assigned_worker == worker.id]
        rows.append(
            {
                "id": worker.id,
                "name": worker.name,
                "department": worker.department,
                "phone": worker.phone,
                L["active_tasks"]: sum(1 for r in assigned if r.status == ReportStatus.IN_PROGRESS),
                "resolved": sum(1 for r in assigned if r.status == ReportStatus.RESOLVED),
            }
        )
    st.dataframe(pd.DataFrame(rows), use_container_width=True)


def admin_map_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🗺️ {L['map']}")
    df = to_dataframe(_visible(app)).dropna(subset=["latitude", "longitude"])
    if df.empty:
        st.info(L["no_reports"])
        return
    st.map(df, latitude="latitude", longitude="longitude")


def analytics_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"📈 {L['analytics']}")
    df = to_dataframe(app.state.reports)
    if df.empty:
        st.info(L["no_reports"])
        return
    st.subheader(L["by_category"])
    st.bar_chart(df["category"].value_counts())
    c1, c2 = st.columns(2)
    with c1:
        st.subheader(L["by_status"])
        st.bar_chart(df["status"].value_counts())
    with c2:
        st.subheader(L["by_priority"])
        st.bar_chart(df["priority"].value_counts())


def notifications_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🔔 {L['notifications']}")
    events = [
        (entry, report)
        for report in _visible(app)
        for entry in report.status_history
    ]
    events.sort(key=lambda pair: pair[0].timestamp, reverse=True)
    if not events:
        st.info(L["no_reports"])
    for entry, report in events[:25]:
        st.write(
            f"{status_badge(entry.status.value)} **{report.id}** · {report.category} · "
            f"{status_label(app.language, entry.status)} · {entry.updated_by} · {entry.timestamp:%d %b %H:%M}"
        )


def settings_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"⚙️ {L['settings']}")
    st.write(f"**{L['backend']}:** {L['demo_backend'] if USE_DEMO_BACKEND else API_BASE_URL}")
    st.write(f"**{L['timeout']}:** {SESSION_TIMEOUT_MINUTES}")
    if st.button(L["health"]):
        try:
            st.json(app.gateway.health_check())
        except GatewayError as exc:
            logger.error("Health check failed: %s", exc)
            st.error(str(exc))


def field_worker_dashboard_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🛠️ {L['tasks']}")
    _refresh_button(app)
    reports = _visible(app)
    _metrics(app, reports)
    open_tasks = [r for r in reports if r.status != ReportStatus.RESOLVED]
    if not open_tasks:
        st.info(L["no_reports"])
        return
    report = _select_report(app, open_tasks, key="worker_select")
    _report_details(app, report)
    with st.form(f"complete_form_{report.id}"):
        proof = st.file_uploader(L["proof"], type=["jpg", "jpeg", "png", "webp"])
        notes = st.text_input(L["notes"])
        submitted = st.form_submit_button(L["complete"])
    if submitted:
        image = to_image_upload(proof)
        if image is None:
            st.warning(L["proof"])
        elif app.dispatch(CompleteReport(report.id, image, notes.strip() or None)):
            st.rerun()


def department_head_dashboard_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🏢 {L['department_dashboard']} · {app.user.department or '-'}")
    _refresh_button(app)
    reports = _visible(app)
    _metrics(app, reports)
    unassigned = [r for r in reports if r.assigned_worker is None and r.status != ReportStatus.RESOLVED]
    if not reports:
        st.info(L["no_reports"])
        return
    _report_table(reports)
    if unassigned:
        st.subheader(L["assign"])
        report = _select_report(app, unassigned, key="head_select")
        _report_details(app, report)
        _assign_form(app, report)


__all__ = [
    "status_form_updates",
    "admin_dashboard_screen",
    "district_magistrate_dashboard_screen",
    "complaints_screen",
    "departments_screen",
    "workers_screen",
    "admin_map_screen",
    "analytics_screen",
    "notifications_screen",
    "settings_screen",
    "field_worker_dashboard_screen",
    "department_head_dashboard_screen",
]
