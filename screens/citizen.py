from __future__ import annotations

"""Citizen screens: dashboard with the complaint form, history, map, profile."""

import streamlit as st

from portal.app import PortalApp
from portal.messages import status_label
from portal.models import ReportDraft
from portal.report_cache import status_counts, to_dataframe
from portal.state import LoadUserReports, SubmitReport, UpdateProfile
from utils.helpers import CATEGORY_CHOICES
from utils.ui import back_button, status_badge, to_image_upload

LABELS = {
    "english": {
        "welcome": "Welcome, {name}",
        "new_report": "Report a problem",
        "photo": "Photo of the problem",
        "description": "Describe the problem",
        "category": "Category",
        "categories": "Detected / selected categories (optional)",
        "location": "Location / landmark",
        "submit": "Submit complaint",
        "recent": "Your recent complaints",
        "no_reports": "You have not filed any complaints yet.",
        "history": "My complaints",
        "refresh": "Refresh",
        "timeline": "Status timeline",
        "map": "Complaints on the map",
        "no_geo": "No geotagged complaints to show.",
        "profile": "My profile",
        "name": "Name",
        "phone": "Mobile number",
        "address": "Address",
        "save": "Save",
        "total": "Total",
    },
    "hindi": {
        "welcome": "स्वागत है, {name}",
        "new_report": "समस्या दर्ज करें",
        "photo": "समस्या की फोटो",
        "description": "समस्या का विवरण",
        "category": "श्रेणी",
        "categories": "पहचानी गई / चुनी गई श्रेणियां (वैकल्पिक)",
        "location": "स्थान / पहचान चिन्ह",
        "submit": "शिकायत दर्ज करें",
        "recent": "आपकी हाल की शिकायतें",
        "no_reports": "आपने अभी तक कोई शिकायत दर्ज नहीं की है।",
        "history": "मेरी शिकायतें",
        "refresh": "रीफ्रेश करें",
        "timeline": "स्थिति समयरेखा",
        "map": "नक्शे पर शिकायतें",
        "no_geo": "दिखाने के लिए कोई जियोटैग शिकायत नहीं।",
        "profile": "मेरी प्रोफाइल",
        "name": "नाम",
        "phone": "मोबाइल नंबर",
        "address": "पता",
        "save": "सहेजें",
        "total": "कुल",
    },
}


def _labels(app: PortalApp) -> dict:
    return LABELS.get(app.language, LABELS["english"])


def _report_card(app: PortalApp, report) -> None:
    L = _labels(app)
    with st.expander(f"{status_badge(report.status.value)} {report.id} · {report.category}"):
        c1, c2 = st.columns([1, 2])
        with c1:
            st.image(report.image, use_container_width=True)
        with c2:
            st.write(report.description)
            st.caption(f"📍 {report.location}")
            st.caption(f"🏢 {report.assigned_department or '-'}")
            st.caption(f"{status_label(app.language, report.status)} · {report.submitted_at:%d %b %Y %H:%M}")
        st.markdown(f"**{L['timeline']}**")
        for entry in report.status_history:
            st.write(
                f"{status_badge(entry.status.value)} {entry.timestamp:%d %b %Y %H:%M} · "
                f"{status_label(app.language, entry.status)} · {entry.updated_by}"
                + (f" · {entry.notes}" if entry.notes else "")
            )
        if report.proof_image:
            st.image(report.proof_image, width=240)


def dashboard_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🏠 {L['welcome'].format(name=app.user.name)}")

    counts = status_counts(app.state.reports)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric(L["total"], sum(counts.values()))
    c2.metric(status_label(app.language, "pending"), counts["pending"])
    c3.metric(status_label(app.language, "in-progress"), counts["in-progress"])
    c4.metric(status_label(app.language, "resolved"), counts["resolved"])

    st.subheader(L["new_report"])
    with st.form("report_form", clear_on_submit=True):
        uploaded = st.file_uploader(L["photo"], type=["jpg", "jpeg", "png", "webp"])
        description = st.text_area(L["description"])
        category = st.selectbox(L["category"], options=CATEGORY_CHOICES)
        categories = st.multiselect(L["categories"], options=CATEGORY_CHOICES)
        location = st.text_input(L["location"])
        submitted = st.form_submit_button(L["submit"])

    if submitted:
        draft = ReportDraft(
            description=description.strip(),
            category=category,
            location=location.strip(),
            categories=list(categories),
        )
        if app.dispatch(SubmitReport(draft, to_image_upload(uploaded))) is not None:
            st.rerun()

    st.subheader(L["recent"])
    if not app.state.reports:
        st.info(L["no_reports"])
    for report in app.state.reports[:3]:
        _report_card(app, report)


def history_screen(app: PortalApp) -> None:
    L = _labels(app)
    back_button(app)
    st.title(f"📋 {L['history']}")
    if st.button(L["refresh"]):
        app.dispatch(LoadUserReports())
        st.rerun()
    if not app.state.reports:
        st.info(L["no_reports"])
    for report in app.state.reports:
        _report_card(app, report)


def map_screen(app: PortalApp) -> None:
    L = _labels(app)
    back_button(app)
    st.title(f"🗺️ {L['map']}")
    df = to_dataframe(app.state.reports).dropna(subset=["latitude", "longitude"])
    if df.empty:
        st.info(L["no_geo"])
        return
    st.map(df, latitude="latitude", longitude="longitude")
    st.dataframe(df[["id", "category", "status", "assigned_department"]], use_container_width=True)


def profile_screen(app: PortalApp) -> None:
    L = _labels(app)
    back_button(app)
    user = app.user
    st.title(f"👤 {L['profile']}")
    st.caption(f"{user.email} · {user.auth_type.upper()} {user.auth_number}")

    with st.form("profile_form"):
        name = st.text_input(L["name"], value=user.name)
        phone = st.text_input(L["phone"], value=user.phone)
        address = st.text_area(L["address"], value=user.address or "")
        submitted = st.form_submit_button(L["save"])

    if submitted and app.dispatch(
        UpdateProfile({"name": name.strip(), "phone": phone.strip(), "address": address.strip() or None})
    ):
        st.rerun()


__all__ = ["dashboard_screen", "history_screen", "map_screen", "profile_screen"]
