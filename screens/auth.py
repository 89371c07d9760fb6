from __future__ import annotations

"""Login, registration and staff login screens."""

import streamlit as st

from config.config import ROLES, STAFF_ROLES
from portal.app import PortalApp
from portal.router import Page
from portal.state import AdminLogin, Login, Navigate, Register
from utils.auth import AUTH_TYPES
from utils.helpers import DEPARTMENTS

LABELS = {
    "english": {
        "title": "VIKSIT KANPUR",
        "tagline": "Report civic problems and track them to resolution",
        "login": "Citizen Login",
        "email": "Email",
        "password": "Password",
        "login_btn": "Login",
        "register_link": "New user? Register here",
        "admin_link": "Staff login",
        "register": "Register",
        "name": "Full name",
        "phone": "Mobile number",
        "auth_type": "ID type",
        "auth_number": "ID number",
        "address": "Address",
        "confirm_password": "Confirm password",
        "register_btn": "Create account",
        "back_to_login": "Back to login",
        "admin_login": "Staff Login",
        "role": "Role",
        "department": "Department",
        "admin_login_btn": "Login as staff",
        "demo_hint": "Demo accounts: ram.kumar@example.com / citizen123, priya.sharma@kanpur.gov.in / dm123",
    },
    "hindi": {
        "title": "विकसित कानपुर",
        "tagline": "नागरिक समस्याएं दर्ज करें और समाधान तक ट्रैक करें",
        "login": "नागरिक लॉगिन",
        "email": "ईमेल",
        "password": "पासवर्ड",
        "login_btn": "लॉगिन करें",
        "register_link": "नए उपयोगकर्ता? यहां पंजीकरण करें",
        "admin_link": "कर्मचारी लॉगिन",
        "register": "पंजीकरण",
        "name": "पूरा नाम",
        "phone": "मोबाइल नंबर",
        "auth_type": "पहचान प्रकार",
        "auth_number": "पहचान संख्या",
        "address": "पता",
        "confirm_password": "पासवर्ड की पुष्टि करें",
        "register_btn": "खाता बनाएं",
        "back_to_login": "लॉगिन पर वापस जाएं",
        "admin_login": "कर्मचारी लॉगिन",
        "role": "भूमिका",
        "department": "विभाग",
        "admin_login_btn": "कर्मचारी के रूप में लॉगिन करें",
        "demo_hint": "डेमो खाते: ram.kumar@example.com / citizen123, priya.sharma@kanpur.gov.in / dm123",
    },
}


def _labels(app: PortalApp) -> dict:
    return LABELS.get(app.language, LABELS["english"])


def login_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🏛️ {L['title']}")
    st.caption(L["tagline"])

    st.subheader(L["login"])
    with st.form("login_form"):
        email = st.text_input(L["email"])
        password = st.text_input(L["password"], type="password")
        submitted = st.form_submit_button(L["login_btn"])

    if submitted and app.dispatch(Login(email.strip(), password)):
        st.rerun()

    c1, c2 = st.columns(2)
    with c1:
        if st.button(L["register_link"]):
            app.dispatch(Navigate(Page.REGISTER))
            st.rerun()
    with c2:
        if st.button(L["admin_link"]):
            app.dispatch(Navigate(Page.ADMIN_LOGIN))
            st.rerun()

    st.info(L["demo_hint"])


def register_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"📝 {L['register']}")

    with st.form("register_form"):
        name = st.text_input(L["name"])
        email = st.text_input(L["email"])
        phone = st.text_input(L["phone"])
        auth_type = st.selectbox(L["auth_type"], options=list(AUTH_TYPES), format_func=str.upper)
        auth_number = st.text_input(L["auth_number"])
        address = st.text_area(L["address"])
        password = st.text_input(L["password"], type="password")
        confirm = st.text_input(L["confirm_password"], type="password")
        submitted = st.form_submit_button(L["register_btn"])

    if submitted:
        user_data = {
            "name": name.strip(),
            "email": email.strip(),
            "phone": phone.strip(),
            "auth_type": auth_type,
            "auth_number": auth_number.strip().upper(),
            "address": address.strip() or None,
            "password": password,
            "confirm_password": confirm,
            "role": ROLES[0],
        }
        if app.dispatch(Register(user_data)):
            st.rerun()

    if st.button(L["back_to_login"]):
        app.dispatch(Navigate(Page.LOGIN))
        st.rerun()


def admin_login_screen(app: PortalApp) -> None:
    L = _labels(app)
    st.title(f"🛡️ {L['admin_login']}")

    with st.form("admin_login_form"):
        role = st.selectbox(L["role"], options=STAFF_ROLES, format_func=lambda r: r.replace("-", " ").title())
        department = st.selectbox(L["department"], options=[""] + DEPARTMENTS)
        email = st.text_input(L["email"])
        password = st.text_input(L["password"], type="password")
        submitted = st.form_submit_button(L["admin_login_btn"])

    if submitted and app.dispatch(AdminLogin(email.strip(), password, role, department or None)):
        st.rerun()

    if st.button(L["back_to_login"]):
        app.dispatch(Navigate(Page.LOGIN))
        st.rerun()


__all__ = ["login_screen", "register_screen", "admin_login_screen"]
