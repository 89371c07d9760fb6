from __future__ import annotations

"""Shared UI helpers for the VIKSIT KANPUR Streamlit app.

This module centralises the pieces every screen shares: the sidebar
(language selector and role navigation), toast rendering, the
unauthorized fallback and the footer.
"""

from typing import Dict, Iterable, Optional, Tuple

import streamlit as st

from config.config import APP_NAME, LANGUAGES
from portal.app import PortalApp
from portal.messages import t
from portal.models import ImageUpload, Role
from portal.router import Page
from portal.state import Back, Logout, Navigate, SetLanguage
from portal.view_selector import ViewSelection
from utils.notifications import Notification

TOAST_ICONS = {"success": "✅", "info": "ℹ️", "warning": "⚠️", "error": "❌"}

NAV_LABELS: Dict[str, Dict[Page, str]] = {
    "english": {
        Page.DASHBOARD: "🏠 Home",
        Page.HISTORY: "📋 My Complaints",
        Page.MAP: "🗺️ Map",
        Page.PROFILE: "👤 Profile",
        Page.ADMIN_DASHBOARD: "📊 Dashboard",
        Page.ADMIN_COMPLAINTS: "📋 Complaints",
        Page.ADMIN_DEPARTMENTS: "🏢 Departments",
        Page.ADMIN_WORKERS: "👷 Workers",
        Page.ADMIN_MAP: "🗺️ Map",
        Page.ADMIN_ANALYTICS: "📈 Analytics",
        Page.ADMIN_NOTIFICATIONS: "🔔 Notifications",
        Page.ADMIN_SETTINGS: "⚙️ Settings",
        Page.FIELD_WORKER_DASHBOARD: "🛠️ My Tasks",
        Page.FIELD_WORKER_NOTIFICATIONS: "🔔 Notifications",
        Page.FIELD_WORKER_PROFILE: "👤 Profile",
        Page.DEPARTMENT_HEAD_DASHBOARD: "🏢 Department",
        Page.DEPARTMENT_HEAD_NOTIFICATIONS: "🔔 Notifications",
        Page.DEPARTMENT_HEAD_PROFILE: "👤 Profile",
        Page.DISTRICT_MAGISTRATE_NOTIFICATIONS: "🔔 Notifications",
        Page.DISTRICT_MAGISTRATE_PROFILE: "👤 Profile",
    },
    "hindi": {
        Page.DASHBOARD: "🏠 होम",
        Page.HISTORY: "📋 मेरी शिकायतें",
        Page.MAP: "🗺️ नक्शा",
        Page.PROFILE: "👤 प्रोफाइल",
        Page.ADMIN_DASHBOARD: "📊 डैशबोर्ड",
        Page.ADMIN_COMPLAINTS: "📋 शिकायतें",
        Page.ADMIN_DEPARTMENTS: "🏢 विभाग",
        Page.ADMIN_WORKERS: "👷 कार्यकर्ता",
        Page.ADMIN_MAP: "🗺️ नक्शा",
        Page.ADMIN_ANALYTICS: "📈 विश्लेषण",
        Page.ADMIN_NOTIFICATIONS: "🔔 सूचनाएं",
        Page.ADMIN_SETTINGS: "⚙️ सेटिंग्स",
        Page.FIELD_WORKER_DASHBOARD: "🛠️ मेरे कार्य",
        Page.FIELD_WORKER_NOTIFICATIONS: "🔔 सूचनाएं",
        Page.FIELD_WORKER_PROFILE: "👤 प्रोफाइल",
        Page.DEPARTMENT_HEAD_DASHBOARD: "🏢 विभाग",
        Page.DEPARTMENT_HEAD_NOTIFICATIONS: "🔔 सूचनाएं",
        Page.DEPARTMENT_HEAD_PROFILE: "👤 प्रोफाइल",
        Page.DISTRICT_MAGISTRATE_NOTIFICATIONS: "🔔 सूचनाएं",
        Page.DISTRICT_MAGISTRATE_PROFILE: "👤 प्रोफाइल",
    },
}

# Sidebar entries per role, in display order.
ROLE_MENU: Dict[Role, Tuple[Page, ...]] = {
    Role.CITIZEN: (Page.DASHBOARD, Page.HISTORY, Page.MAP, Page.PROFILE),
    Role.FIELD_WORKER: (
        Page.FIELD_WORKER_DASHBOARD,
        Page.ADMIN_MAP,
        Page.FIELD_WORKER_NOTIFICATIONS,
        Page.FIELD_WORKER_PROFILE,
    ),
    Role.DEPARTMENT_HEAD: (
        Page.DEPARTMENT_HEAD_DASHBOARD,
        Page.ADMIN_COMPLAINTS,
        Page.ADMIN_WORKERS,
        Page.ADMIN_MAP,
        Page.DEPARTMENT_HEAD_NOTIFICATIONS,
        Page.DEPARTMENT_HEAD_PROFILE,
    ),
    Role.DISTRICT_MAGISTRATE: (
        Page.ADMIN_DASHBOARD,
        Page.ADMIN_COMPLAINTS,
        Page.ADMIN_DEPARTMENTS,
        Page.ADMIN_WORKERS,
        Page.ADMIN_MAP,
        Page.ADMIN_ANALYTICS,
        Page.ADMIN_SETTINGS,
        Page.DISTRICT_MAGISTRATE_NOTIFICATIONS,
        Page.DISTRICT_MAGISTRATE_PROFILE,
    ),
}


def nav_label(language: str, page: Page) -> str:
    labels = NAV_LABELS.get(language, NAV_LABELS["english"])
    return labels.get(page, page.value.replace("-", " ").title())


def init_sidebar_language_selector(app: PortalApp) -> None:
    """Language selector in the sidebar, kept in sync with the app state."""
    st.sidebar.title(f"🏛️ {APP_NAME}")
    current = app.language if app.language in LANGUAGES else LANGUAGES[0]
    lang = st.sidebar.selectbox(
        "भाषा / Language",
        options=LANGUAGES,
        index=LANGUAGES.index(current),
        format_func=lambda value: {"hindi": "हिंदी", "english": "English"}.get(value, value),
    )
    if lang != app.language:
        app.dispatch(SetLanguage(lang))


def render_sidebar_menu(app: PortalApp) -> None:
    """Role navigation and logout button."""
    user = app.user
    if user is None or user.role is None:
        return
    st.sidebar.markdown("---")
    for page in ROLE_MENU[user.role]:
        if st.sidebar.button(nav_label(app.language, page), key=f"nav_{page.value}", use_container_width=True):
            app.dispatch(Navigate(page))
            st.rerun()
    st.sidebar.markdown("---")
    if st.sidebar.button("🚪 Logout / लॉगआउट", key="nav_logout", use_container_width=True):
        app.dispatch(Logout())
        st.rerun()


def back_button(app: PortalApp, label: str = "← Back / वापस") -> None:
    if st.button(label, key=f"back_{app.page.value}"):
        app.dispatch(Back())
        st.rerun()


def render_notifications(notes: Iterable[Notification]) -> None:
    """Show queued toasts; delayed ones are already ordered after the rest."""
    for note in notes:
        st.toast(note.message, icon=TOAST_ICONS.get(note.level))


def render_unauthorized(app: PortalApp, selection: ViewSelection) -> None:
    """Fallback rendered when the current role may not view the page."""
    st.error(f"⛔ {t(app.language, 'unauthorized')}")
    target = selection.fallback_page or Page.LOGIN
    if st.button(nav_label(app.language, target) if target != Page.LOGIN else "🔑 Login", key="unauthorized_home"):
        app.dispatch(Navigate(target))
        st.rerun()


def to_image_upload(uploaded) -> Optional[ImageUpload]:
    """Convert a Streamlit ``UploadedFile`` into an :class:`ImageUpload`."""
    if uploaded is None:
        return None
    return ImageUpload(filename=uploaded.name, content=uploaded.getvalue(), mimetype=uploaded.type or "image/jpeg")


def status_badge(status: str) -> str:
    return {"pending": "🟡", "in-progress": "🔵", "resolved": "🟢"}.get(status, "⚪")


def render_footer() -> None:
    """Render a simple shared footer for all screens."""

    st.markdown("---")
    st.caption("© 2025 VIKSIT KANPUR · Kanpur Nagar Nigam")


__all__ = [
    "NAV_LABELS",
    "ROLE_MENU",
    "nav_label",
    "init_sidebar_language_selector",
    "render_sidebar_menu",
    "back_button",
    "render_notifications",
    "render_unauthorized",
    "to_image_upload",
    "status_badge",
    "render_footer",
]
