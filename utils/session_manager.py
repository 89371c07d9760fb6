from __future__ import annotations

"""Binds the portal application to Streamlit's session state.

This module centralises logic for:

* Creating one :class:`~portal.app.PortalApp` per browser session and
  keeping it in ``st.session_state``.
* Enforcing the inactivity timeout on every script run.
* Small accessors used by the sidebar and screens.

``Home.py`` should call :func:`init_session_state` before anything else and
:func:`get_app` wherever the application is needed.
"""

import logging

import streamlit as st

from portal.app import PortalApp, build_app

APP_KEY = "portal_app"

logger = logging.getLogger(__name__)


def init_session_state() -> None:
    """Create the session's :class:`PortalApp` on first run.

    Safe to call on every rerun; an existing app is left untouched.
    """

    if APP_KEY not in st.session_state:
        st.session_state[APP_KEY] = build_app()
        logger.info("Created portal app for a new browser session")


def get_app() -> PortalApp:
    init_session_state()
    return st.session_state[APP_KEY]


def enforce_session_timeout(app: PortalApp) -> bool:
    """Log out an idle user; otherwise refresh the activity timestamp.

    Returns:
        bool: ``True`` when the session was expired and has been closed.
    """

    if app.session.expired():
        logger.info("Session expired for user %s", app.user.id if app.user else None)
        app.logout()
        st.warning("Your session has expired due to inactivity. Please log in again.")
        return True
    if app.user is not None:
        app.session.touch()
    return False


def show_user_info(app: PortalApp) -> None:
    """Display logged-in user information in sidebar."""
    user = app.user
    if user is None:
        return
    st.sidebar.success(f"👤 **{user.name}**")
    if user.role is not None:
        st.sidebar.caption(f"Role: {user.role.value.replace('-', ' ').title()}")
    if user.department:
        st.sidebar.caption(f"Department: {user.department}")
    st.sidebar.caption(f"Email: {user.email}")


__all__ = [
    "APP_KEY",
    "init_session_state",
    "get_app",
    "enforce_session_timeout",
    "show_user_info",
]
