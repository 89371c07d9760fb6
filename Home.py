from __future__ import annotations

import logging

import streamlit as st

from config.config import APP_NAME, LOG_LEVEL
from screens.registry import SCREENS
from utils.session_manager import enforce_session_timeout, get_app, init_session_state, show_user_info
from utils.ui import (
    init_sidebar_language_selector,
    render_footer,
    render_notifications,
    render_sidebar_menu,
    render_unauthorized,
)

logging.basicConfig(
    level=getattr(logging, str(LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

st.set_page_config(page_title=APP_NAME, page_icon="🏛️", layout="wide")

init_session_state()
app = get_app()
enforce_session_timeout(app)

# Toasts raised before the last st.rerun() are shown first.
render_notifications(app.notifier.drain())

init_sidebar_language_selector(app)
show_user_info(app)
render_sidebar_menu(app)

selection = app.view()
try:
    if selection.authorized:
        SCREENS[selection.screen](app)
    else:
        render_unauthorized(app, selection)
except Exception:
    logger.exception("Failed to render screen %s", selection.screen)
    st.error("Something went wrong while showing this page. Please reload the page.")

render_notifications(app.notifier.drain())
render_footer()
