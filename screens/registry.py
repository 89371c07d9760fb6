from __future__ import annotations

"""Screen id -> render function."""

from typing import Callable, Dict

from portal.app import PortalApp
from portal.router import Page
from portal.view_selector import DISTRICT_MAGISTRATE_DASHBOARD
from screens import auth, citizen, staff

Screen = Callable[[PortalApp], None]

SCREENS: Dict[str, Screen] = {
    Page.LOGIN.value: auth.login_screen,
    Page.REGISTER.value: auth.register_screen,
    Page.ADMIN_LOGIN.value: auth.admin_login_screen,
    Page.DASHBOARD.value: citizen.dashboard_screen,
    Page.HISTORY.value: citizen.history_screen,
    Page.MAP.value: citizen.map_screen,
    Page.PROFILE.value: citizen.profile_screen,
    Page.ADMIN_DASHBOARD.value: staff.admin_dashboard_screen,
    DISTRICT_MAGISTRATE_DASHBOARD: staff.district_magistrate_dashboard_screen,
    Page.ADMIN_COMPLAINTS.value: staff.complaints_screen,
    Page.ADMIN_DEPARTMENTS.value: staff.departments_screen,
    Page.ADMIN_WORKERS.value: staff.workers_screen,
    Page.ADMIN_MAP.value: staff.admin_map_screen,
    Page.ADMIN_ANALYTICS.value: staff.analytics_screen,
    Page.ADMIN_NOTIFICATIONS.value: staff.notifications_screen,
    Page.ADMIN_SETTINGS.value: staff.settings_screen,
    Page.FIELD_WORKER_DASHBOARD.value: staff.field_worker_dashboard_screen,
    Page.FIELD_WORKER_NOTIFICATIONS.value: staff.notifications_screen,
    Page.FIELD_WORKER_PROFILE.value: citizen.profile_screen,
    Page.DEPARTMENT_HEAD_DASHBOARD.value: staff.department_head_dashboard_screen,
    Page.DEPARTMENT_HEAD_NOTIFICATIONS.value: staff.notifications_screen,
    Page.DEPARTMENT_HEAD_PROFILE.value: citizen.profile_screen,
    Page.DISTRICT_MAGISTRATE_NOTIFICATIONS.value: staff.notifications_screen,
    Page.DISTRICT_MAGISTRATE_PROFILE.value: citizen.profile_screen,
}


__all__ = ["Screen", "SCREENS"]
