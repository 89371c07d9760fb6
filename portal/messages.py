from __future__ import annotations

"""User-facing messages raised by the portal core (Hindi and English)."""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "english": {
        "login_success": "Successfully logged in!",
        "login_error": "Login error: {error}",
        "admin_no_privileges": "You do not have admin privileges",
        "admin_welcome": "Welcome {name}!",
        "admin_login_error": "Admin login error: {error}",
        "register_success": "Successfully registered!",
        "register_error": "Registration error: {error}",
        "profile_updated": "Profile updated!",
        "profile_error": "Profile update error: {error}",
        "logout_success": "Successfully logged out!",
        "load_user_reports_error": "Failed to load complaints",
        "no_reports_demo": "No complaints found, showing demo data",
        "reports_loaded": "Loaded {count} complaints",
        "load_all_reports_error": "Failed to load all complaints: {error}",
        "load_users_error": "Failed to load users",
        "submit_success": "Complaint submitted successfully! Complaint ID: {id}",
        "submit_error": "Error submitting complaint: {error}",
        "ai_detected": "AI detected issues: {categories}",
        "report_resolved": "Complaint resolved!",
        "report_in_progress": "Work in progress!",
        "report_updated": "Complaint updated!",
        "report_update_failed": "Could not save the update: {error}",
        "report_not_found": "Complaint {id} not found",
        "invalid_update": "Invalid value for complaint {id}: {error}",
        "task_assigned": "Task assigned to {name}!",
        "worker_notified": "Worker has been notified",
        "worker_not_found": "Worker {id} not found",
        "complete_error": "Failed to complete complaint: {error}",
        "complaint_received": "Complaint received",
        "status_note": "Status updated: {status}",
        "user_required": "User is required",
        "image_required": "Image is required",
        "unauthorized": "You do not have access to this page",
    },
    "hindi": {
        "login_success": "सफलतापूर्वक लॉगिन हो गए!",
        "login_error": "लॉगिन में त्रुटि: {error}",
        "admin_no_privileges": "आपके पास एडमिन अधिकार नहीं हैं",
        "admin_welcome": "स्वागत {name}!",
        "admin_login_error": "एडमिन लॉगिन में त्रुटि: {error}",
        "register_success": "सफलतापूर्वक पंजीकरण हो गया!",
        "register_error": "पंजीकरण में त्रुटि: {error}",
        "profile_updated": "प्रोफाइल अपडेट की गई!",
        "profile_error": "प्रोफाइल अपडेट में त्रुटि: {error}",
        "logout_success": "सफलतापूर्वक लॉगआउट हो गए!",
        "load_user_reports_error": "शिकायतें लोड करने में त्रुटि",
        "no_reports_demo": "कोई शिकायत नहीं मिली, डेमो डेटा दिखाया जा रहा है",
        "reports_loaded": "{count} शिकायतें लोड की गईं",
        "load_all_reports_error": "सभी शिकायतें लोड करने में त्रुटि: {error}",
        "load_users_error": "उपयोगकर्ता लोड नहीं हो सके",
        "submit_success": "शिकायत सफलतापूर्वक दर्ज की गई! शिकायत ID: {id}",
        "submit_error": "शिकायत दर्ज करने में त्रुटि: {error}",
        "ai_detected": "AI द्वारा पहचाने गए मुद्दे: {categories}",
        "report_resolved": "शिकायत हल हो गई!",
        "report_in_progress": "कार्य प्रगति में है!",
        "report_updated": "शिकायत अपडेट की गई!",
        "report_update_failed": "अपडेट सहेजा नहीं जा सका: {error}",
        "report_not_found": "शिकायत {id} नहीं मिली",
        "invalid_update": "शिकायत {id} के लिए अमान्य मान: {error}",
        "task_assigned": "{name} को कार्य सौंपा गया!",
        "worker_notified": "कार्यकर्ता को सूचना भेजी गई",
        "worker_not_found": "कार्यकर्ता {id} नहीं मिला",
        "complete_error": "शिकायत पूरी करने में त्रुटि: {error}",
        "complaint_received": "शिकायत प्राप्त हुई",
        "status_note": "स्थिति अपडेट: {status}",
        "user_required": "उपयोगकर्ता आवश्यक है",
        "image_required": "फोटो आवश्यक है",
        "unauthorized": "आपको इस पेज तक पहुंच नहीं है",
    },
}

STATUS_LABELS: Dict[str, Dict[str, str]] = {
    "english": {"pending": "pending", "in-progress": "in-progress", "resolved": "resolved"},
    "hindi": {"pending": "लंबित", "in-progress": "प्रगति में", "resolved": "हल हो गया"},
}


def t(language: str, key: str, **kwargs: object) -> str:
    """Look up ``key`` for ``language`` (falling back to English) and format it."""
    catalogue = MESSAGES.get(language, MESSAGES["english"])
    template = catalogue.get(key, MESSAGES["english"][key])
    return template.format(**kwargs)


def status_label(language: str, status: str) -> str:
    labels = STATUS_LABELS.get(language, STATUS_LABELS["english"])
    raw = str(getattr(status, "value", status))
    return labels.get(raw, raw)


__all__ = ["MESSAGES", "STATUS_LABELS", "t", "status_label"]
