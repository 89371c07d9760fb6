from __future__ import annotations

"""Report cache: the in-session list of complaints and their lifecycle.

The cache lives on :class:`portal.state.AppState` (``state.reports`` and the
staff directory ``state.users``). :class:`ReportCache` owns every operation
that changes them:

* fetching (``load_user_reports``, ``load_all_reports``, ``load_all_users``)
  replaces the cached list wholesale on success and keeps it on failure;
* ``submit_report`` prepends the newly created report;
* ``update_report`` / ``assign_worker`` patch a report in place and append
  one status history entry per status change;
* ``complete_report`` uploads proof of work and resolves the report.

Failures never propagate to the caller. They are logged, turned into an
error toast and reported through the boolean return value.
"""

import base64
import copy
import logging
import random
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from config.config import AI_DETECTION_TOAST_DELAY, WORKER_NOTIFIED_TOAST_DELAY
from portal.errors import GatewayError, ValidationError
from portal.messages import status_label, t
from portal.models import (
    ImageUpload,
    Priority,
    Report,
    ReportDraft,
    ReportStatus,
    Role,
    StatusEntry,
    User,
)
from portal.normalize import BACKEND_STATUS, image_data_uri, normalize_problem, normalize_user
from portal.state import AppState, MutationRecord, MutationStatus
from utils.helpers import department_for_category, derive_priority, simulate_geotag

logger = logging.getLogger(__name__)

# Report fields a caller may patch through ``update_report``.
UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "assigned_worker",
        "assigned_department",
        "priority",
        "proof_image",
        "estimated_resolution",
        "notes",
    }
)

DATAFRAME_COLUMNS = [
    "id",
    "category",
    "description",
    "status",
    "priority",
    "assigned_department",
    "assigned_worker",
    "citizen_name",
    "submitted_at",
    "latitude",
    "longitude",
]


class ReportCache:
    """Operations over the cached reports and staff directory.

    Args:
        state: Shared application state holding the cache.
        gateway: Backend gateway (HTTP or demo).
        rng: Random source for the simulated geotag; injectable for tests.
    """

    def __init__(self, state: AppState, gateway: Any, rng: Optional[random.Random] = None) -> None:
        self.state = state
        self.gateway = gateway
        self.rng = rng or random.Random()

    def _t(self, key: str, **kwargs: object) -> str:
        return t(self.state.language, key, **kwargs)

    @property
    def notifier(self):
        return self.state.notifier

    def find(self, report_id: str) -> Optional[Report]:
        return next((r for r in self.state.reports if r.id == report_id), None)

    def find_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.state.users if u.id == user_id), None)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def load_user_reports(self, user: Optional[User]) -> bool:
        """Replace the cache with the complaints filed by ``user``."""
        if user is None:
            logger.debug("load_user_reports called without a user; skipping")
            return False
        try:
            response = self.gateway.get_user_problems(user.id)
        except GatewayError as exc:
            logger.error("Failed to load complaints for user %s: %s", user.id, exc)
            self.notifier.error(self._t("load_user_reports_error"))
            return False

        reports = []
        for problem in response.get("problems") or []:
            report = normalize_problem(problem, self.state.language, fallback_user=user)
            report.citizen_name = user.name
            report.citizen_phone = user.phone
            reports.append(report)
        self.state.reports = reports
        logger.info("Loaded %d complaints for user %s", len(reports), user.id)
        return True

    def load_all_reports(self, user: Optional[User]) -> bool:
        """Replace the cache with every complaint; staff only.

        An empty listing keeps the current (demo) data.
        """
        if user is None or user.role == Role.CITIZEN:
            logger.debug("load_all_reports skipped for non-staff user")
            return False
        try:
            response = self.gateway.get_all_problems()
        except GatewayError as exc:
            logger.error("Failed to load all complaints: %s", exc)
            self.notifier.error(self._t("load_all_reports_error", error=str(exc)))
            return False

        problems = response.get("problems") or []
        if not problems:
            logger.info("Backend returned no complaints; keeping %d cached", len(self.state.reports))
            self.notifier.info(self._t("no_reports_demo"))
            return False

        self.state.reports = [normalize_problem(p, self.state.language) for p in problems]
        self.notifier.success(self._t("reports_loaded", count=len(self.state.reports)))
        return True

    def load_all_users(self) -> bool:
        """Replace the staff directory used for worker lookup."""
        try:
            response = self.gateway.get_all_users()
        except GatewayError as exc:
            logger.error("Failed to load users: %s", exc)
            self.notifier.error(self._t("load_users_error"))
            return False

        users = [normalize_user(u) for u in response.get("users") or []]
        if users:
            self.state.users = users
        logger.info("Loaded %d users", len(users))
        return True

    def refresh_all(self, user: Optional[User]) -> bool:
        """Bulk refresh run after a staff login: reports first, then users."""
        reports_loaded = self.load_all_reports(user)
        users_loaded = self.load_all_users()
        return reports_loaded and users_loaded

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _categories_for(self, draft: ReportDraft, image: ImageUpload) -> List[str]:
        if draft.categories:
            return list(draft.categories)
        try:
            analysis = self.gateway.analyze_image(image)
            return list(analysis.get("categories") or [])
        except GatewayError as exc:
            logger.warning("Image analysis failed, using the form category: %s", exc)
            if draft.category and draft.category != "Others":
                return [draft.category]
            return []

    def submit_report(
        self,
        user: Optional[User],
        draft: ReportDraft,
        image: Optional[ImageUpload],
    ) -> Optional[Report]:
        """Submit a new complaint and prepend it to the cache.

        Args:
            user: The submitting citizen.
            draft: Form contents.
            image: The photo of the problem.

        Returns:
            Optional[Report]: The created report, or ``None`` on failure.
        """
        try:
            if user is None:
                raise ValidationError(self._t("user_required"))
            if image is None:
                raise ValidationError(self._t("image_required"))

            categories = self._categories_for(draft, image)
            priority = derive_priority(draft.description, draft.category)
            geotag = simulate_geotag(draft.location, user.name, user.phone, rng=self.rng)
            payload = {
                "problem_categories": categories,
                "others_text": draft.others_text or draft.description,
                "latitude": geotag.latitude,
                "longitude": geotag.longitude,
                "priority": priority.value,
            }
            response = self.gateway.submit_problem(payload, image)
            problem = response.get("problem")
            if not problem:
                raise GatewayError("Malformed response: missing problem")
        except (ValidationError, GatewayError) as exc:
            logger.error("Complaint submission failed: %s", exc)
            self.notifier.error(self._t("submit_error", error=str(exc)))
            return None

        report = normalize_problem(problem, self.state.language, fallback_user=user)
        report.category = categories[0] if categories else (draft.category or report.category)
        report.description = problem.get("others_text") or draft.description
        report.location = draft.location or report.location
        report.citizen_name = user.name
        report.citizen_phone = user.phone
        report.geotag = geotag
        if not problem.get("assigned_department"):
            report.assigned_department = department_for_category(draft.category or report.category)
        if not problem.get("priority"):
            report.priority = priority

        self.state.reports.insert(0, report)
        logger.info("Submitted complaint %s (%s, %s)", report.id, report.category, report.priority.value)
        self.notifier.success(self._t("submit_success", id=report.id))
        if categories:
            self.notifier.info(
                self._t("ai_detected", categories=", ".join(categories)),
                delay=AI_DETECTION_TOAST_DELAY,
            )
        return report

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(updates: Dict[str, Any]) -> Dict[str, Any]:
        """Return ``updates`` with status and priority as enum members.

        Raises:
            ValueError: If a status or priority value is not recognised.
        """
        coerced = dict(updates)
        if "status" in coerced:
            coerced["status"] = ReportStatus(getattr(coerced["status"], "value", coerced["status"]))
        if coerced.get("priority") is not None:
            coerced["priority"] = Priority(getattr(coerced["priority"], "value", coerced["priority"]))
        return coerced

    def _apply(self, report: Report, updates: Dict[str, Any], updated_by: str) -> None:
        notes = updates.get("notes")
        for key, value in updates.items():
            if key == "notes":
                continue
            setattr(report, key, value)

        if "status" in updates:
            timestamp = datetime.now()
            if report.status_history:
                timestamp = max(timestamp, report.status_history[-1].timestamp)
            report.status_history.append(
                StatusEntry(
                    status=report.status,
                    timestamp=timestamp,
                    updated_by=updated_by,
                    notes=notes or self._t("status_note", status=status_label(self.state.language, report.status)),
                )
            )

    def _status_toast(self, updates: Dict[str, Any]) -> None:
        status = updates.get("status")
        status = getattr(status, "value", status)
        if status == ReportStatus.RESOLVED.value:
            self.notifier.success(self._t("report_resolved"))
        elif status == ReportStatus.IN_PROGRESS.value:
            self.notifier.info(self._t("report_in_progress"))
        else:
            self.notifier.success(self._t("report_updated"))

    def _persist(self, report_id: str, updates: Dict[str, Any]) -> None:
        payload: Dict[str, Any] = {}
        if updates.get("priority") is not None:
            payload["priority"] = updates["priority"].value
        if updates.get("notes"):
            payload["notes"] = updates["notes"]

        if "assigned_worker" in updates:
            # The assign endpoint moves the complaint to in-progress itself.
            self.gateway.assign_worker(
                report_id,
                {
                    "worker_id": updates.get("assigned_worker"),
                    "department": updates.get("assigned_department"),
                },
            )
            if payload:
                self.gateway.update_problem(report_id, payload)
            return

        if "status" in updates:
            payload["status"] = BACKEND_STATUS[updates["status"]]
        self.gateway.update_problem(report_id, payload)

    def update_report(
        self,
        report_id: str,
        updates: Dict[str, Any],
        updated_by: Optional[str] = None,
        persist: bool = False,
    ) -> bool:
        """Patch a cached report.

        A ``status`` in ``updates`` appends exactly one history entry. The
        change is local unless ``persist`` is set, in which case it is sent
        to the backend and rolled back if the backend rejects it.

        Args:
            report_id: Id of the report to patch.
            updates: Field values keyed by report field name, plus an
                optional ``notes`` for the history entry.
            updated_by: Name recorded on the history entry; defaults to the
                current user.
            persist: Round-trip the change through the backend.

        Returns:
            bool: ``True`` when the change is in effect.

        Raises:
            ValueError: If ``updates`` names a field that cannot be patched.
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update report fields: {sorted(unknown)}")

        report = self.find(report_id)
        if report is None:
            logger.warning("update_report: complaint %s not in cache", report_id)
            self.notifier.warning(self._t("report_not_found", id=report_id))
            return False

        try:
            updates = self._coerce(updates)
        except ValueError as exc:
            logger.warning("update_report: rejected update of complaint %s: %s", report_id, exc)
            self.notifier.warning(self._t("invalid_update", id=report_id, error=str(exc)))
            return False

        if updated_by is None:
            updated_by = self.state.user.name if self.state.user else "System"

        snapshot = copy.deepcopy(report)
        self._apply(report, updates, updated_by)

        if persist:
            record = MutationRecord(report_id=report_id, updates=dict(updates))
            self.state.mutations.append(record)
            try:
                self._persist(report_id, updates)
            except GatewayError as exc:
                record.status = MutationStatus.FAILED
                record.error = str(exc)
                index = next(i for i, r in enumerate(self.state.reports) if r is report)
                self.state.reports[index] = snapshot
                logger.error("Rolled back update of complaint %s: %s", report_id, exc)
                self.notifier.error(self._t("report_update_failed", error=str(exc)))
                return False
            record.status = MutationStatus.APPLIED

        logger.info("Updated complaint %s: %s", report_id, sorted(updates))
        self._status_toast(updates)
        return True

    def assign_worker(
        self,
        report_id: str,
        worker_id: str,
        updated_by: Optional[str] = None,
        persist: bool = False,
    ) -> bool:
        """Assign a field worker, moving the report to in-progress."""
        worker = self.find_user(worker_id)
        if worker is None:
            logger.warning("assign_worker: worker %s not in directory", worker_id)
            self.notifier.warning(self._t("worker_not_found", id=worker_id))
            return False

        updates = {
            "assigned_worker": worker.id,
            "assigned_department": worker.department,
            "status": ReportStatus.IN_PROGRESS,
        }
        if not self.update_report(report_id, updates, updated_by=updated_by, persist=persist):
            return False

        self.notifier.success(self._t("task_assigned", name=worker.name))
        self.notifier.info(self._t("worker_notified"), delay=WORKER_NOTIFIED_TOAST_DELAY)
        return True

    def complete_report(
        self,
        report_id: str,
        proof: ImageUpload,
        notes: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> bool:
        """Upload proof of work and resolve the report."""
        if self.find(report_id) is None:
            logger.warning("complete_report: complaint %s not in cache", report_id)
            self.notifier.warning(self._t("report_not_found", id=report_id))
            return False
        try:
            response = self.gateway.complete_problem(report_id, proof, notes)
        except GatewayError as exc:
            logger.error("Failed to complete complaint %s: %s", report_id, exc)
            self.notifier.error(self._t("complete_error", error=str(exc)))
            return False

        problem = response.get("problem") or {}
        proof_uri = image_data_uri(
            problem.get("admin_image_base64"), problem.get("admin_image_mimetype")
        ) or image_data_uri(base64.b64encode(proof.content).decode("ascii"), proof.mimetype)
        updates: Dict[str, Any] = {"status": ReportStatus.RESOLVED, "proof_image": proof_uri}
        if notes:
            updates["notes"] = notes
        return self.update_report(report_id, updates, updated_by=updated_by)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def reports_for(self, user: Optional[User]) -> List[Report]:
        """Reports visible to ``user`` on their role's dashboard."""
        reports = self.state.reports
        if user is None:
            return []
        if user.role == Role.FIELD_WORKER:
            return [r for r in reports if r.assigned_worker == user.id]
        if user.role == Role.DEPARTMENT_HEAD:
            return [r for r in reports if r.assigned_department == user.department]
        return list(reports)

    def workers_in(self, department: Optional[str] = None) -> List[User]:
        workers = [u for u in self.state.users if u.role == Role.FIELD_WORKER]
        if department is None:
            return workers
        return [w for w in workers if w.department == department]


def status_counts(reports: Iterable[Report]) -> Dict[str, int]:
    """Count reports per status; every status is present in the result."""
    counts = Counter(r.status.value for r in reports)
    return {status.value: counts.get(status.value, 0) for status in ReportStatus}


def to_dataframe(reports: Iterable[Report]) -> pd.DataFrame:
    """Flatten reports into a DataFrame for tables, charts and the map."""
    rows = []
    for report in reports:
        rows.append(
            {
                "id": report.id,
                "category": report.category,
                "description": report.description,
                "status": report.status.value,
                "priority": report.priority.value if report.priority else None,
                "assigned_department": report.assigned_department,
                "assigned_worker": report.assigned_worker,
                "citizen_name": report.citizen_name,
                "submitted_at": report.submitted_at,
                "latitude": report.geotag.latitude if report.geotag else None,
                "longitude": report.geotag.longitude if report.geotag else None,
            }
        )
    return pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)


__all__ = [
    "UPDATABLE_FIELDS",
    "DATAFRAME_COLUMNS",
    "ReportCache",
    "status_counts",
    "to_dataframe",
]
