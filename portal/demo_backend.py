from __future__ import annotations

"""In-process stand-in for the grievance backend.

:class:`DemoGateway` implements the same methods as
:class:`~portal.gateway.BackendGateway` and returns the same payload
shapes, backed by dictionaries seeded from :mod:`portal.mock_data`. It is
used when no ``VIKSIT_API_BASE_URL`` is configured, so the portal can be
explored without the Express/Hono services.
"""

import base64
import logging
import secrets
from datetime import datetime
from typing import Any, Dict, Optional

from portal.classifier import detect_categories
from portal.errors import AuthenticationRequired, GatewayError
from portal.mock_data import DEMO_PASSWORDS, mock_reports, mock_users
from portal.models import ImageUpload, Report, STAFF_ROLES, User
from portal.normalize import BACKEND_STATUS
from utils.auth import hash_password, verify_password
from utils.database import MemoryTokenStore, TokenStore
from utils.helpers import split_category

logger = logging.getLogger(__name__)


def _user_record(user: User, password_hash: str) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone_number": user.phone,
        "aadhar": user.auth_number,
        "role": user.role.value if user.role else None,
        "department": user.department,
        "address": user.address,
        "avatar_url": user.avatar_url,
        "password_hash": password_hash,
        "created_at": datetime.now().isoformat(),
    }


def _problem_record(report: Report, owner_id: Optional[str] = None) -> Dict[str, Any]:
    parts = split_category(report.category)
    geotag = report.geotag
    return {
        "id": report.id,
        "user_id": owner_id,
        "problem_categories": [parts[-1]] if parts else [],
        "others_text": report.description,
        "user_image_base64": None,
        "user_image_mimetype": None,
        "admin_image_base64": None,
        "admin_image_mimetype": None,
        "latitude": geotag.latitude if geotag else None,
        "longitude": geotag.longitude if geotag else None,
        "status": BACKEND_STATUS[report.status],
        "priority": report.priority.value if report.priority else "medium",
        "assigned_worker_id": report.assigned_worker,
        "assigned_department": report.assigned_department,
        "created_at": report.submitted_at.isoformat(),
        "updated_at": report.submitted_at.isoformat(),
        "user_name": report.citizen_name,
        "user_email": report.citizen_phone,
        "history": [
            {
                "status": entry.status.value,
                "timestamp": entry.timestamp.isoformat(),
                "updated_by": entry.updated_by,
                "notes": entry.notes,
            }
            for entry in report.status_history
        ],
    }


def _public(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k != "password_hash"}


class DemoGateway:
    """Dictionary-backed gateway seeded with the demo data set."""

    def __init__(self, token_store: Optional[TokenStore] = None) -> None:
        self.token_store = token_store or MemoryTokenStore()
        self._sessions: Dict[str, str] = {}
        self._users: Dict[str, Dict[str, Any]] = {}
        for user in mock_users():
            password = DEMO_PASSWORDS.get(user.email, "demo123")
            self._users[user.id] = _user_record(user, hash_password(password))

        citizen_id = next(
            (uid for uid, rec in self._users.items() if rec["role"] == "citizen"),
            None,
        )
        self._problems: Dict[str, Dict[str, Any]] = {}
        for report in mock_reports():
            self._problems[report.id] = _problem_record(report, owner_id=citizen_id)
        self._sequence = len(self._problems)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current_user(self) -> Dict[str, Any]:
        token = self.token_store.get()
        user_id = self._sessions.get(token or "")
        if user_id is None or user_id not in self._users:
            self.token_store.clear()
            raise AuthenticationRequired()
        return self._users[user_id]

    def _require_staff(self) -> Dict[str, Any]:
        user = self._current_user()
        if user["role"] not in {r.value for r in STAFF_ROLES}:
            raise GatewayError("Admin access required", status_code=403)
        return user

    def _issue_token(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = user_id
        self.token_store.set(token)
        return token

    def _problem(self, problem_id: str) -> Dict[str, Any]:
        try:
            return self._problems[str(problem_id)]
        except KeyError:
            raise GatewayError("Problem not found", status_code=404) from None

    def _record_history(self, problem: Dict[str, Any], status: str, by: str, notes: Optional[str]) -> None:
        now = datetime.now().isoformat()
        problem["updated_at"] = now
        portal_status = {"not completed": "pending", "completed": "resolved"}.get(status, status)
        problem.setdefault("history", []).append(
            {"status": portal_status, "timestamp": now, "updated_by": by, "notes": notes}
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        record = next((u for u in self._users.values() if u["email"] == email), None)
        if record is None or not verify_password(password, record["password_hash"]):
            raise GatewayError("Invalid email or password", status_code=401)
        token = self._issue_token(record["id"])
        return {"user": _public(record), "token": token}

    def admin_login(self, email: str, password: str) -> Dict[str, Any]:
        return self.login(email, password)

    def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        email = str(payload.get("email", ""))
        if any(u["email"] == email for u in self._users.values()):
            raise GatewayError("Email already registered", status_code=409)
        user_id = f"user{len(self._users) + 1}"
        while user_id in self._users:
            user_id = f"{user_id}x"
        record = {
            "id": user_id,
            "name": payload.get("name"),
            "email": email,
            "phone_number": payload.get("phone_number"),
            "aadhar": payload.get("aadhar"),
            "role": "citizen",
            "department": None,
            "address": payload.get("address"),
            "avatar_url": None,
            "password_hash": hash_password(str(payload.get("password", ""))),
            "created_at": datetime.now().isoformat(),
        }
        self._users[user_id] = record
        token = self._issue_token(user_id)
        return {"user": _public(record), "token": token}

    def logout(self) -> None:
        token = self.token_store.get()
        if token:
            self._sessions.pop(token, None)
        self.token_store.clear()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def update_user(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        current = self._current_user()
        if current["id"] != user_id and current["role"] == "citizen":
            raise GatewayError("Forbidden", status_code=403)
        if user_id not in self._users:
            raise GatewayError("User not found", status_code=404)
        record = self._users[user_id]
        for key in ("name", "phone_number", "address", "avatar_url"):
            if key in payload and payload[key] is not None:
                record[key] = payload[key]
        return {"user": _public(record)}

    def get_all_users(self) -> Dict[str, Any]:
        self._require_staff()
        return {"users": [_public(u) for u in self._users.values()]}

    # ------------------------------------------------------------------
    # Problems
    # ------------------------------------------------------------------

    def analyze_image(self, image: ImageUpload) -> Dict[str, Any]:
        self._current_user()
        return {"categories": detect_categories(image.filename.replace("_", " "))}

    def submit_problem(self, payload: Dict[str, Any], image: ImageUpload) -> Dict[str, Any]:
        user = self._current_user()
        self._sequence += 1
        problem_id = f"report-{self._sequence:03d}"
        while problem_id in self._problems:
            self._sequence += 1
            problem_id = f"report-{self._sequence:03d}"
        now = datetime.now().isoformat()
        categories = list(payload.get("problem_categories") or [])
        problem = {
            "id": problem_id,
            "user_id": user["id"],
            "problem_categories": categories,
            "others_text": payload.get("others_text"),
            "user_image_base64": base64.b64encode(image.content).decode("ascii"),
            "user_image_mimetype": image.mimetype,
            "admin_image_base64": None,
            "admin_image_mimetype": None,
            "latitude": payload.get("latitude"),
            "longitude": payload.get("longitude"),
            "status": "not completed",
            "priority": payload.get("priority") or "medium",
            "assigned_worker_id": None,
            "assigned_department": None,
            "created_at": now,
            "updated_at": now,
            "user_name": user["name"],
            "user_email": user["email"],
        }
        self._problems[problem_id] = problem
        logger.info("Demo backend stored problem %s for user %s", problem_id, user["id"])
        return {"problem": dict(problem)}

    def get_user_problems(self, user_id: str) -> Dict[str, Any]:
        self._current_user()
        problems = [dict(p) for p in self._problems.values() if p.get("user_id") == user_id]
        problems.sort(key=lambda p: p["created_at"], reverse=True)
        return {"problems": problems}

    def get_all_problems(self) -> Dict[str, Any]:
        self._require_staff()
        problems = [dict(p) for p in self._problems.values()]
        problems.sort(key=lambda p: p["created_at"], reverse=True)
        return {"problems": problems}

    def update_problem(self, problem_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        staff = self._require_staff()
        problem = self._problem(problem_id)
        if updates.get("priority"):
            problem["priority"] = updates["priority"]
        if updates.get("status"):
            problem["status"] = updates["status"]
            self._record_history(problem, updates["status"], staff["name"], updates.get("notes"))
        return {"problem": dict(problem)}

    def assign_worker(self, problem_id: str, assignment: Dict[str, Any]) -> Dict[str, Any]:
        staff = self._require_staff()
        problem = self._problem(problem_id)
        problem["assigned_worker_id"] = assignment.get("worker_id")
        problem["assigned_department"] = assignment.get("department")
        problem["status"] = "in-progress"
        if assignment.get("estimated_completion"):
            problem["estimated_completion"] = assignment["estimated_completion"]
        self._record_history(problem, "in-progress", staff["name"], None)
        return {"problem": dict(problem)}

    def complete_problem(
        self,
        problem_id: str,
        proof: ImageUpload,
        completion_notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        staff = self._require_staff()
        problem = self._problem(problem_id)
        problem["status"] = "completed"
        problem["admin_image_base64"] = base64.b64encode(proof.content).decode("ascii")
        problem["admin_image_mimetype"] = proof.mimetype
        problem["completion_notes"] = completion_notes
        self._record_history(problem, "completed", staff["name"], completion_notes)
        return {"problem": dict(problem)}

    def health_check(self) -> Dict[str, Any]:
        return {"status": "ok", "timestamp": datetime.now().isoformat()}


__all__ = ["DemoGateway"]
