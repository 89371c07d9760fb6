from __future__ import annotations

"""Shared fixtures: a recording fake gateway and a fresh application state."""

from typing import Any, Dict, List, Tuple

import pytest

from portal.errors import GatewayError
from portal.report_cache import ReportCache
from portal.session import SessionStore
from portal.state import AppState


class FakeGateway:
    """Gateway double that records calls and returns canned payloads.

    ``responses`` maps a method name to a payload or to a callable taking
    the call arguments. ``failures`` maps a method name to the
    :class:`GatewayError` it should raise.
    """

    def __init__(self, **responses: Any) -> None:
        self.responses: Dict[str, Any] = responses
        self.failures: Dict[str, GatewayError] = {}
        self.calls: List[Tuple[str, tuple]] = []

    def fail(self, method: str, message: str = "boom", status_code: int = 500) -> None:
        self.failures[method] = GatewayError(message, status_code=status_code)

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _call(self, method: str, *args: Any) -> Any:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]
        value = self.responses.get(method, {})
        if callable(value):
            return value(*args)
        return value

    def login(self, email, password):
        return self._call("login", email, password)

    def admin_login(self, email, password):
        return self._call("admin_login", email, password)

    def register(self, payload):
        return self._call("register", payload)

    def logout(self):
        self.calls.append(("logout", ()))

    def update_user(self, user_id, payload):
        return self._call("update_user", user_id, payload)

    def get_all_users(self):
        return self._call("get_all_users")

    def analyze_image(self, image):
        return self._call("analyze_image", image)

    def submit_problem(self, payload, image):
        return self._call("submit_problem", payload, image)

    def get_user_problems(self, user_id):
        return self._call("get_user_problems", user_id)

    def get_all_problems(self):
        return self._call("get_all_problems")

    def update_problem(self, problem_id, updates):
        return self._call("update_problem", problem_id, updates)

    def assign_worker(self, problem_id, assignment):
        return self._call("assign_worker", problem_id, assignment)

    def complete_problem(self, problem_id, proof, completion_notes=None):
        return self._call("complete_problem", problem_id, proof, completion_notes)

    def health_check(self):
        return self._call("health_check")


def backend_user(role: str = "citizen", **extra: Any) -> Dict[str, Any]:
    record = {
        "id": f"{role}-1",
        "name": f"Test {role}",
        "email": f"{role}@example.com",
        "phone_number": "9876500000",
        "aadhar": "123412341234",
        "role": role,
        "department": None,
    }
    record.update(extra)
    return record


def backend_problem(problem_id: str = "p-1", **extra: Any) -> Dict[str, Any]:
    record = {
        "id": problem_id,
        "problem_categories": ["Water Issues"],
        "others_text": "Pipeline leaking near the market",
        "latitude": "26.45",
        "longitude": "80.33",
        "status": "not completed",
        "priority": "high",
        "created_at": "2024-02-01T10:00:00Z",
        "user_name": "Ram",
        "user_email": "ram@example.com",
    }
    record.update(extra)
    return record


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def state() -> AppState:
    return AppState(language="english")


@pytest.fixture
def cache(state: AppState, gateway: FakeGateway) -> ReportCache:
    return ReportCache(state, gateway)


@pytest.fixture
def session(state: AppState, gateway: FakeGateway, cache: ReportCache) -> SessionStore:
    return SessionStore(state, gateway, cache)
