from __future__ import annotations

"""HTTP client for the grievance backend.

:class:`BackendGateway` wraps the REST endpoints the portal consumes. It
does not normalise payloads; callers get the backend's JSON dictionaries
back (``{"user": ..., "token": ...}``, ``{"problems": [...]}``, ...) and
pass them through :mod:`portal.normalize`.

Every failure surfaces as :class:`~portal.errors.GatewayError`. A 401
response clears the stored token and raises
:class:`~portal.errors.AuthenticationRequired`. There is no retry policy.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests

from config.config import API_BASE_URL, API_TIMEOUT_SECONDS
from portal.errors import AuthenticationRequired, GatewayError
from portal.models import ImageUpload
from utils.database import TokenStore

logger = logging.getLogger(__name__)


class BackendGateway:
    """``requests``-based client for the grievance REST API."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token_store: Optional[TokenStore] = None,
        timeout: float = API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("BackendGateway requires a base URL")
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store or TokenStore()
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if authenticated:
            token = self.token_store.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        authenticated: bool = True,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        default_error: Optional[str] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(authenticated),
                json=json_body,
                data=data,
                files=files,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise GatewayError(f"Network error: {exc}") from exc

        if response.status_code == 401 and authenticated:
            self.token_store.clear()
            raise AuthenticationRequired()

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            message = payload.get("error") if isinstance(payload, dict) else None
            raise GatewayError(
                message or default_error or f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(f"Malformed response from {path}") from exc

    @staticmethod
    def _image_part(image: ImageUpload) -> tuple:
        return (image.filename, image.content, image.mimetype)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        result = self._request(
            "POST",
            "/api/users/login",
            authenticated=False,
            json_body={"email": email, "password": password},
            default_error="Login failed",
        )
        if result.get("token"):
            self.token_store.set(str(result["token"]))
        return result

    def admin_login(self, email: str, password: str) -> Dict[str, Any]:
        # Staff share the citizen login endpoint; the role comes back on the user.
        return self.login(email, password)

    def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        result = self._request(
            "POST",
            "/api/users/register",
            authenticated=False,
            json_body=payload,
            default_error="Registration failed",
        )
        if result.get("token"):
            self.token_store.set(str(result["token"]))
        return result

    def logout(self) -> None:
        """Forget the stored token. The backend is not contacted."""
        self.token_store.clear()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def update_user(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/users/{user_id}", json_body=payload)

    def get_all_users(self) -> Dict[str, Any]:
        return self._request("GET", "/api/users")

    # ------------------------------------------------------------------
    # Problems
    # ------------------------------------------------------------------

    def analyze_image(self, image: ImageUpload) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/api/analyze-image",
            files={"image": self._image_part(image)},
            default_error="Image analysis failed",
        )

    def submit_problem(self, payload: Dict[str, Any], image: ImageUpload) -> Dict[str, Any]:
        form: Dict[str, Any] = {
            "problem_categories": json.dumps(list(payload.get("problem_categories") or [])),
            "latitude": str(payload["latitude"]),
            "longitude": str(payload["longitude"]),
        }
        if payload.get("others_text"):
            form["others_text"] = payload["others_text"]
        if payload.get("priority"):
            form["priority"] = payload["priority"]
        return self._request(
            "POST",
            "/api/problems",
            data=form,
            files={"image": self._image_part(image)},
            default_error="Problem submission failed",
        )

    def get_user_problems(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/problems/user/{user_id}")

    def get_all_problems(self) -> Dict[str, Any]:
        return self._request("GET", "/api/admin/problems")

    def update_problem(self, problem_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/admin/problems/{problem_id}", json_body=updates)

    def assign_worker(self, problem_id: str, assignment: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/api/admin/problems/{problem_id}/assign", json_body=assignment)

    def complete_problem(
        self,
        problem_id: str,
        proof: ImageUpload,
        completion_notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        form = {"completion_notes": completion_notes} if completion_notes else None
        return self._request(
            "POST",
            f"/api/admin/problems/{problem_id}/complete",
            data=form,
            files={"completed_image": self._image_part(proof)},
            default_error="Failed to complete problem",
        )

    def health_check(self) -> Dict[str, Any]:
        return self._request("GET", "/health", authenticated=False)


__all__ = ["BackendGateway"]
