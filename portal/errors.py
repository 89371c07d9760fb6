from __future__ import annotations

"""Exception types shared by the portal core."""

from typing import Optional


class PortalError(Exception):
    """Base class for all portal errors."""


class ValidationError(PortalError):
    """Raised before any network call when local input is unusable."""


class GatewayError(PortalError):
    """A backend call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationRequired(GatewayError):
    """The backend rejected the stored token (HTTP 401)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status_code=401)


__all__ = [
    "PortalError",
    "ValidationError",
    "GatewayError",
    "AuthenticationRequired",
]
