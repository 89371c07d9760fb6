from __future__ import annotations

"""Credential validation and hashing utilities for the grievance portal.

Validation runs client-side before any gateway call; hashing is used by the
in-process demo backend, which stores its seeded accounts the way a real
backend would (bcrypt with salt).
"""

import bcrypt
import re
from typing import Any, Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
AUTH_TYPES = ("aadhaar", "pan")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt with salt.

    Args:
        password (str): Plain text password

    Returns:
        str: Hashed password
    """

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        password (str): Plain text password
        password_hash (str): Hashed password

    Returns:
        bool: True if password matches, False otherwise
    """

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email (str): Email address

    Returns:
        bool: True if valid, False otherwise
    """

    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email or ""))


def validate_phone(phone: str) -> bool:
    """Validate an Indian mobile number (10 digits, optional +91 prefix)."""

    pattern = r"^(\+91)?[6-9]\d{9}$"
    return bool(re.match(pattern, phone or ""))


def validate_auth_number(auth_type: str, auth_number: str) -> Tuple[bool, str]:
    """
    Validate an identity document number.

    Aadhaar numbers must be exactly 12 digits; PAN numbers follow the
    ``AAAAA9999A`` pattern.

    Returns:
        Tuple[bool, str]: (is_valid, error_message)
    """

    if auth_type not in AUTH_TYPES:
        return False, f"Unknown identity type: {auth_type}"
    if auth_type == "aadhaar":
        if not re.fullmatch(r"\d{12}", auth_number or ""):
            return False, "Aadhaar number should be 12 digits"
        return True, ""
    if not re.fullmatch(r"[A-Z]{5}\d{4}[A-Z]", (auth_number or "").upper()):
        return False, "PAN should look like ABCDE1234F"
    return True, ""


def validate_registration(user_data: Dict[str, Any]) -> List[str]:
    """
    Validate a citizen registration payload.

    Args:
        user_data: Form fields (name, email, phone, auth_type, auth_number,
            password and optionally confirm_password).

    Returns:
        List[str]: Error messages; empty when the payload is acceptable.
    """

    errors: List[str] = []
    if not str(user_data.get("name", "")).strip():
        errors.append("Name is required")
    if not validate_email(str(user_data.get("email", ""))):
        errors.append("Invalid email format")
    phone = str(user_data.get("phone", "") or "")
    if phone and not validate_phone(phone):
        errors.append("Invalid phone number")

    ok, msg = validate_auth_number(
        str(user_data.get("auth_type", "aadhaar")), str(user_data.get("auth_number", ""))
    )
    if not ok:
        errors.append(msg)

    password = str(user_data.get("password", ""))
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    confirm = user_data.get("confirm_password")
    if confirm is not None and confirm != password:
        errors.append("Passwords do not match")
    return errors


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "AUTH_TYPES",
    "hash_password",
    "verify_password",
    "validate_email",
    "validate_phone",
    "validate_auth_number",
    "validate_registration",
]
