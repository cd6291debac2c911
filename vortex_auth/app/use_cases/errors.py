"""
Domain error catalogue.

Codes are what the API layer switches on; messages are safe to show.
"""

import logging
from typing import Optional

from vortex_auth.domain.result import Error

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")
USER_EXISTS = Error("USER_EXISTS", "Username already exists")
EMAIL_EXISTS = Error("EMAIL_EXISTS", "Email already exists")
USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")
TOKEN_NOT_FOUND = Error("TOKEN_NOT_FOUND", "Invalid or expired token")
TOKEN_EXPIRED = Error("TOKEN_EXPIRED", "Token has expired")
TOKEN_USED = Error("TOKEN_USED", "Token has already been used")
SESSION_NOT_FOUND = Error("SESSION_NOT_FOUND", "Session not found")


def conflict_error(field: Optional[str]) -> Error:
    """Map a unique-constraint violation to the matching domain error"""
    if field == "email":
        return EMAIL_EXISTS
    return USER_EXISTS


def backend_error(operation: str, exc: Exception) -> Error:
    logger.error(f"{operation} failed: {exc}")
    return Error("BACKEND_ERROR", f"{operation} failed")
