"""
Identity Domain Entities

One entity per file: users, their audit sessions and password reset tokens.
"""

from .user import User
from .session import Session
from .password_reset_token import PasswordResetToken

__all__ = [
    "User",
    "Session",
    "PasswordResetToken",
]
