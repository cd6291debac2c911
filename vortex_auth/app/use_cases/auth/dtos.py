"""
Authentication Use Case DTOs (Data Transfer Objects)

Command and Response classes shared by the auth and user use cases.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from vortex_auth.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - validated registration intent

    Created by the API layer after request validation passes.
    An empty email means the account has no email.
    """

    username: str
    email: Optional[str] = None
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """User projection: everything except the password hash"""

    id: str
    username: str
    email: Optional[str] = None
    age: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            age=user.age,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response for register and login"""

    token: str
    session_id: Optional[str] = None
    user: UserInfo


class MessageResponse(BaseModel):
    """Response carrying only a human readable message"""

    message: str


class CleanupResponse(BaseModel):
    """Rows removed by a maintenance pass"""

    password_reset_tokens_deleted: int
    sessions_deleted: int
