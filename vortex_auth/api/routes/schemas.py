"""
HTTP request payloads.

Validated before anything reaches a use case. An empty email string is
treated as no email.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, EmailStr, Field

from vortex_auth.app.repositories.user_repository import UserUpdate


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank_to_none)]


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=32)
    email: OptionalEmail = Field(None, description="Optional contact address")
    password: str = Field(..., min_length=8, max_length=72)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirmRequest(BaseModel):
    password: str = Field(..., min_length=8, max_length=72)


class LogoutRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class UserUpdateRequest(BaseModel):
    """
    Partial profile update.

    Omitted fields are left alone. "email": "" or null clears the email,
    "age": null clears the age; username cannot be cleared.
    """

    username: Optional[str] = Field(None, min_length=3, max_length=32)
    email: OptionalEmail = None
    age: Optional[int] = Field(None, ge=0, le=150)

    def to_update(self) -> UserUpdate:
        changes = self.model_dump(exclude_unset=True)
        if changes.get("username") is None:
            changes.pop("username", None)
        return UserUpdate(**changes)
