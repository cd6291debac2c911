"""
User Entity

Represents a registered account.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from vortex_auth.domain.base import generate_uuid, utc_now


class User(SQLModel, table=True):
    """
    User entity - a registered account.

    Business Rules:
    - Username is unique and 3-32 characters long
    - Email is optional but unique when present
    - Password stored as bcrypt hash (never in clear)
    - Deleting a user removes its sessions and reset tokens
    """

    __tablename__ = "users"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    username: str = Field(unique=True, index=True, max_length=32)
    email: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    age: Optional[int] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
