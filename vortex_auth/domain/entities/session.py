"""
Session Entity

Audit record of an issued bearer token.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from vortex_auth.domain.base import generate_uuid, utc_now


class Session(SQLModel, table=True):
    """
    Session entity - one row per bearer token handed out.

    Business Rules:
    - Bearer tokens are stateless; sessions are never consulted to authenticate
    - Expiry mirrors the token expiry
    - Removed on logout, on user deletion and once expired
    """

    __tablename__ = "sessions"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    user_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        )
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_session_user_id", "user_id"),
        Index("idx_session_expires_at", "expires_at"),
    )
