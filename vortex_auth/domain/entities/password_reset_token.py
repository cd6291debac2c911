"""
PasswordResetToken Entity

Single-use password reset tokens.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from vortex_auth.domain.base import generate_uuid, utc_now


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - secure password reset tokens.

    Business Rules:
    - Token is 32 random bytes, hex encoded; only its SHA-256 digest is stored
    - Expires after PASSWORD_RESET_TOKEN_EXPIRY hours (default 24)
    - Single-use: marked as used in the same transaction as the password change
    - Expired or used rows are purged periodically
    """

    __tablename__ = "password_reset_tokens"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    user_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        )
    )
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 output

    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_user_id", "user_id"),
        Index("idx_password_reset_used", "used"),
    )
