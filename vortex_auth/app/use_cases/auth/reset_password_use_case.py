"""
Reset Password Use Case

Consumes a reset token and sets a new password in one transaction.
"""

import logging
from datetime import datetime
from typing import Callable

from vortex_auth.app.repositories.errors import NotFoundError, StoreError
from vortex_auth.app.repositories.user_repository import UserUpdate
from vortex_auth.app.services.password_hasher import PasswordHasher, PasswordHashError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.errors import (
    TOKEN_EXPIRED,
    TOKEN_NOT_FOUND,
    TOKEN_USED,
    USER_NOT_FOUND,
    backend_error,
)
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.result import Result, Return
from .dtos import MessageResponse
from .request_password_reset_use_case import hash_reset_token

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - Token is looked up by its SHA-256 hash
    - Expired tokens fail with TOKEN_EXPIRED, whether used or not;
      a token is expired from the instant now == expires_at
    - Used tokens fail with TOKEN_USED
    - The password update and the used flag commit together; when a
      concurrent reset consumed the token first, the password change is
      rolled back and TOKEN_USED is returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock

    async def execute(self, token: str, new_password: str) -> Result[MessageResponse]:
        """
        Execute reset password use case.

        Args:
            token: Reset token (plain text from email)
            new_password: New password to set

        Returns:
            Result with confirmation message, or Error

        Errors:
            - TOKEN_NOT_FOUND: Token unknown
            - TOKEN_EXPIRED: Token has expired
            - TOKEN_USED: Token has already been used
            - BACKEND_ERROR: Store or hasher failure
        """
        async with self.uow:
            try:
                reset_token = await self.uow.password_reset_tokens.get_by_token_hash(
                    hash_reset_token(token)
                )
            except StoreError as exc:
                return Return.err(backend_error("Password reset", exc))

            if reset_token is None:
                return Return.err(TOKEN_NOT_FOUND)

            if self.clock() >= reset_token.expires_at:
                return Return.err(TOKEN_EXPIRED)

            if reset_token.used:
                return Return.err(TOKEN_USED)

            try:
                password_hash = self.hasher.hash(new_password)
            except PasswordHashError as exc:
                return Return.err(backend_error("Password reset", exc))

            try:
                await self.uow.users.update(
                    reset_token.user_id, UserUpdate(password_hash=password_hash)
                )
            except NotFoundError:
                return Return.err(USER_NOT_FOUND)
            except StoreError as exc:
                return Return.err(backend_error("Password reset", exc))

            try:
                await self.uow.password_reset_tokens.mark_used(reset_token.id)
            except NotFoundError:
                logger.warning(f"Reset token {reset_token.id} consumed concurrently")
                await self.uow.rollback()
                return Return.err(TOKEN_USED)
            except StoreError as exc:
                return Return.err(backend_error("Password reset", exc))

            try:
                await self.uow.commit()
            except StoreError as exc:
                return Return.err(backend_error("Password reset", exc))

        logger.info(f"Password reset for user {reset_token.user_id}")
        return Return.ok(MessageResponse(message="Password reset successfully"))
