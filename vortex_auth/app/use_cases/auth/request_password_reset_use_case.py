"""
Request Password Reset Use Case

Issues a single-use reset token and queues the reset email.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from starlette.background import BackgroundTasks

from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.email_dispatcher import EmailDispatcher, deliver_quietly
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.errors import backend_error
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import PasswordResetToken
from vortex_auth.domain.result import Result, Return
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If the email exists, a password reset link has been sent"


def hash_reset_token(token: str) -> str:
    """SHA-256 hex digest; the only form of a reset token that is stored"""
    return hashlib.sha256(token.encode()).hexdigest()


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Unknown email: nothing is written, nothing is sent, same response
    - Token is 32 random bytes, hex encoded; only its hash is persisted
    - Token expires after reset_ttl_hours
    - The email goes out after the response, so a registered and an
      unregistered address answer in the same time
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mailer: EmailDispatcher,
        background: BackgroundTasks,
        reset_ttl_hours: int = 24,
    ):
        self.uow = uow
        self.mailer = mailer
        self.background = background
        self.reset_ttl_hours = reset_ttl_hours

    async def execute(self, email: str) -> Result[MessageResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Address the reset link should go to

        Returns:
            Result with the generic message, or Error(BACKEND_ERROR)
        """
        async with self.uow:
            try:
                user = await self.uow.users.get_by_email(email)
            except StoreError as exc:
                return Return.err(backend_error("Password reset request", exc))

            if user is None:
                logger.info("Password reset requested for unknown email")
                return Return.ok(MessageResponse(message=RESET_REQUESTED_MESSAGE))

            token = secrets.token_hex(32)
            reset_token = PasswordResetToken(
                user_id=user.id,
                token_hash=hash_reset_token(token),
                expires_at=utc_now() + timedelta(hours=self.reset_ttl_hours),
            )

            try:
                await self.uow.password_reset_tokens.create(reset_token)
                await self.uow.commit()
            except StoreError as exc:
                return Return.err(backend_error("Password reset request", exc))

        self.background.add_task(
            deliver_quietly, self.mailer.send_password_reset, email, user.username, token
        )

        logger.info(f"Password reset token issued for user {user.id}")
        return Return.ok(MessageResponse(message=RESET_REQUESTED_MESSAGE))
