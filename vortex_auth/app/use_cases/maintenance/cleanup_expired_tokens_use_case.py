import logging

from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth.dtos import CleanupResponse
from vortex_auth.app.use_cases.errors import backend_error
from vortex_auth.domain.result import Result, Return

logger = logging.getLogger(__name__)


class CleanupExpiredTokensUseCase:
    """Purge expired or used reset tokens and expired sessions"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[CleanupResponse]:
        async with self.uow:
            try:
                tokens_deleted = await self.uow.password_reset_tokens.delete_expired_or_used()
                sessions_deleted = await self.uow.sessions.delete_expired()
                await self.uow.commit()
            except StoreError as exc:
                return Return.err(backend_error("Cleanup", exc))

        if tokens_deleted or sessions_deleted:
            logger.info(
                f"Cleanup removed {tokens_deleted} reset tokens and {sessions_deleted} sessions"
            )
        return Return.ok(
            CleanupResponse(
                password_reset_tokens_deleted=tokens_deleted,
                sessions_deleted=sessions_deleted,
            )
        )
