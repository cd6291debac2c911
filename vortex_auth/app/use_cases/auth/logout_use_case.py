import logging

from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.errors import SESSION_NOT_FOUND, backend_error
from vortex_auth.domain.result import Result, Return
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Removes the caller's audit session.

    Bearer tokens stay valid until they expire; logout only drops the
    session record. Sessions of other users are reported as missing.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str, session_id: str) -> Result[MessageResponse]:
        async with self.uow:
            try:
                session = await self.uow.sessions.get_by_id(session_id)
                if session is None or session.user_id != user_id:
                    return Return.err(SESSION_NOT_FOUND)

                await self.uow.sessions.delete(session_id)
                await self.uow.commit()
            except StoreError as exc:
                return Return.err(backend_error("Logout", exc))

        logger.info(f"Session {session_id} closed for user {user_id}")
        return Return.ok(MessageResponse(message="Logged out successfully"))
