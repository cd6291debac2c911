import logging

from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth.dtos import MessageResponse
from vortex_auth.app.use_cases.errors import USER_NOT_FOUND, backend_error
from vortex_auth.domain.result import Result, Return

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """
    Delete an account together with its sessions and reset tokens.

    The store delete itself is idempotent; a missing account is reported
    as USER_NOT_FOUND here so the caller learns nothing was removed.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str) -> Result[MessageResponse]:
        async with self.uow:
            try:
                if await self.uow.users.get_by_id(user_id) is None:
                    return Return.err(USER_NOT_FOUND)

                await self.uow.users.delete(user_id)
                await self.uow.commit()
            except StoreError as exc:
                return Return.err(backend_error("Delete user", exc))

        logger.info(f"User deleted: {user_id}")
        return Return.ok(MessageResponse(message="User deleted successfully"))
