from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth.dtos import UserInfo
from vortex_auth.app.use_cases.errors import USER_NOT_FOUND, backend_error
from vortex_auth.domain.result import Result, Return


class GetUserUseCase:
    """Load a user projection by id"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str) -> Result[UserInfo]:
        async with self.uow:
            try:
                user = await self.uow.users.get_by_id(user_id)
            except StoreError as exc:
                return Return.err(backend_error("Get user", exc))

            if user is None:
                return Return.err(USER_NOT_FOUND)

            return Return.ok(UserInfo.from_entity(user))
