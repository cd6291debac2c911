"""
Update User Use Case

Applies a partial profile update and returns the stored result.
"""

import logging

from vortex_auth.app.repositories.errors import ConflictError, NotFoundError, StoreError
from vortex_auth.app.repositories.user_repository import UserUpdate
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth.dtos import UserInfo
from vortex_auth.app.use_cases.errors import USER_NOT_FOUND, backend_error, conflict_error
from vortex_auth.domain.result import Result, Return

logger = logging.getLogger(__name__)


class UpdateUserUseCase:
    """
    Use case for updating username, email and age.

    Business Rules:
    - Only fields present in the update are written; updated_at always moves
    - A username or email already taken by another account maps to
      USER_EXISTS / EMAIL_EXISTS through the store's unique constraints
    - Bearer tokens minted before a username change keep the old username
      claim until they expire
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: str, updates: UserUpdate) -> Result[UserInfo]:
        """
        Execute update user use case.

        Args:
            user_id: Account to update
            updates: Fields to write

        Returns:
            Result with the re-fetched user, or Error
        """
        async with self.uow:
            try:
                await self.uow.users.update(user_id, updates)
                user = await self.uow.users.get_by_id(user_id)
                await self.uow.commit()
            except NotFoundError:
                return Return.err(USER_NOT_FOUND)
            except ConflictError as exc:
                return Return.err(conflict_error(exc.field))
            except StoreError as exc:
                return Return.err(backend_error("Update user", exc))

            if user is None:
                return Return.err(USER_NOT_FOUND)

        logger.info(f"User updated: {user_id} ({', '.join(updates.changes()) or 'timestamp only'})")
        return Return.ok(UserInfo.from_entity(user))
