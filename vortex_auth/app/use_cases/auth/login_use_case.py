"""
Login Use Case

Authenticates a username/password pair and returns a bearer token.
"""

import logging
from typing import Optional

from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.app.repositories.errors import StoreError
from vortex_auth.app.services.password_hasher import PasswordHasher
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.errors import INVALID_CREDENTIALS
from vortex_auth.domain.result import Result, Return
from .dtos import AuthResponse, UserInfo
from .sessions import new_session

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Unknown username, store failure and wrong password all return
      INVALID_CREDENTIALS; the caller cannot tell them apart
    - A bcrypt check runs even when the user is missing
    - An audit session is recorded; failing to record it does not fail login
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, jwt_manager: JWTManager):
        self.uow = uow
        self.hasher = hasher
        self.jwt_manager = jwt_manager

    async def execute(self, username: str, password: str) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            username: Username
            password: Plain text password

        Returns:
            Result with AuthResponse, or Error(INVALID_CREDENTIALS)
        """
        async with self.uow:
            try:
                user = await self.uow.users.get_by_username(username)
            except StoreError as exc:
                logger.warning(f"User lookup failed during login: {exc}")
                user = None

            if user is None:
                self.hasher.burn(password)
                return Return.err(INVALID_CREDENTIALS)

            if not self.hasher.verify(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            token = self.jwt_manager.generate_jwt(user.id, user.username)
            session_id = await self._record_session(user.id)

            return Return.ok(
                AuthResponse(token=token, session_id=session_id, user=UserInfo.from_entity(user))
            )

    async def _record_session(self, user_id: str) -> Optional[str]:
        try:
            session = await self.uow.sessions.create(new_session(user_id, self.jwt_manager))
            await self.uow.commit()
        except StoreError as exc:
            logger.warning(f"Could not record session for {user_id}: {exc}")
            await self.uow.rollback()
            return None
        return session.id
