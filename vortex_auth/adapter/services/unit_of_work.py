from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from vortex_auth.adapter.database import Database
from vortex_auth.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from vortex_auth.adapter.repositories.session_repository import SessionRepository
from vortex_auth.adapter.repositories.user_repository import UserRepository
from vortex_auth.app.repositories.errors import BackendError
from vortex_auth.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, database: Database):
        self.session = session
        self.database = database

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session, self.database)
        self.sessions = SessionRepository(self.session, self.database)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session, self.database)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise BackendError(f"Commit failed: {exc}") from exc

    async def rollback(self):
        await self.session.rollback()
