from typing import Optional

from sqlmodel import delete, select, update

from vortex_auth.adapter.repositories.base import SqlRepository
from vortex_auth.app.repositories.errors import NotFoundError
from vortex_auth.app.repositories.user_repository import IUserRepository, UserUpdate
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import PasswordResetToken, Session, User


class UserRepository(SqlRepository, IUserRepository):
    """User repository implementation using SQLModel"""

    async def create(self, user: User) -> User:
        """Create a new user"""
        async with self.translate_errors():
            self.session.add(user)
            await self.session.flush()
            await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        async with self.translate_errors():
            stmt = (
                select(User)
                .where(User.id == user_id)
                .execution_options(populate_existing=True)
            )
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        async with self.translate_errors():
            result = await self.session.exec(select(User).where(User.username == username))
            return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        async with self.translate_errors():
            result = await self.session.exec(select(User).where(User.email == email))
            return result.one_or_none()

    async def update(self, user_id: str, updates: UserUpdate) -> None:
        """Apply the present fields plus updated_at in one UPDATE"""
        values = updates.changes()
        values["updated_at"] = utc_now()
        stmt = update(User).where(User.id == user_id).values(**values)
        async with self.translate_errors():
            result = await self.session.execute(stmt)
            await self.session.flush()
        if result.rowcount == 0:
            raise NotFoundError(f"User {user_id} not found")

    async def delete(self, user_id: str) -> int:
        """Delete a user and its dependents"""
        async with self.translate_errors():
            await self.session.execute(delete(Session).where(Session.user_id == user_id))
            await self.session.execute(
                delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
            )
            result = await self.session.execute(delete(User).where(User.id == user_id))
            await self.session.flush()
        return result.rowcount
