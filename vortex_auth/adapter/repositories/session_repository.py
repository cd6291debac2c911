from typing import Optional

from sqlmodel import delete, select

from vortex_auth.adapter.repositories.base import SqlRepository
from vortex_auth.app.repositories.session_repository import ISessionRepository
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import Session


class SessionRepository(SqlRepository, ISessionRepository):
    """Session repository implementation using SQLModel"""

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        async with self.translate_errors():
            self.session.add(session_obj)
            await self.session.flush()
            await self.session.refresh(session_obj)
        return session_obj

    async def get_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by ID"""
        async with self.translate_errors():
            result = await self.session.exec(select(Session).where(Session.id == session_id))
            return result.one_or_none()

    async def delete(self, session_id: str) -> bool:
        """Delete a session by ID"""
        async with self.translate_errors():
            result = await self.session.execute(delete(Session).where(Session.id == session_id))
            await self.session.flush()
        return result.rowcount > 0

    async def delete_expired(self) -> int:
        """Delete sessions whose expiry has passed"""
        async with self.translate_errors():
            result = await self.session.execute(delete(Session).where(Session.expires_at < utc_now()))
            await self.session.flush()
        return result.rowcount
