from abc import ABC, abstractmethod
from typing import Optional

from vortex_auth.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed"""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete sessions past their expiry. Returns count"""
        pass
