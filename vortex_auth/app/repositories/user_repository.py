from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from vortex_auth.domain.entities import User


class UserUpdate(BaseModel):
    """
    Column updates for a user row.

    Only explicitly assigned fields are written, so passing email=None
    clears the email while leaving it out keeps the current value.
    updated_at is always rewritten by the repository.
    """

    username: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    password_hash: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises ConflictError on username/email collision"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def update(self, user_id: str, updates: UserUpdate) -> None:
        """Apply updates in a single statement. Raises NotFoundError or ConflictError"""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> int:
        """Delete a user with its sessions and reset tokens. Returns rows deleted"""
        pass
