from abc import ABC, abstractmethod
from typing import Optional

from vortex_auth.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash (expiry and used flag unchecked)"""
        pass

    @abstractmethod
    async def mark_used(self, token_id: str) -> None:
        """Flag an unused token as used. Raises NotFoundError if no unused token matched"""
        pass

    @abstractmethod
    async def delete_expired_or_used(self) -> int:
        """Delete tokens that are expired or already used. Returns count"""
        pass
