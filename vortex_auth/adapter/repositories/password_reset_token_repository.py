from typing import Optional

from sqlmodel import delete, or_, select, update

from vortex_auth.adapter.repositories.base import SqlRepository
from vortex_auth.app.repositories.errors import NotFoundError
from vortex_auth.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(SqlRepository, IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        async with self.translate_errors():
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        async with self.translate_errors():
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def mark_used(self, token_id: str) -> None:
        """Set used=True, only if the token is still unused"""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token_id, PasswordResetToken.used == False)  # noqa: E712
            .values(used=True)
        )
        async with self.translate_errors():
            result = await self.session.execute(stmt)
            await self.session.flush()
        if result.rowcount == 0:
            raise NotFoundError(f"No unused password reset token {token_id}")

    async def delete_expired_or_used(self) -> int:
        """Delete where expires_at < now OR used = true"""
        stmt = delete(PasswordResetToken).where(
            or_(
                PasswordResetToken.expires_at < utc_now(),
                PasswordResetToken.used == True,  # noqa: E712
            )
        )
        async with self.translate_errors():
            result = await self.session.execute(stmt)
            await self.session.flush()
        return result.rowcount
