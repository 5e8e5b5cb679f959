"""비밀번호 설정 토큰 레포지토리.

Password setup token repository — lookup by token string and cleanup of
expired tokens.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utcnow
from app.models.token import PasswordSetupToken
from app.repositories.base import BaseRepository, logged_operation


class PasswordSetupTokenRepository(BaseRepository[PasswordSetupToken]):
    """비밀번호 설정 토큰 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(PasswordSetupToken)

    @logged_operation("find_by_token")
    async def find_by_token(self, db: AsyncSession, token: str) -> PasswordSetupToken | None:
        result = await db.execute(
            select(PasswordSetupToken).where(PasswordSetupToken.token == token)
        )
        return result.scalar_one_or_none()

    @logged_operation("delete_expired_tokens")
    async def delete_expired_tokens(self, db: AsyncSession) -> int:
        """만료된 토큰을 삭제하고 삭제 개수를 반환합니다."""
        result = await db.execute(
            delete(PasswordSetupToken).where(PasswordSetupToken.expires_at < utcnow())
        )
        await db.flush()
        return result.rowcount or 0


# 싱글턴 인스턴스 — Singleton instance
password_setup_token_repository: PasswordSetupTokenRepository = PasswordSetupTokenRepository()
