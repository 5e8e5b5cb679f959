"""인증 레포지토리 — 리프레시 토큰 CRUD.

Auth Repository — Refresh token persistence for JWT sessions.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.token import RefreshToken
from app.repositories.base import BaseRepository, logged_operation


class AuthRepository(BaseRepository[RefreshToken]):
    """리프레시 토큰 테이블에 대한 쿼리를 담당하는 레포지토리.

    Repository handling refresh token lifecycle queries.
    """

    def __init__(self) -> None:
        super().__init__(RefreshToken)

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 생성합니다.

        Create a new refresh token record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유 회원 ID (Token owner UUID)
            token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        return await self.create(
            db, {"user_id": user_id, "token": token, "expires_at": expires_at}
        )

    @logged_operation("get_refresh_token")
    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """리프레시 토큰 문자열로 토큰 레코드를 조회합니다."""
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    @logged_operation("delete_refresh_token")
    async def delete_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> bool:
        """리프레시 토큰을 삭제합니다. (False when the token is unknown)"""
        db_token: RefreshToken | None = await self.get_refresh_token(db, token)
        if db_token is None:
            return False

        await db.delete(db_token)
        await db.flush()
        return True

    @logged_operation("delete_user_refresh_tokens")
    async def delete_user_refresh_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """특정 회원의 모든 리프레시 토큰을 삭제합니다.

        Delete all refresh tokens of a member (logout from all devices).
        """
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
