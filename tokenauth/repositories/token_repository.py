"""리프레시 토큰 레포지토리 — 토큰 저장 및 조회.

Refresh Token Repository — Persists issued refresh tokens and resolves them
back to their stored record. Tokens are never mutated after insertion.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from tokenauth.models.token import RefreshToken
from tokenauth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """리프레시 토큰 테이블 쿼리를 담당하는 레포지토리.

    Repository handling refresh token persistence and lookup.
    """

    def __init__(self) -> None:
        super().__init__(RefreshToken)

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: int,
        token: str,
    ) -> RefreshToken:
        """새 리프레시 토큰을 생성합니다.

        Create a new refresh token record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user id)
            token: 불투명 리프레시 토큰 문자열 (Opaque refresh token string)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        return await self.create(db, {"user_id": user_id, "token": token})

    async def get_by_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """리프레시 토큰 문자열로 토큰 레코드를 조회합니다.

        Retrieve a refresh token record by its token string.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            token: 조회할 리프레시 토큰 문자열 (Refresh token string to look up)

        Returns:
            RefreshToken | None: 조회된 토큰 레코드 또는 None (Found token record or None)
        """
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
refresh_token_repository: RefreshTokenRepository = RefreshTokenRepository()
