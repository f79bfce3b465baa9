"""사용자 레포지토리 — 로그인 아이디 기반 사용자 조회.

User Repository — User lookup by login and creation of credential records.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from tokenauth.models.user import User
from tokenauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_login(
        self,
        db: AsyncSession,
        login: str,
    ) -> User | None:
        """로그인 아이디로 사용자를 조회합니다.

        Retrieve a user by login string.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            login: 조회할 로그인 아이디 (Login to look up)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(User.login == login)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_user(
        self,
        db: AsyncSession,
        login: str,
        password_hash: str,
    ) -> User:
        """새 사용자를 생성합니다.

        Insert a user with an already-hashed password.
        """
        return await self.create(db, {"login": login, "password_hash": password_hash})


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
