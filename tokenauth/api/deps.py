"""FastAPI 의존성 주입 모듈 — 액세스 토큰 인증.

FastAPI dependency injection module — Access token authentication.
Provides the reusable dependency that turns an Authorization header into
the authenticated user for protected endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. AccessTokenIssuer.verify()가 서명과 nbf/exp를 검증
       (verify checks the signature and the nbf/exp window)
    4. 클레임의 user_id로 DB에서 사용자를 조회
       (User is fetched from DB using the user_id claim)
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from tokenauth.database import get_db
from tokenauth.models.user import User
from tokenauth.repositories.user_repository import user_repository
from tokenauth.schemas.auth import TokenClaims
from tokenauth.utils.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    PrematureTokenError,
    UnauthorizedError,
)
from tokenauth.utils.jwt import access_token_issuer

# HTTP Bearer 토큰 추출기 — 누락 시 직접 401 처리 (Missing header handled here as 401)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Verify the bearer access token and return the user it was issued to.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 누락/만료/무효 또는 사용자 없음
                           (Missing, expired, or invalid token; or user gone)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    try:
        claims: TokenClaims = access_token_issuer.verify(credentials.credentials)
    except ExpiredTokenError:
        raise UnauthorizedError("Token has expired")
    except PrematureTokenError:
        raise UnauthorizedError("Token is not yet valid")
    except InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    user: User | None = await user_repository.get_by_id(db, claims.user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user
