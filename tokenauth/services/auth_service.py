"""인증 서비스 — 회원가입, 로그인, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for sign-up, sign-in, and token refresh.
Orchestrates the password hasher, access token issuer, refresh token
generator, and the background refresh token store against the user and
token repositories. Core errors are translated to HTTP errors here.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from tokenauth.models.token import RefreshToken
from tokenauth.models.user import User
from tokenauth.repositories.token_repository import refresh_token_repository
from tokenauth.repositories.user_repository import user_repository
from tokenauth.schemas.auth import (
    AuthRequest,
    RefreshRequest,
    SignUpResponse,
    TokenResponse,
)
from tokenauth.services.refresh_token_store import RefreshTokenStore, refresh_token_store
from tokenauth.utils.exceptions import (
    BadRequestError,
    EntropyError,
    HashingError,
    InternalServerError,
    PersistenceError,
    SigningError,
    UnauthorizedError,
)
from tokenauth.utils.jwt import AccessTokenIssuer, access_token_issuer
from tokenauth.utils.password import hash_password, password_too_long, verify_password
from tokenauth.utils.refresh_token import generate_refresh_token

logger = logging.getLogger(__name__)

# 원인과 무관하게 동일한 응답 — Identical responses regardless of the underlying cause
INVALID_CREDENTIALS: str = "Invalid credentials"
INVALID_REFRESH_TOKEN: str = "Invalid or expired refresh token"

# 알 수 없는 로그인에도 bcrypt 검증을 수행하기 위한 해시 (Hash checked for unknown logins)
_DUMMY_PASSWORD_HASH: str = hash_password("tokenauth-dummy-password")


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Holds no per-request state; the issuer and token store are shared,
    process-wide collaborators supplied at construction.
    """

    def __init__(
        self,
        issuer: AccessTokenIssuer,
        token_store: RefreshTokenStore,
    ) -> None:
        self.issuer: AccessTokenIssuer = issuer
        self.token_store: RefreshTokenStore = token_store

    def _issue_access_token(self, user: User) -> tuple[str, int]:
        """액세스 토큰을 발급합니다 (Issue an access token for ``user``)."""
        try:
            return self.issuer.issue(user.id, user.login)
        except SigningError:
            logger.exception("Access token signing failed for user %d", user.id)
            raise InternalServerError("Failed to generate token")

    def _issue_refresh_token(self, user: User) -> str:
        """리프레시 토큰을 생성하고 비동기 저장을 예약합니다.

        Generate a refresh token and hand it to the background store.
        The response does not wait for the write to complete.
        """
        try:
            refresh_token: str = generate_refresh_token()
        except EntropyError:
            logger.exception("Refresh token generation failed for user %d", user.id)
            raise InternalServerError("Failed to generate refresh token")
        self.token_store.persist(user.id, refresh_token)
        return refresh_token

    async def sign_up(
        self,
        db: AsyncSession,
        data: AuthRequest,
    ) -> SignUpResponse:
        """회원가입을 처리합니다.

        Process sign-up: hash the password, create the user, then issue a
        refresh token whose persistence happens in the background.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Sign-up request data)

        Returns:
            SignUpResponse: 생성된 사용자 정보 (Created user and refresh token)

        Raises:
            BadRequestError: 빈 필드 또는 72바이트 초과 비밀번호 (Empty fields or oversized password)
            InternalServerError: 해싱/사용자 생성 실패 시, 이미 존재하는 로그인 포함
                                 (Hashing or user creation failed, including a taken login)
        """
        if not data.login or not data.password:
            raise BadRequestError("Login and password are required")
        if password_too_long(data.password):
            raise BadRequestError("Password must be at most 72 bytes")

        # 해싱은 스레드풀에서 — bcrypt blocks only its own request, not the event loop
        try:
            password_hash: str = await run_in_threadpool(hash_password, data.password)
        except HashingError:
            logger.exception("Password hashing failed during sign-up")
            raise InternalServerError("Failed to process password")

        try:
            user: User = await user_repository.create_user(db, data.login, password_hash)
            # 토큰 저장 워커의 독립 세션이 사용자 행을 볼 수 있도록 먼저 커밋
            # Commit first so the writer's independent session can see the user row
            await db.commit()
        except (PersistenceError, SQLAlchemyError):
            await db.rollback()
            logger.exception("Failed to create user %r", data.login)
            raise InternalServerError("Failed to create user")

        refresh_token: str = self._issue_refresh_token(user)
        logger.info("User %d signed up", user.id)
        return SignUpResponse(user_id=user.id, login=user.login, refresh_token=refresh_token)

    async def sign_in(
        self,
        db: AsyncSession,
        data: AuthRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Process sign-in. An unknown login and a wrong password produce the
        same 401 so callers cannot enumerate accounts.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Sign-in request data)

        Returns:
            TokenResponse: 토큰 응답 (Access token, expiry, and refresh token)

        Raises:
            BadRequestError: 빈 필드 (Empty fields)
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
            InternalServerError: 토큰 생성 실패 시 (Token generation failed)
        """
        if not data.login or not data.password:
            raise BadRequestError("Login and password are required")
        # bcrypt는 72바이트 이후를 무시 — bcrypt ignores input past 72 bytes
        if password_too_long(data.password):
            logger.warning("Sign-in rejected for login %r", data.login)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        user: User | None = await user_repository.get_by_login(db, data.login)
        if user is None:
            # 존재하는 로그인과 같은 비용 — Same bcrypt cost as a known login
            await run_in_threadpool(verify_password, data.password, _DUMMY_PASSWORD_HASH)
            logger.warning("Sign-in rejected for login %r", data.login)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        matches: bool = await run_in_threadpool(verify_password, data.password, user.password_hash)
        if not matches:
            logger.warning("Sign-in rejected for login %r", data.login)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token, expires_at = self._issue_access_token(user)
        refresh_token: str = self._issue_refresh_token(user)
        logger.info("User %d signed in", user.id)
        return TokenResponse(
            token=token,
            expires_at=expires_at,
            user_id=user.id,
            login=user.login,
            refresh_token=refresh_token,
        )

    async def refresh(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 액세스 토큰을 발급합니다.

        Issue a new access token for the owner of a stored refresh token.
        The refresh token itself is not rotated and stays valid for reuse.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 리프레시 요청 데이터 (Refresh request data)

        Returns:
            TokenResponse: 새 토큰 응답 (New access token; refresh token echoed back)

        Raises:
            BadRequestError: 빈 리프레시 토큰 (Empty refresh token)
            UnauthorizedError: 알 수 없는 토큰이거나 소유자가 없을 때
                               (Unknown token or missing owner)
            InternalServerError: 토큰 생성 실패 시 (Token generation failed)
        """
        if not data.refresh_token:
            raise BadRequestError("Refresh token is required")

        db_token: RefreshToken | None = await refresh_token_repository.get_by_token(
            db, data.refresh_token
        )
        if db_token is None:
            logger.warning("Refresh rejected: unknown token")
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        user: User | None = await user_repository.get_by_id(db, db_token.user_id)
        if user is None:
            logger.warning("Refresh rejected: owner %d no longer exists", db_token.user_id)
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        token, expires_at = self._issue_access_token(user)
        logger.info("User %d refreshed access token", user.id)
        return TokenResponse(
            token=token,
            expires_at=expires_at,
            user_id=user.id,
            login=user.login,
            refresh_token=data.refresh_token,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService(
    issuer=access_token_issuer,
    token_store=refresh_token_store,
)
