"""JWT 액세스 토큰 발급 및 검증 모듈.

JWT access token issuance and verification module.
Access tokens are stateless: validity is fully determined by the HMAC
signature and the embedded timestamps, nothing is persisted.

JWT Payload Structure:
    {
        "user_id": 42,              # 사용자 ID (User identifier)
        "login": "alice",           # 로그인 아이디 (Login)
        "iat": 1234567890,          # 발급 시각 (Issued-at)
        "nbf": 1234567890,          # 유효 시작 시각 (Not-before)
        "exp": 1234654290,          # 만료 시각 = iat + 24h (Expiration)
        "jti": "9f1c..."            # 토큰 고유 ID (Unique token id)
    }
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import ValidationError

from tokenauth.config import SYMMETRIC_ALGORITHMS, Settings, settings
from tokenauth.schemas.auth import TokenClaims
from tokenauth.utils.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    PrematureTokenError,
    SigningError,
)

# 검증 시 반드시 존재해야 하는 클레임 — Claims every verified token must carry
REQUIRED_CLAIMS: list[str] = ["user_id", "login", "iat", "nbf", "exp", "jti"]


class AccessTokenIssuer:
    """액세스 토큰 발급기/검증기.

    Issues and verifies signed, time-bounded access tokens.
    The signing secret is supplied once at construction and never mutated;
    an empty secret is rejected immediately rather than at first use.

    Attributes:
        algorithm: HMAC 서명 알고리즘 (HMAC signing algorithm)
        lifetime: 토큰 유효 기간 (Token lifetime)
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ) -> None:
        if not secret_key or not secret_key.strip():
            raise SigningError("signing secret is empty")
        if algorithm not in SYMMETRIC_ALGORITHMS:
            raise SigningError(f"unsupported signing algorithm: {algorithm}")
        self._secret_key: str = secret_key
        self.algorithm: str = algorithm
        self.lifetime: timedelta = lifetime

    @classmethod
    def from_settings(cls, config: Settings) -> "AccessTokenIssuer":
        """설정 객체로부터 발급기를 생성합니다 (Build an issuer from a Settings object)."""
        return cls(
            secret_key=config.JWT_SECRET_KEY,
            algorithm=config.JWT_ALGORITHM,
            lifetime=timedelta(hours=config.JWT_ACCESS_TOKEN_EXPIRE_HOURS),
        )

    def issue(
        self,
        user_id: int,
        login: str,
        now: datetime | None = None,
    ) -> tuple[str, int]:
        """JWT 액세스 토큰을 생성합니다.

        Build claims {user_id, login, iat=now, nbf=now, exp=now+lifetime, jti}
        and sign them with the configured secret.

        Args:
            user_id: 사용자 ID (User id)
            login: 로그인 아이디 (Login)
            now: 발급 기준 시각, None이면 현재 UTC (Issuance time; defaults to current UTC)

        Returns:
            tuple[str, int]: (인코딩된 토큰, 만료 UNIX timestamp)
                             (Encoded token, expiry as UNIX seconds)

        Raises:
            SigningError: 서명 실패 시 (When signing fails)
        """
        issued_at: datetime = now or datetime.now(timezone.utc)
        expires_at: int = int((issued_at + self.lifetime).timestamp())
        payload: dict[str, Any] = {
            "user_id": user_id,
            "login": login,
            "iat": int(issued_at.timestamp()),
            "nbf": int(issued_at.timestamp()),
            "exp": expires_at,
            "jti": uuid.uuid4().hex,
        }
        try:
            token: str = jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise SigningError(str(exc)) from exc
        return token, expires_at

    def verify(self, token: str) -> TokenClaims:
        """JWT 액세스 토큰을 디코딩하고 검증합니다.

        Verify the signature and check that now lies within [nbf, exp].

        Args:
            token: JWT 토큰 문자열 (Encoded JWT token string)

        Returns:
            TokenClaims: 검증된 클레임 (Verified claims)

        Raises:
            ExpiredTokenError: 토큰 만료 시 (When the token is past exp)
            PrematureTokenError: nbf/iat 이전 사용 시 (When used before nbf)
            InvalidTokenError: 서명 불일치/형식 오류 (Bad signature or malformed token)
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("token has expired") from exc
        except jwt.ImmatureSignatureError as exc:
            raise PrematureTokenError("token is not yet valid") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(str(exc)) from exc

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise InvalidTokenError("malformed token claims") from exc


# 전역 발급기 인스턴스 — Process-wide issuer built once from settings
access_token_issuer: AccessTokenIssuer = AccessTokenIssuer.from_settings(settings)
