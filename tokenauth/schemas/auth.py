"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers sign-up, sign-in, token refresh, access token claims, and current user info.
Request fields default to an empty string so a missing field is reported
by the service as a 400 rather than by FastAPI as a 422.
"""

from pydantic import BaseModel


class AuthRequest(BaseModel):
    """회원가입/로그인 요청 스키마.

    Sign-up and sign-in request schema.

    Attributes:
        login: 사용자 로그인 아이디 (User login identifier)
        password: 비밀번호 (Plain text password, bcrypt-hashed or verified on server)
    """

    login: str = ""  # 사용자 로그인 아이디 (User login identifier)
    password: str = ""  # 비밀번호 — 평문 (Plain text, never stored)


class RefreshRequest(BaseModel):
    """토큰 갱신 요청 스키마.

    Token refresh request schema.
    Exchanges a stored refresh token for a new access token.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token)
    """

    refresh_token: str = ""


class SignUpResponse(BaseModel):
    """회원가입 응답 스키마 (201).

    Sign-up response schema.

    Attributes:
        message: 결과 메시지 (Result message)
        user_id: 생성된 사용자 ID (Created user id)
        login: 로그인 아이디 (Login)
        refresh_token: 발급된 리프레시 토큰 (Issued refresh token)
    """

    message: str = "User created successfully"
    user_id: int
    login: str
    refresh_token: str


class TokenResponse(BaseModel):
    """액세스 토큰 발급 응답 스키마.

    Access token issuance response schema.
    Returned after successful sign-in or token refresh.

    Attributes:
        token: JWT 액세스 토큰 (Signed access token, 24h lifetime)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
        expires_at: 만료 시각 UNIX timestamp (Expiry as UNIX seconds)
        user_id: 사용자 ID (User id)
        login: 로그인 아이디 (Login)
        refresh_token: 리프레시 토큰 (Refresh token usable with /refresh)
    """

    token: str
    token_type: str = "bearer"
    expires_at: int
    user_id: int
    login: str
    refresh_token: str


class TokenClaims(BaseModel):
    """액세스 토큰 클레임 — 서명으로 보호되는 신원/시간 정보.

    Access token claims, protected by the token signature.
    Field names match the JWT registered claim names on the wire.

    Attributes:
        user_id: 사용자 ID (User id)
        login: 로그인 아이디 (Login)
        iat: 발급 시각 (Issued-at, UNIX seconds)
        nbf: 유효 시작 시각 (Not-before, UNIX seconds)
        exp: 만료 시각 (Expiry, UNIX seconds)
        jti: 토큰 고유 ID (Unique token id)
    """

    user_id: int
    login: str
    iat: int
    nbf: int
    exp: int
    jti: str


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me)."""

    user_id: int
    login: str
