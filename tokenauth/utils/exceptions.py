"""예외 클래스 모듈 — 코어 오류 및 HTTP 예외.

Exception classes module.
Two families live here:

- Core errors raised by the hasher, token issuer, refresh token generator
  and persistence calls. They know nothing about HTTP.
- Pre-configured HTTPException subclasses raised by the service layer,
  which translates core errors into client-facing status codes.

Usage:
    from tokenauth.utils.exceptions import UnauthorizedError, ExpiredTokenError
    raise UnauthorizedError("Invalid credentials")
"""

from fastapi import HTTPException, status


# ---------------------------------------------------------------------------
# 코어 오류 — Core (transport-independent) errors
# ---------------------------------------------------------------------------
class AuthCoreError(Exception):
    """인증 코어 오류의 기반 클래스 (Base class for all core auth errors)."""


class HashingError(AuthCoreError):
    """비밀번호 해싱 실패 — 엔트로피/리소스 부족 등 복구 불가 오류.

    Password hashing failed irrecoverably (entropy or resource failure).
    A wrong password is never a HashingError.
    """


class SigningError(AuthCoreError):
    """액세스 토큰 서명 실패 (Access token signing failed or secret unavailable)."""


class EntropyError(AuthCoreError):
    """보안 난수 생성 실패 (Secure random source could not supply bytes)."""


class PersistenceError(AuthCoreError):
    """저장소 쓰기 실패 (Repository write failed)."""


class TokenVerificationError(AuthCoreError):
    """액세스 토큰 검증 실패의 기반 클래스 (Base class for access token verification failures)."""


class InvalidTokenError(TokenVerificationError):
    """서명 불일치 또는 형식 오류 (Bad signature or malformed token)."""


class ExpiredTokenError(TokenVerificationError):
    """만료된 토큰 (Token is past its expiry)."""


class PrematureTokenError(TokenVerificationError):
    """아직 유효하지 않은 토큰 (Token used before its not-before time)."""


# ---------------------------------------------------------------------------
# HTTP 예외 — HTTP exceptions with fixed status codes
# ---------------------------------------------------------------------------
class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for missing or malformed input (e.g. empty login or password).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised for bad credentials, unknown refresh tokens, and missing or
    invalid access tokens.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InternalServerError(HTTPException):
    """500 Internal Server Error 예외 — 동기 경로의 내부 실패.

    500 Internal Server Error exception.
    Raised when hashing, signing, entropy, or a synchronous persistence step fails.

    Args:
        detail: 오류 메시지 (Error message, default: "Internal server error")
    """

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
