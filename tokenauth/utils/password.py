"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification utility module.
Uses bcrypt directly for secure password storage.
Passwords are never stored in plain text — always hashed with bcrypt.
"""

import bcrypt

from tokenauth.config import settings
from tokenauth.utils.exceptions import HashingError

# bcrypt 입력 한도 — bcrypt only consumes the first 72 bytes of input
MAX_PASSWORD_BYTES: int = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password using bcrypt.
    The resulting hash includes a random salt, making each hash unique
    even for identical passwords.

    Args:
        password: 평문 비밀번호 (Plain text password to hash)
        rounds: bcrypt 작업 계수, None이면 설정값 사용
                (bcrypt work factor; defaults to settings.BCRYPT_ROUNDS)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)

    Raises:
        HashingError: 솔트 생성 또는 해싱 실패 시 (Salt generation or hashing failed)

    Example:
        hashed = hash_password("my-secret-password")
        # "$2b$12$LJ3m4ys3..."
    """
    try:
        salt: bytes = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except (OSError, ValueError) as exc:
        raise HashingError(str(exc)) from exc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Verify a plain text password against a bcrypt hash.
    Uses constant-time comparison to prevent timing attacks.
    A wrong password or a malformed hash is a normal negative result.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash to compare against)

    Returns:
        bool: 일치하면 True, 불일치하면 False (True if password matches hash)
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # 잘못된 솔트/해시 형식 또는 72바이트 초과 입력 — Malformed hash or oversized input
        return False


def password_too_long(password: str) -> bool:
    """bcrypt 입력 한도 초과 여부 (Whether the password exceeds bcrypt's 72-byte input)."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES
