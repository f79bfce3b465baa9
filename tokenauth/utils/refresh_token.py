"""불투명 리프레시 토큰 생성 모듈.

Opaque refresh token generator.
Tokens are random bytes from the OS CSPRNG, URL-safe base64 encoded.
They carry no claims; validity is decided solely by a store lookup.
"""

import secrets

from tokenauth.config import settings
from tokenauth.utils.exceptions import EntropyError


def generate_refresh_token(num_bytes: int | None = None) -> str:
    """새 리프레시 토큰을 생성합니다.

    Draw ``num_bytes`` (default: settings.REFRESH_TOKEN_BYTES, 32) from a
    cryptographically secure source and encode them URL-safely.

    Raises:
        EntropyError: 난수 소스 실패 시 (Random source could not supply bytes)
    """
    try:
        return secrets.token_urlsafe(num_bytes or settings.REFRESH_TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError("secure random source unavailable") from exc
