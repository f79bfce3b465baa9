"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for schema creation and
relationship resolution.

Modules:
    user: 사용자 (User credentials)
    token: 리프레시 토큰 (Refresh tokens)
"""

from tokenauth.models.user import User
from tokenauth.models.token import RefreshToken

__all__ = ["User", "RefreshToken"]
