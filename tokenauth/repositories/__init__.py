"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Contains all repository classes that handle pure database operations.
Each repository extends BaseRepository for generic CRUD and adds domain-specific queries.
"""

from tokenauth.repositories.token_repository import refresh_token_repository
from tokenauth.repositories.user_repository import user_repository

__all__ = ["refresh_token_repository", "user_repository"]
