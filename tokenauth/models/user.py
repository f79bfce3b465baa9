"""사용자 ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is a login plus a bcrypt password hash; the numeric id is the
identifier embedded in access tokens and referenced by refresh tokens.

Tables:
    - users: 사용자 계정 (User accounts, login is globally unique)
"""

from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tokenauth.database import Base


class User(Base):
    """사용자 모델 — 인증 자격 증명 정보.

    User model — Credential record for authentication.
    The password is never stored in plain text, only its bcrypt hash.

    Attributes:
        id: 고유 식별자 (Auto-increment integer primary key)
        login: 로그인 아이디 (Login string, globally unique)
        password_hash: bcrypt 해시 (bcrypt hash of the password)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_tokens: 이 사용자가 소유한 리프레시 토큰 (Refresh tokens owned by this user)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (numeric, auto-generated)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 로그인 아이디 — Login identifier (unique across all users)
    login: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hash, never the plaintext
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", passive_deletes=True)
