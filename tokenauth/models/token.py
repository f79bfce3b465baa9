"""리프레시 토큰 모델 — 불투명 리프레시 토큰 저장.

Refresh Token model — Stores opaque refresh tokens issued at sign-up and sign-in.
Each token is bound to exactly one user. Tokens carry no expiry of their own;
the audit timestamps record when they were issued.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tokenauth.database import Base


class RefreshToken(Base):
    """리프레시 토큰 테이블.

    Refresh token table for long-lived re-authentication without a password.

    Attributes:
        id: 고유 식별자 (Auto-increment integer primary key)
        user_id: 소유 사용자 ID (Owner user id)
        token: URL-safe 불투명 토큰 문자열 (URL-safe opaque token string, unique)
        created_at: 생성 일시 (Creation timestamp)
        updated_at: 수정 일시 (Last update timestamp)
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user = relationship("User", back_populates="refresh_tokens")
