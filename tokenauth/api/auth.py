"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 현재 사용자.

Auth Router — Sign-up, sign-in, token refresh, and current user endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tokenauth.api.deps import get_current_user
from tokenauth.database import get_db
from tokenauth.models.user import User
from tokenauth.schemas.auth import (
    AuthRequest,
    RefreshRequest,
    SignUpResponse,
    TokenResponse,
    UserMeResponse,
)
from tokenauth.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def sign_up(
    data: AuthRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SignUpResponse:
    """회원가입 — 사용자 생성 및 리프레시 토큰 발급.

    Create a user and issue a refresh token (persisted in the background).
    """
    return await auth_service.sign_up(db, data)


@router.post("/signin", response_model=TokenResponse)
async def sign_in(
    data: AuthRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 액세스 토큰과 리프레시 토큰 발급.

    Verify credentials and issue an access token plus a refresh token.
    """
    return await auth_service.sign_in(db, data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 액세스 토큰 발급.

    Exchange a stored refresh token for a new access token.
    """
    return await auth_service.refresh(db, data)


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 조회 (Identity behind the bearer access token)."""
    return UserMeResponse(user_id=current_user.id, login=current_user.login)
