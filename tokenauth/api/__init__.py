"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates all endpoints into a single router
for inclusion in the FastAPI application.

Included routers:
    - auth: 인증 (Sign-up, sign-in, refresh, current user)
"""

from fastapi import APIRouter

from tokenauth.api.auth import router as auth_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
