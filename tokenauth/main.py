"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 라우터, 수명주기 등록.

FastAPI application entry point — Middleware, router, and lifespan registration.
Startup creates the schema and starts the refresh token writer; shutdown
drains the writer and disposes the engine. Importing this module already
validated the settings, so a missing JWT secret never reaches this point.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tokenauth import __version__
from tokenauth.api import api_router
from tokenauth.config import settings
from tokenauth.database import engine, init_models
from tokenauth.middleware.axiom_logging import AxiomLoggingMiddleware
from tokenauth.services.refresh_token_store import refresh_token_store

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "aiosqlite"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """기동/종료 처리 (Startup and shutdown hooks)."""
    await init_models()
    await refresh_token_store.start()
    logger.info("%s started", settings.APP_NAME)
    try:
        yield
    finally:
        await refresh_token_store.stop()
        await engine.dispose()
        logger.info("%s stopped", settings.APP_NAME)


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
# Registered before CORS to capture all requests
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """형식 오류 요청을 400으로 응답 (Malformed JSON or wrong field types answer 400, not 422)."""
    logger.debug("Rejected malformed body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    Includes the refresh token writer counters so silent write failures show up.
    """
    return {"status": "ok", "refresh_token_writer": refresh_token_store.stats()}


app.include_router(api_router, prefix="/api/v1")
