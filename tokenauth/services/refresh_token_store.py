"""리프레시 토큰 비동기 저장소 — 응답을 막지 않는 쓰기 경로.

Refresh Token Store — Non-blocking write path for issued refresh tokens.
Sign-up and sign-in hand their refresh token to ``persist`` and return
immediately; a single worker task drains a bounded queue and writes each
token in its own session. Write failures are logged and counted, never
surfaced to the HTTP caller.
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tokenauth.config import settings
from tokenauth.database import async_session
from tokenauth.repositories.token_repository import refresh_token_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingToken:
    """큐에 적재된 저장 대기 토큰 (A refresh token waiting to be persisted)."""

    user_id: int
    token: str


class RefreshTokenStore:
    """리프레시 토큰 백그라운드 저장기.

    Background persister for refresh tokens.
    ``start``/``stop`` are tied to the application lifespan. The queue is
    created on ``start`` so each run is bound to the running event loop.

    Attributes:
        persisted: 저장 성공 건수 (Tokens written successfully)
        failed: 저장 실패 건수 (Writes that raised)
        dropped: 큐 포화/중지로 버려진 건수 (Tokens dropped before being queued)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_queue_size: int,
        drain_timeout: float,
    ) -> None:
        self._session_factory: async_sessionmaker[AsyncSession] = session_factory
        self._max_queue_size: int = max_queue_size
        self._drain_timeout: float = drain_timeout
        self._queue: asyncio.Queue[PendingToken] | None = None
        self._worker: asyncio.Task[None] | None = None
        self.persisted: int = 0
        self.failed: int = 0
        self.dropped: int = 0

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """저장 워커를 시작합니다 (Start the persistence worker)."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._worker = asyncio.create_task(self._run(self._queue), name="refresh-token-writer")
        logger.info("Refresh token writer started (queue size %d)", self._max_queue_size)

    async def stop(self) -> None:
        """대기 중인 쓰기를 제한 시간 동안 기다린 뒤 워커를 종료합니다.

        Wait up to the drain timeout for queued writes, then cancel the worker.
        Writes still pending after the timeout are abandoned; the affected
        users obtain a new refresh token on their next sign-in.
        """
        if self._worker is None or self._queue is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=self._drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Refresh token writer stopping with %d pending writes abandoned",
                self._queue.qsize(),
            )
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        self._queue = None
        logger.info("Refresh token writer stopped")

    def persist(self, user_id: int, token: str) -> None:
        """토큰 저장을 예약합니다 — 호출자는 완료를 기다리지 않습니다.

        Schedule a refresh token write. Never blocks and never raises:
        when the writer is stopped or its queue is full the token is dropped
        and the drop is logged.

        Args:
            user_id: 토큰 소유자 ID (Owner user id)
            token: 불투명 리프레시 토큰 (Opaque refresh token)
        """
        if self._queue is None or not self.running:
            self.dropped += 1
            logger.warning("Refresh token writer not running; dropped token for user %d", user_id)
            return
        try:
            self._queue.put_nowait(PendingToken(user_id=user_id, token=token))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Refresh token queue full; dropped token for user %d", user_id)

    async def drain(self) -> None:
        """지금까지 적재된 모든 쓰기가 끝날 때까지 대기 (Wait until every queued write has finished)."""
        if self._queue is not None:
            await self._queue.join()

    def stats(self) -> dict[str, int | bool]:
        return {
            "running": self.running,
            "pending": self._queue.qsize() if self._queue is not None else 0,
            "persisted": self.persisted,
            "failed": self.failed,
            "dropped": self.dropped,
        }

    async def _run(self, queue: asyncio.Queue[PendingToken]) -> None:
        while True:
            item: PendingToken = await queue.get()
            try:
                await self._write(item)
            except Exception:
                self.failed += 1
                logger.exception("Failed to save refresh token for user %d", item.user_id)
            else:
                self.persisted += 1
                logger.debug("Refresh token saved for user %d", item.user_id)
            finally:
                queue.task_done()

    async def _write(self, item: PendingToken) -> None:
        # 요청 세션과 독립된 세션 — Independent session, committed per token
        async with self._session_factory() as session:
            await refresh_token_repository.create_refresh_token(
                session, user_id=item.user_id, token=item.token
            )
            await session.commit()


# 싱글턴 인스턴스 — Singleton instance
refresh_token_store: RefreshTokenStore = RefreshTokenStore(
    session_factory=async_session,
    max_queue_size=settings.REFRESH_TOKEN_QUEUE_SIZE,
    drain_timeout=settings.REFRESH_TOKEN_DRAIN_TIMEOUT_SECONDS,
)
