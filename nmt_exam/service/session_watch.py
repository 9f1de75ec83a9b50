# -*- coding: utf-8 -*-
"""
Наблюдатель за состоянием сессии.

Периодически читает сессию, передаёт снимок в SessionClock и, когда время
вышло или сессию завершили, один раз вызывает завершение. Временные
ошибки чтения повторяются с экспоненциальной задержкой (tenacity); если
повторы исчерпаны, наблюдатель переходит в состояние error.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Any, Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from nmt_exam.config.logger import configure_logger
from nmt_exam.config.settings import settings
from nmt_exam.core.session_clock import SessionClock
from nmt_exam.domain.enums import FinishReason, SessionStatus
from nmt_exam.utils.exceptions import APIException
from nmt_exam.utils.timeutils import utcnow

logger = configure_logger(__name__)


class WatcherState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINALIZED = "finalized"
    ERROR = "error"


class SessionWatcher:
    """
    Args:
        load_session: Корутина, возвращающая свежий снимок сессии (или None)
        on_finalize: Вызывается ровно один раз с причиной завершения
        interval: Период опроса, сек
        retry_attempts: Сколько раз пробовать чтение до ошибки
        retry_base_delay: Базовая задержка экспоненциального backoff, сек
    """

    def __init__(
        self,
        load_session: Callable[[], Awaitable[Any]],
        on_finalize: Callable[[FinishReason], Awaitable[Any]],
        interval: float | None = None,
        retry_attempts: int | None = None,
        retry_base_delay: float | None = None,
        now: Callable[[], Any] = utcnow,
    ):
        self._load_session = load_session
        self._on_finalize = on_finalize
        self.interval = (
            settings.session_poll_interval_seconds if interval is None else interval
        )
        self.retry_attempts = retry_attempts or settings.storage_retry_attempts
        self.retry_base_delay = (
            settings.storage_retry_base_delay
            if retry_base_delay is None
            else retry_base_delay
        )
        self.clock = SessionClock(now=now)
        self.state = WatcherState.IDLE
        self.error: Optional[BaseException] = None
        self._finalized = False
        self._stopped = False
        self._task: Optional[asyncio.Task] = None

    @property
    def finalized(self) -> bool:
        return self._finalized

    async def _load_with_retry(self) -> Any:
        # Доменные ошибки (404 и т.п.) не временные, их не повторяем
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_base_delay, max=10),
            retry=retry_if_not_exception_type(APIException),
            reraise=True,
            before_sleep=lambda rs: logger.warning(
                f"🔁 Повтор чтения сессии (#{rs.attempt_number}): {rs.outcome.exception()}"
            ),
        ):
            with attempt:
                return await self._load_session()

    async def _finalize(self, reason: FinishReason) -> None:
        if self._finalized:
            return
        self._finalized = True
        self.state = WatcherState.FINALIZED
        await self._on_finalize(reason)

    async def poll_once(self) -> Optional[int]:
        """Один цикл: прочитать сессию, пересчитать часы, при необходимости завершить."""
        session = await self._load_with_retry()
        if session is None:
            # Сессию удалили: наблюдать больше не за чем
            logger.info("🗑️ Сессия не найдена, наблюдение прекращено")
            self._stopped = True
            self.state = WatcherState.IDLE
            return None

        remaining = self.clock.observe(session)
        status = getattr(session.status, "value", session.status)
        if status == SessionStatus.FINISHED.value:
            await self._finalize(FinishReason.SESSION_FINISHED)
        elif self.clock.expired:
            await self._finalize(FinishReason.EXPIRED)
        return remaining

    async def run(self) -> None:
        self.state = WatcherState.RUNNING
        while not self._stopped and not self._finalized:
            try:
                await self.poll_once()
            except Exception as e:
                self.error = e
                self.state = WatcherState.ERROR
                logger.error(f"❌ Наблюдение за сессией остановлено: {e}")
                return
            if self._finalized or self._stopped:
                break
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._stopped = False
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        if self.state == WatcherState.RUNNING:
            self.state = WatcherState.IDLE
