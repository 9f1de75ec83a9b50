# -*- coding: utf-8 -*-
"""
Фоновое наблюдение за активными сессиями.

Для каждой активной сессии держится свой SessionWatcher; когда время
сессии вышло (или её завершили), все незавершённые попытки завершаются
на сервере, даже если студент закрыл вкладку.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from sqlalchemy import select

from nmt_exam.clients.database_client import AsyncSessionLocal
from nmt_exam.config.logger import configure_logger
from nmt_exam.config.settings import settings
from nmt_exam.domain.enums import FinishReason, SessionStatus
from nmt_exam.domain.models import ExamSession
from nmt_exam.repository.sql import SqlAttemptStore, SqlSessionStore, SqlTestStore
from nmt_exam.service.attempts import AttemptService
from nmt_exam.service.session_watch import SessionWatcher, WatcherState

logger = configure_logger(__name__)


async def _load_session(session_id: str) -> Optional[ExamSession]:
    async with AsyncSessionLocal() as db:
        return await SqlSessionStore(db).get_session(session_id)


async def _finish_attempts(session_id: str, reason: FinishReason) -> None:
    async with AsyncSessionLocal() as db:
        service = AttemptService(SqlSessionStore(db), SqlTestStore(db), SqlAttemptStore(db))
        await service.finish_session_attempts(session_id, reason)


class SessionSupervisor:
    def __init__(self, interval: float | None = None):
        self.interval = (
            settings.session_poll_interval_seconds if interval is None else interval
        )
        self.watchers: Dict[str, SessionWatcher] = {}
        self._task: Optional[asyncio.Task] = None

    def _watch(self, session_id: str) -> None:
        async def load():
            return await _load_session(session_id)

        async def on_finalize(reason: FinishReason):
            await _finish_attempts(session_id, reason)

        watcher = SessionWatcher(load, on_finalize, interval=self.interval)
        self.watchers[session_id] = watcher
        watcher.start()
        logger.info(f"👀 Наблюдение за сессией {session_id} запущено")

    async def sync_once(self) -> None:
        async with AsyncSessionLocal() as db:
            result = await db.execute(
                select(ExamSession.id).where(ExamSession.status == SessionStatus.ACTIVE)
            )
            active_ids = set(result.scalars().all())

        for session_id in active_ids:
            watcher = self.watchers.get(session_id)
            # Сессия снова активна после сбоя наблюдателя: начинаем заново
            if watcher is None or watcher.state == WatcherState.ERROR:
                self._watch(session_id)

        for session_id in list(self.watchers):
            if session_id not in active_ids:
                watcher = self.watchers.pop(session_id)
                await watcher.stop()
                logger.info(f"🛑 Наблюдение за сессией {session_id} снято")

    async def _run(self) -> None:
        while True:
            try:
                await self.sync_once()
            except Exception as e:
                logger.error(f"❌ Ошибка синхронизации наблюдателей сессий: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        for watcher in self.watchers.values():
            await watcher.stop()
        self.watchers.clear()


session_supervisor = SessionSupervisor()
