# -*- coding: utf-8 -*-
"""SQLAlchemy-реализация SessionStore."""

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.models import ExamSession
from nmt_exam.repository.base import (
    create_item,
    delete_item,
    find_item,
    update_item,
)

logger = configure_logger(__name__)


class SqlSessionStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_session(self, session_id: str) -> Optional[ExamSession]:
        return await find_item(self.db, ExamSession, session_id)

    async def list_sessions(self) -> List[ExamSession]:
        result = await self.db.execute(
            select(ExamSession).order_by(ExamSession.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_session(self, **fields: Any) -> ExamSession:
        session = await create_item(self.db, ExamSession, **fields)
        logger.info(f"🆕 Создана сессия {session.id} ('{session.title}')")
        return session

    async def update_session(self, session_id: str, **fields: Any) -> ExamSession:
        return await update_item(self.db, ExamSession, session_id, **fields)

    async def delete_session(self, session_id: str) -> None:
        await delete_item(self.db, ExamSession, session_id)
