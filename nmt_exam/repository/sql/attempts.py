# -*- coding: utf-8 -*-
"""
SQLAlchemy-реализация AttemptStore.

Уникальность попытки на пару (сессия, студент) держит ограничение
uq_attempt_session_student; завершение и запись ответа выполняются
условным UPDATE ... WHERE status = 'in_progress'.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.enums import AttemptStatus
from nmt_exam.domain.models import Attempt
from nmt_exam.repository.base import find_item
from nmt_exam.utils.exceptions import AttemptFinishedError, NotFoundError

logger = configure_logger(__name__)


class SqlAttemptStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_attempt(self, attempt_id: str) -> Optional[Attempt]:
        return await find_item(self.db, Attempt, attempt_id)

    async def find_attempt(self, session_id: str, student_id: str) -> Optional[Attempt]:
        result = await self.db.execute(
            select(Attempt).where(
                Attempt.session_id == session_id, Attempt.student_id == student_id
            )
        )
        return result.scalars().first()

    async def find_or_create_attempt(
        self, session_id: str, student_id: str
    ) -> Tuple[Attempt, bool]:
        existing = await self.find_attempt(session_id, student_id)
        if existing is not None:
            return existing, False

        attempt = Attempt(session_id=session_id, student_id=student_id)
        self.db.add(attempt)
        try:
            await self.db.commit()
        except IntegrityError:
            # Параллельный запрос успел создать попытку первым
            await self.db.rollback()
            existing = await self.find_attempt(session_id, student_id)
            if existing is None:
                raise
            logger.info(
                f"🔁 Попытка студента {student_id} в сессии {session_id} уже создана"
            )
            return existing, False

        await self.db.refresh(attempt)
        logger.info(
            f"📝 Создана попытка {attempt.id} (сессия {session_id}, студент {student_id})"
        )
        return attempt, True

    async def list_attempts(
        self, session_id: str, status: Optional[AttemptStatus] = None
    ) -> List[Attempt]:
        stmt = select(Attempt).where(Attempt.session_id == session_id)
        if status is not None:
            stmt = stmt.where(Attempt.status == status)
        result = await self.db.execute(stmt.order_by(Attempt.started_at))
        return list(result.scalars().all())

    async def save_answer(
        self, attempt_id: str, question_id: str, answer: Dict[str, Any]
    ) -> Attempt:
        result = await self.db.execute(
            select(Attempt).where(Attempt.id == attempt_id).with_for_update()
        )
        attempt = result.scalars().first()
        if attempt is None:
            raise NotFoundError("Спроба", attempt_id)
        if attempt.status == AttemptStatus.FINISHED:
            await self.db.rollback()
            raise AttemptFinishedError(attempt_id)

        answers = dict(attempt.answers or {})
        answers[question_id] = answer
        written = await self.db.execute(
            update(Attempt)
            .where(Attempt.id == attempt_id, Attempt.status == AttemptStatus.IN_PROGRESS)
            .values(answers=answers)
            .execution_options(synchronize_session=False)
        )
        if written.rowcount != 1:
            await self.db.rollback()
            raise AttemptFinishedError(attempt_id)

        await self.db.commit()
        await self.db.refresh(attempt)
        return attempt

    async def finalize_attempt(
        self,
        attempt_id: str,
        score_by_test: Dict[str, int],
        finished_at: datetime,
        reason: str,
    ) -> bool:
        result = await self.db.execute(
            update(Attempt)
            .where(Attempt.id == attempt_id, Attempt.status == AttemptStatus.IN_PROGRESS)
            .values(
                status=AttemptStatus.FINISHED,
                score_by_test=dict(score_by_test),
                finished_at=finished_at,
                finish_reason=reason,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        # Объект в identity map устарел после прямого UPDATE, в том числе
        # когда попытку первым завершил другой процесс
        attempt = await self.get_attempt(attempt_id)
        if attempt is not None:
            await self.db.refresh(attempt)
        return result.rowcount == 1
