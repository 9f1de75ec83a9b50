# -*- coding: utf-8 -*-
"""
Сервис попыток студентов.

Попытка создаётся один раз на пару (сессия, студент), принимает ответы,
пока не завершена, и завершается ровно один раз: по кнопке студента, по
истечении времени сессии или при завершении сессии администратором.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Tuple

from nmt_exam.config.logger import configure_logger
from nmt_exam.core.scoring import score_attempt
from nmt_exam.core.session_clock import is_expired
from nmt_exam.domain.enums import ALL_STUDENTS, AttemptStatus, FinishReason, SessionStatus
from nmt_exam.domain.questions import AttemptAnswer
from nmt_exam.repository.ports import AttemptStore, SessionStore, TestStore
from nmt_exam.service.questions import load_session_questions
from nmt_exam.utils.exceptions import (
    AttemptFinishedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from nmt_exam.utils.timeutils import utcnow

logger = configure_logger(__name__)


class AttemptFinalizer:
    """
    Идемпотентное завершение попыток.

    Защита от двойного завершения в три слоя: замок на попытку внутри
    процесса, проверка статуса перед подсчётом и условная запись в
    хранилище (только из in_progress).
    """

    def __init__(self, now: Callable[[], Any] = utcnow):
        self._now = now
        self._locks: Dict[str, asyncio.Lock] = {}

    async def finalize(
        self,
        attempt_id: str,
        *,
        sessions: SessionStore,
        tests: TestStore,
        attempts: AttemptStore,
        reason: FinishReason,
    ) -> Any:
        """
        Завершает попытку и сохраняет баллы.

        Args:
            attempt_id: ID попытки
            sessions, tests, attempts: Хранилища
            reason: Что инициировало завершение

        Returns:
            Попытка после завершения (или уже завершённая ранее)
        """
        lock = self._locks.setdefault(attempt_id, asyncio.Lock())
        try:
            async with lock:
                return await self._finalize_locked(
                    attempt_id, sessions, tests, attempts, reason
                )
        finally:
            if not lock.locked() and self._locks.get(attempt_id) is lock:
                del self._locks[attempt_id]

    async def _finalize_locked(
        self,
        attempt_id: str,
        sessions: SessionStore,
        tests: TestStore,
        attempts: AttemptStore,
        reason: FinishReason,
    ) -> Any:
        attempt = await attempts.get_attempt(attempt_id)
        if attempt is None:
            raise NotFoundError("Спроба", attempt_id)
        if attempt.status == AttemptStatus.FINISHED:
            return attempt

        session = await sessions.get_session(attempt.session_id)
        if session is None:
            raise NotFoundError("Сесія", attempt.session_id)

        questions = await load_session_questions(session, tests)
        scores = score_attempt(questions, attempt.answers or {})

        persisted = await attempts.finalize_attempt(
            attempt_id, scores, self._now(), FinishReason(reason).value
        )
        if persisted:
            logger.info(
                f"🏁 Попытка {attempt_id} завершена ({FinishReason(reason).value}): {scores}"
            )
        else:
            logger.info(f"ℹ️ Попытка {attempt_id} уже была завершена параллельно")

        return await attempts.get_attempt(attempt_id)


# Общий для процесса: все запросы должны видеть одни и те же замки
attempt_finalizer = AttemptFinalizer()


def _status_value(status: Any) -> str:
    return status.value if hasattr(status, "value") else str(status)


def is_student_allowed(session: Any, student_id: str) -> bool:
    allowed = session.allowed_students or []
    return ALL_STUDENTS in allowed or student_id in allowed


class AttemptService:
    """Операции студента над своей попыткой."""

    def __init__(
        self,
        sessions: SessionStore,
        tests: TestStore,
        attempts: AttemptStore,
        finalizer: AttemptFinalizer = attempt_finalizer,
        now: Callable[[], Any] = utcnow,
    ):
        self.sessions = sessions
        self.tests = tests
        self.attempts = attempts
        self.finalizer = finalizer
        self._now = now

    async def _get_session(self, session_id: str) -> Any:
        session = await self.sessions.get_session(session_id)
        if session is None:
            raise NotFoundError("Сесія", session_id)
        return session

    async def _get_own_attempt(self, attempt_id: str, student_id: str) -> Any:
        attempt = await self.attempts.get_attempt(attempt_id)
        if attempt is None:
            raise NotFoundError("Спроба", attempt_id)
        if attempt.student_id != student_id:
            raise PermissionDeniedError("Це не ваша спроба")
        return attempt

    async def finalize(
        self,
        attempt_id: str,
        reason: FinishReason,
    ) -> Any:
        return await self.finalizer.finalize(
            attempt_id,
            sessions=self.sessions,
            tests=self.tests,
            attempts=self.attempts,
            reason=reason,
        )

    async def sync_with_session(self, attempt: Any, session: Any) -> Any:
        """Завершает попытку, если сессия уже закончилась или её время вышло."""
        if attempt.status != AttemptStatus.IN_PROGRESS:
            return attempt
        if _status_value(session.status) == SessionStatus.FINISHED.value:
            return await self.finalize(attempt.id, FinishReason.SESSION_FINISHED)
        if is_expired(session, self._now()):
            return await self.finalize(attempt.id, FinishReason.EXPIRED)
        return attempt

    async def find_or_create(self, session_id: str, student_id: str) -> Tuple[Any, bool]:
        """
        Возвращает попытку студента в сессии, создавая её при первом входе.

        Новая попытка создаётся только в активной сессии с неистёкшим
        временем; существующая возвращается всегда (и дозавершается, если
        сессия уже закончилась).
        """
        session = await self._get_session(session_id)
        if not is_student_allowed(session, student_id):
            raise PermissionDeniedError("Ви не маєте доступу до цієї сесії")

        existing = await self.attempts.find_attempt(session_id, student_id)
        if existing is not None:
            return await self.sync_with_session(existing, session), False

        if _status_value(session.status) != SessionStatus.ACTIVE.value:
            raise ConflictError("Сесія ще не розпочата або вже завершена")
        if is_expired(session, self._now()):
            raise ConflictError("Час сесії вичерпано")

        return await self.attempts.find_or_create_attempt(session_id, student_id)

    async def get_attempt(self, attempt_id: str, student_id: str) -> Any:
        attempt = await self._get_own_attempt(attempt_id, student_id)
        session = await self._get_session(attempt.session_id)
        return await self.sync_with_session(attempt, session)

    async def save_answer(
        self,
        attempt_id: str,
        student_id: str,
        question_id: str,
        value: Any,
    ) -> Any:
        """
        Записывает ответ на один вопрос.

        Пауза сессии запись не блокирует: время на паузе не идёт, а
        последний введённый ответ не должен теряться. testId/subjectId
        ответа берутся из вопросов сессии, а не от клиента.
        """
        attempt = await self._get_own_attempt(attempt_id, student_id)
        session = await self._get_session(attempt.session_id)
        attempt = await self.sync_with_session(attempt, session)
        if attempt.status != AttemptStatus.IN_PROGRESS:
            raise AttemptFinishedError(attempt_id)

        questions = await load_session_questions(session, self.tests)
        item = next((q for q in questions if q.id == question_id), None)
        if item is None:
            raise NotFoundError("Питання", question_id)

        answer = AttemptAnswer(
            value=value, test_id=item.test_id, subject_id=item.subject_id
        )
        return await self.attempts.save_answer(
            attempt_id, question_id, answer.model_dump(by_alias=True)
        )

    async def finish(self, attempt_id: str, student_id: str) -> Any:
        await self._get_own_attempt(attempt_id, student_id)
        return await self.finalize(attempt_id, FinishReason.STUDENT)

    async def finish_session_attempts(
        self, session_id: str, reason: FinishReason = FinishReason.SESSION_FINISHED
    ) -> int:
        """Завершает все незавершённые попытки сессии; возвращает их число."""
        pending = await self.attempts.list_attempts(session_id, AttemptStatus.IN_PROGRESS)
        for attempt in pending:
            await self.finalize(attempt.id, reason)
        if pending:
            logger.info(f"🏁 Сессия {session_id}: завершено попыток {len(pending)}")
        return len(pending)
