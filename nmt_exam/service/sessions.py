# -*- coding: utf-8 -*-
"""
Сервис экзаменационных сессий (сторона администратора).

Переходы статуса считаются чистыми функциями core.session_lifecycle,
здесь они только применяются к хранилищу и сопровождаются побочными
эффектами: завершение сессии завершает все открытые попытки.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from nmt_exam.config.logger import configure_logger
from nmt_exam.core.session_lifecycle import TRANSITIONS
from nmt_exam.domain.enums import ALL_STUDENTS, FinishReason, SessionStatus
from nmt_exam.repository.ports import AttemptStore, SessionStore, TestStore
from nmt_exam.service.attempts import AttemptFinalizer, AttemptService, attempt_finalizer
from nmt_exam.service.questions import invalidate_session_questions
from nmt_exam.utils.exceptions import NotFoundError, SessionTransitionError
from nmt_exam.utils.timeutils import utcnow

logger = configure_logger(__name__)

_TRANSITION_ICONS = {"start": "▶️", "pause": "⏸️", "resume": "⏯️", "finish": "⏹️"}


class SessionService:
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
        self._now = now
        self._attempt_service = AttemptService(
            sessions, tests, attempts, finalizer=finalizer, now=now
        )

    async def get(self, session_id: str) -> Any:
        session = await self.sessions.get_session(session_id)
        if session is None:
            raise NotFoundError("Сесія", session_id)
        return session

    async def list_sessions(self) -> List[Any]:
        return await self.sessions.list_sessions()

    async def _check_tests_exist(self, test_ids: List[str]) -> None:
        found = {test.id for test in await self.tests.get_tests(test_ids)}
        missing = [test_id for test_id in test_ids if test_id not in found]
        if missing:
            raise NotFoundError("Тест", ", ".join(missing))

    async def create(
        self,
        title: str,
        test_ids: List[str],
        duration_minutes: int,
        allowed_students: Optional[List[str]] = None,
        show_detailed_results_to_student: bool = False,
    ) -> Any:
        """Новая сессия всегда создаётся черновиком."""
        await self._check_tests_exist(test_ids)
        return await self.sessions.create_session(
            title=title,
            test_ids=list(test_ids),
            duration_minutes=duration_minutes,
            status=SessionStatus.DRAFT,
            allowed_students=list(allowed_students or [ALL_STUDENTS]),
            show_detailed_results_to_student=show_detailed_results_to_student,
        )

    async def update(self, session_id: str, **fields: Any) -> Any:
        """Редактирование разрешено только черновику."""
        session = await self.get(session_id)
        status = SessionStatus(session.status)
        if status != SessionStatus.DRAFT:
            raise SessionTransitionError("update", status.value)

        fields = {key: value for key, value in fields.items() if value is not None}
        if "test_ids" in fields:
            await self._check_tests_exist(fields["test_ids"])
        if "allowed_students" in fields and not fields["allowed_students"]:
            fields["allowed_students"] = [ALL_STUDENTS]

        updated = await self.sessions.update_session(session_id, **fields)
        await invalidate_session_questions(session_id)
        return updated

    async def delete(self, session_id: str) -> None:
        await self.get(session_id)
        await self.sessions.delete_session(session_id)
        await invalidate_session_questions(session_id)
        logger.info(f"🗑️ Сессия {session_id} удалена")

    async def transition(self, session_id: str, action: str) -> Any:
        """
        Применяет переход start / pause / resume / finish.

        Raises:
            SessionTransitionError: переход недопустим из текущего состояния
            SessionIntegrityError: у паузы нет paused_at или end_time
        """
        session = await self.get(session_id)
        updates = TRANSITIONS[action](session, self._now())
        session = await self.sessions.update_session(session_id, **updates)
        logger.info(
            f"{_TRANSITION_ICONS.get(action, '🔄')} Сессия {session_id}: {action}"
        )

        if action == "finish":
            await self._attempt_service.finish_session_attempts(
                session_id, FinishReason.SESSION_FINISHED
            )
        return session

    async def start(self, session_id: str) -> Any:
        return await self.transition(session_id, "start")

    async def pause(self, session_id: str) -> Any:
        return await self.transition(session_id, "pause")

    async def resume(self, session_id: str) -> Any:
        return await self.transition(session_id, "resume")

    async def finish(self, session_id: str) -> Any:
        return await self.transition(session_id, "finish")
