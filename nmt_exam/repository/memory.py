# -*- coding: utf-8 -*-
"""
In-memory реализация портов хранилища.

Та же семантика, что и у SQL-адаптера (уникальная попытка на пару
сессия/студент, условное завершение), но в словарях процесса. Удобна для
модульных тестов наблюдателя сессии, буфера ответов и финализатора.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from nmt_exam.domain.enums import ALL_STUDENTS, AttemptStatus, SessionStatus
from nmt_exam.utils.exceptions import AttemptFinishedError, NotFoundError
from nmt_exam.utils.timeutils import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SessionRecord:
    title: str
    duration_minutes: int
    test_ids: List[str] = field(default_factory=list)
    status: SessionStatus = SessionStatus.DRAFT
    allowed_students: List[str] = field(default_factory=lambda: [ALL_STUDENTS])
    show_detailed_results_to_student: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_paused: bool = False
    paused_at: Optional[datetime] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class TestRecord:
    __test__ = False

    title: str
    questions: List[Dict[str, Any]] = field(default_factory=list)
    subject_id: Optional[str] = None
    description: Optional[str] = None
    id: str = field(default_factory=_new_id)


@dataclass
class AttemptRecord:
    session_id: str
    student_id: str
    status: AttemptStatus = AttemptStatus.IN_PROGRESS
    answers: Dict[str, Any] = field(default_factory=dict)
    score_by_test: Dict[str, int] = field(default_factory=dict)
    started_at: datetime = field(default_factory=utcnow)
    finished_at: Optional[datetime] = None
    finish_reason: Optional[str] = None
    id: str = field(default_factory=_new_id)


class InMemoryStore:
    """Реализует SessionStore, TestStore и AttemptStore одновременно."""

    def __init__(self):
        self.sessions: Dict[str, SessionRecord] = {}
        self.tests: Dict[str, TestRecord] = {}
        self.subjects: Dict[str, str] = {}
        self.attempts: Dict[str, AttemptRecord] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # SessionStore
    # ------------------------------------------------------------------

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        record = self.sessions.get(session_id)
        # Снимок, а не живая ссылка: как строка, прочитанная из БД
        return replace(record) if record is not None else None

    async def list_sessions(self) -> List[SessionRecord]:
        return [replace(record) for record in self.sessions.values()]

    async def create_session(self, **fields: Any) -> SessionRecord:
        record = SessionRecord(**fields)
        self.sessions[record.id] = record
        return replace(record)

    async def update_session(self, session_id: str, **fields: Any) -> SessionRecord:
        record = self.sessions.get(session_id)
        if record is None:
            raise NotFoundError("Сесія", session_id)
        for key, value in fields.items():
            setattr(record, key, value)
        return replace(record)

    async def delete_session(self, session_id: str) -> None:
        if self.sessions.pop(session_id, None) is None:
            raise NotFoundError("Сесія", session_id)
        for attempt_id in [
            a.id for a in self.attempts.values() if a.session_id == session_id
        ]:
            del self.attempts[attempt_id]

    # ------------------------------------------------------------------
    # TestStore
    # ------------------------------------------------------------------

    def add_test(self, **fields: Any) -> TestRecord:
        record = TestRecord(**fields)
        self.tests[record.id] = record
        return record

    async def get_test(self, test_id: str) -> Optional[TestRecord]:
        return self.tests.get(test_id)

    async def get_tests(self, test_ids: Iterable[str]) -> List[TestRecord]:
        return [self.tests[tid] for tid in test_ids if tid in self.tests]

    async def get_subject_names(self, subject_ids: Iterable[str]) -> Dict[str, str]:
        return {sid: self.subjects[sid] for sid in subject_ids if sid in self.subjects}

    # ------------------------------------------------------------------
    # AttemptStore
    # ------------------------------------------------------------------

    async def get_attempt(self, attempt_id: str) -> Optional[AttemptRecord]:
        record = self.attempts.get(attempt_id)
        return replace(record, answers=dict(record.answers)) if record else None

    async def find_attempt(
        self, session_id: str, student_id: str
    ) -> Optional[AttemptRecord]:
        for record in self.attempts.values():
            if record.session_id == session_id and record.student_id == student_id:
                return replace(record, answers=dict(record.answers))
        return None

    async def find_or_create_attempt(
        self, session_id: str, student_id: str
    ) -> Tuple[AttemptRecord, bool]:
        async with self._lock:
            existing = await self.find_attempt(session_id, student_id)
            if existing is not None:
                return existing, False
            record = AttemptRecord(session_id=session_id, student_id=student_id)
            self.attempts[record.id] = record
            return replace(record), True

    async def list_attempts(
        self, session_id: str, status: Optional[AttemptStatus] = None
    ) -> List[AttemptRecord]:
        return [
            replace(record, answers=dict(record.answers))
            for record in self.attempts.values()
            if record.session_id == session_id
            and (status is None or record.status == status)
        ]

    async def save_answer(
        self, attempt_id: str, question_id: str, answer: Dict[str, Any]
    ) -> AttemptRecord:
        async with self._lock:
            record = self.attempts.get(attempt_id)
            if record is None:
                raise NotFoundError("Спроба", attempt_id)
            if record.status != AttemptStatus.IN_PROGRESS:
                raise AttemptFinishedError(attempt_id)
            record.answers = {**record.answers, question_id: answer}
            return replace(record, answers=dict(record.answers))

    async def finalize_attempt(
        self,
        attempt_id: str,
        score_by_test: Dict[str, int],
        finished_at: datetime,
        reason: str,
    ) -> bool:
        async with self._lock:
            record = self.attempts.get(attempt_id)
            if record is None or record.status != AttemptStatus.IN_PROGRESS:
                return False
            record.status = AttemptStatus.FINISHED
            record.score_by_test = dict(score_by_test)
            record.finished_at = finished_at
            record.finish_reason = reason
            return True
