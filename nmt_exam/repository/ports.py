# -*- coding: utf-8 -*-
"""
Порты хранилища.

Ядро и сервисы работают только через эти протоколы; реализации:
SQLAlchemy (repository.sql) и in-memory (repository.memory). Логика
никогда не ветвится по типу хранилища.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from nmt_exam.domain.enums import AttemptStatus


class SessionStore(Protocol):
    async def get_session(self, session_id: str) -> Optional[Any]: ...

    async def list_sessions(self) -> List[Any]: ...

    async def create_session(self, **fields: Any) -> Any: ...

    async def update_session(self, session_id: str, **fields: Any) -> Any: ...

    async def delete_session(self, session_id: str) -> None: ...


class TestStore(Protocol):
    async def get_test(self, test_id: str) -> Optional[Any]: ...

    async def get_tests(self, test_ids: Iterable[str]) -> List[Any]: ...

    async def get_subject_names(self, subject_ids: Iterable[str]) -> Dict[str, str]: ...


class AttemptStore(Protocol):
    async def get_attempt(self, attempt_id: str) -> Optional[Any]: ...

    async def find_attempt(self, session_id: str, student_id: str) -> Optional[Any]: ...

    async def find_or_create_attempt(
        self, session_id: str, student_id: str
    ) -> Tuple[Any, bool]:
        """Возвращает (попытка, создана_ли); гонка двух create даёт одну попытку."""
        ...

    async def list_attempts(
        self, session_id: str, status: Optional[AttemptStatus] = None
    ) -> List[Any]: ...

    async def save_answer(
        self, attempt_id: str, question_id: str, answer: Dict[str, Any]
    ) -> Any:
        """Записывает ответ; для завершённой попытки AttemptFinishedError."""
        ...

    async def finalize_attempt(
        self,
        attempt_id: str,
        score_by_test: Dict[str, int],
        finished_at: datetime,
        reason: str,
    ) -> bool:
        """Условный переход in_progress -> finished; False, если уже завершена."""
        ...
