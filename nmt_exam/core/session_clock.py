# -*- coding: utf-8 -*-
"""
Обратный отсчёт времени сессии.

Оставшееся время выводится из сохранённых полей сессии (status, end_time,
is_paused, paused_at) и локальных часов; сам модуль ничего не изменяет.
Сессия передаётся как любой объект с этими атрибутами: ORM-модель,
pydantic-схема или запись in-memory хранилища.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.enums import SessionStatus
from nmt_exam.utils.timeutils import as_utc, utcnow

logger = configure_logger(__name__)

_ONE_MS = timedelta(milliseconds=1)


def _status_value(session: Any) -> str:
    status = getattr(session, "status", None)
    return status.value if isinstance(status, SessionStatus) else str(status)


def remaining_ms(session: Any, now: datetime | None = None) -> Optional[int]:
    """
    Оставшееся время сессии в миллисекундах.

    Returns:
        None, если сессия не активна (или у активной нет end_time),
        иначе неотрицательное целое. На паузе время заморожено
        в момент paused_at.
    """
    if _status_value(session) != SessionStatus.ACTIVE.value:
        return None

    end_time = as_utc(getattr(session, "end_time", None))
    if end_time is None:
        logger.warning(
            f"⚠️ Активная сессия {getattr(session, 'id', '?')} без end_time"
        )
        return None

    now = as_utc(now) or utcnow()
    if getattr(session, "is_paused", False):
        base = as_utc(getattr(session, "paused_at", None)) or now
    else:
        base = now

    return max(0, (end_time - base) // _ONE_MS)


def is_expired(session: Any, now: datetime | None = None) -> bool:
    """Истекло ли время активной сессии (пауза время не расходует)."""
    if getattr(session, "is_paused", False):
        return False
    left = remaining_ms(session, now)
    return left is not None and left == 0


def format_remaining(ms: Optional[int]) -> str:
    """Формат HH:MM:SS; для неприменимого значения нули."""
    total_seconds = (ms or 0) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class SessionClock:
    """
    Живой обратный отсчёт для одной сессии.

    Снимок сессии подаётся через observe() (его поставляет наблюдатель за
    состоянием сессии), tick() пересчитывает остаток. Когда остаток
    становится нулевым вне паузы, on_expired вызывается ровно один раз;
    повторно сигнал взводится, только если новый снимок вернул время
    (например, после resume end_time сдвинулся вперёд).
    """

    def __init__(
        self,
        on_expired: Callable[[], Any] | None = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self._on_expired = on_expired
        self._now = now
        self._session: Any = None
        self._fired = False
        self.remaining_ms: Optional[int] = None

    @property
    def session(self) -> Any:
        return self._session

    @property
    def expired(self) -> bool:
        return self._fired

    @property
    def is_paused(self) -> bool:
        return bool(self._session is not None and getattr(self._session, "is_paused", False))

    def observe(self, session: Any) -> Optional[int]:
        """Принимает свежий снимок сессии и сразу пересчитывает остаток."""
        self._session = session
        return self.tick()

    def tick(self) -> Optional[int]:
        if self._session is None:
            self.remaining_ms = None
            return None

        value = remaining_ms(self._session, self._now())
        self.remaining_ms = value

        if value is None or self.is_paused:
            return value

        if value > 0:
            self._fired = False
        elif not self._fired:
            self._fired = True
            logger.info(
                f"⏰ Время сессии {getattr(self._session, 'id', '?')} истекло"
            )
            if self._on_expired is not None:
                self._on_expired()
        return value

    def format(self) -> str:
        return format_remaining(self.remaining_ms)
