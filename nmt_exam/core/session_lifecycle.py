# -*- coding: utf-8 -*-
"""
Переходы жизненного цикла сессии.

draft -> active -> (paused <-> active) -> finished

Каждая функция проверяет текущее состояние и возвращает словарь полей,
которые хранилище должно записать. Время "now" приходит снаружи, из
локальных часов сервера, и никогда не берётся из хранилища.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict

from nmt_exam.domain.enums import SessionStatus
from nmt_exam.utils.exceptions import SessionIntegrityError, SessionTransitionError
from nmt_exam.utils.timeutils import as_utc


def _status(session: Any) -> SessionStatus:
    return SessionStatus(getattr(session, "status"))


def start(session: Any, now: datetime) -> Dict[str, Any]:
    if _status(session) != SessionStatus.DRAFT:
        raise SessionTransitionError("start", _status(session).value)
    now = as_utc(now)
    return {
        "status": SessionStatus.ACTIVE,
        "start_time": now,
        "end_time": now + timedelta(minutes=session.duration_minutes),
        "is_paused": False,
        "paused_at": None,
    }


def pause(session: Any, now: datetime) -> Dict[str, Any]:
    if _status(session) != SessionStatus.ACTIVE or session.is_paused:
        state = "paused" if session.is_paused else _status(session).value
        raise SessionTransitionError("pause", state)
    return {"is_paused": True, "paused_at": as_utc(now)}


def resume(session: Any, now: datetime) -> Dict[str, Any]:
    """Сдвигает end_time вперёд ровно на длительность паузы."""
    if _status(session) != SessionStatus.ACTIVE or not session.is_paused:
        raise SessionTransitionError("resume", _status(session).value)

    paused_at = as_utc(session.paused_at)
    end_time = as_utc(session.end_time)
    if paused_at is None or end_time is None:
        raise SessionIntegrityError(
            getattr(session, "id", None), "пауза без paused_at або end_time"
        )

    pause_duration = as_utc(now) - paused_at
    return {
        "end_time": end_time + pause_duration,
        "is_paused": False,
        "paused_at": None,
    }


def finish(session: Any, now: datetime) -> Dict[str, Any]:
    if _status(session) == SessionStatus.FINISHED:
        raise SessionTransitionError("finish", SessionStatus.FINISHED.value)
    return {"status": SessionStatus.FINISHED, "is_paused": False, "paused_at": None}


TRANSITIONS = {
    "start": start,
    "pause": pause,
    "resume": resume,
    "finish": finish,
}
