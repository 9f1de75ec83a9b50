# -*- coding: utf-8 -*-
"""Помощники для работы со временем в UTC."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Текущий момент в UTC (aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Приводит datetime к aware UTC.

    SQLite возвращает naive значения даже для DateTime(timezone=True),
    такие значения считаются записанными в UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
