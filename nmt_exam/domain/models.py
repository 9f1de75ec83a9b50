# -*- coding: utf-8 -*-
"""
nmt_exam/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~
ORM-модели SQLAlchemy 2.0 для предметов, тестов, сессий и попыток.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from nmt_exam.domain.enums import ALL_STUDENTS, AttemptStatus, SessionStatus
from nmt_exam.utils.timeutils import utcnow


def _uuid() -> str:
    return str(uuid.uuid4())


def _enum_column(enum_cls, name: str) -> Enum:
    # Храним значения ("active"), а не имена ("ACTIVE")
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda e: [item.value for item in e],
    )


class Base(DeclarativeBase):
    pass


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Test(Base):
    __tablename__ = "tests"
    __test__ = False  # pytest не должен собирать модель как тест-класс

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    subject_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Упорядоченный список вопросов в camelCase-формате (см. domain.questions)
    questions: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utcnow, nullable=True
    )


class ExamSession(Base):
    __tablename__ = "exam_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    test_ids: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[SessionStatus] = mapped_column(
        _enum_column(SessionStatus, "session_status"),
        default=SessionStatus.DRAFT,
        nullable=False,
    )
    allowed_students: Mapped[List[str]] = mapped_column(
        JSON, default=lambda: [ALL_STUDENTS], nullable=False
    )
    show_detailed_results_to_student: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    end_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_paused: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    paused_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Attempt(Base):
    __tablename__ = "attempts"
    __table_args__ = (
        # Одна попытка на пару (сессия, студент)
        UniqueConstraint("session_id", "student_id", name="uq_attempt_session_student"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("exam_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[str] = mapped_column(String(128), nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    finished_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[AttemptStatus] = mapped_column(
        _enum_column(AttemptStatus, "attempt_status"),
        default=AttemptStatus.IN_PROGRESS,
        nullable=False,
    )
    # questionId -> {"value": ..., "testId": ..., "subjectId": ...}
    answers: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    score_by_test: Mapped[Dict[str, int]] = mapped_column(
        JSON, default=dict, nullable=False
    )
    finish_reason: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
