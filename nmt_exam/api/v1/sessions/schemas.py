# -*- coding: utf-8 -*-
"""
Pydantic-схемы экзаменационных сессий.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from nmt_exam.core.session_clock import remaining_ms
from nmt_exam.domain.enums import SessionStatus
from nmt_exam.domain.questions import CamelModel


class SessionCreateSchema(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    test_ids: List[str] = Field(min_length=1)
    duration_minutes: int = Field(gt=0, description="Тривалість сесії, хв")
    allowed_students: Optional[List[str]] = Field(
        default=None, description='ID студентів або ["all"]; за замовчуванням ["all"]'
    )
    show_detailed_results_to_student: bool = False


class SessionUpdateSchema(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    test_ids: Optional[List[str]] = Field(default=None, min_length=1)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    allowed_students: Optional[List[str]] = None
    show_detailed_results_to_student: Optional[bool] = None


class SessionReadSchema(CamelModel):
    id: str
    title: str
    test_ids: List[str]
    duration_minutes: int
    status: SessionStatus
    allowed_students: List[str]
    show_detailed_results_to_student: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_paused: bool
    paused_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    remaining_ms: Optional[int] = None

    @classmethod
    def from_session(cls, session: Any) -> "SessionReadSchema":
        data = cls.model_validate(session)
        data.remaining_ms = remaining_ms(session)
        return data


class TestResultSchema(CamelModel):
    test_id: str
    test_title: str
    subject_name: str
    score: int
    max_score: float
    nmt_score: int


class AttemptResultSchema(CamelModel):
    attempt_id: str
    student_id: str
    status: str
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    finish_reason: Optional[str] = None
    total_score: int
    tests: List[TestResultSchema]


class SessionResultsSchema(CamelModel):
    session_id: str
    title: str
    status: str
    attempts: List[AttemptResultSchema]
