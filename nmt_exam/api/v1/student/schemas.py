# -*- coding: utf-8 -*-
"""
Pydantic-схемы для студента: доступные сессии, часы, вопросы без
правильных ответов, попытка и её результаты.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import field_validator

from nmt_exam.api.v1.sessions.schemas import TestResultSchema
from nmt_exam.core.session_clock import format_remaining, is_expired, remaining_ms
from nmt_exam.domain.enums import AttemptStatus, QuestionType, SessionStatus
from nmt_exam.domain.questions import CamelModel, MatchPrompt, QuestionOption, SessionQuestion


class SessionClockSchema(CamelModel):
    session_id: str
    status: SessionStatus
    is_paused: bool
    remaining_ms: Optional[int] = None
    remaining: str
    expired: bool
    end_time: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: Any) -> "SessionClockSchema":
        left = remaining_ms(session)
        return cls(
            session_id=session.id,
            status=session.status,
            is_paused=session.is_paused,
            remaining_ms=left,
            remaining=format_remaining(left),
            expired=is_expired(session),
            end_time=session.end_time,
        )


class StudentSessionSchema(CamelModel):
    id: str
    title: str
    status: SessionStatus
    duration_minutes: int
    test_ids: List[str]
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_paused: bool
    remaining_ms: Optional[int] = None
    show_detailed_results_to_student: bool

    @classmethod
    def from_session(cls, session: Any) -> "StudentSessionSchema":
        data = cls.model_validate(session)
        data.remaining_ms = remaining_ms(session)
        return data


class StudentQuestionSchema(CamelModel):
    """Вопрос, каким его видит студент: без правильных ответов."""

    id: str
    test_id: str
    subject_id: Optional[str] = None
    test_title: Optional[str] = None
    question_text: str
    type: QuestionType
    points: float
    image_url: Optional[str] = None
    options: Optional[List[QuestionOption]] = None
    match_prompts: Optional[List[MatchPrompt]] = None

    @classmethod
    def from_item(cls, item: SessionQuestion) -> "StudentQuestionSchema":
        q = item.question
        return cls(
            id=q.id,
            test_id=item.test_id,
            subject_id=item.subject_id,
            test_title=item.test_title,
            question_text=q.question_text,
            type=q.type,
            points=q.points,
            image_url=q.image_url,
            options=q.options,
            match_prompts=q.match_prompts,
        )


class AnswerSaveSchema(CamelModel):
    value: Union[str, List[str], Dict[str, str], None] = None

    @field_validator("value", mode="before")
    @classmethod
    def numbers_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class QuestionReviewSchema(CamelModel):
    question_id: str
    test_id: str
    question_text: str
    student_answer: Any = None
    correct_answer: str
    points_awarded: float
    max_points: float
    is_correct: bool


class AttemptReadSchema(CamelModel):
    id: str
    session_id: str
    student_id: str
    status: AttemptStatus
    started_at: datetime
    finished_at: Optional[datetime] = None
    finish_reason: Optional[str] = None
    answers: Dict[str, Any]
    score_by_test: Dict[str, int]
    # Заполняются только для завершённой попытки
    results: Optional[List[TestResultSchema]] = None
    review: Optional[List[QuestionReviewSchema]] = None
