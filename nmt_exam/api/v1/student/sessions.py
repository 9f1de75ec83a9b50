# -*- coding: utf-8 -*-
"""
Сессии глазами студента: доступные сессии, часы и вопросы.
"""

from typing import List

from fastapi import APIRouter, Depends

from nmt_exam.api.v1.dependencies import get_session_service
from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.enums import SessionStatus
from nmt_exam.security.security import get_current_user, student_only
from nmt_exam.service.attempts import is_student_allowed
from nmt_exam.service.questions import load_session_questions
from nmt_exam.service.sessions import SessionService
from nmt_exam.utils.exceptions import ConflictError, PermissionDeniedError

from .schemas import SessionClockSchema, StudentQuestionSchema, StudentSessionSchema

router = APIRouter()
logger = configure_logger(__name__)


async def _get_visible_session(service: SessionService, session_id: str, student_id: str):
    session = await service.get(session_id)
    if not is_student_allowed(session, student_id):
        raise PermissionDeniedError("Ви не маєте доступу до цієї сесії")
    if SessionStatus(session.status) == SessionStatus.DRAFT:
        raise ConflictError("Сесія ще не опублікована")
    return session


@router.get(
    "/sessions",
    response_model=List[StudentSessionSchema],
    dependencies=[Depends(student_only)],
)
async def available_sessions_endpoint(
    service: SessionService = Depends(get_session_service),
    current_user: dict = Depends(get_current_user),
) -> List[StudentSessionSchema]:
    """Сессии, открытые студенту (явно или через "all"), кроме черновиков."""
    student_id = current_user["sub"]
    sessions = await service.list_sessions()
    visible = [
        s
        for s in sessions
        if SessionStatus(s.status) != SessionStatus.DRAFT
        and is_student_allowed(s, student_id)
    ]
    logger.debug(f"Студенту {student_id} доступно сессий: {len(visible)}")
    return [StudentSessionSchema.from_session(s) for s in visible]


@router.get(
    "/sessions/{session_id}",
    response_model=StudentSessionSchema,
    dependencies=[Depends(student_only)],
)
async def student_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
    current_user: dict = Depends(get_current_user),
) -> StudentSessionSchema:
    session = await _get_visible_session(service, session_id, current_user["sub"])
    return StudentSessionSchema.from_session(session)


@router.get(
    "/sessions/{session_id}/clock",
    response_model=SessionClockSchema,
    dependencies=[Depends(student_only)],
)
async def session_clock_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
    current_user: dict = Depends(get_current_user),
) -> SessionClockSchema:
    """Оставшееся время сессии по серверным часам."""
    session = await _get_visible_session(service, session_id, current_user["sub"])
    return SessionClockSchema.from_session(session)


@router.get(
    "/sessions/{session_id}/questions",
    response_model=List[StudentQuestionSchema],
    dependencies=[Depends(student_only)],
)
async def session_questions_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
    current_user: dict = Depends(get_current_user),
) -> List[StudentQuestionSchema]:
    """Вопросы всех тестов сессии по порядку, без правильных ответов."""
    session = await _get_visible_session(service, session_id, current_user["sub"])
    questions = await load_session_questions(session, service.tests)
    return [StudentQuestionSchema.from_item(item) for item in questions]
