# -*- coding: utf-8 -*-
"""
Попытка студента: вход в сессию, сохранение ответов, завершение.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from nmt_exam.api.v1.dependencies import get_attempt_service
from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.enums import AttemptStatus
from nmt_exam.security.security import get_current_user, student_only
from nmt_exam.service.attempts import AttemptService
from nmt_exam.service.results import attempt_results

from .schemas import AnswerSaveSchema, AttemptReadSchema

router = APIRouter()
logger = configure_logger(__name__)


async def build_attempt_read(service: AttemptService, attempt: Any) -> AttemptReadSchema:
    data = AttemptReadSchema.model_validate(attempt)
    if AttemptStatus(attempt.status) == AttemptStatus.FINISHED:
        session = await service.sessions.get_session(attempt.session_id)
        if session is not None:
            extra = await attempt_results(session, attempt, service.tests)
            data = AttemptReadSchema.model_validate({**data.model_dump(), **extra})
    return data


@router.post(
    "/sessions/{session_id}/attempt",
    response_model=AttemptReadSchema,
    dependencies=[Depends(student_only)],
)
async def find_or_create_attempt_endpoint(
    session_id: str,
    response: Response,
    service: AttemptService = Depends(get_attempt_service),
    current_user: dict = Depends(get_current_user),
) -> AttemptReadSchema:
    """
    Войти в сессию.

    Возвращает существующую попытку студента или создаёт новую (201),
    если сессия активна и время не вышло.
    """
    student_id = current_user["sub"]
    try:
        attempt, created = await service.find_or_create(session_id, student_id)
        if created:
            response.status_code = status.HTTP_201_CREATED
        return await build_attempt_read(service, attempt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка входа студента {student_id} в сессию {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка початку спроби",
        )


@router.get(
    "/attempts/{attempt_id}",
    response_model=AttemptReadSchema,
    dependencies=[Depends(student_only)],
)
async def read_attempt_endpoint(
    attempt_id: str,
    service: AttemptService = Depends(get_attempt_service),
    current_user: dict = Depends(get_current_user),
) -> AttemptReadSchema:
    attempt = await service.get_attempt(attempt_id, current_user["sub"])
    return await build_attempt_read(service, attempt)


@router.put(
    "/attempts/{attempt_id}/answers/{question_id}",
    response_model=AttemptReadSchema,
    dependencies=[Depends(student_only)],
)
async def save_answer_endpoint(
    attempt_id: str,
    question_id: str,
    data: AnswerSaveSchema,
    service: AttemptService = Depends(get_attempt_service),
    current_user: dict = Depends(get_current_user),
) -> AttemptReadSchema:
    """Сохранить ответ на один вопрос; для завершённой попытки 409."""
    try:
        attempt = await service.save_answer(
            attempt_id, current_user["sub"], question_id, data.value
        )
        return AttemptReadSchema.model_validate(attempt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка сохранения ответа {question_id} в попытке {attempt_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка збереження відповіді",
        )


@router.post(
    "/attempts/{attempt_id}/finish",
    response_model=AttemptReadSchema,
    dependencies=[Depends(student_only)],
)
async def finish_attempt_endpoint(
    attempt_id: str,
    service: AttemptService = Depends(get_attempt_service),
    current_user: dict = Depends(get_current_user),
) -> AttemptReadSchema:
    """Завершить попытку; повторный вызов возвращает уже сохранённый результат."""
    try:
        attempt = await service.finish(attempt_id, current_user["sub"])
        return await build_attempt_read(service, attempt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка завершения попытки {attempt_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка завершення спроби",
        )
