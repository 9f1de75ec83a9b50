# -*- coding: utf-8 -*-
"""
Управление ходом сессии: start / pause / resume / finish.

Недопустимый переход даёт 409 с кодом INVALID_TRANSITION, нарушение
целостности полей времени тоже 409, но с кодом DATA_INTEGRITY.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from nmt_exam.api.v1.dependencies import get_session_service
from nmt_exam.config.logger import configure_logger
from nmt_exam.security.security import admin_only
from nmt_exam.service.sessions import SessionService

from .schemas import SessionReadSchema

router = APIRouter()
logger = configure_logger(__name__)


async def _apply(service: SessionService, session_id: str, action: str) -> SessionReadSchema:
    try:
        session = await service.transition(session_id, action)
        return SessionReadSchema.from_session(session)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка перехода '{action}' для сессии {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка зміни стану сесії",
        )


@router.post(
    "/{session_id}/start",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def start_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    """Запустить черновик: отсчёт времени начинается сейчас."""
    return await _apply(service, session_id, "start")


@router.post(
    "/{session_id}/pause",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def pause_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    return await _apply(service, session_id, "pause")


@router.post(
    "/{session_id}/resume",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def resume_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    """Продолжить: время окончания сдвигается на длительность паузы."""
    return await _apply(service, session_id, "resume")


@router.post(
    "/{session_id}/finish",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def finish_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    """Завершить сессию; все незавершённые попытки будут оценены."""
    return await _apply(service, session_id, "finish")
