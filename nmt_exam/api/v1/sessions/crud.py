# -*- coding: utf-8 -*-
"""
Административные CRUD-операции для экзаменационных сессий.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from nmt_exam.api.v1.dependencies import get_session_service
from nmt_exam.config.logger import configure_logger
from nmt_exam.security.security import admin_only
from nmt_exam.service.sessions import SessionService

from .schemas import SessionCreateSchema, SessionReadSchema, SessionUpdateSchema

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "",
    response_model=List[SessionReadSchema],
    dependencies=[Depends(admin_only)],
)
async def list_sessions_endpoint(
    service: SessionService = Depends(get_session_service),
) -> List[SessionReadSchema]:
    sessions = await service.list_sessions()
    return [SessionReadSchema.from_session(s) for s in sessions]


@router.post(
    "",
    response_model=SessionReadSchema,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
async def create_session_endpoint(
    data: SessionCreateSchema,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    """Создать сессию в статусе draft."""
    try:
        session = await service.create(**data.model_dump())
        return SessionReadSchema.from_session(session)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка создания сессии: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка створення сесії",
        )


@router.get(
    "/{session_id}",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def get_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    return SessionReadSchema.from_session(await service.get(session_id))


@router.patch(
    "/{session_id}",
    response_model=SessionReadSchema,
    dependencies=[Depends(admin_only)],
)
async def update_session_endpoint(
    session_id: str,
    data: SessionUpdateSchema,
    service: SessionService = Depends(get_session_service),
) -> SessionReadSchema:
    """Изменить черновик сессии; для начатой сессии 409."""
    try:
        session = await service.update(session_id, **data.model_dump(exclude_unset=True))
        return SessionReadSchema.from_session(session)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка обновления сессии {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка оновлення сесії",
        )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_only)],
)
async def delete_session_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> None:
    try:
        await service.delete(session_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления сессии {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка видалення сесії",
        )
