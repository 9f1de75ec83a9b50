# -*- coding: utf-8 -*-
"""
Роутер для работы с предметами.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.clients.database_client import get_db
from nmt_exam.config.logger import configure_logger
from nmt_exam.repository.sql.tests import (
    create_subject,
    delete_subject,
    list_subjects,
    update_subject,
)
from nmt_exam.security.security import admin_only, authenticated

from .schemas import SubjectCreateSchema, SubjectReadSchema, SubjectUpdateSchema

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "",
    response_model=List[SubjectReadSchema],
    dependencies=[Depends(authenticated)],
)
async def list_subjects_endpoint(
    session: AsyncSession = Depends(get_db),
) -> List[SubjectReadSchema]:
    """Список всех предметов по алфавиту."""
    subjects = await list_subjects(session)
    return [SubjectReadSchema.model_validate(s) for s in subjects]


@router.post(
    "",
    response_model=SubjectReadSchema,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
async def create_subject_endpoint(
    data: SubjectCreateSchema,
    session: AsyncSession = Depends(get_db),
) -> SubjectReadSchema:
    try:
        subject = await create_subject(session, **data.model_dump())
        logger.info(f"📚 Создан предмет {subject.id} ('{subject.name}')")
        return SubjectReadSchema.model_validate(subject)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка создания предмета: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка створення предмета",
        )


@router.patch(
    "/{subject_id}",
    response_model=SubjectReadSchema,
    dependencies=[Depends(admin_only)],
)
async def update_subject_endpoint(
    subject_id: str,
    data: SubjectUpdateSchema,
    session: AsyncSession = Depends(get_db),
) -> SubjectReadSchema:
    try:
        subject = await update_subject(
            session, subject_id, **data.model_dump(exclude_unset=True)
        )
        return SubjectReadSchema.model_validate(subject)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка обновления предмета {subject_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка оновлення предмета",
        )


@router.delete(
    "/{subject_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_only)],
)
async def delete_subject_endpoint(
    subject_id: str,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Удалить предмет; тесты предмета остаются без привязки."""
    try:
        await delete_subject(session, subject_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления предмета {subject_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Помилка видалення предмета",
        )
