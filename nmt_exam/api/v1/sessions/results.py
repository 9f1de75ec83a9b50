# -*- coding: utf-8 -*-
"""
Результаты сессии для администратора: сводка и CSV-выгрузка.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from nmt_exam.api.v1.dependencies import get_session_service
from nmt_exam.config.logger import configure_logger
from nmt_exam.security.security import admin_only
from nmt_exam.service.results import session_results, session_results_csv
from nmt_exam.service.sessions import SessionService

from .schemas import SessionResultsSchema

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "/{session_id}/results",
    response_model=SessionResultsSchema,
    dependencies=[Depends(admin_only)],
)
async def session_results_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> SessionResultsSchema:
    session = await service.get(session_id)
    data = await session_results(session, service.tests, service.attempts)
    return SessionResultsSchema.model_validate(data)


@router.get(
    "/{session_id}/results/csv",
    dependencies=[Depends(admin_only)],
)
async def session_results_csv_endpoint(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> Response:
    """Скачать CSV: одна строка на пару (студент, вопрос)."""
    session = await service.get(session_id)
    content = await session_results_csv(session, service.tests, service.attempts)
    filename = f"session_{session_id}_results.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
