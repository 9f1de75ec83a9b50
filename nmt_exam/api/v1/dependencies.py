# -*- coding: utf-8 -*-
"""
Зависимости FastAPI: хранилища и сервисы поверх сессии БД запроса.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.clients.database_client import get_db
from nmt_exam.repository.sql import SqlAttemptStore, SqlSessionStore, SqlTestStore
from nmt_exam.service.attempts import AttemptService
from nmt_exam.service.sessions import SessionService


def get_test_store(db: AsyncSession = Depends(get_db)) -> SqlTestStore:
    return SqlTestStore(db)


def get_attempt_store(db: AsyncSession = Depends(get_db)) -> SqlAttemptStore:
    return SqlAttemptStore(db)


def get_session_service(db: AsyncSession = Depends(get_db)) -> SessionService:
    return SessionService(SqlSessionStore(db), SqlTestStore(db), SqlAttemptStore(db))


def get_attempt_service(db: AsyncSession = Depends(get_db)) -> AttemptService:
    return AttemptService(SqlSessionStore(db), SqlTestStore(db), SqlAttemptStore(db))
