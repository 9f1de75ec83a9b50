# -*- coding: utf-8 -*-
"""
Роутер для экзаменационных сессий (администратор).

Подключается в приложение с префиксом /api/v1.
"""

from fastapi import APIRouter

from . import crud, lifecycle, results

router = APIRouter()

router.include_router(
    crud.router, prefix="/sessions", tags=["🗓️ Сесії - 👨‍💼 Админ - CRUD"]
)
router.include_router(
    lifecycle.router, prefix="/sessions", tags=["🗓️ Сесії - ⏯️ Админ - Хід сесії"]
)
router.include_router(
    results.router, prefix="/sessions", tags=["🗓️ Сесії - 📊 Админ - Результати"]
)
