# -*- coding: utf-8 -*-
"""
Роутер студента. Подключается в приложение с префиксом /api/v1/student.
"""

from fastapi import APIRouter

from . import attempts, sessions

router = APIRouter()

router.include_router(sessions.router, tags=["🎓 Студент - 🗓️ Сесії"])
router.include_router(attempts.router, tags=["🎓 Студент - 📝 Спроби"])
