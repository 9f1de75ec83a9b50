# -*- coding: utf-8 -*-
"""
Конфигурация для Uvicorn с логами через loguru.
"""

import logging

from nmt_exam.config.logger import InterceptHandler
from nmt_exam.config.settings import settings

_ROUTED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "fastapi",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
)


def setup_uvicorn_logging():
    """Настраивает перехват логов uvicorn и SQLAlchemy."""
    for logger_name in (*_ROUTED_LOGGERS, "uvicorn.access"):
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers.clear()
        logger_obj.propagate = False

    for logger_name in _ROUTED_LOGGERS:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_uvicorn_config():
    """Возвращает конфигурацию для uvicorn."""
    return {
        "app": "nmt_exam.main:app",
        "host": settings.app_host,
        "port": settings.app_port,
        "reload": False,
        "log_config": None,  # Отключаем стандартную конфигурацию логов
        "access_log": True,
        "use_colors": True,
    }
