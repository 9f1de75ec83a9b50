# -*- coding: utf-8 -*-
"""
Настройка логирования для NMT Exam API с использованием loguru.
"""
import logging
import os
import sys

from loguru import logger

# Удаляем стандартный хендлер loguru
logger.remove()

# Шумные библиотеки, INFO которых не нужен в логах приложения
_SILENCED_PREFIXES = ("httpx", "httpcore", "asyncio", "aiosqlite")


class InterceptHandler(logging.Handler):
    """Перехватывает стандартные логи и перенаправляет их в loguru."""

    def emit(self, record):
        # Пропускаем uvicorn INFO логи (Will watch, Uvicorn running, Started server, etc.)
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return

        if record.name.startswith(_SILENCED_PREFIXES):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


# Настраиваем перехват всех стандартных логов
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

# Получаем настройки из переменных окружения
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
debug_mode = os.getenv("DEBUG", "false").lower() == "true"
log_file = os.getenv("LOG_FILE")

# Формат для консоли (с цветами и префиксом)
console_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Формат для системных сообщений (без файловых путей)
system_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>SYSTEM</cyan> | "
    "<level>{message}</level>"
)

# Формат для файла (без цветов)
file_format = (
    "{time:YYYY-MM-DD HH:mm:ss} | "
    "{level: <8} | "
    "{name}:{function}:{line} - "
    "{message}"
)

logger.add(
    sys.stdout,
    format=console_format,
    level="DEBUG" if debug_mode else log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["extra"].get("system") is not True
    and (record["level"].name != "DEBUG" or debug_mode),
)

logger.add(
    sys.stdout,
    format=system_format,
    level=log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["extra"].get("system") is True,
)

if log_file:
    logger.add(
        log_file,
        format=file_format,
        level="INFO",
        rotation="20 MB",
        retention="14 days",
        encoding="utf-8",
        filter=lambda record: record["extra"].get("system") is not True,
    )


def configure_logger(name: str = "nmt_exam"):
    """
    Получает настроенный логгер, привязанный к имени модуля.

    Args:
        name: Имя модуля, попадает в extra["module"]

    Returns:
        loguru.Logger: Настроенный логгер
    """
    return logger.bind(module=name)


def get_system_logger():
    """
    Получает логгер для системных сообщений без файловых путей.

    Returns:
        loguru.Logger: Настроенный логгер для системных сообщений
    """
    return logger.bind(system=True)
