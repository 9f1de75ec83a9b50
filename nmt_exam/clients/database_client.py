# -*- coding: utf-8 -*-
"""
Клиент для работы с базой данных PostgreSQL.
"""
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from nmt_exam.config.logger import configure_logger
from nmt_exam.config.settings import settings
from nmt_exam.domain.models import Base

logger = configure_logger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite (тесты, локальный запуск) не поддерживает параметры пула
    if url.startswith("sqlite"):
        return {"echo": settings.database_echo}
    return {
        "echo": settings.database_echo,
        "pool_pre_ping": True,  # Проверяем соединение перед использованием
        "pool_recycle": 3600,  # Переподключаемся каждый час
    }


# Асинхронный движок для всех операций
async_engine = create_async_engine(
    settings.database_url, **_engine_options(settings.database_url)
)

# Фабрика асинхронных сессий
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Предоставляет асинхронную сессию базы данных для внедрения зависимостей в FastAPI.

    Yields:
        AsyncSession: Активная сессия базы данных
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Создаёт все таблицы по моделям (используется скриптами и локально)."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("🗄️ Таблицы базы данных созданы")


async def check_db_connection() -> bool:
    """Простая проверка доступности базы данных."""
    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ База данных недоступна: {e}")
        return False
