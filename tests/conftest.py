# -*- coding: utf-8 -*-
"""
Общие фикстуры для тестирования
"""

import os

# Окружение тестов задаётся до импорта приложения
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("SESSION_WATCH_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from nmt_exam.clients.database_client import get_db  # noqa: E402
from nmt_exam.domain.models import Base  # noqa: E402
from nmt_exam.main import app  # noqa: E402
from nmt_exam.repository.memory import InMemoryStore  # noqa: E402
from tests.fixtures import auth_headers  # noqa: E402

# Тестовая база данных в памяти
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Создать тестовый движок БД (новая пустая база на каждый тест)."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Создать тестовую сессию БД."""
    session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_maker() as session:
        yield session


@pytest.fixture
async def async_client(test_session):
    """Асинхронный тестовый клиент API поверх тестовой сессии БД."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def admin_headers() -> dict:
    return auth_headers("admin", "admin-1")


@pytest.fixture
def student_headers() -> dict:
    return auth_headers("student", "student-1")
