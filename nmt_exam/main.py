# -*- coding: utf-8 -*-
"""
Точка входа FastAPI-приложения NMT Exam.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBearer

from nmt_exam import __version__
from nmt_exam.api.v1.sessions import router as sessions_router
from nmt_exam.api.v1.student import router as student_router
from nmt_exam.api.v1.subjects import router as subjects_router
from nmt_exam.api.v1.tests import router as tests_router
from nmt_exam.clients.database_client import check_db_connection
from nmt_exam.config.logger import configure_logger
from nmt_exam.config.redis_settings import redis_settings
from nmt_exam.config.settings import settings
from nmt_exam.config.uvicorn_config import setup_uvicorn_logging
from nmt_exam.service.cache_service import cache_service
from nmt_exam.service.supervisor import session_supervisor

logger = configure_logger(__name__)

# Схема безопасности для Bearer токенов
security_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Введите ваш JWT токен в формате: Bearer <token>",
    auto_error=False,
)

app = FastAPI(
    title="NMT Exam API",
    description="API для проведення екзаменаційних сесій НМТ",
    version=__version__,
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    openapi_tags=[
        {"name": "📚 Предмети", "description": "Довідник предметів"},
        {
            "name": "🧪 Тесты - 👨‍💼 Админ - CRUD",
            "description": "Створення та редагування тестів",
        },
        {
            "name": "🧪 Тесты - ❓ Питання",
            "description": "Імпорт, експорт і редагування питань тесту",
        },
        {
            "name": "🗓️ Сесії - 👨‍💼 Админ - CRUD",
            "description": "Створення та налаштування екзаменаційних сесій",
        },
        {
            "name": "🗓️ Сесії - ⏯️ Админ - Хід сесії",
            "description": "Старт, пауза, продовження та завершення сесії",
        },
        {
            "name": "🗓️ Сесії - 📊 Админ - Результати",
            "description": "Зведення результатів і CSV-вивантаження",
        },
        {
            "name": "🎓 Студент - 🗓️ Сесії",
            "description": "Доступні сесії, таймер і питання",
        },
        {
            "name": "🎓 Студент - 📝 Спроби",
            "description": "Спроба студента: відповіді та завершення",
        },
        {"name": "🩺 Система", "description": "Стан сервісу"},
    ],
)

# Настройка CORS из настроек
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)


# Middleware для логирования всех запросов
@app.middleware("http")
async def log_all_requests(request, call_next):
    if request.url.path.startswith("/api/"):
        logger.info(f"🌐 API запрос: {request.method} {request.url.path}")

    try:
        response = await call_next(request)

        if request.url.path.startswith("/api/"):
            if response.status_code >= 400:
                logger.warning(
                    f"❌ API ошибка: {request.method} {request.url.path} → {response.status_code}"
                )
            else:
                logger.info(
                    f"✅ API ответ: {request.method} {request.url.path} → {response.status_code}"
                )

        return response

    except Exception as e:
        if request.url.path.startswith("/api/"):
            logger.error(
                f"💥 Критическая ошибка API: {request.method} {request.url.path}"
            )
            error_msg = str(e)
            if len(error_msg) > 1000:
                error_msg = error_msg[:1000] + "... (содержимое обрезано)"
            logger.exception(f"Детали ошибки: {error_msg}")
        raise


# Настраиваем схему безопасности для OpenAPI
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "Bearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Введите ваш JWT токен в формате: Bearer <token>",
        }
    }
    openapi_schema["security"] = [{"Bearer": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# Подключаем роутеры с системными emoji тегами
app.include_router(subjects_router, prefix="/api/v1/subjects", tags=["📚 Предмети"])
app.include_router(tests_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(student_router, prefix="/api/v1/student")


@app.get("/api/v1/health", tags=["🩺 Система"])
async def health() -> dict:
    """Простая проверка живости сервиса."""
    return {"status": "ok", "version": __version__}


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()

    logger.info("🔧 Инициализация сервисов...")
    logger.info(f"⚙️ Конфигурация: {settings.get_config_source()}")

    if await check_db_connection():
        logger.info("✅ PostgreSQL подключен")
    else:
        raise RuntimeError("База данных недоступна")

    if redis_settings.redis_enabled:
        try:
            redis_client = await cache_service.get_redis()
            await redis_client.ping()
            logger.info("✅ Redis подключен и готов")
        except Exception as e:
            logger.error(f"❌ Ошибка Redis: {e}")
            # Redis не критичен для работы приложения, продолжаем без него
            logger.warning("⚠️ Продолжаем работу без Redis кэширования")

    if settings.session_watch_enabled:
        session_supervisor.start()
        logger.info("👀 Фоновое наблюдение за сессиями запущено")

    logger.info("🎉 Все сервисы готовы к работе!")


@app.on_event("shutdown")
async def shutdown_event():
    """Обработчик завершения приложения"""
    logger.info("🛑 Завершение работы NMT Exam API")
    await session_supervisor.stop()
    await cache_service.close()
