# -*- coding: utf-8 -*-
"""
nmt_exam/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Этот модуль загружает конфигурацию из .env файла, предоставляя централизованную
систему управления настройками для всех окружений.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

"""Загрузка .env производится ТОЛЬКО если файл существует.
В контейнере используем переменные окружения, переданные Docker/Compose.
"""
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ROOT_ENV_PATH = (BASE_DIR / ".env").resolve()


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из .env файла."""

    model_config = SettingsConfigDict(
        env_file=ROOT_ENV_PATH if ROOT_ENV_PATH.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация базы данных
    database_url: str | None = None
    postgres_db: str = "nmt"
    postgres_user: str = "nmt"
    postgres_password: str = "nmt"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    database_echo: bool = False

    # Конфигурация JWT
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Конфигурация приложения
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_domain: str | None = None
    frontend_port: int | None = None

    # Конфигурация CORS
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"

    # Сессии и попытки
    session_watch_enabled: bool = True  # Фоновое завершение попыток по таймеру
    session_poll_interval_seconds: float = 1.0  # Период опроса состояния сессии
    storage_retry_attempts: int = 3  # Повторы чтения сессии/профиля
    storage_retry_base_delay: float = 0.5  # Базовая задержка backoff, сек

    def get_allowed_origins(self) -> list[str]:
        """Формирует список разрешённых origins для CORS.
        Приоритет: явные cors_allow_origins -> из домена/порта -> localhost для dev.
        """
        if self.cors_allow_origins:
            return [
                origin.strip()
                for origin in self.cors_allow_origins.split(",")
                if origin.strip()
            ]

        allowed: list[str] = []

        if self.app_domain:
            allowed.append(f"https://{self.app_domain}")

        port = self.frontend_port or 3000
        allowed.extend(
            [
                f"http://localhost:{port}",
                f"http://127.0.0.1:{port}",
            ]
        )
        return allowed

    def get_cors_methods(self) -> list[str]:
        """Возвращает список разрешённых HTTP методов для CORS."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [
            method.strip()
            for method in self.cors_allow_methods.split(",")
            if method.strip()
        ]

    def get_cors_headers(self) -> list[str]:
        """Возвращает список разрешённых заголовков для CORS."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [
            header.strip()
            for header in self.cors_allow_headers.split(",")
            if header.strip()
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.database_url:
            self.database_url = self._build_database_url()

    def _build_database_url(self) -> str:
        """Собирает URL базы данных из отдельных компонентов."""
        driver = "postgresql+asyncpg"
        return f"{driver}://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    def get_config_source(self) -> str:
        """Возвращает информацию об источнике конфигурации для отладки."""
        if ROOT_ENV_PATH.exists():
            return f"root: {ROOT_ENV_PATH}"
        return "environment variables only"


settings = Settings()
