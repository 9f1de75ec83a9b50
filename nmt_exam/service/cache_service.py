"""
Сервис кэширования для интеграции с Redis.

Этот модуль предоставляет высокоуровневый интерфейс для операций кэширования
с автоматической сериализацией/десериализацией и управлением TTL.
Любая ошибка Redis деградирует до промаха кэша.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from nmt_exam.config.logger import configure_logger
from nmt_exam.config.redis_settings import get_redis_connection_params, redis_settings

logger = configure_logger(__name__)


class CacheService:
    """Высокоуровневый сервис кэширования для операций с Redis."""

    def __init__(self, enabled: bool | None = None):
        """Инициализирует сервис кэширования."""
        self._redis: Optional[Redis] = None
        self._connection_params = get_redis_connection_params()
        self.enabled = redis_settings.redis_enabled if enabled is None else enabled

    async def get_redis(self) -> Redis:
        """
        Получить подключение к Redis (ленивая инициализация).

        Returns:
            Экземпляр подключения к Redis
        """
        if self._redis is None:
            try:
                self._redis = redis.Redis(**self._connection_params)
                await self._redis.ping()
                logger.info("Подключение к Redis установлено успешно")
            except Exception as e:
                self._redis = None
                logger.error(f"Ошибка подключения к Redis: {e}")
                raise

        return self._redis

    async def close(self):
        """Закрыть подключение к Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Подключение к Redis закрыто")

    def key(self, *parts: Any) -> str:
        """Ключ кэша с общим префиксом приложения."""
        return ":".join([redis_settings.cache_prefix, *(str(part) for part in parts)])

    def _serialize(self, data: Any) -> str:
        try:
            return json.dumps(data, default=str, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Ошибка сериализации данных: {e}")
            raise

    def _deserialize(self, data: str) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError) as e:
            logger.error(f"Ошибка десериализации данных: {e}")
            raise

    async def get(self, key: str) -> Optional[Any]:
        """
        Получить значение из кэша.

        Returns:
            Кэшированное значение или None если не найдено
        """
        if not self.enabled:
            return None
        try:
            redis_client = await self.get_redis()
            data = await redis_client.get(key)

            if data is None:
                return None

            return self._deserialize(data)
        except Exception as e:
            logger.error(f"Ошибка получения ключа кэша '{key}': {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Установить значение в кэш.

        Returns:
            True если успешно, False в противном случае
        """
        if not self.enabled:
            return False
        try:
            redis_client = await self.get_redis()
            serialized_value = self._serialize(value)

            if ttl:
                await redis_client.setex(key, ttl, serialized_value)
            else:
                await redis_client.set(key, serialized_value)

            return True
        except Exception as e:
            logger.error(f"Ошибка установки ключа кэша '{key}': {e}")
            return False

    async def delete(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            redis_client = await self.get_redis()
            result = await redis_client.delete(key)
            return result > 0
        except Exception as e:
            logger.error(f"Ошибка удаления ключа кэша '{key}': {e}")
            return False

    async def invalidate_pattern(self, pattern: str) -> int:
        """
        Удалить все ключи, подходящие под шаблон.

        Returns:
            Количество удалённых ключей
        """
        if not self.enabled:
            return 0
        try:
            redis_client = await self.get_redis()
            keys = [key async for key in redis_client.scan_iter(match=pattern)]
            deleted = await redis_client.delete(*keys) if keys else 0
            logger.debug(f"Инвалидировано {deleted} ключей по шаблону '{pattern}'")
            return deleted
        except Exception as e:
            logger.error(f"Ошибка инвалидации по шаблону '{pattern}': {e}")
            return 0


cache_service = CacheService()
