#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт инициализации базы данных.

Выполняет:
1. Применение миграций Alembic
2. Проверку подключения к базе данных
"""

import asyncio
import subprocess
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from nmt_exam.clients.database_client import check_db_connection  # noqa: E402
from nmt_exam.config.logger import configure_logger  # noqa: E402

logger = configure_logger("scripts.init_database")


async def init_database():
    """Применяет миграции и проверяет, что база отвечает."""
    try:
        print("🚀 Начинаем инициализацию базы данных...")

        print("🔄 Применение миграций...")
        result = subprocess.run(
            ["alembic", "-c", "alembic.ini", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent,
        )

        if result.returncode != 0:
            print(f"❌ Ошибка при применении миграций: {result.stderr}")
            print(f"stdout: {result.stdout}")
            sys.exit(1)

        print("✅ Миграции применены успешно")

        if not await check_db_connection():
            print("❌ База данных не отвечает после миграций")
            sys.exit(1)

        print("🎉 Инициализация базы данных завершена успешно!")

    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        print(f"❌ Ошибка: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(init_database())
