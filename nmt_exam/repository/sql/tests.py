# -*- coding: utf-8 -*-
"""
SQLAlchemy-реализация TestStore и операции с предметами и тестами.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.models import Subject, Test
from nmt_exam.repository.base import (
    create_item,
    delete_item,
    find_item,
    get_item,
    list_items,
    update_item,
)

logger = configure_logger(__name__)


class SqlTestStore:
    __test__ = False

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # TestStore
    # ------------------------------------------------------------------

    async def get_test(self, test_id: str) -> Optional[Test]:
        return await find_item(self.db, Test, test_id)

    async def get_tests(self, test_ids: Iterable[str]) -> List[Test]:
        """Тесты в порядке test_ids; отсутствующие пропускаются."""
        ids = list(test_ids)
        if not ids:
            return []
        result = await self.db.execute(select(Test).where(Test.id.in_(ids)))
        by_id = {test.id: test for test in result.scalars().all()}
        missing = [test_id for test_id in ids if test_id not in by_id]
        if missing:
            logger.warning(f"⚠️ Тесты не найдены: {missing}")
        return [by_id[test_id] for test_id in ids if test_id in by_id]

    async def get_subject_names(self, subject_ids: Iterable[str]) -> Dict[str, str]:
        ids = [sid for sid in set(subject_ids) if sid]
        if not ids:
            return {}
        result = await self.db.execute(
            select(Subject.id, Subject.name).where(Subject.id.in_(ids))
        )
        return {row.id: row.name for row in result.all()}

    # ------------------------------------------------------------------
    # Тесты
    # ------------------------------------------------------------------

    async def list_tests(self, subject_id: str | None = None) -> List[Test]:
        return await list_items(
            self.db, Test, limit=0, order_by=Test.created_at, subject_id=subject_id
        )

    async def create_test(self, **fields: Any) -> Test:
        test = await create_item(self.db, Test, **fields)
        logger.info(f"🆕 Создан тест {test.id} ('{test.title}')")
        return test

    async def update_test(self, test_id: str, **fields: Any) -> Test:
        return await update_item(self.db, Test, test_id, **fields)

    async def replace_questions(
        self, test_id: str, questions: List[Dict[str, Any]]
    ) -> Test:
        """Заменяет список вопросов теста целиком одной записью."""
        test = await get_item(self.db, Test, test_id)
        # Новый список, чтобы SQLAlchemy заметил изменение JSON-колонки
        test.questions = list(questions)
        await self.db.commit()
        await self.db.refresh(test)
        logger.info(f"📥 Тест {test_id}: сохранено {len(questions)} вопросов")
        return test

    async def delete_test(self, test_id: str) -> None:
        await delete_item(self.db, Test, test_id)


# ---------------------------------------------------------------------------
# Предметы
# ---------------------------------------------------------------------------


async def list_subjects(db: AsyncSession) -> List[Subject]:
    return await list_items(db, Subject, limit=0, order_by=Subject.name)


async def get_subject(db: AsyncSession, subject_id: str) -> Subject:
    return await get_item(db, Subject, subject_id)


async def create_subject(db: AsyncSession, **fields: Any) -> Subject:
    return await create_item(db, Subject, **fields)


async def update_subject(db: AsyncSession, subject_id: str, **fields: Any) -> Subject:
    return await update_item(db, Subject, subject_id, **fields)


async def delete_subject(db: AsyncSession, subject_id: str) -> None:
    await delete_item(db, Subject, subject_id)
