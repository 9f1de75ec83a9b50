# -*- coding: utf-8 -*-
"""
Сборка вопросов сессии.

Вопросы всех тестов сессии разворачиваются в один список в порядке
session.test_ids и кэшируются в Redis по сессии. Любое изменение
вопросов теста сбрасывает кэш всех сессий.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from nmt_exam.config.logger import configure_logger
from nmt_exam.config.redis_settings import redis_settings
from nmt_exam.domain.questions import Question, SessionQuestion
from nmt_exam.repository.ports import TestStore
from nmt_exam.service.cache_service import cache_service

logger = configure_logger(__name__)


def _questions_key(session_id: str) -> str:
    return cache_service.key("session", session_id, "questions")


def _to_cache(items: List[SessionQuestion]) -> List[Dict[str, Any]]:
    return [
        {
            "question": item.question.to_storage(),
            "testId": item.test_id,
            "subjectId": item.subject_id,
            "testTitle": item.test_title,
        }
        for item in items
    ]


def _from_cache(data: List[Dict[str, Any]]) -> List[SessionQuestion]:
    return [
        SessionQuestion(
            question=Question.model_validate(entry["question"]),
            test_id=entry["testId"],
            subject_id=entry.get("subjectId"),
            test_title=entry.get("testTitle"),
        )
        for entry in data
    ]


def flatten_test_questions(tests: List[Any]) -> List[SessionQuestion]:
    """Разворачивает вопросы тестов; повреждённые записи пропускаются с предупреждением."""
    items: List[SessionQuestion] = []
    for test in tests:
        for raw in getattr(test, "questions", None) or []:
            try:
                question = Question.model_validate(raw)
            except PydanticValidationError as e:
                logger.warning(
                    f"⚠️ Пропущен некорректный вопрос в тесте {test.id}: {e.errors()[0].get('msg')}"
                )
                continue
            items.append(
                SessionQuestion(
                    question=question,
                    test_id=test.id,
                    subject_id=getattr(test, "subject_id", None),
                    test_title=getattr(test, "title", None),
                )
            )
    return items


async def load_session_questions(session: Any, tests: TestStore) -> List[SessionQuestion]:
    """
    Все вопросы сессии по порядку её тестов.

    Args:
        session: Сессия (нужны id и test_ids)
        tests: Хранилище тестов

    Returns:
        Упорядоченный список SessionQuestion
    """
    key = _questions_key(session.id)
    cached = await cache_service.get(key)
    if cached is not None:
        try:
            return _from_cache(cached)
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.warning(f"⚠️ Повреждённый кэш вопросов сессии {session.id}: {e}")
            await cache_service.delete(key)

    loaded = await tests.get_tests(session.test_ids or [])
    items = flatten_test_questions(loaded)
    await cache_service.set(
        key, _to_cache(items), ttl=redis_settings.cache_ttl_session_questions
    )
    logger.debug(f"Сессия {session.id}: загружено {len(items)} вопросов")
    return items


async def invalidate_session_questions(session_id: str | None = None) -> None:
    """Сбрасывает кэш вопросов одной сессии или всех сессий сразу."""
    if session_id is not None:
        await cache_service.delete(_questions_key(session_id))
        return
    await cache_service.invalidate_pattern(cache_service.key("session", "*", "questions"))
