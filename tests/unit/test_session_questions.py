# -*- coding: utf-8 -*-
"""
Unit тесты для сборки и кэширования вопросов сессии
"""

from types import SimpleNamespace

import pytest

from nmt_exam.config.redis_settings import redis_settings
from nmt_exam.service import questions as questions_module
from nmt_exam.service.questions import load_session_questions
from tests.fixtures import matching, single_choice


class FakeCache:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    def key(self, *parts):
        return ":".join(str(p) for p in parts)

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key):
        return self.data.pop(key, None) is not None


@pytest.fixture
def fake_cache(monkeypatch):
    cache = FakeCache()
    monkeypatch.setattr(questions_module, "cache_service", cache)
    return cache


class TestLoadSessionQuestions:
    @pytest.mark.asyncio
    async def test_questions_in_test_order(self, memory_store, fake_cache):
        # Arrange
        first = memory_store.add_test(title="Алгебра", questions=[single_choice("q1")])
        second = memory_store.add_test(title="Геометрія", questions=[matching("q2")])
        session = SimpleNamespace(id="s1", test_ids=[second.id, first.id])

        # Act
        items = await load_session_questions(session, memory_store)

        # Assert
        assert [item.id for item in items] == ["q2", "q1"]
        assert items[0].test_id == second.id

    @pytest.mark.asyncio
    async def test_cached_with_questions_ttl(self, memory_store, fake_cache):
        test = memory_store.add_test(title="Алгебра", questions=[single_choice("q1")])
        session = SimpleNamespace(id="s1", test_ids=[test.id])

        await load_session_questions(session, memory_store)

        assert fake_cache.ttls == {
            "session:s1:questions": redis_settings.cache_ttl_session_questions
        }

    @pytest.mark.asyncio
    async def test_served_from_cache(self, memory_store, fake_cache):
        test = memory_store.add_test(title="Алгебра", questions=[single_choice("q1")])
        session = SimpleNamespace(id="s1", test_ids=[test.id])
        await load_session_questions(session, memory_store)

        memory_store.tests.clear()
        cached = await load_session_questions(session, memory_store)

        assert [item.id for item in cached] == ["q1"]
