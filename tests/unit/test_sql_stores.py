# -*- coding: utf-8 -*-
"""
Unit тесты для SQLAlchemy-адаптеров хранилища
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from nmt_exam.domain.enums import AttemptStatus, SessionStatus
from nmt_exam.domain.models import Attempt
from nmt_exam.repository.sql import SqlAttemptStore, SqlSessionStore, SqlTestStore
from nmt_exam.utils.exceptions import AttemptFinishedError
from tests.fixtures import (
    create_attempt,
    create_exam_session,
    create_test_subject,
    create_test_test,
    single_choice,
)


class TestSqlAttemptStore:
    @pytest.mark.asyncio
    async def test_find_or_create_returns_existing(self, test_session):
        # Arrange
        test = await create_test_test(test_session, [single_choice("q1")])
        session = await create_exam_session(
            test_session, [test.id], status=SessionStatus.ACTIVE
        )
        store = SqlAttemptStore(test_session)

        # Act
        first, created = await store.find_or_create_attempt(session.id, "student-1")
        second, created_again = await store.find_or_create_attempt(session.id, "student-1")

        # Assert
        assert created is True and created_again is False
        assert first.id == second.id
        assert first.status == AttemptStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_duplicate_insert_violates_unique_constraint(self, test_session):
        test = await create_test_test(test_session, [])
        session = await create_exam_session(test_session, [test.id])
        await create_attempt(test_session, session.id, "student-1")

        with pytest.raises(IntegrityError):
            await create_attempt(test_session, session.id, "student-1")
        await test_session.rollback()

    @pytest.mark.asyncio
    async def test_save_answer_and_finalize(self, test_session):
        # Arrange
        test = await create_test_test(test_session, [single_choice("q1")])
        session = await create_exam_session(
            test_session, [test.id], status=SessionStatus.ACTIVE
        )
        attempt = await create_attempt(test_session, session.id)
        store = SqlAttemptStore(test_session)
        finished_at = datetime(2026, 5, 20, 10, 0, tzinfo=timezone.utc)

        # Act
        saved = await store.save_answer(
            attempt.id, "q1", {"value": "A", "testId": test.id, "subjectId": None}
        )
        first = await store.finalize_attempt(attempt.id, {test.id: 5}, finished_at, "student")
        second = await store.finalize_attempt(attempt.id, {test.id: 0}, finished_at, "expired")

        # Assert
        assert saved.answers["q1"]["value"] == "A"
        assert first is True
        assert second is False
        stored = await store.get_attempt(attempt.id)
        assert stored.status == AttemptStatus.FINISHED
        assert stored.score_by_test == {test.id: 5}
        assert stored.finish_reason == "student"

    @pytest.mark.asyncio
    async def test_finalize_lost_race_returns_winner_state(self, test_session):
        # Arrange
        test = await create_test_test(test_session, [single_choice("q1")])
        session = await create_exam_session(
            test_session, [test.id], status=SessionStatus.ACTIVE
        )
        attempt = await create_attempt(test_session, session.id)
        store = SqlAttemptStore(test_session)
        loaded = await store.get_attempt(attempt.id)
        assert loaded.status == AttemptStatus.IN_PROGRESS

        # Другой процесс завершает попытку в обход identity map
        finished_at = datetime(2026, 5, 20, 10, 0, tzinfo=timezone.utc)
        await test_session.execute(
            update(Attempt)
            .where(Attempt.id == attempt.id)
            .values(
                status=AttemptStatus.FINISHED,
                score_by_test={test.id: 5},
                finished_at=finished_at,
                finish_reason="expired",
            )
            .execution_options(synchronize_session=False)
        )
        await test_session.commit()

        # Act
        persisted = await store.finalize_attempt(
            attempt.id, {test.id: 0}, finished_at, "student"
        )
        stored = await store.get_attempt(attempt.id)

        # Assert
        assert persisted is False
        assert stored.status == AttemptStatus.FINISHED
        assert stored.score_by_test == {test.id: 5}
        assert stored.finish_reason == "expired"

    @pytest.mark.asyncio
    async def test_save_answer_after_finish_rejected(self, test_session):
        test = await create_test_test(test_session, [])
        session = await create_exam_session(test_session, [test.id])
        attempt = await create_attempt(
            test_session, session.id, status=AttemptStatus.FINISHED
        )
        store = SqlAttemptStore(test_session)

        with pytest.raises(AttemptFinishedError):
            await store.save_answer(attempt.id, "q1", {"value": "A", "testId": test.id})

    @pytest.mark.asyncio
    async def test_list_attempts_filters_status(self, test_session):
        test = await create_test_test(test_session, [])
        session = await create_exam_session(test_session, [test.id])
        await create_attempt(test_session, session.id, "a")
        await create_attempt(test_session, session.id, "b", status=AttemptStatus.FINISHED)
        store = SqlAttemptStore(test_session)

        pending = await store.list_attempts(session.id, AttemptStatus.IN_PROGRESS)
        everything = await store.list_attempts(session.id)

        assert [a.student_id for a in pending] == ["a"]
        assert len(everything) == 2
        assert all(isinstance(a, Attempt) for a in everything)


class TestSqlTestStore:
    @pytest.mark.asyncio
    async def test_get_tests_keeps_requested_order(self, test_session):
        t1 = await create_test_test(test_session, [], title="Перший")
        t2 = await create_test_test(test_session, [], title="Другий")
        store = SqlTestStore(test_session)

        loaded = await store.get_tests([t2.id, "missing", t1.id])

        assert [t.id for t in loaded] == [t2.id, t1.id]

    @pytest.mark.asyncio
    async def test_subject_names(self, test_session):
        subject = await create_test_subject(test_session, "Історія України")
        store = SqlTestStore(test_session)

        names = await store.get_subject_names([subject.id, "missing"])

        assert names == {subject.id: "Історія України"}


class TestSqlSessionStore:
    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_session):
        test = await create_test_test(test_session, [])
        store = SqlSessionStore(test_session)
        session = await store.create_session(
            title="НМТ", test_ids=[test.id], duration_minutes=30
        )

        updated = await store.update_session(session.id, title="НМТ-2")
        assert updated.title == "НМТ-2"
        assert updated.allowed_students == ["all"]

        await store.delete_session(session.id)
        assert await store.get_session(session.id) is None
