# -*- coding: utf-8 -*-
"""
Integration тесты для API студента: сессии, часы, попытка
"""

import pytest

from nmt_exam.domain.enums import SessionStatus
from tests.fixtures import (
    auth_headers,
    create_exam_session,
    create_test_test,
    matching,
    multiple_choice,
    single_choice,
)


async def started_session(client, test_session, admin_headers, **fields):
    test = await create_test_test(
        test_session, [single_choice("q1", 5), multiple_choice("q2", 10), matching("q3", 4)]
    )
    session = await create_exam_session(test_session, [test.id], **fields)
    await client.post(f"/api/v1/sessions/{session.id}/start", headers=admin_headers)
    return session, test


class TestStudentSessionsAPI:
    @pytest.mark.asyncio
    async def test_available_sessions(
        self, async_client, test_session, admin_headers, student_headers
    ):
        # Arrange
        test = await create_test_test(test_session, [single_choice("q1")])
        await create_exam_session(test_session, [test.id])  # черновик скрыт
        open_to_all = await create_exam_session(
            test_session, [test.id], status=SessionStatus.ACTIVE
        )
        mine = await create_exam_session(
            test_session,
            [test.id],
            status=SessionStatus.FINISHED,
            allowed_students=["student-1"],
        )
        await create_exam_session(
            test_session,
            [test.id],
            status=SessionStatus.ACTIVE,
            allowed_students=["student-2"],
        )

        # Act
        response = await async_client.get(
            "/api/v1/student/sessions", headers=student_headers
        )

        # Assert
        assert response.status_code == 200
        assert {s["id"] for s in response.json()} == {open_to_all.id, mine.id}

    @pytest.mark.asyncio
    async def test_admin_token_rejected(self, async_client, admin_headers):
        response = await async_client.get("/api/v1/student/sessions", headers=admin_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_clock(self, async_client, test_session, admin_headers, student_headers):
        session, _ = await started_session(
            async_client, test_session, admin_headers, duration_minutes=10
        )

        response = await async_client.get(
            f"/api/v1/student/sessions/{session.id}/clock", headers=student_headers
        )

        data = response.json()
        assert data["status"] == "active"
        assert data["expired"] is False
        assert 0 < data["remainingMs"] <= 600_000
        assert data["remaining"] in ("00:10:00", "00:09:59")

    @pytest.mark.asyncio
    async def test_paused_clock(
        self, async_client, test_session, admin_headers, student_headers
    ):
        session, _ = await started_session(async_client, test_session, admin_headers)
        await async_client.post(f"/api/v1/sessions/{session.id}/pause", headers=admin_headers)

        response = await async_client.get(
            f"/api/v1/student/sessions/{session.id}/clock", headers=student_headers
        )

        assert response.json()["isPaused"] is True
        assert response.json()["expired"] is False

    @pytest.mark.asyncio
    async def test_draft_session_hidden(
        self, async_client, test_session, student_headers
    ):
        test = await create_test_test(test_session, [single_choice("q1")])
        draft = await create_exam_session(test_session, [test.id])

        response = await async_client.get(
            f"/api/v1/student/sessions/{draft.id}", headers=student_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_foreign_session_forbidden(
        self, async_client, test_session, student_headers
    ):
        test = await create_test_test(test_session, [single_choice("q1")])
        session = await create_exam_session(
            test_session,
            [test.id],
            status=SessionStatus.ACTIVE,
            allowed_students=["student-2"],
        )

        response = await async_client.get(
            f"/api/v1/student/sessions/{session.id}/questions", headers=student_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_questions_hide_correct_answers(
        self, async_client, test_session, admin_headers, student_headers
    ):
        # Arrange
        session, test = await started_session(async_client, test_session, admin_headers)

        # Act
        response = await async_client.get(
            f"/api/v1/student/sessions/{session.id}/questions", headers=student_headers
        )

        # Assert
        questions = response.json()
        assert [q["id"] for q in questions] == ["q1", "q2", "q3"]
        assert all("correctAnswers" not in q for q in questions)
        assert questions[0]["testId"] == test.id
        assert len(questions[2]["matchPrompts"]) == 4


class TestStudentAttemptAPI:
    @pytest.mark.asyncio
    async def test_enter_session_once(
        self, async_client, test_session, admin_headers, student_headers
    ):
        session, _ = await started_session(async_client, test_session, admin_headers)
        url = f"/api/v1/student/sessions/{session.id}/attempt"

        first = await async_client.post(url, headers=student_headers)
        second = await async_client.post(url, headers=student_headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert first.json()["status"] == "in_progress"

    @pytest.mark.asyncio
    async def test_cannot_enter_draft(self, async_client, test_session, student_headers):
        test = await create_test_test(test_session, [single_choice("q1")])
        draft = await create_exam_session(test_session, [test.id])

        response = await async_client.post(
            f"/api/v1/student/sessions/{draft.id}/attempt", headers=student_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_save_answers(
        self, async_client, test_session, admin_headers, student_headers
    ):
        # Arrange
        session, test = await started_session(async_client, test_session, admin_headers)
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student_headers
        )
        base = f"/api/v1/student/attempts/{entered.json()['id']}/answers"

        # Act
        await async_client.put(f"{base}/q1", json={"value": "B"}, headers=student_headers)
        await async_client.put(f"{base}/q1", json={"value": "A"}, headers=student_headers)
        saved = await async_client.put(
            f"{base}/q3",
            json={"value": {"p1": "o1", "p2": "o2"}},
            headers=student_headers,
        )
        unknown = await async_client.put(
            f"{base}/ghost", json={"value": "A"}, headers=student_headers
        )

        # Assert
        answers = saved.json()["answers"]
        assert answers["q1"] == {"value": "A", "testId": test.id, "subjectId": None}
        assert answers["q3"]["value"] == {"p1": "o1", "p2": "o2"}
        assert unknown.status_code == 404

    @pytest.mark.asyncio
    async def test_answer_allowed_while_paused(
        self, async_client, test_session, admin_headers, student_headers
    ):
        session, _ = await started_session(async_client, test_session, admin_headers)
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student_headers
        )
        await async_client.post(f"/api/v1/sessions/{session.id}/pause", headers=admin_headers)

        response = await async_client.put(
            f"/api/v1/student/attempts/{entered.json()['id']}/answers/q1",
            json={"value": "A"},
            headers=student_headers,
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_finish_and_results(
        self, async_client, test_session, admin_headers, student_headers
    ):
        # Arrange
        session, test = await started_session(async_client, test_session, admin_headers)
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student_headers
        )
        attempt_id = entered.json()["id"]
        await async_client.put(
            f"/api/v1/student/attempts/{attempt_id}/answers/q3",
            json={"value": {"p1": "o1", "p2": "o2", "p3": "o3"}},
            headers=student_headers,
        )

        # Act
        finished = await async_client.post(
            f"/api/v1/student/attempts/{attempt_id}/finish", headers=student_headers
        )
        again = await async_client.post(
            f"/api/v1/student/attempts/{attempt_id}/finish", headers=student_headers
        )
        late = await async_client.put(
            f"/api/v1/student/attempts/{attempt_id}/answers/q1",
            json={"value": "A"},
            headers=student_headers,
        )

        # Assert
        data = finished.json()
        assert data["status"] == "finished"
        assert data["finishReason"] == "student"
        assert data["scoreByTest"] == {test.id: 3}
        assert data["results"][0]["score"] == 3
        assert data["results"][0]["maxScore"] == 19
        assert data["review"] is None
        assert again.json()["finishedAt"] == data["finishedAt"]
        assert late.status_code == 409

    @pytest.mark.asyncio
    async def test_detailed_review_when_enabled(
        self, async_client, test_session, admin_headers, student_headers
    ):
        session, _ = await started_session(
            async_client,
            test_session,
            admin_headers,
            show_detailed_results_to_student=True,
        )
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student_headers
        )
        attempt_id = entered.json()["id"]
        await async_client.put(
            f"/api/v1/student/attempts/{attempt_id}/answers/q1",
            json={"value": "A"},
            headers=student_headers,
        )

        finished = await async_client.post(
            f"/api/v1/student/attempts/{attempt_id}/finish", headers=student_headers
        )

        review = finished.json()["review"]
        assert [r["questionId"] for r in review] == ["q1", "q2", "q3"]
        assert review[0]["isCorrect"] is True
        assert review[1]["studentAnswer"] is None

    @pytest.mark.asyncio
    async def test_other_student_attempt_forbidden(
        self, async_client, test_session, admin_headers, student_headers
    ):
        session, _ = await started_session(async_client, test_session, admin_headers)
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student_headers
        )

        response = await async_client.get(
            f"/api/v1/student/attempts/{entered.json()['id']}",
            headers=auth_headers("student", "student-2"),
        )

        assert response.status_code == 403
