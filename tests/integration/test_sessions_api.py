# -*- coding: utf-8 -*-
"""
Integration тесты для административного API сессий
"""

import csv
from io import StringIO

import pytest

from nmt_exam.domain.enums import AttemptStatus, SessionStatus
from tests.fixtures import (
    auth_headers,
    create_attempt,
    create_exam_session,
    create_test_subject,
    create_test_test,
    multiple_choice,
    single_choice,
)


async def seed_test(test_session):
    subject = await create_test_subject(test_session, "Математика")
    return await create_test_test(
        test_session,
        [single_choice("q1", 5), multiple_choice("q2", 10)],
        subject_id=subject.id,
    )


class TestSessionsCrudAPI:
    @pytest.mark.asyncio
    async def test_create_session_is_draft(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)

        # Act
        response = await async_client.post(
            "/api/v1/sessions",
            json={"title": "Пробне НМТ", "testIds": [test.id], "durationMinutes": 60},
            headers=admin_headers,
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["allowedStudents"] == ["all"]
        assert data["startTime"] is None
        assert data["remainingMs"] is None
        assert data["showDetailedResultsToStudent"] is False

    @pytest.mark.asyncio
    async def test_create_validation(self, async_client, test_session, admin_headers):
        test = await seed_test(test_session)

        no_tests = await async_client.post(
            "/api/v1/sessions",
            json={"title": "НМТ", "testIds": [], "durationMinutes": 60},
            headers=admin_headers,
        )
        zero_duration = await async_client.post(
            "/api/v1/sessions",
            json={"title": "НМТ", "testIds": [test.id], "durationMinutes": 0},
            headers=admin_headers,
        )
        unknown_test = await async_client.post(
            "/api/v1/sessions",
            json={"title": "НМТ", "testIds": ["missing"], "durationMinutes": 60},
            headers=admin_headers,
        )

        assert no_tests.status_code == 422
        assert zero_duration.status_code == 422
        assert unknown_test.status_code == 404

    @pytest.mark.asyncio
    async def test_students_cannot_manage_sessions(self, async_client, student_headers):
        response = await async_client.get("/api/v1/sessions", headers=student_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_update_draft_only(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)
        draft = await create_exam_session(test_session, [test.id])
        active = await create_exam_session(
            test_session, [test.id], status=SessionStatus.ACTIVE
        )

        # Act
        ok = await async_client.patch(
            f"/api/v1/sessions/{draft.id}",
            json={"durationMinutes": 90, "allowedStudents": ["student-1"]},
            headers=admin_headers,
        )
        rejected = await async_client.patch(
            f"/api/v1/sessions/{active.id}",
            json={"title": "Інша назва"},
            headers=admin_headers,
        )

        # Assert
        assert ok.status_code == 200
        assert ok.json()["durationMinutes"] == 90
        assert ok.json()["allowedStudents"] == ["student-1"]
        assert rejected.status_code == 409

    @pytest.mark.asyncio
    async def test_list_and_delete(self, async_client, test_session, admin_headers):
        test = await seed_test(test_session)
        session = await create_exam_session(test_session, [test.id])

        listed = await async_client.get("/api/v1/sessions", headers=admin_headers)
        deleted = await async_client.delete(
            f"/api/v1/sessions/{session.id}", headers=admin_headers
        )
        missing = await async_client.get(
            f"/api/v1/sessions/{session.id}", headers=admin_headers
        )

        assert [s["id"] for s in listed.json()] == [session.id]
        assert deleted.status_code == 204
        assert missing.status_code == 404


class TestSessionLifecycleAPI:
    @pytest.mark.asyncio
    async def test_start_pause_resume_finish(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)
        session = await create_exam_session(test_session, [test.id], duration_minutes=30)
        base = f"/api/v1/sessions/{session.id}"

        # Act & Assert
        started = await async_client.post(f"{base}/start", headers=admin_headers)
        assert started.status_code == 200
        assert started.json()["status"] == "active"
        assert 0 < started.json()["remainingMs"] <= 30 * 60 * 1000

        paused = await async_client.post(f"{base}/pause", headers=admin_headers)
        assert paused.json()["isPaused"] is True
        assert paused.json()["pausedAt"] is not None

        resumed = await async_client.post(f"{base}/resume", headers=admin_headers)
        assert resumed.json()["isPaused"] is False
        assert resumed.json()["pausedAt"] is None

        finished = await async_client.post(f"{base}/finish", headers=admin_headers)
        assert finished.json()["status"] == "finished"
        assert finished.json()["remainingMs"] is None

    @pytest.mark.asyncio
    async def test_invalid_transitions(self, async_client, test_session, admin_headers):
        test = await seed_test(test_session)
        session = await create_exam_session(test_session, [test.id])
        base = f"/api/v1/sessions/{session.id}"

        pause_draft = await async_client.post(f"{base}/pause", headers=admin_headers)
        resume_draft = await async_client.post(f"{base}/resume", headers=admin_headers)
        await async_client.post(f"{base}/start", headers=admin_headers)
        start_again = await async_client.post(f"{base}/start", headers=admin_headers)

        assert pause_draft.status_code == 409
        assert resume_draft.status_code == 409
        assert start_again.status_code == 409

    @pytest.mark.asyncio
    async def test_finish_finalizes_attempts(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)
        session = await create_exam_session(test_session, [test.id])
        await async_client.post(f"/api/v1/sessions/{session.id}/start", headers=admin_headers)
        student = auth_headers("student", "student-7")
        entered = await async_client.post(
            f"/api/v1/student/sessions/{session.id}/attempt", headers=student
        )
        attempt_id = entered.json()["id"]
        await async_client.put(
            f"/api/v1/student/attempts/{attempt_id}/answers/q1",
            json={"value": "A"},
            headers=student,
        )

        # Act
        await async_client.post(f"/api/v1/sessions/{session.id}/finish", headers=admin_headers)
        attempt = await async_client.get(
            f"/api/v1/student/attempts/{attempt_id}", headers=student
        )

        # Assert
        data = attempt.json()
        assert data["status"] == "finished"
        assert data["finishReason"] == "session_finished"
        assert data["scoreByTest"] == {test.id: 5}


class TestSessionResultsAPI:
    @pytest.mark.asyncio
    async def test_results_summary(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)
        session = await create_exam_session(
            test_session, [test.id], status=SessionStatus.FINISHED
        )
        await create_attempt(
            test_session,
            session.id,
            "student-1",
            status=AttemptStatus.FINISHED,
            score_by_test={test.id: 15},
            finish_reason="student",
        )

        # Act
        response = await async_client.get(
            f"/api/v1/sessions/{session.id}/results", headers=admin_headers
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["sessionId"] == session.id
        row = data["attempts"][0]
        assert row["studentId"] == "student-1"
        assert row["totalScore"] == 15
        assert row["tests"][0]["subjectName"] == "Математика"
        assert row["tests"][0]["maxScore"] == 15
        assert row["tests"][0]["nmtScore"] == 200

    @pytest.mark.asyncio
    async def test_results_csv(self, async_client, test_session, admin_headers):
        # Arrange
        test = await seed_test(test_session)
        session = await create_exam_session(
            test_session, [test.id], status=SessionStatus.FINISHED
        )
        await create_attempt(
            test_session,
            session.id,
            "student-1",
            answers={"q1": {"value": "A", "testId": test.id, "subjectId": None}},
        )

        # Act
        response = await async_client.get(
            f"/api/v1/sessions/{session.id}/results/csv", headers=admin_headers
        )

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert f"session_{session.id}_results.csv" in response.headers["content-disposition"]
        rows = list(csv.reader(StringIO(response.text)))
        assert rows[0][0] == "studentId"
        assert len(rows) == 3
        assert rows[1][:4] == ["student-1", "Математика", "Алгебра", "q1"]
        assert rows[2][6] == "N/A"
