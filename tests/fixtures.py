# -*- coding: utf-8 -*-
"""
Фикстуры и фабрики для тестов экзаменационных сессий
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.domain.enums import ALL_STUDENTS, SessionStatus
from nmt_exam.domain.models import Attempt, ExamSession, Subject, Test
from nmt_exam.domain.questions import Question, SessionQuestion
from nmt_exam.repository.base import create_item
from nmt_exam.security.security import create_access_token

# ----------------------------- Вопросы --------------------------------------


def single_choice(qid: str, points: float = 5, correct: str = "A") -> Dict[str, Any]:
    return {
        "id": qid,
        "questionText": f"Питання {qid}",
        "type": "single_choice",
        "points": points,
        "options": [{"id": o, "text": f"Варіант {o}"} for o in ("A", "B", "C", "D")],
        "correctAnswers": [correct],
    }


def multiple_choice(
    qid: str, points: float = 10, correct: Optional[List[str]] = None
) -> Dict[str, Any]:
    return {
        "id": qid,
        "questionText": f"Питання {qid}",
        "type": "multiple_choice",
        "points": points,
        "options": [{"id": o, "text": f"Варіант {o}"} for o in ("A", "B", "C", "D")],
        "correctAnswers": correct if correct is not None else ["B", "C"],
    }


def numeric_input(qid: str, points: float = 2, correct: str = "42") -> Dict[str, Any]:
    return {
        "id": qid,
        "questionText": f"Питання {qid}",
        "type": "numeric_input",
        "points": points,
        "correctAnswers": [correct],
    }


def text_input(qid: str, points: float = 2, correct: str = "Київ") -> Dict[str, Any]:
    return {
        "id": qid,
        "questionText": f"Питання {qid}",
        "type": "text_input",
        "points": points,
        "correctAnswers": [correct],
    }


def matching(qid: str, points: float = 10, pairs: int = 4) -> Dict[str, Any]:
    """Вопрос на соответствие: prompt pN правильно сопоставлен с oN."""
    return {
        "id": qid,
        "questionText": f"Питання {qid}",
        "type": "matching",
        "points": points,
        "matchPrompts": [{"id": f"p{i}", "text": f"Пункт {i}"} for i in range(1, pairs + 1)],
        "options": [{"id": f"o{i}", "text": f"Відповідь {i}"} for i in range(1, pairs + 1)],
        "correctAnswers": [
            {"promptId": f"p{i}", "optionId": f"o{i}"} for i in range(1, pairs + 1)
        ],
    }


def session_questions(
    test_id: str, questions: List[Dict[str, Any]], subject_id: Optional[str] = None
) -> List[SessionQuestion]:
    return [
        SessionQuestion(Question.model_validate(q), test_id=test_id, subject_id=subject_id)
        for q in questions
    ]


def answer(value: Any, test_id: str = "t1") -> Dict[str, Any]:
    return {"value": value, "testId": test_id, "subjectId": None}


# ----------------------------- База данных ----------------------------------


async def create_test_subject(session: AsyncSession, name: str = "Математика") -> Subject:
    """Создать тестовый предмет"""
    return await create_item(session, Subject, name=name)


async def create_test_test(
    session: AsyncSession,
    questions: List[Dict[str, Any]],
    title: str = "Алгебра",
    subject_id: Optional[str] = None,
) -> Test:
    """Создать тест с вопросами"""
    return await create_item(
        session, Test, title=title, subject_id=subject_id, questions=questions
    )


async def create_exam_session(
    session: AsyncSession,
    test_ids: List[str],
    duration_minutes: int = 10,
    status: SessionStatus = SessionStatus.DRAFT,
    allowed_students: Optional[List[str]] = None,
    **fields,
) -> ExamSession:
    """Создать экзаменационную сессию"""
    return await create_item(
        session,
        ExamSession,
        title="Пробне НМТ",
        test_ids=test_ids,
        duration_minutes=duration_minutes,
        status=status,
        allowed_students=allowed_students or [ALL_STUDENTS],
        **fields,
    )


async def create_attempt(
    session: AsyncSession, session_id: str, student_id: str = "student-1", **fields
) -> Attempt:
    return await create_item(
        session, Attempt, session_id=session_id, student_id=student_id, **fields
    )


# ----------------------------- Авторизация ----------------------------------


def auth_headers(role: str, subject: str) -> Dict[str, str]:
    """Заголовок Authorization с токеном для роли и пользователя."""
    token = create_access_token({"sub": subject, "role": role})
    return {"Authorization": f"Bearer {token}"}
