# -*- coding: utf-8 -*-
"""
Результаты сессии: сводка по попыткам, разбор для студента и CSV.
"""

from __future__ import annotations

from typing import Any, Dict, List

from nmt_exam.config.logger import configure_logger
from nmt_exam.core.nmt_scale import convert_to_nmt_scale, get_max_score_for_test
from nmt_exam.core.results_csv import generate_results_csv, render_correct_answer
from nmt_exam.core.scoring import answer_value, is_empty_answer, score_question
from nmt_exam.domain.questions import SessionQuestion
from nmt_exam.repository.ports import AttemptStore, TestStore
from nmt_exam.service.questions import load_session_questions

logger = configure_logger(__name__)

UNKNOWN_SUBJECT = "Невідомий предмет"
UNKNOWN_TEST = "Невідомий тест"


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


def breakdown_by_test(
    test_ids: List[str],
    score_by_test: Dict[str, int],
    tests_by_id: Dict[str, Any],
    subject_names: Dict[str, str],
) -> List[Dict[str, Any]]:
    """Баллы по каждому тесту сессии вместе со шкалой НМТ."""
    rows = []
    for test_id in test_ids:
        test = tests_by_id.get(test_id)
        if test is None:
            logger.warning(f"⚠️ Тест {test_id} отсутствует, выводим заглушку")
        raw = score_by_test.get(test_id, 0)
        max_score = get_max_score_for_test(test)
        subject_id = getattr(test, "subject_id", None)
        rows.append(
            {
                "testId": test_id,
                "testTitle": getattr(test, "title", None) or UNKNOWN_TEST,
                "subjectName": subject_names.get(subject_id or "", UNKNOWN_SUBJECT),
                "score": raw,
                "maxScore": max_score,
                "nmtScore": convert_to_nmt_scale(raw, max_score),
            }
        )
    return rows


def question_review(
    questions: List[SessionQuestion], answers: Dict[str, Any]
) -> List[Dict[str, Any]]:
    """Разбор по вопросам для студента (если сессия это разрешает)."""
    review = []
    for item in questions:
        value = answer_value(answers.get(item.id))
        points = 0.0 if is_empty_answer(value) else score_question(item.question, value)
        review.append(
            {
                "questionId": item.id,
                "testId": item.test_id,
                "questionText": item.question.question_text,
                "studentAnswer": value,
                "correctAnswer": render_correct_answer(item),
                "pointsAwarded": points,
                "maxPoints": item.question.points,
                "isCorrect": points >= item.question.points and points > 0,
            }
        )
    return review


async def session_results(
    session: Any, tests: TestStore, attempts: AttemptStore
) -> Dict[str, Any]:
    """Сводка по всем попыткам сессии для администратора."""
    test_ids = list(session.test_ids or [])
    loaded = await tests.get_tests(test_ids)
    tests_by_id = {test.id: test for test in loaded}
    subject_names = await tests.get_subject_names(
        test.subject_id for test in loaded if getattr(test, "subject_id", None)
    )

    rows = []
    for attempt in await attempts.list_attempts(session.id):
        score_by_test = attempt.score_by_test or {}
        rows.append(
            {
                "attemptId": attempt.id,
                "studentId": attempt.student_id,
                "status": getattr(attempt.status, "value", attempt.status),
                "startedAt": _iso(attempt.started_at),
                "finishedAt": _iso(attempt.finished_at),
                "finishReason": attempt.finish_reason,
                "totalScore": sum(score_by_test.values()),
                "tests": breakdown_by_test(
                    test_ids, score_by_test, tests_by_id, subject_names
                ),
            }
        )

    return {
        "sessionId": session.id,
        "title": session.title,
        "status": getattr(session.status, "value", session.status),
        "attempts": rows,
    }


async def attempt_results(session: Any, attempt: Any, tests: TestStore) -> Dict[str, Any]:
    """
    Результаты завершённой попытки для самого студента.

    Баллы по тестам видны всегда; разбор по вопросам только если
    сессия разрешает подробные результаты.
    """
    test_ids = list(session.test_ids or [])
    loaded = await tests.get_tests(test_ids)
    subject_names = await tests.get_subject_names(
        test.subject_id for test in loaded if getattr(test, "subject_id", None)
    )
    results = breakdown_by_test(
        test_ids,
        attempt.score_by_test or {},
        {test.id: test for test in loaded},
        subject_names,
    )

    review = None
    if session.show_detailed_results_to_student:
        questions = await load_session_questions(session, tests)
        review = question_review(questions, attempt.answers or {})
    return {"results": results, "review": review}


async def session_results_csv(
    session: Any, tests: TestStore, attempts: AttemptStore
) -> str:
    questions = await load_session_questions(session, tests)
    subject_names = await tests.get_subject_names(
        q.subject_id for q in questions if q.subject_id
    )
    all_attempts = await attempts.list_attempts(session.id)
    logger.info(
        f"📊 CSV сессии {session.id}: {len(all_attempts)} попыток × {len(questions)} вопросов"
    )
    return generate_results_csv(all_attempts, questions, subject_names)
