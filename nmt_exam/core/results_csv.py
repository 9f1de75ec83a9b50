# -*- coding: utf-8 -*-
"""
CSV-выгрузка результатов сессии: строка на пару (студент, вопрос).

pointsReceived остаётся пустым: побалльная разбивка по вопросу не
хранится, хранится только сумма по тесту.
"""

from __future__ import annotations

import csv
from io import StringIO
from typing import Any, Iterable, List, Mapping

from nmt_exam.core.scoring import answer_value
from nmt_exam.domain.enums import QuestionType
from nmt_exam.domain.questions import SessionQuestion

CSV_HEADERS = [
    "studentId",
    "subject",
    "testTitle",
    "questionId",
    "questionText",
    "questionType",
    "studentAnswer",
    "correctAnswer",
    "pointsReceived",
    "maxPoints",
]


def render_correct_answer(item: SessionQuestion) -> str:
    question = item.question
    if question.type == QuestionType.MATCHING:
        return "; ".join(f"{m.prompt_id}->{m.option_id}" for m in question.correct_matches)
    return ", ".join(question.correct_strings)


def render_student_answer(item: SessionQuestion, value: Any) -> str:
    if value is None:
        return "N/A"
    if item.question.type == QuestionType.MATCHING:
        if not isinstance(value, Mapping):
            return "Invalid format"
        return "; ".join(f"{prompt}->{option}" for prompt, option in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _format_points(points: float) -> str:
    return str(int(points)) if float(points).is_integer() else str(points)


def generate_results_csv(
    attempts: Iterable[Any],
    questions: List[SessionQuestion],
    subject_names: Mapping[str, str],
) -> str:
    """
    Строит CSV по попыткам сессии.

    Args:
        attempts: Объекты с student_id и answers (questionId -> ответ)
        questions: Все вопросы сессии по порядку
        subject_names: subject_id -> название предмета

    Returns:
        CSV-текст, все поля в кавычках
    """
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    for attempt in attempts:
        answers = getattr(attempt, "answers", None) or {}
        for item in questions:
            value = answer_value(answers.get(item.id))
            writer.writerow(
                [
                    attempt.student_id,
                    subject_names.get(item.subject_id or "", "N/A"),
                    item.test_title or "N/A",
                    item.id,
                    item.question.question_text.replace("\n", " "),
                    item.question.type.value,
                    render_student_answer(item, value),
                    render_correct_answer(item),
                    "",
                    _format_points(item.question.points),
                ]
            )

    content = output.getvalue()
    output.close()
    return content
