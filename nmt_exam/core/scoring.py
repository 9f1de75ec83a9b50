# -*- coding: utf-8 -*-
"""
Автоматическая оценка попытки.

Чистая функция от (упорядоченные вопросы сессии, ответы студента) к
словарю test_id -> целый балл. Правила по типам:

* single_choice / numeric_input / text_input: полный балл, если правильный
  ответ ровно один и совпадает с ответом студента без учёта регистра и
  пробелов по краям (числа сравниваются как текст);
* multiple_choice: полный балл только при совпадении множеств;
* matching: линейный частичный балл за каждую угаданную пару.

Сумма по тесту округляется один раз (половина вверх). Баллы считаются
один раз при завершении попытки и не пересчитываются, если вопросы
теста потом отредактировали.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Mapping

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.enums import QuestionType, SINGLE_VALUE_TYPES
from nmt_exam.domain.questions import AttemptAnswer, Question, SessionQuestion

logger = configure_logger(__name__)


def round_half_up(value: float) -> int:
    """Округление 2.5 -> 3, а не банковское round()."""
    return int(math.floor(value + 0.5))


def answer_value(answer: Any) -> Any:
    """Достаёт value из AttemptAnswer или сырого словаря хранилища."""
    if answer is None:
        return None
    if isinstance(answer, AttemptAnswer):
        return answer.value
    if isinstance(answer, Mapping):
        return answer.get("value")
    return answer


def is_empty_answer(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _normalize(value: Any) -> str:
    return str(value).lower().strip()


def _score_single_value(question: Question, value: Any) -> float:
    correct = question.correct_strings
    if len(correct) == 1 and _normalize(value) == _normalize(correct[0]):
        return question.points
    return 0.0


def _score_multiple_choice(question: Question, value: Any) -> float:
    selected = sorted(str(v) for v in value) if isinstance(value, (list, tuple)) else []
    correct = sorted(question.correct_strings)
    if len(selected) == len(correct) and all(
        s == c for s, c in zip(selected, correct)
    ):
        return question.points
    return 0.0


def _score_matching(question: Question, value: Any) -> float:
    matches = question.correct_matches
    if not isinstance(value, Mapping) or not matches:
        return 0.0
    correct_count = sum(1 for m in matches if value.get(m.prompt_id) == m.option_id)
    return correct_count * (question.points / len(matches))


def score_question(question: Question, value: Any) -> float:
    """Балл за один вопрос (для matching может быть дробным)."""
    if is_empty_answer(value):
        return 0.0
    if question.type in SINGLE_VALUE_TYPES:
        return _score_single_value(question, value)
    if question.type == QuestionType.MULTIPLE_CHOICE:
        return _score_multiple_choice(question, value)
    if question.type == QuestionType.MATCHING:
        return _score_matching(question, value)
    return 0.0


def score_attempt(
    questions: Iterable[SessionQuestion], answers: Mapping[str, Any]
) -> Dict[str, int]:
    """
    Баллы попытки по тестам.

    Args:
        questions: Вопросы сессии с test_id, в порядке тестов сессии
        answers: questionId -> AttemptAnswer (или словарь с ключом "value")

    Returns:
        test_id -> целый балл. Тест попадает в результат, только если на
        какой-то его вопрос дан непустой ответ.
    """
    raw: Dict[str, float] = {}

    for item in questions:
        value = answer_value(answers.get(item.id))
        if is_empty_answer(value):
            continue

        raw.setdefault(item.test_id, 0.0)
        points = score_question(item.question, value)
        raw[item.test_id] += points
        logger.debug(
            f"Question {item.id} ({item.question.type.value}): "
            f"{'✅' if points else '❌'} {points}/{item.question.points}"
        )

    return {test_id: round_half_up(total) for test_id, total in raw.items()}
