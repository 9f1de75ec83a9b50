# -*- coding: utf-8 -*-
"""
Проверка импортируемого набора вопросов.

Набор принимается только целиком: первая некорректная запись отклоняет
весь импорт с описанием причины и номером вопроса.
"""

from __future__ import annotations

import json
import re
from numbers import Real
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from nmt_exam.domain.enums import CHOICE_TYPES, QuestionType
from nmt_exam.domain.questions import Question
from nmt_exam.utils.exceptions import QuestionImportError

_KNOWN_TYPES = {t.value for t in QuestionType}


def _check_structure(item: Any, index: int) -> None:
    if not isinstance(item, dict):
        raise QuestionImportError("очікується об'єкт", index)

    for key in ("id", "questionText", "type"):
        if not isinstance(item.get(key), str):
            raise QuestionImportError(f"поле '{key}' має бути рядком", index)

    points = item.get("points")
    if isinstance(points, bool) or not isinstance(points, Real):
        raise QuestionImportError("поле 'points' має бути числом", index)
    if points < 0:
        raise QuestionImportError("бали мають бути невід'ємним числом", index)

    if not isinstance(item.get("correctAnswers"), list):
        raise QuestionImportError("поле 'correctAnswers' має бути масивом", index)

    q_type = item["type"]
    if q_type not in _KNOWN_TYPES:
        raise QuestionImportError(f"непідтримуваний тип '{q_type}'", index)

    if q_type == QuestionType.MATCHING.value:
        if not isinstance(item.get("matchPrompts"), list) or not isinstance(
            item.get("options"), list
        ):
            raise QuestionImportError(
                "питання на відповідність потребує 'matchPrompts' та 'options'", index
            )
        for answer in item["correctAnswers"]:
            if not (
                isinstance(answer, dict)
                and answer.get("promptId")
                and answer.get("optionId")
            ):
                raise QuestionImportError(
                    "кожна правильна пара має містити 'promptId' та 'optionId'", index
                )
        return

    if q_type in {t.value for t in CHOICE_TYPES} and not isinstance(
        item.get("options"), list
    ):
        raise QuestionImportError("питання з вибором потребує масив 'options'", index)

    if not all(isinstance(answer, str) for answer in item["correctAnswers"]):
        raise QuestionImportError("правильні відповіді мають бути рядками", index)


def validate_question_batch(payload: Any) -> List[Question]:
    """
    Проверяет и разбирает импортируемый набор вопросов.

    Args:
        payload: JSON-строка/байты или уже разобранный список

    Returns:
        Список вопросов в исходном порядке

    Raises:
        QuestionImportError: если набор не массив, id повторяются или хоть
            одна запись некорректна
    """
    if isinstance(payload, (bytes, str)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise QuestionImportError(f"некоректний JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise QuestionImportError("JSON має бути масивом.")

    questions: List[Question] = []
    seen_ids: set[str] = set()
    for index, item in enumerate(payload):
        _check_structure(item, index)
        if item["id"] in seen_ids:
            raise QuestionImportError(f"повторюваний id '{item['id']}'", index)
        seen_ids.add(item["id"])
        try:
            questions.append(Question.model_validate(item))
        except PydanticValidationError as exc:
            raise QuestionImportError(str(exc.errors()[0].get("msg")), index) from exc

    return questions


def export_filename(title: str | None, test_id: str) -> str:
    """Имя файла экспорта: test_<безопасное_название>_<id>.json."""
    safe_title = re.sub(r"[^a-z0-9]", "_", (title or "test"), flags=re.IGNORECASE)
    return f"test_{safe_title.lower()}_{test_id}.json"
