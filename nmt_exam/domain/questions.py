# -*- coding: utf-8 -*-
"""
nmt_exam/domain/questions.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Типы значений вопросов и ответов.

Вопросы хранятся внутри теста JSON-списком в camelCase-формате
(тот же формат используется для импорта/экспорта), поэтому модели
принимают и отдают алиасы camelCase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from nmt_exam.domain.enums import QuestionType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class QuestionOption(CamelModel):
    id: str
    text: str = ""


class MatchPrompt(CamelModel):
    id: str
    text: str = ""


class CorrectMatch(CamelModel):
    """Правильная пара для вопроса на соответствие."""

    prompt_id: str
    option_id: str


class Question(CamelModel):
    id: str
    question_text: str
    type: QuestionType
    points: float = Field(ge=0)
    image_url: Optional[str] = None
    options: Optional[List[QuestionOption]] = None
    match_prompts: Optional[List[MatchPrompt]] = None
    # single/multiple/numeric/text: список строк; matching: список пар
    correct_answers: List[Union[CorrectMatch, str]] = Field(default_factory=list)

    @field_serializer("points")
    def serialize_points(self, value: float) -> int | float:
        return int(value) if float(value).is_integer() else value

    @property
    def correct_strings(self) -> List[str]:
        return [str(a) for a in self.correct_answers if not isinstance(a, CorrectMatch)]

    @property
    def correct_matches(self) -> List[CorrectMatch]:
        return [a for a in self.correct_answers if isinstance(a, CorrectMatch)]

    def to_storage(self) -> Dict[str, Any]:
        """Представление для JSON-колонки теста и экспорта."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AttemptAnswer(CamelModel):
    """
    Ответ студента на один вопрос.

    Форма value зависит от типа вопроса: строка, список id вариантов
    или словарь promptId -> optionId.
    """

    value: Union[str, List[str], Dict[str, str], None] = None
    test_id: str
    subject_id: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def numbers_as_text(cls, v: Any) -> Any:
        # numeric_input сравнивается как текст
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


@dataclass(frozen=True)
class SessionQuestion:
    """Вопрос сессии вместе с контекстом теста, в порядке session.test_ids."""

    question: Question
    test_id: str
    subject_id: Optional[str] = None
    test_title: Optional[str] = None

    @property
    def id(self) -> str:
        return self.question.id
