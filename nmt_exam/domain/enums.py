# -*- coding: utf-8 -*-
"""
nmt_exam/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена NMT Exam.

Этот модуль содержит все определения перечислений, используемые в приложении, такие как
роли, типы вопросов, статусы сессий и попыток.
"""

import enum

# Значение allowed_students, открывающее сессию всем студентам
ALL_STUDENTS = "all"


class Role(str, enum.Enum):
    """Роли, доступные в системе."""

    ADMIN = "admin"
    STUDENT = "student"


class QuestionType(str, enum.Enum):
    """Поддерживаемые типы вопросов."""

    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    NUMERIC_INPUT = "numeric_input"
    TEXT_INPUT = "text_input"
    MATCHING = "matching"


# Типы, у которых правильный ответ: одна строка
SINGLE_VALUE_TYPES = frozenset(
    {QuestionType.SINGLE_CHOICE, QuestionType.NUMERIC_INPUT, QuestionType.TEXT_INPUT}
)
CHOICE_TYPES = frozenset({QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE})


class SessionStatus(str, enum.Enum):
    """Состояния жизненного цикла экзаменационной сессии."""

    DRAFT = "draft"
    ACTIVE = "active"
    FINISHED = "finished"  # Терминальное состояние


class AttemptStatus(str, enum.Enum):
    """Статусы попытки студента."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"  # Терминальное состояние, ответы заморожены


class FinishReason(str, enum.Enum):
    """Что инициировало завершение попытки."""

    STUDENT = "student"  # Студент подтвердил завершение
    EXPIRED = "expired"  # Время сессии истекло
    SESSION_FINISHED = "session_finished"  # Администратор завершил сессию
