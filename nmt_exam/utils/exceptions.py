# -*- coding: utf-8 -*-
"""
Этот модуль определяет пользовательские исключения для NMT Exam API.
Эти исключения используются для обработки общих сценариев ошибок с соответствующими HTTP статус-кодами и сообщениями.
"""

from enum import Enum

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Перечисление для уникальных кодов ошибок."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DATA_INTEGRITY = "DATA_INTEGRITY"
    ATTEMPT_FINISHED = "ATTEMPT_FINISHED"
    IMPORT_ERROR = "IMPORT_ERROR"


class APIException(HTTPException):
    """Базовый класс для пользовательских исключений API."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        headers: dict | None = None,
    ):
        """
        Инициализирует APIException с кодом статуса, деталями и кодом ошибки.

        Args:
            status_code (int): HTTP код статуса.
            detail (str): Сообщение об ошибке.
            error_code (str): Уникальный код ошибки.
            headers (dict, optional): Дополнительные заголовки.
        """
        super().__init__(status_code=status_code, headers=headers)
        self.detail = detail
        self.error_code = error_code

    def __str__(self) -> str:
        return self.detail


class NotFoundError(APIException):
    """Вызывается, когда ресурс не найден."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | int | None = None,
        details: str | None = None,
    ):
        """
        Инициализирует NotFoundError.

        Args:
            resource_type (str): Тип ресурса (например, "Session", "Test").
            resource_id (str or int, optional): ID ресурса.
            details (str, optional): Дополнительные детали об ошибке.
        """
        detail = f"{resource_type} не знайдено"
        if resource_id:
            detail = f"{resource_type} з ID {resource_id} не знайдено"
        if details:
            detail = f"{detail}: {details}"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=ErrorCode.NOT_FOUND,
        )


class ConflictError(APIException):
    """Вызывается, когда ресурс уже существует или возникает конфликт."""

    def __init__(self, detail: str, error_code: str = ErrorCode.CONFLICT):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code,
        )


class PermissionDeniedError(APIException):
    """Вызывается, когда у пользователя недостаточно прав."""

    def __init__(self, detail: str = "Недостатньо прав"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=ErrorCode.PERMISSION_DENIED,
        )


class ValidationError(APIException):
    """Вызывается, когда входные данные недействительны."""

    def __init__(self, detail: str, error_code: str = ErrorCode.VALIDATION_ERROR):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=error_code,
        )


# ---------------------------------------------------------------------------
# Доменные ошибки сессий и попыток
# ---------------------------------------------------------------------------


class SessionTransitionError(ConflictError):
    """Недопустимый переход статуса сессии (например, пауза черновика)."""

    def __init__(self, action: str, current: str):
        self.action = action
        self.current = current
        super().__init__(
            detail=f"Неможливо виконати '{action}' для сесії у стані '{current}'",
            error_code=ErrorCode.INVALID_TRANSITION,
        )


class SessionIntegrityError(ConflictError):
    """Поля времени сессии противоречат друг другу (нет endTime/pausedAt)."""

    def __init__(self, session_id, details: str):
        self.session_id = session_id
        super().__init__(
            detail=f"Порушено цілісність даних сесії {session_id}: {details}",
            error_code=ErrorCode.DATA_INTEGRITY,
        )


class AttemptFinishedError(ConflictError):
    """Попытка уже завершена, ответы заморожены."""

    def __init__(self, attempt_id):
        self.attempt_id = attempt_id
        super().__init__(
            detail=f"Спробу {attempt_id} вже завершено",
            error_code=ErrorCode.ATTEMPT_FINISHED,
        )


class QuestionImportError(ValidationError):
    """Импорт вопросов отклонён целиком из-за некорректной записи."""

    def __init__(self, detail: str, index: int | None = None):
        self.index = index
        if index is not None:
            detail = f"Питання #{index + 1}: {detail}"
        super().__init__(detail=detail, error_code=ErrorCode.IMPORT_ERROR)
