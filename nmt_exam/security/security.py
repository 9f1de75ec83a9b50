# -*- coding: utf-8 -*-
"""nmt_exam.security
~~~~~~~~~~~~~~~~~~
JWT помощники и проверки доступа на основе ролей.

Ключевые моменты
================
* Использует *python‑jose* для компактной обработки JWS.
* Экспортирует **create_access_token**, **verify_token** и **require_roles**
  (фабрика зависимостей FastAPI).
* Вход и управление пользователями вне этого сервиса: токены выпускает
  внешний провайдер или ``scripts/issue_token.py``. В payload ожидаются
  ``sub`` (ID студента/администратора) и ``role``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from nmt_exam.config.logger import configure_logger
from nmt_exam.config.settings import settings
from nmt_exam.domain.enums import Role

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# JWT помощники
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "token_type": "access"})
    if "sub" in to_encode and not isinstance(to_encode["sub"], str):
        to_encode["sub"] = str(to_encode["sub"])
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.error(f"Ошибка проверки JWT: {str(exc)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недійсний або прострочений токен",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    if payload.get("token_type") != "access" or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недійсний токен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ---------------------------------------------------------------------------
# Проверка на основе ролей
# ---------------------------------------------------------------------------


def _extract_token(request: Request) -> str:
    auth: str | None = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Відсутній bearer токен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.split(" ", 1)[1]


def require_roles(*allowed_roles: Role) -> Callable[[Request], dict]:
    allowed: set[Role] = set(allowed_roles)

    async def checker(request: Request) -> dict:
        payload = verify_token(_extract_token(request))
        try:
            role = Role(payload["role"])
        except (KeyError, ValueError) as exc:
            logger.error(f"Неверная роль в payload: {payload}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Недійсний payload токена",
            ) from exc

        if role not in allowed:
            logger.warning(
                f"Доступ запрещен: Пользователь {payload.get('sub')} с ролью {role.value} пытался получить доступ к {request.url.path}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Недостатньо прав"
            )

        return payload

    return checker


# Удобные предустановки --------------------------------------------------------

admin_only = require_roles(Role.ADMIN)

student_only = require_roles(Role.STUDENT)

authenticated = require_roles(Role.ADMIN, Role.STUDENT)


async def get_current_user(request: Request) -> dict:
    """
    Получить текущего пользователя из токена.

    Returns:
        Словарь с данными пользователя из токена (sub, role)

    Raises:
        HTTPException: Если токен недействителен или отсутствует
    """
    return verify_token(_extract_token(request))
