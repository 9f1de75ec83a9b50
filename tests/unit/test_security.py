# -*- coding: utf-8 -*-
"""
Unit тесты для JWT помощников
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from nmt_exam.config.settings import settings
from nmt_exam.security.security import create_access_token, verify_token


class TestTokens:
    def test_roundtrip_payload(self):
        token = create_access_token({"sub": 42, "role": "student"})

        payload = verify_token(token)

        assert payload["sub"] == "42"
        assert payload["role"] == "student"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "s1", "role": "student"}, timedelta(minutes=-1))

        with pytest.raises(HTTPException) as exc:
            verify_token(token)
        assert exc.value.status_code == 401

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "s1", "token_type": "access"}, "other", algorithm="HS256")

        with pytest.raises(HTTPException):
            verify_token(token)

    def test_wrong_token_type_rejected(self):
        token = jwt.encode(
            {"sub": "s1", "token_type": "refresh"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(HTTPException) as exc:
            verify_token(token)
        assert exc.value.status_code == 401
