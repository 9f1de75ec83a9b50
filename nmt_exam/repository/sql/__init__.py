# -*- coding: utf-8 -*-
"""Адаптеры хранилища на async SQLAlchemy."""

from nmt_exam.repository.sql.attempts import SqlAttemptStore
from nmt_exam.repository.sql.sessions import SqlSessionStore
from nmt_exam.repository.sql.tests import SqlTestStore

__all__ = ["SqlAttemptStore", "SqlSessionStore", "SqlTestStore"]
