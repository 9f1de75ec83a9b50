# -*- coding: utf-8 -*-
from datetime import datetime
from typing import Optional

from pydantic import Field

from nmt_exam.domain.questions import CamelModel


class SubjectCreateSchema(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class SubjectUpdateSchema(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class SubjectReadSchema(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
