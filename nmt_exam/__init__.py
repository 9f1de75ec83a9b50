# -*- coding: utf-8 -*-
"""NMT Exam: экзаменационные сессии НМТ с таймером и автоматической оценкой."""

__version__ = "0.1.0"
