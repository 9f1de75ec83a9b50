# -*- coding: utf-8 -*-
"""Перевод сырых баллов в шкалу НМТ 100–200."""

from __future__ import annotations

from typing import Any, Iterable

from nmt_exam.core.scoring import round_half_up

NMT_MIN = 100
NMT_MAX = 200


def convert_to_nmt_scale(raw_score: float, max_score: float) -> int:
    """
    Линейно переводит [0, max_score] в [100, 200].

    При max_score <= 0 или отрицательном raw_score возвращает нижнюю
    границу 100; балл выше максимума обрезается до максимума.
    """
    if max_score <= 0 or raw_score < 0:
        return NMT_MIN
    score = min(raw_score, max_score)
    scale = (NMT_MAX - NMT_MIN) / max_score
    return round_half_up(NMT_MIN + score * scale)


def get_max_score_for_test(test: Any) -> float:
    """Сумма points всех вопросов теста; 0 для отсутствующего теста."""
    if test is None:
        return 0
    questions: Iterable[Any] = getattr(test, "questions", None) or []
    total = 0
    for q in questions:
        points = q.get("points", 0) if isinstance(q, dict) else getattr(q, "points", 0)
        total += points or 0
    return total
