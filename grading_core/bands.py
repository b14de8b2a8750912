# grading_core/bands.py
from __future__ import annotations
import math
from typing import Sequence, Tuple

from .config import BAND_EMPTY, BAND_FLOOR, BAND_TABLE


def band_for_percentage(
    percentage: float,
    table: Sequence[Tuple[float, float]] = BAND_TABLE,
    floor: float = BAND_FLOOR,
) -> float:
    p = float(percentage)
    for threshold, band in table:
        if p >= threshold: return float(band)
    return float(floor)


def to_band(
    correct: int,
    total: int,
    table: Sequence[Tuple[float, float]] = BAND_TABLE,
    floor: float = BAND_FLOOR,
) -> float:
    if not total:
        return BAND_EMPTY
    return band_for_percentage(float(correct) * 100.0 / float(total), table, floor)


def percentage_of(correct: int, total: int) -> int:
    if not total:
        return 0
    # half-up, not banker's rounding
    return int(math.floor(float(correct) * 100.0 / float(total) + 0.5))
