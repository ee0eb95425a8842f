from __future__ import annotations

"""Score formulas mapping a module's metrics onto 0-100.

Every formula is a pure function of a PerformanceMetrics value. Rounding is
half-up, so 12.5 becomes 13.
"""

import math
from typing import Tuple

from ..stats.metrics import PerformanceMetrics


DIFFICULTY_BANDS = [
    (80, "Excellent", "None"),
    (60, "Good", "Mild"),
    (40, "Below Average", "Moderate"),
    (20, "Poor", "Severe"),
]
LOWEST_BAND = ("Very Poor", "Profound")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, lo: int, hi: int = 100) -> int:
    return max(lo, min(hi, value))


def score_word_recognition(metrics: PerformanceMetrics) -> int:
    """100 at 500 ms, one point lost per 25 ms beyond; floor 10."""
    score = 100 - (metrics.average_reaction_time - 500) / 25
    return _clamp(round_half_up(score), 10)


def score_visual_processing(metrics: PerformanceMetrics) -> int:
    """100 at 400 ms, one point lost per 21 ms beyond; floor 5."""
    score = 100 - (metrics.average_reaction_time - 400) / 21
    return _clamp(round_half_up(score), 5)


def score_accuracy(metrics: PerformanceMetrics) -> int:
    if metrics.total_trials == 0:
        return 0
    return round_half_up(metrics.correct_answers / metrics.total_trials * 100)


def score_word_sequencing(metrics: PerformanceMetrics) -> int:
    """Accuracy minus a time penalty of (average seconds per word) / 10.

    The average covers every trial of the module, not only correct ones.
    """
    if metrics.total_trials == 0:
        return 0
    base = metrics.correct_answers / metrics.total_trials * 100
    penalty = (metrics.average_reaction_time / 1000) / 10
    return _clamp(round_half_up(base - penalty), 0)


def score_working_memory(metrics: PerformanceMetrics) -> int:
    return min(100, int(metrics.max_span or 0) * 10)


def calculate_difficulty(score: float) -> Tuple[str, str]:
    """Map a score onto (difficulty level, dyslexia classification)."""
    for threshold, level, classification in DIFFICULTY_BANDS:
        if score >= threshold:
            return level, classification
    return LOWEST_BAND
