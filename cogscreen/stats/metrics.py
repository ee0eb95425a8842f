from __future__ import annotations

"""Per-module trial metrics: an append-only accumulator and its snapshot."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class PerformanceMetrics:
    """Summary of one module's trials, produced once at module end."""

    total_trials: int
    correct_answers: int
    average_reaction_time: float  # ms
    max_span: int = 0


class MetricsAccumulator:
    """Collects per-trial correctness and reaction time for one module."""

    def __init__(self) -> None:
        self._reaction_times: List[float] = []
        self._correct = 0
        self._max_span = 0

    @property
    def total(self) -> int:
        return len(self._reaction_times)

    @property
    def correct(self) -> int:
        return self._correct

    def record(self, correct: bool, reaction_time_ms: float) -> None:
        """Fold one resolved trial in."""
        self._reaction_times.append(max(0.0, float(reaction_time_ms)))
        if correct:
            self._correct += 1

    def record_span(self, best_span: int) -> None:
        self._max_span = max(self._max_span, int(best_span))

    def snapshot(self) -> PerformanceMetrics:
        count = len(self._reaction_times)
        avg = sum(self._reaction_times) / count if count else 0.0
        return PerformanceMetrics(
            total_trials=count,
            correct_answers=self._correct,
            average_reaction_time=avg,
            max_span=self._max_span,
        )
