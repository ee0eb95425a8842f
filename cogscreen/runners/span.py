from __future__ import annotations

"""Adaptive staircase for the working-memory span module.

Each trial flashes a digit sequence, then asks for it back in order. The
span grows by one after every success and the module ends at the ceiling
or after consecutive failures at the same span.
"""

import random
from typing import Any, List, Optional

from ..bank.models import ModuleConfig
from ..errors import InputError
from ..stats.metrics import MetricsAccumulator
from ..util.randomness import DIGITS, digit_sequence
from .base_runner import BaseRunner, Phase, Resolution, Trial


class AdaptiveSpanController(BaseRunner):
    def __init__(
        self,
        config: ModuleConfig,
        accumulator: MetricsAccumulator,
        rng: random.Random,
        *,
        start_span: int = 2,
        ceiling: int = 9,
        max_failures: int = 2,
        exposure_ms: int = 2000,
        feedback_ms: int = 1000,
        transition_ms: int = 100,
    ) -> None:
        super().__init__(config, accumulator)
        self.rng = rng
        self.span = int(start_span)
        self.ceiling = int(ceiling)
        self.max_failures = int(max_failures)
        self.exposure_ms = int(exposure_ms)
        self.feedback_ms = int(feedback_ms)
        self.transition_ms = int(transition_ms)
        self.best_span = 0
        self.failures = 0
        self.sequence: List[str] = []
        self._last_correct = False

    def begin_trial(self, now_ms: float) -> Trial:
        self._require(Phase.READY, "trial start")
        self.sequence = digit_sequence(self.span, self.rng)
        self.trial = Trial(index=self._index)
        self.phase = Phase.EXPOSING
        return self.trial

    def end_exposure(self, now_ms: float) -> None:
        """Hide the digits; the reaction-time clock starts now."""
        self._require(Phase.EXPOSING, "exposure end")
        assert self.trial is not None
        self.trial.started_at_ms = float(now_ms)
        self.phase = Phase.AWAITING_INPUT

    def submit(self, value: Any, now_ms: float) -> Optional[Resolution]:
        self._require(Phase.AWAITING_INPUT, "input")
        assert self.trial is not None and self.trial.started_at_ms is not None
        return self.resolve(self._index, value, float(now_ms) - self.trial.started_at_ms)

    def resolve(self, trial_index: int, response: Any, reaction_time_ms: float) -> Resolution:
        self._require(Phase.AWAITING_INPUT, "resolution")
        self._check_trial_index(trial_index)
        digits = self._normalize(response)
        correct = digits == self.sequence
        if correct:
            self.best_span = max(self.best_span, self.span)
            self.failures = 0
            is_last = self.span >= self.ceiling
        else:
            self.failures += 1
            is_last = self.failures >= self.max_failures
        self._last_correct = correct
        if is_last:
            self.accumulator.record_span(self.best_span)
        return self._fold(digits, correct, reaction_time_ms, is_last)

    def _normalize(self, response: Any) -> List[str]:
        if isinstance(response, str):
            digits = [c for c in response if not c.isspace()]
        else:
            try:
                digits = [str(d) for d in response]
            except TypeError:
                raise InputError("expected a sequence of digits") from None
        if len(digits) != self.span:
            raise InputError(f"expected {self.span} digits, got {len(digits)}")
        if any(d not in DIGITS for d in digits):
            raise InputError("only digits 1-9 are accepted")
        return digits

    def _prepare_next(self) -> None:
        # Failures retry at the same span.
        if self._last_correct:
            self.span += 1
        self.sequence = []
