from __future__ import annotations

"""Base runner abstractions: phases, trials and resolutions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..bank.models import ModuleConfig
from ..errors import InputError
from ..stats.metrics import MetricsAccumulator


class Phase(str, Enum):
    READY = "ready"  # between trials
    EXPOSING = "exposing"
    AWAITING_INPUT = "awaiting_input"
    FEEDBACK = "feedback"
    FINISHED = "finished"


@dataclass
class Trial:
    """The live trial; discarded once folded into the accumulator."""

    index: int
    started_at_ms: Optional[float] = None
    response: Any = None
    correct: Optional[bool] = None
    reaction_time_ms: Optional[float] = None


@dataclass(frozen=True)
class Resolution:
    trial_index: int
    correct: bool
    is_last_trial: bool
    reaction_time_ms: float


class BaseRunner:
    """Abstract base for module runners.

    A runner holds exactly one phase value. Only the session orchestrator
    moves it between phases, through begin_trial, submit and
    finish_feedback.
    """

    feedback_ms: int = 0
    transition_ms: int = 0

    def __init__(self, config: ModuleConfig, accumulator: MetricsAccumulator) -> None:
        self.config = config
        self.accumulator = accumulator
        self.phase = Phase.READY
        self.trial: Optional[Trial] = None
        self._index = 0
        self._finishing = False

    @property
    def trial_index(self) -> int:
        return self._index

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    def begin_trial(self, now_ms: float) -> Trial:
        raise NotImplementedError

    def submit(self, value: Any, now_ms: float) -> Optional[Resolution]:
        raise NotImplementedError

    def resolve(self, trial_index: int, response: Any, reaction_time_ms: float) -> Resolution:
        raise NotImplementedError

    def clear_input(self) -> None:
        """Drop pending input of the live trial, if any."""

    def _require(self, phase: Phase, what: str) -> None:
        if self.phase is not phase:
            raise InputError(f"{what} not accepted while {self.phase.value}")

    def _check_trial_index(self, trial_index: int) -> None:
        if self.trial is None or trial_index != self.trial.index:
            raise InputError(f"trial {trial_index} is not the live trial")

    def _fold(self, response: Any, correct: bool, reaction_time_ms: float, is_last: bool) -> Resolution:
        """Record the trial in the accumulator, then enter FEEDBACK."""
        assert self.trial is not None
        rt = max(0.0, float(reaction_time_ms))
        self.trial.response = response
        self.trial.correct = correct
        self.trial.reaction_time_ms = rt
        self.accumulator.record(correct, rt)
        self._finishing = is_last
        self.phase = Phase.FEEDBACK
        return Resolution(trial_index=self.trial.index, correct=correct, is_last_trial=is_last, reaction_time_ms=rt)

    def finish_feedback(self) -> bool:
        """Leave FEEDBACK. Returns True when the module is finished."""
        self._require(Phase.FEEDBACK, "feedback completion")
        self.trial = None
        if self._finishing:
            self.phase = Phase.FINISHED
            return True
        self._index += 1
        self._prepare_next()
        self.phase = Phase.READY
        return False

    def _prepare_next(self) -> None:
        pass
