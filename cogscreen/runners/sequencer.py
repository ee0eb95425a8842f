from __future__ import annotations

"""Trial sequencer for modules with a fixed question list."""

from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..bank.models import SINGLE_CHOICE_KINDS, ModuleConfig, Question, QuestionKind
from ..errors import InputError
from ..stats.metrics import MetricsAccumulator
from .base_runner import BaseRunner, Phase, Resolution, Trial


def _exact_match(response: Any, question: Question) -> bool:
    return response == question.correct_answer


def _ordered_match(response: Any, question: Question) -> bool:
    return tuple(response) == tuple(question.correct_answer)


# One correctness rule per question kind.
CORRECTNESS_RULES: Dict[QuestionKind, Callable[[Any, Question], bool]] = {
    QuestionKind.SELECTION: _exact_match,
    QuestionKind.AUDIO_MATCH: _exact_match,
    QuestionKind.VISUAL_SEARCH: _exact_match,
    QuestionKind.SEQUENCE: _ordered_match,
}


class TrialSequencer(BaseRunner):
    """Drives a fixed-question module through its list, one trial at a time."""

    def __init__(self, config: ModuleConfig, accumulator: MetricsAccumulator, *, settle_ms: int = 500) -> None:
        super().__init__(config, accumulator)
        self.feedback_ms = int(settle_ms)
        self.transition_ms = 0
        self._picks: List[str] = []

    @property
    def question(self) -> Question:
        return self.config.questions[self._index]

    @property
    def total_trials(self) -> int:
        return len(self.config.questions)

    @property
    def picks(self) -> Tuple[str, ...]:
        return tuple(self._picks)

    def begin_trial(self, now_ms: float) -> Trial:
        self._require(Phase.READY, "trial start")
        self._picks = []
        self.trial = Trial(index=self._index, started_at_ms=float(now_ms))
        self.phase = Phase.AWAITING_INPUT
        return self.trial

    def submit(self, value: Any, now_ms: float) -> Optional[Resolution]:
        """Tap one option. Sequence questions resolve on the final pick."""
        self._require(Phase.AWAITING_INPUT, "input")
        if self.question.kind is QuestionKind.SEQUENCE:
            return self.pick(str(value), now_ms)
        return self.resolve(self._index, value, self._elapsed(now_ms))

    def resolve(self, trial_index: int, response: Any, reaction_time_ms: float) -> Resolution:
        self._require(Phase.AWAITING_INPUT, "resolution")
        self._check_trial_index(trial_index)
        question = self.question
        if question.kind is QuestionKind.SEQUENCE:
            if isinstance(response, str) or len(response) != question.target_length:
                raise InputError(f"expected {question.target_length} picks")
            response = tuple(response)
        elif question.kind in SINGLE_CHOICE_KINDS and response not in (question.options or ()):
            raise InputError(f"'{response}' is not one of the options")
        correct = CORRECTNESS_RULES[question.kind](response, question)
        is_last = trial_index >= self.total_trials - 1
        return self._fold(response, correct, reaction_time_ms, is_last)

    # --- sequence picks ---

    def is_available(self, value: str) -> bool:
        """A value stays available until picked as often as the answer uses it."""
        needed = Counter(self.question.correct_answer)[value]
        return self._picks.count(value) < needed

    def option_states(self) -> List[Tuple[str, bool]]:
        opts: Sequence[str] = self.question.options or ()
        return [(opt, self.is_available(opt)) for opt in opts]

    def pick(self, value: str, now_ms: float) -> Optional[Resolution]:
        self._require(Phase.AWAITING_INPUT, "pick")
        if self.question.kind is not QuestionKind.SEQUENCE:
            raise InputError("picks only apply to sequence questions")
        if not self.is_available(value):
            raise InputError(f"'{value}' is not available")
        self._picks.append(value)
        if len(self._picks) < self.question.target_length:
            return None
        return self.resolve(self._index, tuple(self._picks), self._elapsed(now_ms))

    def clear_input(self) -> None:
        if self.phase is Phase.AWAITING_INPUT:
            self._picks = []

    def _elapsed(self, now_ms: float) -> float:
        assert self.trial is not None and self.trial.started_at_ms is not None
        return float(now_ms) - self.trial.started_at_ms

    def _prepare_next(self) -> None:
        self._picks = []
