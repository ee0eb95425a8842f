from __future__ import annotations

"""Immutable question and module-config models."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Tuple, Union

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..stats.metrics import PerformanceMetrics


class AssessmentType(str, Enum):
    """The screening modules, in battery order."""

    WORD_RECOGNITION = "WordRecognition"
    LETTER_ACCURACY = "LetterAccuracy"
    PHONEME_MATCHING = "PhonemeMatching"
    WORD_SEQUENCING = "WordSequencing"
    READING_COMPREHENSION = "ReadingComprehension"
    WORKING_MEMORY = "WorkingMemory"
    VISUAL_PROCESSING = "VisualProcessing"
    SPELLING_RECOGNITION = "SpellingRecognition"


class QuestionKind(str, Enum):
    SELECTION = "selection"
    SEQUENCE = "sequence"
    MEMORY = "memory"
    VISUAL_SEARCH = "visual_search"
    AUDIO_MATCH = "audio_match"


# Kinds answered by tapping exactly one of the options.
SINGLE_CHOICE_KINDS = frozenset({QuestionKind.SELECTION, QuestionKind.VISUAL_SEARCH, QuestionKind.AUDIO_MATCH})

Answer = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Question:
    id: str
    stimulus: str
    kind: QuestionKind
    correct_answer: Answer
    options: Optional[Tuple[str, ...]] = None
    audio_text: Optional[str] = None
    prompt: Optional[str] = None

    @property
    def spoken_text(self) -> str:
        return self.audio_text or self.stimulus

    @property
    def target_length(self) -> int:
        """Number of picks a sequence answer needs (1 for single-choice kinds)."""
        if isinstance(self.correct_answer, tuple):
            return len(self.correct_answer)
        return 1

    def validate(self) -> None:
        """Raise ConfigurationError if the question cannot be administered."""
        if self.kind in SINGLE_CHOICE_KINDS:
            if not self.options:
                raise ConfigurationError(f"question {self.id}: {self.kind.value} question has no options")
            if not isinstance(self.correct_answer, str):
                raise ConfigurationError(f"question {self.id}: expected a single correct answer")
            if self.correct_answer not in self.options:
                raise ConfigurationError(f"question {self.id}: correct answer is not among the options")
        elif self.kind is QuestionKind.SEQUENCE:
            if not isinstance(self.correct_answer, tuple) or not self.correct_answer:
                raise ConfigurationError(f"question {self.id}: sequence answer must be a non-empty tuple")
            if Counter(self.options or ()) != Counter(self.correct_answer):
                raise ConfigurationError(f"question {self.id}: options and answer letters differ")
        else:
            raise ConfigurationError(f"question {self.id}: kind {self.kind.value} has no fixed-list rule")


@dataclass(frozen=True)
class ModuleConfig:
    type: AssessmentType
    title: str
    description: str
    instructions: str
    calculate_score: Callable[["PerformanceMetrics"], int]
    questions: Tuple[Question, ...] = field(default_factory=tuple)

    @property
    def is_span(self) -> bool:
        return self.type is AssessmentType.WORKING_MEMORY

    def validate(self) -> None:
        if self.is_span:
            if self.questions:
                raise ConfigurationError(f"{self.type.value}: span module generates its own trials")
            return
        if not self.questions:
            raise ConfigurationError(f"{self.type.value}: no questions")
        for q in self.questions:
            q.validate()
