from __future__ import annotations

"""Result records produced at module completion."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict

from ..bank.models import AssessmentType


class RawMetricKind(str, Enum):
    REACTION_MS = "reaction_ms"
    SPAN = "span"
    CORRECT = "correct"


@dataclass(frozen=True)
class AssessmentResult:
    type: AssessmentType
    score: int
    raw_metric: int
    total_items: int
    completed: bool
    date: str  # ISO-8601, UTC

    def to_json(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data
