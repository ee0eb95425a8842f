from __future__ import annotations

"""Module registry and metadata.

Exposes per-module metadata, picks the raw metric surfaced in results,
and constructs the runner for each module through a single factory.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List

from ..bank.models import AssessmentType, ModuleConfig
from ..results.schema import RawMetricKind
from ..runners.base_runner import BaseRunner
from ..runners.sequencer import TrialSequencer
from ..runners.span import AdaptiveSpanController
from ..stats.metrics import MetricsAccumulator, PerformanceMetrics
from ..scoring.formulas import round_half_up


@dataclass(frozen=True)
class ModuleMeta:
    id: AssessmentType
    name: str
    runner: str  # "sequencer" | "span"
    raw_metric: RawMetricKind
    formula: str


_META: Dict[AssessmentType, ModuleMeta] = {
    m.id: m
    for m in [
        ModuleMeta(AssessmentType.WORD_RECOGNITION, "Word Recognition Speed", "sequencer", RawMetricKind.REACTION_MS, "speed (500 ms, /25, floor 10)"),
        ModuleMeta(AssessmentType.LETTER_ACCURACY, "Letter Accuracy", "sequencer", RawMetricKind.CORRECT, "accuracy"),
        ModuleMeta(AssessmentType.PHONEME_MATCHING, "Phoneme Matching", "sequencer", RawMetricKind.CORRECT, "accuracy"),
        ModuleMeta(AssessmentType.WORD_SEQUENCING, "Word Sequencing", "sequencer", RawMetricKind.CORRECT, "accuracy minus time penalty"),
        ModuleMeta(AssessmentType.READING_COMPREHENSION, "Reading Comprehension", "sequencer", RawMetricKind.CORRECT, "accuracy"),
        ModuleMeta(AssessmentType.WORKING_MEMORY, "Working Memory Span", "span", RawMetricKind.SPAN, "best span x 10"),
        ModuleMeta(AssessmentType.VISUAL_PROCESSING, "Visual Processing Speed", "sequencer", RawMetricKind.REACTION_MS, "speed (400 ms, /21, floor 5)"),
        ModuleMeta(AssessmentType.SPELLING_RECOGNITION, "Spelling Recognition", "sequencer", RawMetricKind.CORRECT, "accuracy"),
    ]
}


def list_modules() -> List[ModuleMeta]:
    return [_META[t] for t in AssessmentType]


def get_module(module_id: str) -> ModuleMeta:
    try:
        return _META[AssessmentType(module_id)]
    except ValueError:
        raise KeyError(f"Unknown module id: {module_id}") from None


def raw_metric(module: AssessmentType, metrics: PerformanceMetrics) -> int:
    kind = _META[module].raw_metric
    if kind is RawMetricKind.REACTION_MS:
        return round_half_up(metrics.average_reaction_time)
    if kind is RawMetricKind.SPAN:
        return int(metrics.max_span)
    return int(metrics.correct_answers)


def make_runner(
    config: ModuleConfig,
    accumulator: MetricsAccumulator,
    *,
    rng: random.Random,
    cfg: Dict[str, Any],
) -> BaseRunner:
    """Factory that builds the runner for a module from validated config."""
    timing = cfg.get("timing", {})
    meta = _META[config.type]
    if meta.runner == "span":
        span = cfg.get("span", {})
        return AdaptiveSpanController(
            config,
            accumulator,
            rng,
            start_span=int(span.get("start", 2)),
            ceiling=int(span.get("ceiling", 9)),
            max_failures=int(span.get("max_failures", 2)),
            exposure_ms=int(timing.get("exposure_ms", 2000)),
            feedback_ms=int(timing.get("feedback_ms", 1000)),
            transition_ms=int(timing.get("transition_ms", 100)),
        )
    return TrialSequencer(config, accumulator, settle_ms=int(timing.get("settle_ms", 500)))
