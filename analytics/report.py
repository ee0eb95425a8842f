from __future__ import annotations

"""Results table and overall classification for a finished battery."""

from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from cogscreen.bank.models import AssessmentType
from cogscreen.app.module_registry import get_module
from cogscreen.results.schema import AssessmentResult, RawMetricKind
from cogscreen.scoring.formulas import DIFFICULTY_BANDS, LOWEST_BAND, calculate_difficulty, round_half_up

from .config import ReportConfig
from .schema import DTYPES, ResultRow

SPEED_MODULES = [AssessmentType.WORD_RECOGNITION.value, AssessmentType.VISUAL_PROCESSING.value]


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def results_frame(results: Iterable[AssessmentResult]) -> pd.DataFrame:
    """Validate results through ResultRow and return a typed DataFrame.

    Adds 'level' and 'classification' columns from the score bands.
    """
    rows = [ResultRow.model_validate(r.to_json()) for r in results]
    if not rows:
        df = _empty_df()
    else:
        df = pd.DataFrame([{**r.model_dump(), "type": r.type.value} for r in rows])
        for col, dt in DTYPES.items():
            df[col] = df[col].astype(dt)
    scores = df["score"].astype("float64").to_numpy()
    conditions = [scores >= threshold for threshold, _, _ in DIFFICULTY_BANDS]
    df["level"] = np.select(conditions, [lvl for _, lvl, _ in DIFFICULTY_BANDS], default=LOWEST_BAND[0])
    df["classification"] = np.select(
        conditions, [cls for _, _, cls in DIFFICULTY_BANDS], default=LOWEST_BAND[1]
    )
    return df


def summarize_results(df: pd.DataFrame, cfg: Optional[ReportConfig] = None) -> Dict[str, Any]:
    """Average score, overall band, and the strongest/weakest modules."""
    cfg = cfg or ReportConfig()
    if df.empty:
        level, classification = calculate_difficulty(0)
        return {"average_score": 0, "level": level, "classification": classification, "strengths": [], "weaknesses": []}

    scores = df["score"].astype("float64")
    average = round_half_up(float(scores.mean()))
    level, classification = calculate_difficulty(average)

    module = df["type"].astype("string")
    raw = df["raw_metric"].astype("float64")
    slow = module.isin(SPEED_MODULES) & (raw > cfg.slow_reaction_ms)
    short_span = (module == AssessmentType.WORKING_MEMORY.value) & (raw < cfg.low_span)
    weak = (scores < cfg.weakness_threshold) | slow | short_span
    strong = (scores >= cfg.strength_threshold) & ~weak

    return {
        "average_score": average,
        "level": level,
        "classification": classification,
        "strengths": _names(module[strong]),
        "weaknesses": _names(module[weak]),
    }


def _names(s: pd.Series) -> List[str]:
    return [str(v) for v in s.tolist()]


def _raw_label(row: pd.Series) -> str:
    raw = int(row["raw_metric"])
    kind = get_module(str(row["type"])).raw_metric
    if kind is RawMetricKind.REACTION_MS:
        return f"avg {raw} ms"
    if kind is RawMetricKind.SPAN:
        return f"span {raw}"
    return f"{raw}/{int(row['total_items'])} correct"


def format_report(df: pd.DataFrame, summary: Dict[str, Any]) -> str:
    """Return a human-readable results table and overall verdict."""
    lines = []
    for _, row in df.iterrows():
        lines.append(f"{str(row['type']):<22} {int(row['score']):>3}/100  {row['level']:<13} {_raw_label(row)}")
    lines.append(f"Overall: {summary['average_score']}/100 ({summary['level']}), classification: {summary['classification']}")
    if summary["strengths"]:
        lines.append("Strengths: " + ", ".join(summary["strengths"]))
    if summary["weaknesses"]:
        lines.append("Needs attention: " + ", ".join(summary["weaknesses"]))
    return "\n".join(lines)
