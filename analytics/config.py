from __future__ import annotations

"""Report configuration (thresholds) using Pydantic."""

from pydantic import BaseModel, Field


class ReportConfig(BaseModel):
    """Thresholds for the results report.

    - strength_threshold: module scores at or above count as strengths
    - weakness_threshold: module scores below count as weaknesses
    - slow_reaction_ms: speed modules slower than this are flagged
    - low_span: memory spans below this are flagged
    """

    strength_threshold: int = Field(60, ge=0, le=100)
    weakness_threshold: int = Field(40, ge=0, le=100)
    slow_reaction_ms: int = Field(1000, gt=0)
    low_span: int = Field(5, ge=0, le=9)
