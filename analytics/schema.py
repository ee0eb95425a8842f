from __future__ import annotations

"""Pydantic row model and dtypes for the results table."""

from datetime import datetime, timezone

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator

from cogscreen.bank.models import AssessmentType

MODULES = [t.value for t in AssessmentType]

DTYPES = {
    "type": CategoricalDtype(categories=MODULES, ordered=True),
    "score": "UInt8",
    "raw_metric": "UInt32",
    "total_items": "UInt16",
    "completed": "boolean",
    "date": pd.DatetimeTZDtype(tz="UTC"),
}


class ResultRow(BaseModel):
    type: AssessmentType
    score: int = Field(ge=0, le=100)
    raw_metric: int = Field(ge=0)
    total_items: int = Field(ge=0, le=65535)
    completed: bool = True
    date: datetime

    @field_validator("date")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
