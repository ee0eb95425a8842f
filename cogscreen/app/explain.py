from __future__ import annotations

"""Minimal tracing helpers (explain mode).

Enabled with the --explain flag; emits one-line JSON records at trial,
timer and module milestones.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

_ENABLED = False
_STREAM: Optional[TextIO] = None


def enable(flag: bool = True, stream: Optional[TextIO] = None) -> None:
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    out = _STREAM or sys.stderr
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        line = "{}"
    print(f"[EXPLAIN] {event} :: {line}", file=out)
