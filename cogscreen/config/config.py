from __future__ import annotations

"""Configuration loading and validation for cogscreen.

This module loads YAML configuration, applies defaults, and validates
timings and module names before a session is built.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..bank.models import AssessmentType


ALLOWED_SPEECH_BACKENDS = {"pyttsx3", "none"}
DEFAULT_MODULE_ORDER = [t.value for t in AssessmentType]


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or the packaged defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _non_negative_int(section: Dict[str, Any], key: str, default: int) -> None:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError):
        value = -1
    if value < 0:
        print(f"WARNING: Invalid {key} '{section.get(key)}', using {default}.")
        value = default
    section[key] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for name in ("timing", "span", "session", "speech", "summary", "report"):
        if not isinstance(cfg.get(name), dict):
            cfg[name] = {}

    timing = cfg["timing"]
    span = cfg["span"]
    session = cfg["session"]
    speech = cfg["speech"]
    summary = cfg["summary"]
    report = cfg["report"]

    _non_negative_int(timing, "settle_ms", 500)
    _non_negative_int(timing, "exposure_ms", 2000)
    _non_negative_int(timing, "feedback_ms", 1000)
    _non_negative_int(timing, "transition_ms", 100)

    _non_negative_int(span, "start", 2)
    _non_negative_int(span, "ceiling", 9)
    _non_negative_int(span, "max_failures", 2)
    if not (1 <= span["start"] <= span["ceiling"] <= 9):
        print(f"WARNING: Invalid span range {span['start']}..{span['ceiling']}, using 2..9.")
        span["start"], span["ceiling"] = 2, 9
    if span["max_failures"] < 1:
        print("WARNING: span.max_failures must be >= 1, using 2.")
        span["max_failures"] = 2

    session.setdefault("modules", list(DEFAULT_MODULE_ORDER))
    modules = []
    for name in session.get("modules") or []:
        if str(name) in DEFAULT_MODULE_ORDER:
            modules.append(str(name))
        else:
            print(f"WARNING: Unknown module '{name}', skipping.")
    if not modules:
        print("WARNING: No valid modules configured, using the full battery.")
        modules = list(DEFAULT_MODULE_ORDER)
    session["modules"] = modules

    speech.setdefault("enabled", True)
    speech.setdefault("backend", "pyttsx3")
    speech.setdefault("rate", 0.8)
    if speech.get("backend") not in ALLOWED_SPEECH_BACKENDS:
        print(f"WARNING: Unsupported speech backend '{speech.get('backend')}', using 'none'.")
        speech["backend"] = "none"

    summary.setdefault("enabled", True)
    summary.setdefault("model", "gemini-2.5-flash")
    summary.setdefault("api_key_env", "API_KEY")
    summary.setdefault("timeout_s", 20)

    report.setdefault("plot_path", None)

    return cfg
