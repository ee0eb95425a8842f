from __future__ import annotations

"""Tiny pub/sub event bus for presentation notifications."""

from typing import Any, Callable, Dict, List

from .explain import trace as xtrace

SESSION_STARTED = "session_started"
MODULE_STARTED = "module_started"
TRIAL_STARTED = "trial_started"
EXPOSURE_ENDED = "exposure_ended"
PICK_ACCEPTED = "pick_accepted"
TRIAL_RESOLVED = "trial_resolved"
MODULE_COMPLETE = "module_complete"
MODULE_FAILED = "module_failed"
SESSION_COMPLETE = "session_complete"
SESSION_QUIT = "session_quit"


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        xtrace(event, payload if isinstance(payload, dict) else None)
        for h in self._subs.get(event, []):
            try:
                h(payload)
            except Exception as exc:
                # A broken view must not stall the trial loop.
                print(f"[WARN] handler for '{event}' failed: {exc}")
