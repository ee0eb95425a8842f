from __future__ import annotations

"""Clocks and the single-slot scheduler for phase transitions."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .explain import trace as xtrace


class Clock:
    """Millisecond time source."""

    def now_ms(self) -> float:
        raise NotImplementedError

    def sleep_ms(self, ms: float) -> None:
        raise NotImplementedError


class MonotonicClock(Clock):
    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def sleep_ms(self, ms: float) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)


class ManualClock(Clock):
    """Clock that only moves when told to; sleeping advances it."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        self._now += float(ms)

    def sleep_ms(self, ms: float) -> None:
        self.advance(max(0.0, float(ms)))


@dataclass
class _Pending:
    due_ms: float
    label: str
    action: Callable[[], None]


class Scheduler:
    """Holds at most one pending transition.

    Scheduling a new transition supersedes the pending one, so a stale
    callback from an earlier phase can never fire.
    """

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self._pending: Optional[_Pending] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending.label if self._pending else None

    @property
    def due_ms(self) -> Optional[float]:
        return self._pending.due_ms if self._pending else None

    def schedule(self, delay_ms: float, label: str, action: Callable[[], None]) -> None:
        if self._pending is not None:
            xtrace("timer_superseded", {"label": self._pending.label, "by": label})
        self._pending = _Pending(due_ms=self.clock.now_ms() + max(0.0, float(delay_ms)), label=label, action=action)

    def cancel(self) -> None:
        if self._pending is not None:
            xtrace("timer_cancelled", {"label": self._pending.label})
        self._pending = None

    def fire_due(self) -> bool:
        """Run the pending action if its time has come. Returns True if it ran."""
        p = self._pending
        if p is None or self.clock.now_ms() < p.due_ms:
            return False
        self._pending = None
        p.action()
        return True

    def wait(self) -> bool:
        """Sleep until the pending transition is due, then run it."""
        p = self._pending
        if p is None:
            return False
        self.clock.sleep_ms(p.due_ms - self.clock.now_ms())
        return self.fire_due()
