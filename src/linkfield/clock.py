"""Time sources for stamping links and timing target dwell."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything with a ``now()`` returning seconds as a float."""

    def now(self) -> float: ...


class SystemClock:
    """Wall-clock time (seconds since the epoch)."""

    def now(self) -> float:
        return time.time()


class MonotonicClock:
    """Monotonic time; immune to wall-clock adjustments."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """A clock that only moves when told to.

    Used for headless runs with a fixed time step and for tests.

    Example:
        >>> clock = ManualClock(start=10.0)
        >>> clock.advance(0.5)
        10.5
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        """Jump to an absolute time. Time may not run backwards."""
        if value < self._now:
            raise ValueError(f"Clock cannot move backwards: {value} < {self._now}")
        self._now = value

    def advance(self, seconds: float) -> float:
        """Move forward by ``seconds`` and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative amount: {seconds}")
        self._now += seconds
        return self._now
