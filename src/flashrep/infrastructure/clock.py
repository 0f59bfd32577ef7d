"""Clock adapters."""

import time

from flashrep.domain.review.ports import Clock


class SystemClock(Clock):
    """Wall-clock time in epoch milliseconds."""

    def now(self) -> int:
        return time.time_ns() // 1_000_000


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, now_ms: int = 0):
        self._now = now_ms

    def now(self) -> int:
        return self._now

    def set(self, now_ms: int) -> None:
        self._now = now_ms

    def advance(self, ms: int) -> None:
        self._now += ms
