from __future__ import annotations

import threading

from .core.contracts import CounterSnapshot


class _Counter:
    """Increment-only integer, safe to bump from any thread."""

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def incr(self, n: int = 1) -> None:
        if n < 0:
            raise ValueError("counters never decrease")
        with self._lock:
            self._value += n

    @property
    def value(self) -> int:
        return self._value


class HarvestCounters:
    """
    Live progress of one run.

    requests  lookup calls issued (failed calls included)
    resolved  UUIDs returned by the service, ignored ones included
    found     UUIDs accepted and appended to the output file

    The three counters are independent; a snapshot is not a consistent cut
    across them, which is fine for a status line.
    """

    def __init__(self) -> None:
        self.requests = _Counter()
        self.resolved = _Counter()
        self.found = _Counter()

    def snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(
            requests=self.requests.value,
            found=self.found.value,
            resolved=self.resolved.value,
        )
