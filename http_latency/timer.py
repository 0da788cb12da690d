"""Monotonic timing of a single request lifecycle."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from http_latency.models.result import Measurement
from http_latency.models.target import Target


@dataclass(kw_only=True)
class LatencyTimer:
    """Measures one request from just before sending until the body is read.

    A timer is single-use: ``start`` once, then either ``stop`` on success or
    drop it on failure. Elapsed time of a failed attempt is never reported.
    """

    target: Target
    clock: Callable[[], float] = time.perf_counter
    _start: float | None = field(default=None, init=False)

    @property
    def started(self) -> bool:
        return self._start is not None

    def start(self) -> None:
        if self._start is not None:
            raise RuntimeError("Timer already started")
        self._start = self.clock()

    def elapsed(self) -> float:
        """Seconds since ``start``."""
        if self._start is None:
            raise RuntimeError("Timer not started")
        return self.clock() - self._start

    def stop(self) -> Measurement:
        """Record the end timestamp and produce the Measurement."""
        if self._start is None:
            raise RuntimeError("Timer not started")
        end = max(self.clock(), self._start)
        return Measurement(target=self.target, start=self._start, end=end)
