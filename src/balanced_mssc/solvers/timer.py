"""
Cooperative time budget shared by one VNS run.
"""
from __future__ import annotations

from typing import Literal
import math
import time

ClockKind = Literal["cpu", "wall"]

_SOURCES = {
    "cpu"   : time.process_time,
    "wall"  : time.perf_counter,
}


class Budget:
    """Stopwatch with a deadline.

    The search polls :meth:`exhausted` at bounded intervals; there is no
    other way to stop a run early.

    Parameters
    ----------
    time_limit : float | None
        Seconds available from :meth:`start`. ``None`` means unbounded.
    clock : {"cpu", "wall"}
        ``"cpu"`` measures process CPU time, ``"wall"`` a monotonic clock.
    """

    def __init__(self, time_limit: float | None, clock: ClockKind = "cpu"):
        if clock not in _SOURCES:
            raise ValueError(f"Unknown clock '{clock}'. Valid choices: {list(_SOURCES)}")
        if time_limit is not None and (math.isnan(time_limit) or time_limit < 0):
            raise ValueError(f"time_limit must be non-negative, got {time_limit}")
        self.time_limit = math.inf if time_limit is None else float(time_limit)
        self.clock      = clock
        self._now       = _SOURCES[clock]
        self._t0        : float | None = None

    def start(self) -> "Budget":
        self._t0 = self._now()
        return self

    def elapsed(self) -> float:
        if self._t0 is None:
            return 0.0
        return self._now() - self._t0

    def exhausted(self) -> bool:
        return self.elapsed() >= self.time_limit

    def __repr__(self) -> str:
        return f"Budget(limit={self.time_limit}, clock={self.clock!r}, elapsed={self.elapsed():.4f})"
