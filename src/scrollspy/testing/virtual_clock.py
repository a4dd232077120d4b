"""Deterministic scheduler driven by a virtual clock.

Implements the ``Scheduler`` protocol without any real timers: time only
moves when a test calls ``advance``. Animation frames are timers due one
frame interval after they were requested, so frame cadence, throttle windows
and debounce windows all interleave exactly as they would on a real host.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Tuple

from ..config.settings import FRAME_INTERVAL_MS

__all__ = ["VirtualTimer", "VirtualScheduler"]


class VirtualTimer:
    def __init__(self, due: float, callback: Callable[[], None], kind: str) -> None:
        self.due = due
        self.callback = callback
        self.kind = kind
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    def __init__(self, frame_interval_ms: float = FRAME_INTERVAL_MS) -> None:
        self._now = 0.0
        self._frame_interval = float(frame_interval_ms)
        self._queue: List[Tuple[float, int, VirtualTimer]] = []
        self._seq = itertools.count()

    # Scheduler protocol -------------------------------------------------
    def now(self) -> float:
        return self._now

    def request_frame(self, callback: Callable[[], None]) -> VirtualTimer:
        return self._push(self._now + self._frame_interval, callback, "frame")

    def after(self, delay_ms: float, callback: Callable[[], None]) -> VirtualTimer:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        return self._push(self._now + delay_ms, callback, "timer")

    # Driving ------------------------------------------------------------
    def advance(self, ms: float) -> int:
        """Move the clock forward by *ms*, firing everything due; returns fired count."""
        target = self._now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_frame(self) -> int:
        return self.advance(self._frame_interval)

    def run_until_idle(self, max_ms: float = 10_000.0) -> int:
        """Advance until nothing is pending (bounded by *max_ms*)."""
        fired = 0
        start = self._now
        while self.pending and self._now - start < max_ms:
            next_due = min(due for due, _, t in self._queue if not t.cancelled)
            fired += self.advance(max(0.0, next_due - self._now))
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    @property
    def pending_frames(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled and t.kind == "frame")

    def _push(self, due: float, callback: Callable[[], None], kind: str) -> VirtualTimer:
        timer = VirtualTimer(due, callback, kind)
        heapq.heappush(self._queue, (due, next(self._seq), timer))
        return timer
