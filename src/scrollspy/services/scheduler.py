"""Update scheduling primitives.

The detector never touches host timer APIs directly. It relies on a
``Scheduler`` offering two primitives:

 - ``request_frame(fn)``: run *fn* on the next animation frame
 - ``after(delay_ms, fn)``: run *fn* once after *delay_ms*

Both return a handle with ``cancel()``. A Qt implementation lives in
``scrollspy.components.qt_host``; ``scrollspy.testing.VirtualScheduler``
drives a deterministic virtual clock for tests.

On top of these primitives:

 - ``UpdateScheduler`` coalesces recompute requests to at most one per frame
   and throttles scroll bursts with a trailing edge, so the *last* event of a
   burst always produces a final recompute.
 - ``Debouncer`` fires once after a quiet period; every ``trigger`` restarts
   the wait.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

__all__ = ["TimerHandle", "Scheduler", "UpdateScheduler", "Debouncer"]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...  # pragma: no cover - structural


class Scheduler(Protocol):
    def now(self) -> float:
        """Monotonic time in milliseconds."""
        ...  # pragma: no cover - structural

    def request_frame(self, callback: Callable[[], None]) -> TimerHandle: ...  # pragma: no cover

    def after(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...  # pragma: no cover


class UpdateScheduler:
    """Frame-aligned, throttled recompute requests.

    ``request_tick`` is for resize / mutation / registration changes: it only
    coalesces. ``notify_scroll`` additionally applies the minimum-interval
    throttle: the first event of a burst schedules a tick immediately, events
    inside the throttle window are remembered, and when the window closes a
    remembered event re-enters ``notify_scroll``.
    """

    def __init__(
        self, scheduler: Scheduler, tick: Callable[[], None], throttle_ms: float = 10.0
    ) -> None:
        self._scheduler = scheduler
        self._tick = tick
        self._throttle_ms = max(0.0, float(throttle_ms))
        self._frame: Optional[TimerHandle] = None
        self._throttle_timer: Optional[TimerHandle] = None
        self._throttled = False
        self._pending = False

    @property
    def frame_pending(self) -> bool:
        return self._frame is not None

    @property
    def throttled(self) -> bool:
        return self._throttled

    def set_throttle(self, throttle_ms: float) -> None:
        self._throttle_ms = max(0.0, float(throttle_ms))

    def request_tick(self) -> None:
        if self._frame is not None:
            return
        self._frame = self._scheduler.request_frame(self._run_frame)

    def notify_scroll(self) -> None:
        if self._throttled:
            self._pending = True
            return
        self._throttled = True
        self._pending = False
        self.request_tick()
        self._throttle_timer = self._scheduler.after(self._throttle_ms, self._release_throttle)

    def cancel(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None
        if self._throttle_timer is not None:
            self._throttle_timer.cancel()
            self._throttle_timer = None
        self._throttled = False
        self._pending = False

    # Internal ---------------------------------------------------------
    def _run_frame(self) -> None:
        self._frame = None
        self._tick()

    def _release_throttle(self) -> None:
        self._throttled = False
        self._throttle_timer = None
        if self._pending:
            self._pending = False
            self.notify_scroll()


class Debouncer:
    def __init__(self, scheduler: Scheduler, delay_ms: float, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._callback = callback
        self._timer: Optional[TimerHandle] = None

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._scheduler.after(self._delay_ms, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self._callback()
