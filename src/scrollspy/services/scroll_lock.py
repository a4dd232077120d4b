"""Programmatic scroll lock.

State machine suspending organic detection while a ``scroll_to`` animation
runs, so the detector does not fight the navigation.

States
------
UNLOCKED --engage(target)--> LOCKED --release()--> UNLOCKED

Release is armed by two independent watchers, whichever fires first:
 - an idle debounce restarted by every scroll activity tick
 - a one-shot host "scroll settled" notification

On release both watchers are torn down and ``on_release`` runs exactly once;
the owner uses it to schedule one catch-up recompute. ``engage`` while
already locked tears the old watchers down first (latest request wins).
``cancel`` drops the lock silently, for teardown.

Only this class ever sets ``locked``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from ..config.settings import SCROLL_IDLE_MS
from .scheduler import Debouncer, Scheduler

__all__ = ["LockState", "ScrollLock"]

_logger = logging.getLogger(__name__)


class LockState(str, Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class ScrollLock:
    def __init__(
        self,
        scheduler: Scheduler,
        on_release: Callable[[], None],
        *,
        idle_ms: float = SCROLL_IDLE_MS,
    ) -> None:
        self._on_release = on_release
        self._debounce = Debouncer(scheduler, idle_ms, self.release)
        self._state = LockState.UNLOCKED
        self._target_id: Optional[str] = None
        self._awaiting_settle = False

    @property
    def state(self) -> LockState:
        return self._state

    @property
    def locked(self) -> bool:
        return self._state is LockState.LOCKED

    @property
    def target_id(self) -> Optional[str]:
        return self._target_id

    @property
    def armed(self) -> bool:
        return self._debounce.armed or self._awaiting_settle

    def engage(self, target_id: Optional[str] = None) -> None:
        self._teardown()
        self._state = LockState.LOCKED
        self._target_id = target_id
        self._awaiting_settle = True
        _logger.debug("scroll lock engaged (target=%s)", target_id)

    def arm(self) -> None:
        """Start (or restart) the idle debounce."""
        if self.locked:
            self._debounce.trigger()

    def note_activity(self) -> None:
        self.arm()

    def note_settled(self) -> None:
        if self.locked and self._awaiting_settle:
            self.release()

    def release(self) -> None:
        if not self.locked:
            return
        self._teardown()
        self._state = LockState.UNLOCKED
        target = self._target_id
        self._target_id = None
        _logger.debug("scroll lock released (target=%s)", target)
        self._on_release()

    def cancel(self) -> None:
        self._teardown()
        self._state = LockState.UNLOCKED
        self._target_id = None

    def _teardown(self) -> None:
        self._debounce.cancel()
        self._awaiting_settle = False
