"""EventBus core.

Lightweight synchronous publish/subscribe mechanism used to surface detector
transitions (active changed, section entered/left, scroll started/ended,
snapshot updated, tracked ids changed) to whoever hosts the detector.

Goals:
 - Decouple the detector from how hosts get notified
 - Minimal, testable surface (no Qt dependency)
 - Error isolation: one failing handler doesn't break the publish cycle
 - One-shot (once) subscriptions and unsubscribe handles
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Dict, List, Protocol

__all__ = [
    "SpyEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]

_logger = logging.getLogger(__name__)


class SpyEvent(str, Enum):  # str subclass keeps names usable as plain keys
    ACTIVE_CHANGED = "active_changed"
    SECTION_ENTERED = "section_entered"
    SECTION_LEFT = "section_left"
    SCROLL_STARTED = "scroll_started"
    SCROLL_ENDED = "scroll_ended"
    SNAPSHOT_UPDATED = "snapshot_updated"
    SECTIONS_CHANGED = "sections_changed"
    DIAGNOSTIC = "diagnostic"


@dataclass
class Event:
    name: str  # matches SpyEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | SpyEvent) -> str:
    return name.value if isinstance(name, SpyEvent) else name


class EventBus:
    """Synchronous event dispatcher.

    The subscription table is guarded by a re-entrant lock; handlers run
    while the lock is NOT held (copy-first) so they may subscribe or
    unsubscribe recursively.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, Exception]] = []

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def subscribe(
        self, name: str | SpyEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = _key(name)
        sub = Subscription(event=key, handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(key, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket:
                self._subs[sub.event] = [s for s in bucket if s is not sub]
                if not self._subs[sub.event]:
                    self._subs.pop(sub.event, None)
        sub.active = False

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, name: str | SpyEvent, payload: Any = None) -> Event:
        key = _key(name)
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
        finished: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler failures
                _logger.exception("event handler for %s failed", key)
                with self._lock:
                    self._errors.append((evt, exc))
            if sub.once:
                sub.active = False
                finished.append(sub)
        for sub in finished:
            self.unsubscribe(sub)
        return evt

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def subscriber_count(self, name: str | SpyEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    def list_events(self) -> list[str]:
        with self._lock:
            return list(self._subs.keys())

    @property
    def errors(self) -> list[tuple[Event, Exception]]:
        with self._lock:
            return list(self._errors)
