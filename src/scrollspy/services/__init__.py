"""Service layer exports.

Responsibilities:
 - EventBus publish/subscribe core
 - Frame-aligned update scheduling and the programmatic scroll lock
 - The active-section detector controller
 - Diagnostics capture
"""

from .event_bus import EventBus, SpyEvent  # noqa: F401
from .scheduler import Debouncer, Scheduler, TimerHandle, UpdateScheduler  # noqa: F401
from .scroll_lock import LockState, ScrollLock  # noqa: F401
from .scroll_spy import DetectorContext, ScrollSpyController  # noqa: F401
from .logging_service import DiagnosticEntry, DiagnosticsLog  # noqa: F401

__all__ = [
    "EventBus",
    "SpyEvent",
    "Debouncer",
    "Scheduler",
    "TimerHandle",
    "UpdateScheduler",
    "LockState",
    "ScrollLock",
    "DetectorContext",
    "ScrollSpyController",
    "DiagnosticEntry",
    "DiagnosticsLog",
]
