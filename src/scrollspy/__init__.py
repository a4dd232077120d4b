"""scrollspy: active-section detection for scrollable documents.

The detector answers "which section is the reader looking at" for a stack of
sections inside a scrolling surface. It is split into:

 - ``scrollspy.design``      pure geometry, scoring and selection functions
 - ``scrollspy.services``    the controller, scheduling, scroll lock, event bus
 - ``scrollspy.app``         persisted options
 - ``scrollspy.components``  PyQt6 widgets (``ScrollSpyArea``, ``SectionNav``)
 - ``scrollspy.testing``     virtual clock and synthetic layout for tests

Importing the package does not import Qt; only ``scrollspy.components`` does.
"""

from __future__ import annotations

from .app.config_store import SpyOptions, load_options, save_options
from .design.geometry import LayoutProvider, TrackedByIds, TrackedBySelector
from .models import (
    LinkState,
    PositionTarget,
    ScrollState,
    ScrollToOptions,
    SectionState,
    SectionTarget,
    SpySnapshot,
)
from .services.event_bus import EventBus, SpyEvent
from .services.scroll_spy import ScrollSpyController

__all__ = [
    "SpyOptions",
    "load_options",
    "save_options",
    "LayoutProvider",
    "TrackedByIds",
    "TrackedBySelector",
    "LinkState",
    "PositionTarget",
    "ScrollState",
    "ScrollToOptions",
    "SectionState",
    "SectionTarget",
    "SpySnapshot",
    "EventBus",
    "SpyEvent",
    "ScrollSpyController",
]

__version__ = "0.1.0"
