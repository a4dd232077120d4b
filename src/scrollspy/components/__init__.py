"""PyQt6 bindings for the active-section detector."""

from .qt_host import QtFrameScheduler, QtTimerHandle, ScrollAreaLayoutProvider  # noqa: F401
from .scroll_spy_area import ScrollSpyArea  # noqa: F401
from .section_nav import SectionNav  # noqa: F401

__all__ = [
    "QtFrameScheduler",
    "QtTimerHandle",
    "ScrollAreaLayoutProvider",
    "ScrollSpyArea",
    "SectionNav",
]
