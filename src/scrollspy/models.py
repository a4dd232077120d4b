"""Snapshot models emitted after each detector tick.

Snapshots are immutable; collaborators read them but never mutate detector
state through them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from .design.geometry import SectionBounds
from .design.offsets import Offset

__all__ = [
    "ScrollState",
    "SectionState",
    "SpySnapshot",
    "LinkState",
    "SectionTarget",
    "PositionTarget",
    "ScrollTarget",
    "ScrollToOptions",
]


@dataclass(frozen=True)
class ScrollState:
    position: float = 0.0
    progress: float = 0.0
    direction: Optional[str] = None  # "up" | "down" | None (unchanged position)
    velocity: float = 0.0  # px per ms
    scrolling: bool = False
    max_scroll: float = 0.0
    viewport_size: float = 0.0
    content_size: float = 0.0
    offset: float = 0.0
    trigger_line: float = 0.0  # distance from the viewport top


@dataclass(frozen=True)
class SectionState:
    bounds: SectionBounds
    visibility: float  # rounded to 2 decimals
    progress: float  # rounded to 2 decimals
    in_viewport: bool
    active: bool


@dataclass(frozen=True)
class SpySnapshot:
    active_id: Optional[str] = None
    index: int = -1
    ids: Tuple[str, ...] = ()
    scroll: ScrollState = field(default_factory=ScrollState)
    sections: Dict[str, SectionState] = field(default_factory=dict)

    @property
    def progress(self) -> float:
        return self.scroll.progress

    @property
    def direction(self) -> Optional[str]:
        return self.scroll.direction

    @property
    def in_viewport(self) -> frozenset[str]:
        return frozenset(k for k, s in self.sections.items() if s.in_viewport)


@dataclass(frozen=True)
class LinkState:
    """What a navigation link needs to render its current state."""

    id: str
    active: bool

    @property
    def aria_current(self) -> Optional[str]:
        return "page" if self.active else None


@dataclass(frozen=True)
class SectionTarget:
    id: str


@dataclass(frozen=True)
class PositionTarget:
    """Raw content-relative scroll destination (before offset)."""

    top: float


ScrollTarget = Union[str, SectionTarget, PositionTarget]


@dataclass(frozen=True)
class ScrollToOptions:
    """Per-request overrides for ``scroll_to``.

    ``anchor`` is "top", "center", "bottom" or None (nearest natural).
    ``lock_active`` defaults to True for section targets and False for raw
    positions.
    """

    offset: Optional[Offset] = None
    behavior: Optional[str] = None
    anchor: Optional[str] = None
    lock_active: Optional[bool] = None
