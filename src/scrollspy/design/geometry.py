"""Section geometry sampling.

Normalizes every tracked section into a single content-relative coordinate
space (distance from the scrollable origin) so that scoring and selection do
not care whether the scrolling surface is the top-level document or a nested
container.

The host environment is reached only through the narrow ``LayoutProvider``
protocol. A PyQt6 implementation lives in ``scrollspy.components.qt_host``;
``scrollspy.testing.SyntheticLayout`` supplies plain numbers for tests.

Conversion rules (rect values are viewport-relative):
 - container supplied:  top = rect_top - container_rect_top + container_scroll
 - no container:        top = rect_top + document_scroll
 - bottom = top + rect_height

Descriptors whose handle is missing or not mounted are dropped silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Tuple, Union

__all__ = [
    "Rect",
    "RawTelemetry",
    "SectionDescriptor",
    "SectionBounds",
    "TrackedByIds",
    "TrackedBySelector",
    "TrackedBy",
    "LayoutProvider",
    "content_relative_top",
    "sample_bounds",
]


@dataclass(frozen=True)
class Rect:
    """Viewport-relative vertical extent of a host element."""

    top: float
    height: float


@dataclass(frozen=True)
class RawTelemetry:
    position: float
    viewport_size: float
    content_size: float

    @property
    def max_scroll(self) -> float:
        return max(0.0, self.content_size - self.viewport_size)


@dataclass(frozen=True)
class SectionDescriptor:
    id: str
    handle: Any = None  # None => not yet mounted


@dataclass(frozen=True)
class SectionBounds:
    id: str
    top: float
    bottom: float
    height: float


@dataclass(frozen=True)
class TrackedByIds:
    ids: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ids", tuple(self.ids))


@dataclass(frozen=True)
class TrackedBySelector:
    query: str


TrackedBy = Union[TrackedByIds, TrackedBySelector]


class LayoutProvider(Protocol):
    """Host geometry / scrolling surface.

    ``frame`` is the scroll container handle, or None for the top-level
    document.
    """

    def rect_of(self, handle: Any) -> Optional[Rect]:
        """Return the viewport-relative rect of *handle*, or None if unmounted."""
        ...  # pragma: no cover - structural

    def frame_top(self, frame: Any) -> float:
        """Return the viewport-relative top of the container (0 for the document)."""
        ...  # pragma: no cover - structural

    def telemetry(self, frame: Any) -> RawTelemetry: ...  # pragma: no cover

    def scroll_to(self, frame: Any, position: float, behavior: str) -> None: ...  # pragma: no cover

    def query(self, selector: str, frame: Any) -> List[SectionDescriptor]:
        """Resolve *selector* to descriptors; raise ValueError if it is malformed."""
        ...  # pragma: no cover - structural


def content_relative_top(
    rect_top: float,
    scroll_offset: float,
    container_top: Optional[float] = None,
) -> float:
    if container_top is not None:
        return rect_top - container_top + scroll_offset
    return rect_top + scroll_offset


def sample_bounds(
    descriptors: Iterable[SectionDescriptor],
    provider: LayoutProvider,
    frame: Any = None,
) -> List[SectionBounds]:
    """Return bounds for every mounted descriptor, in declaration order."""
    scroll_offset = provider.telemetry(frame).position
    container_top = provider.frame_top(frame) if frame is not None else None
    out: List[SectionBounds] = []
    for desc in descriptors:
        if desc.handle is None:
            continue
        rect = provider.rect_of(desc.handle)
        if rect is None:
            continue
        top = content_relative_top(rect.top, scroll_offset, container_top)
        out.append(SectionBounds(id=desc.id, top=top, bottom=top + rect.height, height=rect.height))
    return out
