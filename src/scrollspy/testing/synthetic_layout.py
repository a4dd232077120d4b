"""Layout provider backed by plain numbers.

Sections are boxes with a content-relative ``top`` and ``height``; the
provider reports them the way a real host would (viewport-relative rects
shifted by the current scroll position) so the full sampling path is
exercised. Handles are the box names.

Example:
    layout = SyntheticLayout(viewport_size=500)
    layout.stack([("intro", 500), ("usage", 500), ("api", 500)])
    layout.position = 600
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..design.geometry import RawTelemetry, Rect, SectionDescriptor

__all__ = ["Box", "ScrollCall", "SyntheticLayout"]


@dataclass
class Box:
    name: str
    top: float
    height: float
    section_id: str = ""  # id reported to selector queries ("" => unnamed)
    mounted: bool = True


@dataclass(frozen=True)
class ScrollCall:
    frame: Any
    position: float
    behavior: str


class SyntheticLayout:
    def __init__(
        self,
        *,
        viewport_size: float,
        content_size: Optional[float] = None,
        position: float = 0.0,
        frame_offset: float = 0.0,
        apply_scrolls: bool = True,
    ) -> None:
        self.viewport_size = viewport_size
        self._content_size = content_size
        self.position = position
        self.frame_offset = frame_offset  # viewport-relative top of the container
        self.apply_scrolls = apply_scrolls
        self.boxes: Dict[str, Box] = {}
        self.scroll_calls: List[ScrollCall] = []

    # Building -----------------------------------------------------------
    @property
    def content_size(self) -> float:
        if self._content_size is not None:
            return self._content_size
        return max((b.top + b.height for b in self.boxes.values()), default=0.0)

    @content_size.setter
    def content_size(self, value: Optional[float]) -> None:
        self._content_size = value

    def add(self, name: str, top: float, height: float, *, section_id: str | None = None) -> str:
        self.boxes[name] = Box(name, top, height, name if section_id is None else section_id)
        return name

    def stack(self, sections: Iterable[Tuple[str, float]], start: float = 0.0) -> List[str]:
        """Lay sections out back to back starting at *start*."""
        handles = []
        top = start
        for name, height in sections:
            handles.append(self.add(name, top, height))
            top += height
        return handles

    def unmount(self, name: str) -> None:
        self.boxes[name].mounted = False

    def mount(self, name: str) -> None:
        self.boxes[name].mounted = True

    def remove(self, name: str) -> None:
        self.boxes.pop(name, None)

    # LayoutProvider -----------------------------------------------------
    def rect_of(self, handle: Any) -> Optional[Rect]:
        box = self.boxes.get(handle)
        if box is None or not box.mounted:
            return None
        return Rect(top=self.frame_offset + box.top - self.position, height=box.height)

    def frame_top(self, frame: Any) -> float:
        return self.frame_offset

    def telemetry(self, frame: Any) -> RawTelemetry:
        return RawTelemetry(
            position=self.position,
            viewport_size=self.viewport_size,
            content_size=self.content_size,
        )

    def scroll_to(self, frame: Any, position: float, behavior: str) -> None:
        self.scroll_calls.append(ScrollCall(frame, position, behavior))
        if self.apply_scrolls:
            self.position = position

    def query(self, selector: str, frame: Any) -> List[SectionDescriptor]:
        try:
            pattern = re.compile(selector)
        except re.error as exc:
            raise ValueError(str(exc)) from exc
        ordered = sorted(self.boxes.values(), key=lambda b: b.top)
        return [
            SectionDescriptor(id=b.section_id, handle=b.name)
            for b in ordered
            if b.mounted and pattern.fullmatch(b.name)
        ]
