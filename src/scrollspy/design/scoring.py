"""Section visibility scoring.

Turns section bounds plus scroll telemetry into a numeric desirability score
per section. Only the *relative ordering* of scores matters; the magnitudes
are design constants chosen so that the bands never overlap:

 - fully visible (visibility ratio >= threshold): 1000 + ratio * 500
 - partially visible (in viewport):                share_of_viewport * 800
 - out of viewport:                                0

On top of the band a section containing the trigger line while in view gets
``TRIGGER_LINE_BONUS`` and every section loses ``index * INDEX_PENALTY`` so
that the earliest declared section wins exact ties. The bonus is only granted
in view, so it can never lift an off-screen section into relevance.

Trigger line policies:
 - ``fixed``: ``position + offset``
 - ``progressive``: the offset is interpolated from its configured value
   toward the viewport floor as scroll progress goes 0 -> 1, so the last
   sections can still reach the line near the end of travel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from ..config.settings import (
    FULL_VISIBILITY_BASE,
    FULL_VISIBILITY_WEIGHT,
    INDEX_PENALTY,
    PARTIAL_VISIBILITY_WEIGHT,
    TRIGGER_LINE_BONUS,
)
from .geometry import SectionBounds

__all__ = [
    "TRIGGER_POLICIES",
    "ScoringContext",
    "SectionScore",
    "scroll_progress",
    "trigger_line_offset",
    "section_progress",
    "score_section",
    "calculate_section_scores",
]

TRIGGER_POLICIES = ("fixed", "progressive")


@dataclass(frozen=True)
class ScoringContext:
    position: float
    viewport_size: float
    content_size: float
    effective_offset: float
    threshold: float
    trigger_policy: str = "fixed"

    @property
    def viewport_top(self) -> float:
        return self.position

    @property
    def viewport_bottom(self) -> float:
        return self.position + self.viewport_size

    @property
    def trigger_line(self) -> float:
        return self.position + trigger_line_offset(
            self.position,
            self.viewport_size,
            self.content_size,
            self.effective_offset,
            self.trigger_policy,
        )


@dataclass(frozen=True)
class SectionScore:
    id: str
    score: float
    visibility_ratio: float
    in_viewport: bool
    progress: float
    bounds: SectionBounds


def scroll_progress(position: float, viewport_size: float, content_size: float) -> float:
    """Fraction of scrollable travel covered, clamped to [0, 1]."""
    max_scroll = max(1.0, content_size - viewport_size)
    return min(1.0, max(0.0, position / max_scroll))


def trigger_line_offset(
    position: float,
    viewport_size: float,
    content_size: float,
    effective_offset: float,
    policy: str = "fixed",
) -> float:
    """Distance of the trigger line from the viewport top."""
    if policy == "progressive":
        progress = scroll_progress(position, viewport_size, content_size)
        return effective_offset + progress * (viewport_size - effective_offset)
    return effective_offset


def section_progress(bounds: SectionBounds, viewport_bottom: float, viewport_size: float) -> float:
    """How far the section has travelled through the viewport (0 entering, 1 gone)."""
    if bounds.height == 0:
        return 0.0
    total_travel = viewport_size + bounds.height
    traveled = viewport_bottom - bounds.top
    return max(0.0, min(1.0, traveled / total_travel))


def score_section(bounds: SectionBounds, index: int, ctx: ScoringContext) -> SectionScore:
    viewport_top = ctx.viewport_top
    viewport_bottom = ctx.viewport_bottom
    visible_height = max(0.0, min(bounds.bottom, viewport_bottom) - max(bounds.top, viewport_top))
    visibility_ratio = visible_height / bounds.height if bounds.height > 0 else 0.0
    share_of_viewport = visible_height / ctx.viewport_size if ctx.viewport_size > 0 else 0.0
    in_viewport = bounds.bottom > viewport_top and bounds.top < viewport_bottom

    score = 0.0
    if visibility_ratio >= ctx.threshold:
        score += FULL_VISIBILITY_BASE + visibility_ratio * FULL_VISIBILITY_WEIGHT
    elif in_viewport:
        score += share_of_viewport * PARTIAL_VISIBILITY_WEIGHT

    trigger = ctx.trigger_line
    if in_viewport and bounds.top <= trigger < bounds.bottom:
        score += TRIGGER_LINE_BONUS

    score -= index * INDEX_PENALTY

    return SectionScore(
        id=bounds.id,
        score=score,
        visibility_ratio=visibility_ratio,
        in_viewport=in_viewport,
        progress=section_progress(bounds, viewport_bottom, ctx.viewport_size),
        bounds=bounds,
    )


def calculate_section_scores(
    bounds: Iterable[SectionBounds],
    ctx: ScoringContext,
    index_map: Optional[Mapping[str, int]] = None,
) -> List[SectionScore]:
    """Score every section.

    ``index_map`` maps ids to their position in the tracked list; when omitted
    the iteration order of *bounds* is used. Output order follows *bounds*.
    """
    items = list(bounds)
    indices: Dict[str, int] = (
        dict(index_map) if index_map is not None else {b.id: i for i, b in enumerate(items)}
    )
    return [score_section(b, indices.get(b.id, 0), ctx) for b in items]
