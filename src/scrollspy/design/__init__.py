"""Pure (Qt-free) active-section detection logic."""

from __future__ import annotations

from .offsets import Offset, parse_percent, resolve_offset
from .geometry import (
    LayoutProvider,
    RawTelemetry,
    Rect,
    SectionBounds,
    SectionDescriptor,
    TrackedBy,
    TrackedByIds,
    TrackedBySelector,
    sample_bounds,
)
from .scoring import ScoringContext, SectionScore, calculate_section_scores
from .selection import determine_active_section, edge_override
from .anchors import position_scroll_target, section_scroll_target

__all__ = [
    "Offset",
    "parse_percent",
    "resolve_offset",
    "LayoutProvider",
    "RawTelemetry",
    "Rect",
    "SectionBounds",
    "SectionDescriptor",
    "TrackedBy",
    "TrackedByIds",
    "TrackedBySelector",
    "sample_bounds",
    "ScoringContext",
    "SectionScore",
    "calculate_section_scores",
    "determine_active_section",
    "edge_override",
    "position_scroll_target",
    "section_scroll_target",
]
