"""Hysteresis-based active section selection.

Evaluated once per recompute tick (never while a programmatic scroll lock is
engaged). Order of rules:

 1. Bottom edge: with enough scrollable travel and the viewport within
    ``EDGE_TOLERANCE`` of the end, the last tracked id wins unless the
    second-to-last section is still in view.
 2. Top edge: symmetric, using the first and second tracked ids.
 3. Candidates are the in-viewport sections (all sections when none are).
 4. Best candidate = highest score; the first one wins ties.
 5. The incumbent keeps its place unless it has no score, left the
    viewport, or is beaten by more than the hysteresis margin.

Rule 5 is the anti-flicker guarantee: a challenger has to win decisively.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..config.settings import EDGE_TOLERANCE, MIN_SCROLL_THRESHOLD
from .scoring import SectionScore

__all__ = ["edge_state", "edge_override", "determine_active_section"]


def edge_state(position: float, viewport_size: float, content_size: float) -> tuple[bool, bool]:
    """Return ``(at_top, at_bottom)`` for the given telemetry."""
    max_scroll = max(0.0, content_size - viewport_size)
    has_scroll = max_scroll > MIN_SCROLL_THRESHOLD
    at_bottom = has_scroll and position + viewport_size >= content_size - EDGE_TOLERANCE
    at_top = has_scroll and position <= EDGE_TOLERANCE
    return at_top, at_bottom


def _edge_pick(
    by_id: Dict[str, SectionScore], edge_id: str, neighbour_id: Optional[str]
) -> Optional[str]:
    if edge_id not in by_id:
        return None
    if neighbour_id is None:
        return edge_id
    neighbour = by_id.get(neighbour_id)
    if neighbour is None or not neighbour.in_viewport:
        return edge_id
    return None


def edge_override(
    scores: Sequence[SectionScore],
    section_ids: Sequence[str],
    position: float,
    viewport_size: float,
    content_size: float,
) -> Optional[str]:
    """Return the forced id at an extreme of scroll travel, else None."""
    if not section_ids:
        return None
    at_top, at_bottom = edge_state(position, viewport_size, content_size)
    by_id = {s.id: s for s in scores}
    if at_bottom:
        neighbour = section_ids[-2] if len(section_ids) >= 2 else None
        picked = _edge_pick(by_id, section_ids[-1], neighbour)
        if picked is not None:
            return picked
    if at_top:
        neighbour = section_ids[1] if len(section_ids) >= 2 else None
        picked = _edge_pick(by_id, section_ids[0], neighbour)
        if picked is not None:
            return picked
    return None


def determine_active_section(
    scores: Sequence[SectionScore],
    section_ids: Sequence[str],
    current_active_id: Optional[str],
    hysteresis: float,
    position: float,
    viewport_size: float,
    content_size: float,
) -> Optional[str]:
    if not scores or not section_ids:
        return None

    forced = edge_override(scores, section_ids, position, viewport_size, content_size)
    if forced is not None:
        return forced

    visible = [s for s in scores if s.in_viewport]
    candidates = visible or list(scores)
    # sorted() is stable, so equal scores keep declaration order
    best = sorted(candidates, key=lambda s: s.score, reverse=True)[0]

    current = next((s for s in scores if s.id == current_active_id), None)
    should_switch = (
        current is None
        or not current.in_viewport
        or best.score > current.score + hysteresis
        or best.id == current_active_id
    )
    return best.id if should_switch else current_active_id
