"""Scroll destination computation for programmatic navigation.

Anchor policies for a section target:
 - ``top``: section top sits ``offset`` below the viewport top
 - ``center``: section vertically centred in the viewport
 - ``bottom``: section bottom flush with the viewport bottom
 - None ("nearest natural"): the destination keeps the section straddling
   the trigger line, using the same trigger line policy as scoring. A
   section that fits is centred when centring already satisfies that,
   otherwise the closest edge of the straddling range is used. A section
   taller than the viewport is aligned with its top.

Every destination is clamped to ``[0, max_scroll]``.
"""

from __future__ import annotations

from typing import Optional, Tuple

__all__ = [
    "ANCHOR_POLICIES",
    "clamp",
    "straddle_range",
    "section_scroll_target",
    "position_scroll_target",
]

ANCHOR_POLICIES = ("top", "center", "bottom")


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def straddle_range(
    section_top: float,
    section_height: float,
    viewport_size: float,
    max_scroll: float,
    effective_offset: float,
    trigger_policy: str = "fixed",
) -> Tuple[float, float]:
    """Scroll positions for which the trigger line lies inside the section.

    For the progressive policy the trigger line at position ``y`` is
    ``offset + y * (1 + (viewport - offset) / max_scroll)``; solving for the
    section edges divides by that slope.
    """
    slope = 1.0
    if trigger_policy == "progressive" and max_scroll > 0:
        dynamic_range = viewport_size - effective_offset
        if dynamic_range != 0:
            slope = 1.0 + dynamic_range / max_scroll
    low = (section_top - effective_offset) / slope
    high = (section_top + section_height - effective_offset) / slope
    return low, high


def section_scroll_target(
    section_top: float,
    section_height: float,
    viewport_size: float,
    max_scroll: float,
    effective_offset: float,
    anchor: Optional[str] = None,
    trigger_policy: str = "fixed",
) -> float:
    if max_scroll <= 0:
        return 0.0

    top_target = section_top - effective_offset
    center_target = section_top - (viewport_size - section_height) / 2
    bottom_target = section_top + section_height - viewport_size

    if anchor == "top":
        return clamp(top_target, 0.0, max_scroll)
    if anchor == "center":
        return clamp(center_target, 0.0, max_scroll)
    if anchor == "bottom":
        return clamp(bottom_target, 0.0, max_scroll)

    if section_height > viewport_size:
        return clamp(top_target, 0.0, max_scroll)

    low, high = straddle_range(
        section_top, section_height, viewport_size, max_scroll, effective_offset, trigger_policy
    )
    return clamp(clamp(center_target, low, high), 0.0, max_scroll)


def position_scroll_target(top: float, max_scroll: float, effective_offset: float) -> float:
    return clamp(top - effective_offset, 0.0, max(0.0, max_scroll))
