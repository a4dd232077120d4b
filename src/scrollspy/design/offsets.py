"""Trigger offset resolution.

An offset is either an absolute distance (``120``) or a percentage of the
viewport height (``"8%"``). Percentages are resolved against the *current*
viewport height on every tick because resizes change it.

Public API:
 - Offset type alias
 - parse_percent(value) -> float | None
 - resolve_offset(offset, viewport_height, default) -> float

Edge Cases:
 - Non-finite numeric offsets resolve to 0.
 - Unparsable / non-finite percentage strings resolve to 0.
 - Non-finite viewport heights are treated as 0.

The function is pure; identical inputs always produce identical output.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Union

from ..config.settings import DEFAULT_OFFSET

__all__ = ["Offset", "PERCENT_PATTERN", "parse_percent", "resolve_offset"]

Offset = Union[float, int, str]

PERCENT_PATTERN = re.compile(r"^(-?\d+(?:\.\d+)?)%$")


def parse_percent(value: str) -> Optional[float]:
    """Return the numeric part of an ``"N%"`` string or None if malformed."""
    match = PERCENT_PATTERN.match(value)
    if not match:
        return None
    percent = float(match.group(1))
    if not math.isfinite(percent):
        return None
    return percent


def resolve_offset(
    offset: Optional[Offset],
    viewport_height: float,
    default: Offset = DEFAULT_OFFSET,
) -> float:
    """Resolve *offset* into an absolute distance from the viewport top."""
    value = default if offset is None else offset
    safe_height = viewport_height if math.isfinite(viewport_height) else 0.0

    if isinstance(value, bool):  # bool is an int subclass; never a valid offset
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        percent = parse_percent(value)
        if percent is None:
            return 0.0
        return percent / 100.0 * safe_height
    return 0.0
