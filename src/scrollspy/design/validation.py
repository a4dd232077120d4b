"""Option sanitization.

Every user-supplied option passes through here before it reaches the
detector. Invalid input never raises: out-of-range numbers are clamped to
the nearest bound, malformed values fall back to the default, and each
correction is reported as a ``WARNING`` on this module's logger.

Limits:
 - offset (absolute):   [-10000, 10000]
 - offset (percentage): [-500%, 500%]
 - threshold:           [0, 1]
 - hysteresis:          [0, 1000]
 - throttle (ms):       [0, 1000]
"""

from __future__ import annotations

import logging
import math
from collections import abc
from typing import Any, List, Optional, Tuple

from ..config.settings import (
    DEFAULT_BEHAVIOR,
    DEFAULT_HYSTERESIS,
    DEFAULT_OFFSET,
    DEFAULT_THRESHOLD,
    DEFAULT_THROTTLE_MS,
    DEFAULT_TRIGGER_POLICY,
)
from .offsets import Offset, parse_percent
from .scoring import TRIGGER_POLICIES

__all__ = [
    "VALIDATION_LIMITS",
    "BEHAVIORS",
    "sanitize_offset",
    "sanitize_threshold",
    "sanitize_hysteresis",
    "sanitize_throttle",
    "sanitize_ids",
    "sanitize_selector",
    "sanitize_behavior",
    "sanitize_trigger_policy",
]

_logger = logging.getLogger(__name__)

VALIDATION_LIMITS = {
    "offset": (-10000.0, 10000.0),
    "offset_percent": (-500.0, 500.0),
    "threshold": (0.0, 1.0),
    "hysteresis": (0.0, 1000.0),
    "throttle": (0.0, 1000.0),
}

BEHAVIORS = ("smooth", "instant", "auto")


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _sanitize_number(name: str, value: Any, default: float) -> float:
    if value is None:
        return default
    if not _is_finite_number(value):
        _logger.warning("Invalid %s value: %r. Using default.", name, value)
        return default
    low, high = VALIDATION_LIMITS[name]
    if value < low or value > high:
        _logger.warning(
            "%s %s clamped to [%s, %s].",
            name.capitalize(),
            value,
            _format_number(low),
            _format_number(high),
        )
        return max(low, min(high, float(value)))
    return float(value)


def sanitize_offset(offset: Optional[Offset]) -> Offset:
    if offset is None:
        return DEFAULT_OFFSET

    if isinstance(offset, (int, float)) and not isinstance(offset, bool):
        if not math.isfinite(offset):
            _logger.warning("Invalid offset value: %r. Using default.", offset)
            return DEFAULT_OFFSET
        low, high = VALIDATION_LIMITS["offset"]
        if offset < low or offset > high:
            _logger.warning("Offset %s clamped to [%s, %s].", offset, low, high)
            return max(low, min(high, float(offset)))
        return offset

    if isinstance(offset, str):
        trimmed = offset.strip()
        percent = parse_percent(trimmed)
        if percent is None:
            _logger.warning("Invalid offset format: %r. Using default.", offset)
            return DEFAULT_OFFSET
        low, high = VALIDATION_LIMITS["offset_percent"]
        if percent < low or percent > high:
            clamped = max(low, min(high, percent))
            _logger.warning("Offset percentage %s%% clamped to [%s%%, %s%%].", percent, low, high)
            return f"{_format_number(clamped)}%"
        return trimmed

    _logger.warning("Invalid offset type: %s. Using default.", type(offset).__name__)
    return DEFAULT_OFFSET


def sanitize_threshold(threshold: Any) -> float:
    return _sanitize_number("threshold", threshold, DEFAULT_THRESHOLD)


def sanitize_hysteresis(hysteresis: Any) -> float:
    return _sanitize_number("hysteresis", hysteresis, DEFAULT_HYSTERESIS)


def sanitize_throttle(throttle: Any) -> float:
    return _sanitize_number("throttle", throttle, DEFAULT_THROTTLE_MS)


def sanitize_ids(ids: Any) -> Tuple[str, ...]:
    """Trim ids, dropping non-strings, blanks and duplicates (first one wins)."""
    if ids is None or isinstance(ids, (str, bytes)) or not isinstance(ids, abc.Iterable):
        _logger.warning("Invalid ids: expected a sequence of strings. Using empty list.")
        return ()

    seen = set()
    out: List[str] = []
    for raw in ids:
        if not isinstance(raw, str):
            _logger.warning("Invalid id type: %s. Skipping.", type(raw).__name__)
            continue
        trimmed = raw.strip()
        if not trimmed:
            _logger.warning("Empty string id detected. Skipping.")
            continue
        if trimmed in seen:
            _logger.warning('Duplicate id "%s" detected. Skipping.', trimmed)
            continue
        seen.add(trimmed)
        out.append(trimmed)
    return tuple(out)


def sanitize_selector(selector: Any) -> str:
    if selector is None:
        return ""
    if not isinstance(selector, str):
        _logger.warning("Invalid selector type: %s. Using empty string.", type(selector).__name__)
        return ""
    trimmed = selector.strip()
    if not trimmed:
        _logger.warning("Empty selector provided.")
    return trimmed


def sanitize_behavior(behavior: Any) -> str:
    if behavior is None:
        return DEFAULT_BEHAVIOR
    if behavior not in BEHAVIORS:
        _logger.warning("Invalid scroll behavior: %r. Using default.", behavior)
        return DEFAULT_BEHAVIOR
    return behavior


def sanitize_trigger_policy(policy: Any) -> str:
    if policy is None:
        return DEFAULT_TRIGGER_POLICY
    if policy not in TRIGGER_POLICIES:
        _logger.warning("Invalid trigger policy: %r. Using default.", policy)
        return DEFAULT_TRIGGER_POLICY
    return policy
