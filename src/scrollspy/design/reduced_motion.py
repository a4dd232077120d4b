"""Reduced motion preference and scroll behavior resolution.

Single source of truth for whether programmatic scrolling should animate.
Hosts that can read an OS accessibility setting call
``set_reduced_motion`` once at startup; everything else asks
``resolve_behavior``.

Patterns:
- Module level state guarded by a simple setter/getter; operations are
  idempotent and cheap.
- Environment bootstrap: ``SCROLLSPY_PREFER_REDUCED_MOTION=1`` (or
  "true"/"yes"/"on", case-insensitive) enables reduced motion at import time.

Public API:
- set_reduced_motion(enabled: bool) -> None
- is_reduced_motion() -> bool
- resolve_behavior(behavior: str | None, default: str = "auto") -> str
- temporarily_reduced_motion(force: bool = True) -> context manager
"""

from __future__ import annotations

import contextlib
import os
from typing import Iterator, Optional

__all__ = [
    "set_reduced_motion",
    "is_reduced_motion",
    "resolve_behavior",
    "temporarily_reduced_motion",
]

_reduced_motion_enabled: bool = False

_env_value = os.getenv("SCROLLSPY_PREFER_REDUCED_MOTION", "").strip().lower()
if _env_value in {"1", "true", "yes", "on"}:
    _reduced_motion_enabled = True


def set_reduced_motion(enabled: bool) -> None:
    global _reduced_motion_enabled
    _reduced_motion_enabled = bool(enabled)


def is_reduced_motion() -> bool:
    return _reduced_motion_enabled


def resolve_behavior(behavior: Optional[str], default: str = "auto") -> str:
    """Map a configured behavior onto ``smooth`` or ``instant``.

    ``auto`` defers to the reduced motion preference: ``instant`` when motion
    should be reduced, ``smooth`` otherwise. Explicit values pass through.
    """
    value = behavior or default
    if value == "auto":
        return "instant" if _reduced_motion_enabled else "smooth"
    return value


@contextlib.contextmanager
def temporarily_reduced_motion(force: bool = True) -> Iterator[None]:
    """Temporarily override the preference; the prior state is always restored."""
    prev = _reduced_motion_enabled
    try:
        set_reduced_motion(force)
        yield
    finally:
        set_reduced_motion(prev)
