"""Testing utilities for headless (Qt-free) verification.

This subpackage intentionally avoids importing PyQt so detector tests stay
fast and deterministic.
"""

from __future__ import annotations

__all__ = [
    "Box",
    "ScrollCall",
    "SyntheticLayout",
    "VirtualScheduler",
    "VirtualTimer",
]

from .synthetic_layout import Box, ScrollCall, SyntheticLayout
from .virtual_clock import VirtualScheduler, VirtualTimer
