"""Global constants for active-section detection."""

from __future__ import annotations

from typing import Final

DEFAULT_OFFSET: Final = "8%"
DEFAULT_THRESHOLD: Final = 0.6
DEFAULT_HYSTERESIS: Final = 150.0
DEFAULT_THROTTLE_MS: Final = 10.0
DEFAULT_BEHAVIOR: Final = "auto"
DEFAULT_TRIGGER_POLICY: Final = "fixed"

# Scroll activity
SCROLL_IDLE_MS: Final = 100  # no scroll events for this long => scroll ended / lock released
MUTATION_DEBOUNCE_MS: Final = 50
FRAME_INTERVAL_MS: Final = 16  # ~60Hz animation-frame cadence for Qt hosts
SMOOTH_SCROLL_DURATION_MS: Final = 250  # QPropertyAnimation length for "smooth" scrolls

# Edge handling
MIN_SCROLL_THRESHOLD: Final = 10  # minimal scrollable travel before edge overrides apply
EDGE_TOLERANCE: Final = 5

# Scoring bands
FULL_VISIBILITY_BASE: Final = 1000.0
FULL_VISIBILITY_WEIGHT: Final = 500.0
PARTIAL_VISIBILITY_WEIGHT: Final = 800.0
TRIGGER_LINE_BONUS: Final = 200.0
INDEX_PENALTY: Final = 0.1
