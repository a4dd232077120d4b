"""Detector option model and persistence.

Stores and loads the tunable detector options (offset, threshold,
hysteresis, throttle, behavior, trigger policy) so a host can keep user
preferences between sessions.

Design principles:
- Pure logic (no Qt import) so it can be unit-tested headless.
- Explicit schema with version field to enable future migrations.
- Graceful fallback: corrupt or incompatible files produce defaults instead
  of raising.
- Every value that enters a ``SpyOptions`` through ``sanitized`` or
  ``from_dict`` goes through ``scrollspy.design.validation``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

from ..config.settings import (
    DEFAULT_BEHAVIOR,
    DEFAULT_HYSTERESIS,
    DEFAULT_OFFSET,
    DEFAULT_THRESHOLD,
    DEFAULT_THROTTLE_MS,
    DEFAULT_TRIGGER_POLICY,
)
from ..design.offsets import Offset
from ..design.validation import (
    sanitize_behavior,
    sanitize_hysteresis,
    sanitize_offset,
    sanitize_threshold,
    sanitize_throttle,
    sanitize_trigger_policy,
)

__all__ = ["SpyOptions", "load_options", "save_options", "OPTIONS_VERSION"]

_logger = logging.getLogger(__name__)

OPTIONS_VERSION = 1  # Increment when structure changes

DEFAULT_FILENAME = "scrollspy_options.json"


@dataclass(frozen=True)
class SpyOptions:
    """Detector options.

    Attributes
    ----------
    offset: Trigger offset, absolute number or ``"N%"`` of viewport height.
    threshold: Visibility ratio at which a section counts as fully visible.
    hysteresis: Score margin a challenger needs to replace the active section.
    throttle_ms: Minimum interval between scroll-driven recomputes.
    behavior: ``smooth`` | ``instant`` | ``auto`` for programmatic scrolls.
    trigger_policy: ``fixed`` | ``progressive`` trigger line placement.
    """

    offset: Offset = DEFAULT_OFFSET
    threshold: float = DEFAULT_THRESHOLD
    hysteresis: float = DEFAULT_HYSTERESIS
    throttle_ms: float = DEFAULT_THROTTLE_MS
    behavior: str = DEFAULT_BEHAVIOR
    trigger_policy: str = DEFAULT_TRIGGER_POLICY

    def sanitized(self) -> "SpyOptions":
        return SpyOptions(
            offset=sanitize_offset(self.offset),
            threshold=sanitize_threshold(self.threshold),
            hysteresis=sanitize_hysteresis(self.hysteresis),
            throttle_ms=sanitize_throttle(self.throttle_ms),
            behavior=sanitize_behavior(self.behavior),
            trigger_policy=sanitize_trigger_policy(self.trigger_policy),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["version"] = OPTIONS_VERSION
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpyOptions":
        return cls(
            offset=data.get("offset"),
            threshold=data.get("threshold"),
            hysteresis=data.get("hysteresis"),
            throttle_ms=data.get("throttle_ms"),
            behavior=data.get("behavior"),
            trigger_policy=data.get("trigger_policy"),
        ).sanitized()


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_options(base_dir: str | Path | None = None) -> SpyOptions:
    """Load options from *base_dir* (defaults to CWD); defaults on any problem."""
    path = _resolve_path(base_dir)
    if not path.exists():
        return SpyOptions()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError("options file must contain a JSON object")
        version = data.get("version", OPTIONS_VERSION)
        if version != OPTIONS_VERSION:
            _logger.warning(
                "Options file %s has version %r (expected %s). Using defaults.",
                path,
                version,
                OPTIONS_VERSION,
            )
            return SpyOptions()
        return SpyOptions.from_dict(data)
    except (OSError, ValueError, TypeError) as exc:
        _logger.warning("Could not read options file %s (%s). Using defaults.", path, exc)
        return SpyOptions()


def save_options(options: SpyOptions, base_dir: str | Path | None = None) -> Path:
    """Persist options; returns the path written."""
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(options.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
    return path
