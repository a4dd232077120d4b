"""Diagnostics capture.

Every non-fatal problem the detector notices (clamped options, unknown
scroll targets, invalid selectors, ...) is a ``WARNING`` on a ``scrollspy.*``
logger. ``DiagnosticsLog`` keeps the most recent records in a ring buffer so
a host (debug overlay, status bar) can show them, and can optionally
republish each record on an ``EventBus`` as ``SpyEvent.DIAGNOSTIC``.

Design goals:
 - Headless testability (no Qt dependency here)
 - Filtering by level name or logger name substring
 - Capacity-bound ring buffer with O(1) append
"""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from dataclasses import asdict, dataclass
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import EventBus, SpyEvent

__all__ = ["DiagnosticEntry", "DiagnosticsLog"]

ROOT_LOGGER_NAME = "scrollspy"


@dataclass(frozen=True)
class DiagnosticEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, log: "DiagnosticsLog") -> None:
        super().__init__()
        self._log = log

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._log._ingest_record(record)


class DiagnosticsLog:
    def __init__(
        self,
        capacity: int = 200,
        *,
        bus: Optional[EventBus] = None,
        level: int = logging.WARNING,
    ) -> None:
        self._lock = RLock()
        self._entries: Deque[DiagnosticEntry] = deque(maxlen=capacity)
        self._bus = bus
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(level)
        self._logger: Optional[logging.Logger] = None
        self._publishing = False

    # Lifecycle --------------------------------------------------------
    def attach(self, logger_name: str = ROOT_LOGGER_NAME) -> None:
        if self._logger is not None:
            return
        logger = logging.getLogger(logger_name)
        logger.addHandler(self._handler)
        if logger.getEffectiveLevel() > self._handler.level:
            logger.setLevel(self._handler.level)
        self._logger = logger

    def detach(self) -> None:
        if self._logger is None:
            return
        self._logger.removeHandler(self._handler)
        self._logger = None

    @property
    def attached(self) -> bool:
        return self._logger is not None

    # Internal ingestion -----------------------------------------------
    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = DiagnosticEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        # a failing DIAGNOSTIC handler logs through the bus again; don't recurse
        if self._bus is None or self._publishing:
            return
        self._publishing = True
        try:
            self._bus.publish(SpyEvent.DIAGNOSTIC, entry)
        finally:
            self._publishing = False

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[DiagnosticEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[DiagnosticEntry]:
        out: List[DiagnosticEntry] = []
        for e in self.recent():
            if level and e.level != level:
                continue
            if name_contains and name_contains not in e.name:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # Export ------------------------------------------------------------
    def export_jsonl(
        self,
        path: str | None = None,
        *,
        level: str | None = None,
        name_contains: str | None = None,
        append: bool = False,
    ) -> int:
        """Export filtered entries as JSON Lines; returns number of lines written."""
        entries = self.filter(level=level, name_contains=name_contains)
        file_path = path or os.path.join(os.getcwd(), "scrollspy_diagnostics.jsonl")
        with open(file_path, "a" if append else "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
