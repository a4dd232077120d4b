"""Qt host adapters.

Bridges the host-agnostic detector to a ``QScrollArea``:

 - ``QtFrameScheduler`` implements the ``Scheduler`` protocol with
   single-shot ``QTimer`` objects (frames are one ``FRAME_INTERVAL_MS`` tick)
 - ``ScrollAreaLayoutProvider`` implements ``LayoutProvider`` against the
   area's viewport, vertical scrollbar and content widget

Coordinates reported by ``rect_of`` are relative to the area's viewport, so
``frame_top`` is always 0 and the sampler's content-relative math reduces to
``rect.top + scrollbar value``.

Sections are the *direct* children of the content widget. Selector queries
match the full ``objectName`` against a ``QRegularExpression``; the
objectName doubles as the section id.
"""

from __future__ import annotations

import time
from typing import Any, Callable, List, Optional, Set

from PyQt6.QtCore import QEasingCurve, QObject, QPoint, QPropertyAnimation, QRegularExpression, Qt, QTimer
from PyQt6.QtWidgets import QScrollArea, QWidget

from ..config.settings import FRAME_INTERVAL_MS, SMOOTH_SCROLL_DURATION_MS
from ..design.geometry import RawTelemetry, Rect, SectionDescriptor

__all__ = ["QtTimerHandle", "QtFrameScheduler", "ScrollAreaLayoutProvider"]


class QtTimerHandle:
    def __init__(self, timer: QTimer, owner: "QtFrameScheduler") -> None:
        self._timer = timer
        self._owner = owner

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def cancel(self) -> None:
        self._timer.stop()
        self._owner._discard(self._timer)


class QtFrameScheduler:
    """``Scheduler`` backed by the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None, *, frame_interval_ms: int = FRAME_INTERVAL_MS) -> None:
        self._parent = parent
        self._frame_interval = int(frame_interval_ms)
        self._timers: Set[QTimer] = set()  # keep pending timers alive

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def request_frame(self, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(self._frame_interval, callback)

    def after(self, delay_ms: float, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(max(0, int(round(delay_ms))), callback)

    @property
    def pending(self) -> int:
        return len(self._timers)

    def cancel_all(self) -> None:
        for timer in list(self._timers):
            timer.stop()
            self._discard(timer)

    def _start(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)

        def _fire() -> None:
            self._discard(timer)
            callback()

        timer.timeout.connect(_fire)
        self._timers.add(timer)
        timer.start(delay_ms)
        return QtTimerHandle(timer, self)

    def _discard(self, timer: QTimer) -> None:
        if timer in self._timers:
            self._timers.discard(timer)
            timer.deleteLater()


class ScrollAreaLayoutProvider:
    """``LayoutProvider`` for a ``QScrollArea``.

    ``on_settled`` is invoked when a smooth scroll animation finishes; hosts
    forward it to ``ScrollSpyController.handle_scroll_settled``.
    """

    def __init__(
        self,
        area: QScrollArea,
        *,
        on_settled: Optional[Callable[[], None]] = None,
        duration_ms: int = SMOOTH_SCROLL_DURATION_MS,
    ) -> None:
        self._area = area
        self._on_settled = on_settled
        self._duration_ms = duration_ms
        self._animation: Optional[QPropertyAnimation] = None

    @property
    def animating(self) -> bool:
        return (
            self._animation is not None
            and self._animation.state() == QPropertyAnimation.State.Running
        )

    def rect_of(self, handle: Any) -> Optional[Rect]:
        if not isinstance(handle, QWidget):
            return None
        viewport = self._area.viewport()
        if viewport is None or not viewport.isAncestorOf(handle):
            return None
        top_left = handle.mapTo(viewport, QPoint(0, 0))
        return Rect(top=float(top_left.y()), height=float(handle.height()))

    def frame_top(self, frame: Any) -> float:
        return 0.0

    def telemetry(self, frame: Any) -> RawTelemetry:
        bar = self._area.verticalScrollBar()
        viewport = self._area.viewport()
        content = self._area.widget()
        return RawTelemetry(
            position=float(bar.value()),
            viewport_size=float(viewport.height()) if viewport is not None else 0.0,
            content_size=float(content.height()) if content is not None else 0.0,
        )

    def scroll_to(self, frame: Any, position: float, behavior: str) -> None:
        bar = self._area.verticalScrollBar()
        target = int(round(max(bar.minimum(), min(bar.maximum(), position))))
        if self._animation is not None:
            self._animation.stop()
            self._animation = None
        if behavior == "instant" or self._duration_ms <= 0 or bar.value() == target:
            bar.setValue(target)
            if behavior != "instant":
                self._settled()
            return
        anim = QPropertyAnimation(bar, b"value", self._area)
        anim.setDuration(self._duration_ms)
        anim.setStartValue(bar.value())
        anim.setEndValue(target)
        anim.setEasingCurve(QEasingCurve.Type.OutCubic)
        anim.finished.connect(self._settled)
        self._animation = anim
        anim.start()

    def query(self, selector: str, frame: Any) -> List[SectionDescriptor]:
        regex = QRegularExpression(QRegularExpression.anchoredPattern(selector))
        if not regex.isValid():
            raise ValueError(regex.errorString())
        content = self._area.widget()
        if content is None:
            return []
        children = content.findChildren(QWidget, options=Qt.FindChildOption.FindDirectChildrenOnly)
        matched = [w for w in children if regex.match(w.objectName()).hasMatch()]
        matched.sort(key=lambda w: w.y())
        return [SectionDescriptor(id=w.objectName(), handle=w) for w in matched]

    def _settled(self) -> None:
        self._animation = None
        if self._on_settled is not None:
            self._on_settled()
