"""ScrollSpyArea widget.

A ``QScrollArea`` whose content is a vertical stack of section widgets and
which tracks the active section while the user scrolls.

Usage:
    area = ScrollSpyArea()
    area.add_section("intro", QLabel("..."))
    area.add_section("usage", QLabel("..."))
    area.activeChanged.connect(lambda new, prev: print(new))
    area.scroll_to_section("usage")

Sections are tracked by id (``add_section``/``remove_section``) unless a
``selector`` is given, in which case every direct child of the content widget
whose objectName fully matches the pattern is tracked and content changes are
picked up automatically.

Signals
-------
activeChanged(new_id, prev_id)   ids may be None
sectionEntered(id) / sectionLeft(id)
scrollStarted() / scrollEnded()
snapshotUpdated(SpySnapshot)
sectionsChanged(ids)             tuple of the tracked ids after a change
"""

from __future__ import annotations

from typing import Dict, Optional

from PyQt6.QtCore import QEvent, QObject, pyqtSignal
from PyQt6.QtWidgets import QScrollArea, QVBoxLayout, QWidget

from ..app.config_store import SpyOptions
from ..design.geometry import TrackedByIds, TrackedBySelector
from ..models import PositionTarget, ScrollToOptions, SpySnapshot
from ..services.event_bus import Event, EventBus, SpyEvent
from ..services.scheduler import Scheduler
from ..services.scroll_spy import ScrollSpyController
from .qt_host import QtFrameScheduler, ScrollAreaLayoutProvider

__all__ = ["ScrollSpyArea"]

_MUTATION_EVENTS = (QEvent.Type.ChildAdded, QEvent.Type.ChildRemoved, QEvent.Type.LayoutRequest)


class ScrollSpyArea(QScrollArea):
    activeChanged = pyqtSignal(object, object)
    sectionEntered = pyqtSignal(str)
    sectionLeft = pyqtSignal(str)
    scrollStarted = pyqtSignal()
    scrollEnded = pyqtSignal()
    snapshotUpdated = pyqtSignal(object)
    sectionsChanged = pyqtSignal(object)

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        options: Optional[SpyOptions] = None,
        selector: Optional[str] = None,
        scheduler: Optional[Scheduler] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("scrollSpyArea")
        self.setWidgetResizable(True)
        self._content = QWidget()
        self._content.setObjectName("scrollSpyContent")
        self._layout = QVBoxLayout(self._content)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self.setWidget(self._content)
        self._sections: Dict[str, QWidget] = {}

        self.scheduler = scheduler if scheduler is not None else QtFrameScheduler(self)
        self.provider = ScrollAreaLayoutProvider(self, on_settled=self._on_scroll_settled)
        tracked = TrackedBySelector(selector) if selector is not None else TrackedByIds(())
        self.controller = ScrollSpyController(
            tracked, self.provider, self.scheduler, options=options, bus=bus
        )
        bus = self.controller.bus
        self._subscriptions = [
            bus.subscribe(SpyEvent.ACTIVE_CHANGED, self._forward_active),
            bus.subscribe(SpyEvent.SECTION_ENTERED, lambda e: self.sectionEntered.emit(e.payload.id)),
            bus.subscribe(SpyEvent.SECTION_LEFT, lambda e: self.sectionLeft.emit(e.payload.id)),
            bus.subscribe(SpyEvent.SCROLL_STARTED, lambda e: self.scrollStarted.emit()),
            bus.subscribe(SpyEvent.SCROLL_ENDED, lambda e: self.scrollEnded.emit()),
            bus.subscribe(SpyEvent.SNAPSHOT_UPDATED, lambda e: self.snapshotUpdated.emit(e.payload)),
            bus.subscribe(SpyEvent.SECTIONS_CHANGED, lambda e: self.sectionsChanged.emit(tuple(e.payload))),
        ]
        self.verticalScrollBar().valueChanged.connect(self._on_value_changed)
        self._content.installEventFilter(self)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    @property
    def content(self) -> QWidget:
        return self._content

    @property
    def active_id(self) -> Optional[str]:
        return self.controller.active_id

    @property
    def snapshot(self) -> SpySnapshot:
        return self.controller.snapshot

    def section_widget(self, section_id: str) -> Optional[QWidget]:
        return self._sections.get(section_id)

    def add_section(self, section_id: str, widget: QWidget) -> QWidget:
        """Append *widget* to the content stack as section *section_id*."""
        if not widget.objectName():
            widget.setObjectName(section_id)
        self._layout.addWidget(widget)
        self._sections[section_id] = widget
        if isinstance(self.controller.tracked, TrackedByIds):
            self.controller.set_tracked(TrackedByIds(tuple(self._sections)))
            self.controller.register(section_id, widget)
        return widget

    def remove_section(self, section_id: str) -> None:
        widget = self._sections.pop(section_id, None)
        if widget is None:
            return
        if isinstance(self.controller.tracked, TrackedByIds):
            self.controller.unregister(section_id)
            self.controller.set_tracked(TrackedByIds(tuple(self._sections)))
        self._layout.removeWidget(widget)
        widget.setParent(None)
        widget.deleteLater()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def scroll_to_section(
        self,
        section_id: str,
        *,
        behavior: Optional[str] = None,
        anchor: Optional[str] = None,
        offset=None,
        lock_active: Optional[bool] = None,
    ) -> bool:
        opts = ScrollToOptions(offset=offset, behavior=behavior, anchor=anchor, lock_active=lock_active)
        return self.controller.scroll_to(section_id, opts)

    def scroll_to_position(self, top: float, *, behavior: Optional[str] = None) -> bool:
        return self.controller.scroll_to(PositionTarget(top), ScrollToOptions(behavior=behavior))

    def dispose(self) -> None:
        for sub in self._subscriptions:
            self.controller.bus.unsubscribe(sub)
        self._subscriptions = []
        self.controller.dispose()
        if isinstance(self.scheduler, QtFrameScheduler):
            self.scheduler.cancel_all()

    # ------------------------------------------------------------------
    # Qt event plumbing
    # ------------------------------------------------------------------
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt API
        if obj is self._content and event.type() in _MUTATION_EVENTS:
            self.controller.handle_mutation()
        return super().eventFilter(obj, event)

    def resizeEvent(self, event) -> None:  # noqa: N802 - Qt API
        super().resizeEvent(event)
        self.controller.handle_resize()

    def _on_value_changed(self, _value: int) -> None:
        self.controller.handle_scroll()

    def _on_scroll_settled(self) -> None:
        self.controller.handle_scroll_settled()

    def _forward_active(self, event: Event) -> None:
        self.activeChanged.emit(event.payload.new_id, event.payload.prev_id)
