"""Section navigation bar.

A column of checkable buttons, one per tracked section, that mirrors the
active section of a ``ScrollSpyArea`` and scrolls to a section on click.
The buttons are rebuilt whenever the area starts or stops tracking a section.

Styling hooks:
 - objectName ``sectionNav`` on the bar, ``sectionNavButton`` on each button
 - dynamic property ``active`` (bool) and ``ariaCurrent`` ("page" or "")
   on each button so QSS can highlight the current entry
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QPushButton, QVBoxLayout, QWidget

from ..models import LinkState
from .scroll_spy_area import ScrollSpyArea

__all__ = ["SectionNav"]


class SectionNav(QWidget):
    sectionRequested = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("sectionNav")
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(2)
        self._buttons: Dict[str, QPushButton] = {}
        self._labels: Dict[str, str] = {}
        self._active: Optional[str] = None
        self._area: Optional[ScrollSpyArea] = None

    def bind(self, area: ScrollSpyArea, labels: Optional[Mapping[str, str]] = None) -> None:
        """Follow *area*: mirror its tracked sections and its active id."""
        if self._area is not None:
            self._area.activeChanged.disconnect(self._on_active_changed)
            self._area.sectionsChanged.disconnect(self._on_sections_changed)
        self._area = area
        self.set_sections(area.controller.ids, labels or {})
        area.activeChanged.connect(self._on_active_changed)
        area.sectionsChanged.connect(self._on_sections_changed)
        self.set_active(area.active_id)

    def set_sections(self, ids: Iterable[str], labels: Optional[Mapping[str, str]] = None) -> None:
        """Rebuild the buttons; *labels* replaces the stored id-to-text mapping when given."""
        if labels is not None:
            self._labels = dict(labels)
        while self._layout.count():
            item = self._layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._buttons.clear()
        for section_id in ids:
            btn = QPushButton(self._labels.get(section_id, section_id), self)
            btn.setObjectName("sectionNavButton")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, sid=section_id: self._on_clicked(sid))
            self._layout.addWidget(btn)
            self._buttons[section_id] = btn
        self._layout.addStretch(1)
        self._refresh()

    def button(self, section_id: str) -> Optional[QPushButton]:
        return self._buttons.get(section_id)

    @property
    def active_id(self) -> Optional[str]:
        return self._active

    def set_active(self, section_id: Optional[str]) -> None:
        self._active = section_id
        self._refresh()

    def _refresh(self) -> None:
        for section_id, btn in self._buttons.items():
            link = LinkState(id=section_id, active=section_id == self._active)
            btn.setChecked(link.active)
            btn.setProperty("active", link.active)
            btn.setProperty("ariaCurrent", link.aria_current or "")
            btn.style().unpolish(btn)
            btn.style().polish(btn)

    def _on_active_changed(self, new_id, _prev_id) -> None:
        self.set_active(new_id)

    def _on_sections_changed(self, ids) -> None:
        self.set_sections(ids)

    def _on_clicked(self, section_id: str) -> None:
        self.sectionRequested.emit(section_id)
        if self._area is not None:
            self._area.scroll_to_section(section_id)
        else:
            # keep the checked state consistent until the host reacts
            self._refresh()
