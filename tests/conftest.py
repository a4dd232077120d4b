# Shared fixtures plus a fallback 'qtbot' fixture if pytest-qt is not installed.
# Widget tests that expect a qtbot still perform basic lifecycle operations;
# if pytest-qt is installed, its fixture wins.

import sys
import os
import contextlib
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from scrollspy.design import reduced_motion  # noqa: E402
from scrollspy.testing import SyntheticLayout, VirtualScheduler  # noqa: E402

try:  # If pytest-qt present, do nothing (its fixture will be used)
    import pytestqt  # type: ignore  # noqa: F401
except Exception:  # pragma: no cover
    try:
        from PyQt6.QtWidgets import QApplication
    except Exception:  # pragma: no cover
        QApplication = None  # type: ignore

    @pytest.fixture
    def qtbot():  # type: ignore
        if QApplication is None:
            pytest.skip("PyQt6 not available")
        app = QApplication.instance() or QApplication(sys.argv)  # type: ignore
        widgets = []

        class Bot:
            def addWidget(self, w):  # mimic pytest-qt API subset
                widgets.append(w)

            def wait(self, ms):
                app.processEvents()

            @contextlib.contextmanager
            def waitSignal(self, *args, **kwargs):  # no-op stub
                yield

        return Bot()


@pytest.fixture(autouse=True)
def _motion_preference_reset():
    prev = reduced_motion.is_reduced_motion()
    reduced_motion.set_reduced_motion(False)
    yield
    reduced_motion.set_reduced_motion(prev)


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def document():
    """Three 500px sections in a 500px viewport (max scroll 1000)."""
    layout = SyntheticLayout(viewport_size=500)
    layout.stack([("intro", 500), ("usage", 500), ("api", 500)])
    return layout


class EventRecorder:
    def __init__(self, bus, names):
        self.events = []
        for name in names:
            bus.subscribe(name, self.events.append)

    @property
    def names(self):
        return [e.name for e in self.events]

    def payloads(self, name):
        return [e.payload for e in self.events if e.name == name]

    def clear(self):
        self.events.clear()


@pytest.fixture
def recorder_factory():
    return EventRecorder
