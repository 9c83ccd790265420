"""
Pytest configuration and shared fixtures.
"""
import os
import sys
import time
from pathlib import Path

import numpy as np
import pytest

# Qt widgets render without a display during tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Make 'regionocr' importable without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from regionocr.core.engine import RecognitionEngine


class FakeEngine(RecognitionEngine):
    """Answers every recognition immediately with canned lines or an error."""

    def __init__(self, lines=None, error=None):
        self.lines = lines if lines is not None else []
        self.error = error
        self.calls = []

    def recognize(self, image, roi, callback):
        self.calls.append((image, roi))
        if self.error is not None:
            callback(None, self.error)
        else:
            callback(list(self.lines), None)


@pytest.fixture
def sample_image():
    """An 800x600 BGR raster with a distinct value in every row."""
    image = np.zeros((600, 800, 3), dtype=np.uint8)
    image[:, :, 0] = (np.arange(600) % 256).reshape(600, 1)
    return image


@pytest.fixture
def fake_engine():
    return FakeEngine(lines=["first line", "second line"])


@pytest.fixture
def image_file(tmp_path, sample_image):
    """The sample image written to disk as PNG."""
    import cv2

    path = tmp_path / "scan.png"
    cv2.imwrite(str(path), sample_image)
    return path


@pytest.fixture(scope="session")
def qt_app():
    """One QApplication shared by every test that needs an event loop or widgets."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


def process_events_until(condition, timeout=5.0):
    """Runs the Qt event loop until `condition()` holds or the timeout passes."""
    from PyQt6.QtCore import QCoreApplication, QEventLoop

    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 50)
    return condition()
