"""
Tests for regionocr.gui.selection_window on the offscreen Qt platform.

Pointer events are sent in Qt's top-left window coordinates; the emitted
region must land on the same raster rows once flipped for cropping.
"""
from unittest.mock import MagicMock

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QKeyEvent, QMouseEvent
from PyQt6.QtWidgets import QApplication

from regionocr.core.geometry import FlippedRect, NativeRect, to_flipped
from regionocr.core.recognizer import crop_image
from regionocr.gui.selection_window import SelectionWindow


def send_mouse(widget, event_type, x, y, button=Qt.MouseButton.LeftButton):
    buttons = Qt.MouseButton.NoButton if event_type == QEvent.Type.MouseButtonRelease else Qt.MouseButton.LeftButton
    if event_type == QEvent.Type.MouseMove:
        button = Qt.MouseButton.NoButton
    pos = QPointF(x, y)
    event = QMouseEvent(event_type, pos, widget.mapToGlobal(pos), button, buttons,
                        Qt.KeyboardModifier.NoModifier)
    QApplication.sendEvent(widget, event)


def is_red(color):
    return color.red() > 200 and color.green() < 50


@pytest.fixture
def on_complete():
    return MagicMock()


@pytest.fixture
def window(qt_app, sample_image, on_complete):
    """An 800x600 image previewed at half size (a 400x300 window)."""
    widget = SelectionWindow(sample_image, 0.5, on_complete)
    widget.show()
    return widget


class TestSelectionWindow:
    """Tests for SelectionWindow."""

    def test_window_matches_scaled_image(self, window):
        assert (window.width(), window.height()) == (400, 300)

    def test_drag_emits_lower_left_native_region(self, window, on_complete, sample_image):
        send_mouse(window, QEvent.Type.MouseButtonPress, 10, 20)
        send_mouse(window, QEvent.Type.MouseMove, 60, 45)
        send_mouse(window, QEvent.Type.MouseButtonRelease, 110, 70)

        on_complete.assert_called_once()
        region = on_complete.call_args[0][0]
        assert region == NativeRect(20, 460, 200, 100)

        flipped = to_flipped(region, 600)
        assert flipped == FlippedRect(20, 40, 200, 100)
        # The dragged window rows 20..70 are raster rows 40..140
        crop = crop_image(sample_image, flipped)
        assert crop[0, 0, 0] == 40
        assert crop[-1, 0, 0] == 139

    def test_drag_upwards_gives_same_region(self, window, on_complete):
        send_mouse(window, QEvent.Type.MouseButtonPress, 110, 70)
        send_mouse(window, QEvent.Type.MouseButtonRelease, 10, 20)

        on_complete.assert_called_once_with(NativeRect(20, 460, 200, 100))

    def test_outline_is_drawn_where_the_pointer_is(self, window):
        send_mouse(window, QEvent.Type.MouseButtonPress, 10, 20)
        send_mouse(window, QEvent.Type.MouseMove, 110, 70)

        image = window.grab().toImage()

        assert any(is_red(image.pixelColor(60, y)) for y in (19, 20, 21))
        assert any(is_red(image.pixelColor(60, y)) for y in (69, 70, 71))
        # The unconverted display rows (230..280) stay untouched
        assert not any(is_red(image.pixelColor(60, y)) for y in range(225, 285))

    def test_right_button_does_not_select(self, window, on_complete):
        send_mouse(window, QEvent.Type.MouseButtonPress, 10, 20, button=Qt.MouseButton.RightButton)
        send_mouse(window, QEvent.Type.MouseButtonRelease, 110, 70, button=Qt.MouseButton.RightButton)

        on_complete.assert_not_called()
        assert window.machine.selection is None

    def test_escape_cancels_once(self, window, on_complete):
        QApplication.sendEvent(
            window, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Escape, Qt.KeyboardModifier.NoModifier))

        on_complete.assert_called_once_with(None)
        assert window.machine.is_done

    def test_close_without_selection_cancels(self, window, on_complete):
        window.close()

        on_complete.assert_called_once_with(None)

    def test_close_after_selection_does_not_cancel(self, window, on_complete):
        send_mouse(window, QEvent.Type.MouseButtonPress, 10, 20)
        send_mouse(window, QEvent.Type.MouseButtonRelease, 110, 70)

        # The release already closed the window; the only call is the region
        on_complete.assert_called_once_with(NativeRect(20, 460, 200, 100))
