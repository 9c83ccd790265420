# -*- coding: utf-8 -*-
"""
src/regionocr/gui/selection_window.py

Defines the SelectionWindow widget for choosing a region of an image.

The window shows a scaled preview of the loaded image and forwards mouse
events to a SelectionStateMachine. Qt reports positions from the top-left
corner; they are converted to the lower-left display convention before they
reach the state machine. Closing the window or pressing Escape cancels the
selection.
"""

import logging
from typing import Callable, Optional

import cv2
import numpy as np
from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QCursor, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QWidget

from ..core.geometry import DisplayRect, NativeRect, image_size
from ..core.selection import SelectionStateMachine

WINDOW_TITLE = "Select Region"


def to_pixmap(image: np.ndarray, scale: float) -> QPixmap:
    """Converts a BGR raster into a QPixmap scaled by `scale`."""
    rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    height, width = rgb.shape[:2]
    qimage = QImage(rgb.data, width, height, rgb.strides[0], QImage.Format.Format_RGB888).copy()
    pixmap = QPixmap.fromImage(qimage)
    if scale != 1.0:
        pixmap = pixmap.scaled(
            max(1, int(round(width * scale))),
            max(1, int(round(height * scale))),
            Qt.AspectRatioMode.IgnoreAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
    return pixmap


class SelectionWindow(QWidget):
    """
    A fixed-size window showing the scaled image and the selection being dragged.
    """

    def __init__(self, image: np.ndarray, scale: float,
                 on_complete: Callable[[Optional[NativeRect]], None]):
        """
        Args:
            image (np.ndarray): The decoded input image (BGR).
            scale (float): Preview scale factor.
            on_complete: Called once with the native region, or None on cancel.
        """
        super().__init__()
        logging.info(f"Initializing SelectionWindow with scale {scale:.3f}.")

        self.pixmap = to_pixmap(image, scale)
        self.machine = SelectionStateMachine(scale, on_complete, on_redraw=self._on_redraw)

        self.setWindowTitle(WINDOW_TITLE)
        self.setFixedSize(self.pixmap.size())
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)

        width, height = image_size(image)
        logging.debug(f"Preview is {self.pixmap.width()}x{self.pixmap.height()} for a {width}x{height} image.")

    def showEvent(self, event):
        """Ensure the window is active and ready when shown."""
        super().showEvent(event)
        self.activateWindow()
        self.raise_()

    def _to_display(self, event):
        """Maps a Qt mouse position to the lower-left display convention."""
        pos = event.position()
        return pos.x(), self.height() - pos.y()

    def _on_redraw(self, rect: DisplayRect):
        self.update()

    def paintEvent(self, event):
        """Draws the preview and, while dragging, the selection outline."""
        painter = QPainter(self)
        painter.drawPixmap(0, 0, self.pixmap)

        rect = self.machine.selection
        if rect is not None and not self.machine.is_done:
            top = self.height() - rect.y - rect.height
            painter.setPen(QPen(QColor(255, 0, 0), 1, Qt.PenStyle.SolidLine))
            painter.drawRect(QRectF(rect.x, top, rect.width, rect.height))
        painter.end()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.machine.press(*self._to_display(event))

    def mouseMoveEvent(self, event):
        self.machine.drag(*self._to_display(event))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.machine.release(*self._to_display(event))
            if self.machine.is_done:
                self.close()

    def keyPressEvent(self, event):
        """Allows the user to cancel the selection with the Escape key."""
        if event.key() == Qt.Key.Key_Escape:
            logging.info("Selection cancelled by user (Escape key).")
            self.close()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        # No-op once the selection has been finalized.
        self.machine.cancel()
        super().closeEvent(event)
