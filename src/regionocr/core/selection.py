# -*- coding: utf-8 -*-
"""
src/regionocr/core/selection.py

Drag-to-select state machine, independent of any GUI toolkit.

The preview window forwards pointer events here as plain display-space
coordinates. The machine is single shot: the completion callback fires once,
either with the selected region in native pixels or with None when the
operator cancels, and every later event is ignored.
"""

import enum
import logging
from typing import Callable, Optional, Tuple

from .geometry import DisplayRect, NativeRect, display_rect_from_points, to_native

logger = logging.getLogger(__name__)


class SelectionState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    FINALIZED = "finalized"
    CANCELLED = "cancelled"


class SelectionStateMachine:
    """
    Tracks one pointer drag over a scaled preview.

    Attributes:
        scale (float): Preview scale factor used to convert the result.
        state (SelectionState): The current state.
        selection (Optional[DisplayRect]): The rectangle being dragged.
    """

    def __init__(self, scale: float,
                 on_complete: Callable[[Optional[NativeRect]], None],
                 on_redraw: Optional[Callable[[DisplayRect], None]] = None):
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale
        self.state = SelectionState.IDLE
        self.selection: Optional[DisplayRect] = None
        self._start: Optional[Tuple[float, float]] = None
        self._on_complete = on_complete
        self._on_redraw = on_redraw

    @property
    def is_done(self) -> bool:
        return self.state in (SelectionState.FINALIZED, SelectionState.CANCELLED)

    def press(self, x: float, y: float) -> None:
        """Starts a drag at the given display point."""
        if self.state is not SelectionState.IDLE:
            return
        self._start = (x, y)
        self.selection = display_rect_from_points(self._start, self._start)
        self.state = SelectionState.DRAGGING
        logger.debug(f"Selection started at: {x},{y}")

    def drag(self, x: float, y: float) -> None:
        """Stretches the selection to the current pointer position."""
        if self.state is not SelectionState.DRAGGING:
            return
        self._update(x, y)

    def release(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        """Ends the drag and reports the selection in native pixels."""
        if self.state is not SelectionState.DRAGGING:
            return
        if x is not None and y is not None:
            self._update(x, y)

        self.state = SelectionState.FINALIZED
        native = to_native(self.selection, self.scale)
        logger.info(f"Selection finalized: display={self.selection.as_tuple()} native={native.as_tuple()}")
        self._on_complete(native)

    def cancel(self) -> None:
        """Abandons the selection, e.g. because the window is closing."""
        if self.is_done:
            return
        self.state = SelectionState.CANCELLED
        logger.info("Selection cancelled.")
        self._on_complete(None)

    def _update(self, x: float, y: float) -> None:
        self.selection = display_rect_from_points(self._start, (x, y))
        if self._on_redraw:
            self._on_redraw(self.selection)
