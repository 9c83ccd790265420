# -*- coding: utf-8 -*-
"""
The Core Processing Package for RegionOCR.

Everything here works without a window:
- `geometry`: rectangle types per coordinate space and the transforms between them.
- `region_store`: reading and writing region records.
- `selection`: the drag-to-select state machine.
- `engine`: the recognition engine contract; `easyocr_engine` implements it.
- `recognizer`: the orchestrator that turns a region into text and artifacts.
"""

from .geometry import DisplayRect, FlippedRect, NativeRect, NormalizedRect, Size
from .selection import SelectionState, SelectionStateMachine

__all__ = [
    "DisplayRect",
    "FlippedRect",
    "NativeRect",
    "NormalizedRect",
    "Size",
    "SelectionState",
    "SelectionStateMachine",
]
