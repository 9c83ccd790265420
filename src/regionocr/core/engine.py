# -*- coding: utf-8 -*-
"""
src/regionocr/core/engine.py

The contract between the orchestrator and a text-recognition engine.

One call to `recognize` leads to exactly one call of the supplied callback,
either with the recognized lines or with an error. There is no timeout and no
way to cancel a recognition once it has started; callers that need either
must wrap the engine themselves.

The helpers below translate the region-of-interest into raster pixels and
filter raw engine results, independent of any particular engine.
"""

import abc
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import EngineError
from .geometry import NormalizedRect, Size

logger = logging.getLogger(__name__)

# Receives (lines, None) on success or (None, error) on failure.
RecognitionCallback = Callable[[Optional[List[str]], Optional[Exception]], None]

# Results whose box is shorter than this fraction of the analyzed height are dropped.
DEFAULT_MIN_TEXT_HEIGHT = 0.01


class RecognitionEngine(abc.ABC):
    """Anything that can turn a raster into lines of text."""

    @abc.abstractmethod
    def recognize(self, image: np.ndarray, roi: Optional[NormalizedRect],
                  callback: RecognitionCallback) -> None:
        """
        Starts recognition of `image`, restricted to `roi` when given.

        `roi` uses a lower-left origin, like native rectangles. The callback
        must be called exactly once.
        """


def roi_to_window(roi: NormalizedRect, size: Size) -> Tuple[int, int, int, int]:
    """
    Converts a region-of-interest into a pixel window of the raster.

    The window is clamped to the raster.

    Returns:
        (left, top, right, bottom) in raster columns and rows.

    Raises:
        EngineError: If nothing of the region lies inside the raster.
    """
    width, height = size
    left = roi.x * width
    right = (roi.x + roi.width) * width
    # Raster rows grow downwards, the region's y axis grows upwards.
    top = (1.0 - roi.y - roi.height) * height
    bottom = (1.0 - roi.y) * height

    left = int(round(min(max(left, 0), width)))
    right = int(round(min(max(right, 0), width)))
    top = int(round(min(max(top, 0), height)))
    bottom = int(round(min(max(bottom, 0), height)))

    if right <= left or bottom <= top:
        raise EngineError(f"region of interest {roi.as_tuple()} lies outside the image")
    return left, top, right, bottom


def _box_height(bbox: Sequence[Sequence[float]]) -> float:
    ys = [point[1] for point in bbox]
    return max(ys) - min(ys)


def filter_results(results: Sequence[Sequence[Any]], analyzed_height: int,
                   confidence_threshold: float = 0.0,
                   min_text_height: float = DEFAULT_MIN_TEXT_HEIGHT) -> List[str]:
    """
    Keeps the text of results that are confident and tall enough.

    Results are (bbox, text, confidence) triples, or (bbox, text) pairs when
    the engine groups lines into paragraphs. Pairs carry no confidence and are
    only filtered by height. The engine's order is preserved.
    """
    min_height = min_text_height * analyzed_height
    lines = []
    for result in results:
        bbox, text = result[0], result[1]
        confidence = result[2] if len(result) > 2 else None

        if confidence is not None and confidence < confidence_threshold:
            logger.debug(f"Rejected '{text}' with confidence {confidence:.2f}")
            continue
        if _box_height(bbox) < min_height:
            logger.debug(f"Rejected '{text}': text height below {min_height:.1f}px")
            continue
        if text.strip():
            lines.append(text)
    return lines
