# -*- coding: utf-8 -*-
"""
src/regionocr/core/recognizer.py

Turns a selected region into recognized text and output artifacts.

Given the loaded image and an optional native-space region, the orchestrator
writes a cropped preview of the region, asks the engine to read the region,
and writes the text next to the input image. Failures at any of these steps
are logged and reduce the result; they never stop the run. The completion
callback is called exactly once with the final (possibly empty) text.
"""

import logging
import math
from pathlib import Path
from typing import Callable, List, Optional, Union

import cv2
import numpy as np

from ..errors import CropError, PersistenceWriteError
from ..utils.clipboard_manager import copy_to_clipboard
from .engine import RecognitionEngine
from .geometry import FlippedRect, NativeRect, image_size, to_flipped, to_normalized

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def crop_image(image: np.ndarray, rect: FlippedRect) -> np.ndarray:
    """
    Cuts a flipped-space rectangle out of a raster.

    Raises:
        CropError: If the rectangle is empty or does not fit inside the raster.
    """
    width, height = image_size(image)
    edges = (rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)
    if not all(math.isfinite(edge) for edge in edges):
        raise CropError(f"crop rectangle {rect.as_tuple()} has edges beyond any image")
    left, top, right, bottom = (int(round(edge)) for edge in edges)

    if right <= left or bottom <= top:
        raise CropError(f"crop rectangle {rect.as_tuple()} is empty")
    if left < 0 or top < 0 or right > width or bottom > height:
        raise CropError(f"crop rectangle {rect.as_tuple()} exceeds image bounds {width}x{height}")
    return image[top:bottom, left:right]


def write_image(image: np.ndarray, path: PathLike) -> None:
    try:
        ok = cv2.imwrite(str(path), image)
    except cv2.error as e:
        raise PersistenceWriteError(f"could not write image to {path}: {e}") from e
    if not ok:
        raise PersistenceWriteError(f"could not write image to {path}")


def write_text(text: str, path: PathLike) -> None:
    path = Path(path)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise PersistenceWriteError(f"could not write text to {path}: {e}") from e


class RecognitionOrchestrator:
    """
    Drives one recognition run against a RecognitionEngine.

    Attributes:
        engine (RecognitionEngine): The engine that reads the text.
        copy_to_clipboard (bool): Also place non-empty results on the clipboard.
    """

    def __init__(self, engine: RecognitionEngine, copy_to_clipboard: bool = False):
        self.engine = engine
        self.copy_to_clipboard = copy_to_clipboard

    def run(self, image: np.ndarray, region: Optional[NativeRect],
            output_path: PathLike, crop_path: PathLike,
            on_complete: Callable[[str], None]) -> None:
        """
        Recognizes text in `region` of `image`, or in the whole image if None.

        Args:
            image (np.ndarray): The decoded input image.
            region (Optional[NativeRect]): The selected region in native pixels.
            output_path: Where the recognized text is written.
            crop_path: Where the cropped preview of the region is written.
            on_complete: Called once with the recognized text.
        """
        completed = False

        def finish(text: str) -> None:
            nonlocal completed
            if completed:
                logger.warning("Ignoring a second completion of the same recognition run.")
                return
            completed = True
            on_complete(text)

        size = image_size(image)
        roi = None

        if region is not None:
            if region.is_empty:
                logger.error(f"Refusing to recognize a region without area: {region.as_tuple()}")
                finish("")
                return

            self._write_crop(image, to_flipped(region, size.height), crop_path)
            roi = to_normalized(region, size)
            logger.info(f"Region of interest: {roi.as_tuple()}")
        else:
            logger.info("No region given, analyzing the full image.")

        def on_engine_done(lines: Optional[List[str]], error: Optional[Exception]) -> None:
            finish(self._handle_result(lines, error, output_path))

        self.engine.recognize(image, roi, on_engine_done)

    def _write_crop(self, image: np.ndarray, rect: FlippedRect, crop_path: PathLike) -> None:
        try:
            crop = crop_image(image, rect)
            write_image(crop, crop_path)
        except CropError as e:
            logger.warning(f"Skipping cropped preview: {e}")
            return
        except PersistenceWriteError as e:
            logger.error(f"Failed to save cropped preview: {e}")
            return
        logger.info(f"Saved cropped preview to {crop_path}")

    def _handle_result(self, lines: Optional[List[str]], error: Optional[Exception],
                       output_path: PathLike) -> str:
        if error is not None:
            logger.error(f"OCR error: {error}")
            lines = []

        text = "\n".join(lines or [])
        if not text:
            logger.warning("No text recognized; the output file was not written.")
            return text

        try:
            write_text(text, output_path)
            logger.info(f"Saved OCR result to {output_path}")
        except PersistenceWriteError as e:
            logger.error(f"Failed to save output: {e}")

        print(f"\nOCR Result:\n{text}")

        if self.copy_to_clipboard:
            copy_to_clipboard(text)
        return text
