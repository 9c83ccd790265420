# -*- coding: utf-8 -*-
"""
src/regionocr/core/easyocr_engine.py

RecognitionEngine implementation backed by EasyOCR.

Recognition runs on a worker thread so the preview window stays responsive,
and the result is handed back to the Qt event loop through a signal. The
callback therefore always runs on the main thread, serially with pointer
events.
"""

import logging
import threading
from typing import List, Optional

import easyocr
import numpy as np
from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from ..errors import EngineError
from .engine import DEFAULT_MIN_TEXT_HEIGHT, RecognitionCallback, RecognitionEngine, filter_results, roi_to_window
from .geometry import NormalizedRect, image_size

DEFAULT_LANGUAGES = ['en']


class _ResultRelay(QObject):
    """Carries a finished recognition from the worker thread to the Qt main thread."""
    finished = pyqtSignal(object, object, object)

    def __init__(self):
        super().__init__()
        self.finished.connect(self._deliver)

    @pyqtSlot(object, object, object)
    def _deliver(self, callback, lines, error):
        callback(lines, error)


class EasyOCREngine(RecognitionEngine):
    """
    Recognition engine backed by an EasyOCR reader.

    The reader loads its models on first use, which can take a while, so one
    instance should be kept for the whole process. The engine itself must be
    created on the Qt main thread after the application object exists.
    """

    def __init__(self, languages: List[str] = None, gpu: bool = False,
                 confidence_threshold: float = 0.0,
                 min_text_height: float = DEFAULT_MIN_TEXT_HEIGHT,
                 paragraph: bool = False):
        """
        Args:
            languages (List[str]): Language codes for EasyOCR. Defaults to ['en'].
            gpu (bool): Whether EasyOCR may use CUDA.
            confidence_threshold (float): Minimum confidence (0-1) of a kept result.
            min_text_height (float): Minimum box height as a fraction of the analyzed height.
            paragraph (bool): Let EasyOCR merge nearby lines into paragraphs.
        """
        if languages is None:
            languages = DEFAULT_LANGUAGES
        self.languages = languages
        self.gpu = gpu
        self.confidence_threshold = confidence_threshold
        self.min_text_height = min_text_height
        self.paragraph = paragraph
        self._reader: Optional[easyocr.Reader] = None
        self._reader_lock = threading.Lock()
        self._relay = _ResultRelay()

    def _get_reader(self) -> easyocr.Reader:
        with self._reader_lock:
            if self._reader is None:
                logging.info(f"Initializing EasyOCR Reader for languages: {self.languages}...")
                try:
                    self._reader = easyocr.Reader(self.languages, gpu=self.gpu)
                except Exception as e:
                    raise EngineError(f"failed to initialize EasyOCR reader: {e}") from e
                logging.info("EasyOCR Reader initialized successfully.")
            return self._reader

    def read_lines(self, image: np.ndarray, roi: Optional[NormalizedRect]) -> List[str]:
        """Runs recognition synchronously and returns the accepted lines."""
        if image is None or image.size == 0:
            raise EngineError("cannot recognize an empty image")

        if roi is not None:
            left, top, right, bottom = roi_to_window(roi, image_size(image))
            image = image[top:bottom, left:right]
            logging.debug(f"Analyzing window left={left} top={top} right={right} bottom={bottom}")

        reader = self._get_reader()
        try:
            results = reader.readtext(image, detail=1, paragraph=self.paragraph)
        except Exception as e:
            raise EngineError(f"an error occurred during OCR processing: {e}") from e

        lines = filter_results(results, image.shape[0],
                               confidence_threshold=self.confidence_threshold,
                               min_text_height=self.min_text_height)
        logging.info(f"EasyOCR returned {len(results)} results, kept {len(lines)}.")
        return lines

    def recognize(self, image: np.ndarray, roi: Optional[NormalizedRect],
                  callback: RecognitionCallback) -> None:
        worker = threading.Thread(
            target=self._run,
            args=(image, roi, callback),
            name="easyocr-recognition",
            daemon=True,
        )
        worker.start()

    def _run(self, image, roi, callback):
        try:
            lines = self.read_lines(image, roi)
        except EngineError as e:
            self._relay.finished.emit(callback, None, e)
        except Exception as e:
            logging.error(f"Unexpected recognition failure: {e}", exc_info=True)
            self._relay.finished.emit(callback, None, EngineError(str(e)))
        else:
            self._relay.finished.emit(callback, lines, None)
