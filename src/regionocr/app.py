# -*- coding: utf-8 -*-
"""
src/regionocr/app.py

Core application controller for RegionOCR.

This module parses the command line, loads the image and runs one session.
A session either lets the operator select a region on a scaled preview
(interactive mode) or reuses the region saved in ./region.txt (reuse mode),
and then hands the region to the recognition orchestrator.

Usage:
    regionocr <image-path> [--noscale] [--reuse]

Exit status is 0 on success and 1 on any fatal condition, including the
operator closing the preview without selecting anything.
"""

import argparse
import enum
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import cv2
import numpy as np
from PyQt6.QtCore import QCoreApplication, QTimer

from .config import get_config
from .core.engine import RecognitionEngine
from .core.geometry import NativeRect, Size, compute_scale, image_size
from .core.recognizer import RecognitionOrchestrator
from .core.region_store import REUSED_REGION_FILENAME, load_region, save_region
from .errors import ArgumentError, ImageLoadError, PersistenceWriteError, RegionParseError, UserCancellation

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

logger = logging.getLogger(__name__)

# (image, scale, on_complete) -> an object with show()
SelectorFactory = Callable[[np.ndarray, float, Callable[[Optional[NativeRect]], None]], object]


class SessionMode(enum.Enum):
    INTERACTIVE = "interactive"
    REUSE_SAVED_REGION = "reuse"


@dataclass(frozen=True)
class SessionOptions:
    image_path: Path
    allow_scaling: bool = True
    mode: SessionMode = SessionMode.INTERACTIVE
    config_path: Optional[Path] = None
    verbose: bool = False


@dataclass(frozen=True)
class OutputPaths:
    """Artifacts written next to the input image."""
    text: Path
    region: Path
    cropped: Path

    @classmethod
    def for_image(cls, image_path: Path) -> "OutputPaths":
        base = Path(image_path).with_suffix("")
        return cls(
            text=base.with_name(base.name + ".txt"),
            region=base.with_name(base.name + ".region.txt"),
            cropped=base.with_name(base.name + ".cropped.jpg"),
        )


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="regionocr",
        description="Select a region of an image and extract its text.",
    )
    parser.add_argument("image_path", type=Path, help="Image to read text from")
    parser.add_argument("--noscale", action="store_true",
                        help="Show the preview at full size instead of fitting it to the screen")
    parser.add_argument("--reuse", action="store_true",
                        help=f"Skip selection and reuse the region saved in ./{REUSED_REGION_FILENAME}")
    parser.add_argument("--config", type=Path, default=None,
                        help="Read settings from this file instead of the default config.ini")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: List[str]) -> SessionOptions:
    """
    Parses the command line (without the program name).

    Raises:
        ArgumentError: If the arguments are missing or invalid.
    """
    args = build_parser().parse_args(argv)
    return SessionOptions(
        image_path=args.image_path,
        allow_scaling=not args.noscale,
        mode=SessionMode.REUSE_SAVED_REGION if args.reuse else SessionMode.INTERACTIVE,
        config_path=args.config,
        verbose=args.verbose,
    )


def load_image(path: Path) -> np.ndarray:
    """
    Reads and decodes an image with OpenCV.

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None or image.size == 0:
        raise ImageLoadError(f"Failed to load image from {path}")
    width, height = image_size(image)
    logger.info(f"Loaded {path} ({width}x{height})")
    return image


def default_selector_factory(image, scale, on_complete):
    from .gui.selection_window import SelectionWindow
    return SelectionWindow(image, scale, on_complete)


class OCRSession:
    """
    Runs one selection-and-recognition flow.

    The session never blocks: it reacts to the selection and recognition
    callbacks, and reports the final status through `on_exit` exactly once.
    """

    def __init__(self, options: SessionOptions, image: np.ndarray,
                 engine: RecognitionEngine, viewport: Size,
                 on_exit: Callable[[int], None],
                 selector_factory: SelectorFactory = default_selector_factory,
                 margin: float = 0.9, copy_to_clipboard: bool = False,
                 working_dir: Optional[Path] = None):
        self.options = options
        self.image = image
        self.viewport = viewport
        self.paths = OutputPaths.for_image(options.image_path)
        self.orchestrator = RecognitionOrchestrator(engine, copy_to_clipboard=copy_to_clipboard)
        self.selector_factory = selector_factory
        self.margin = margin
        self.working_dir = working_dir
        self.selector = None
        self.exit_code: Optional[int] = None
        self.text: Optional[str] = None
        self.failure: Optional[Exception] = None
        self._on_exit = on_exit

    @property
    def reused_region_path(self) -> Path:
        base = self.working_dir if self.working_dir is not None else Path.cwd()
        return base / REUSED_REGION_FILENAME

    def start(self) -> None:
        if self.options.mode is SessionMode.REUSE_SAVED_REGION:
            self._start_reuse()
        else:
            self._start_interactive()

    def _start_reuse(self):
        try:
            region = load_region(self.reused_region_path)
        except RegionParseError as e:
            logger.error(f"Cannot reuse region: {e}")
            self.failure = e
            self._exit(EXIT_FAILURE)
            return
        self._recognize(region)

    def _start_interactive(self):
        scale = compute_scale(self.viewport, image_size(self.image),
                              self.options.allow_scaling, margin=self.margin)
        logger.info(f"Preview scale: {scale:.3f}")
        self.selector = self.selector_factory(self.image, scale, self._on_selection)
        self.selector.show()

    def _on_selection(self, region: Optional[NativeRect]):
        if region is None:
            self.failure = UserCancellation("the preview was closed without a selection")
            logger.info(f"Selection cancelled: {self.failure}")
            self._exit(EXIT_FAILURE)
            return

        try:
            save_region(region, self.paths.region)
        except PersistenceWriteError as e:
            logger.error(f"Failed to save region: {e}")
        self._recognize(region)

    def _recognize(self, region: NativeRect):
        self.orchestrator.run(self.image, region, self.paths.text, self.paths.cropped,
                              self._on_recognition_complete)

    def _on_recognition_complete(self, text: str):
        self.text = text
        self._exit(EXIT_SUCCESS)

    def _exit(self, code: int):
        if self.exit_code is not None:
            return
        self.exit_code = code
        self._on_exit(code)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )


def build_engine(config) -> RecognitionEngine:
    # easyocr imports torch, so it is only loaded when an engine is needed.
    from .core.easyocr_engine import EasyOCREngine
    return EasyOCREngine(
        languages=config.languages,
        gpu=config.gpu,
        confidence_threshold=config.confidence_threshold,
        min_text_height=config.min_text_height,
        paragraph=config.paragraph,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    The entry point for RegionOCR.

    Returns:
        int: The process exit status.
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        options = parse_args(argv)
    except ArgumentError as e:
        print(f"Usage: regionocr <image-path> [--noscale] [--reuse]\nError: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(options.verbose)
    config = get_config(options.config_path)

    try:
        image = load_image(options.image_path)
    except ImageLoadError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    if options.mode is SessionMode.REUSE_SAVED_REGION:
        # No window in reuse mode, only an event loop for the engine callback.
        app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
        viewport = Size(0, 0)
    else:
        from PyQt6.QtWidgets import QApplication
        app = QApplication(sys.argv[:1])
        # The window closes before recognition finishes; quit only via on_exit.
        app.setQuitOnLastWindowClosed(False)
        screen = app.primaryScreen()
        if screen is None:
            logger.error("No primary screen found. Cannot show the preview.")
            return EXIT_FAILURE
        geometry = screen.availableGeometry()
        viewport = Size(geometry.width(), geometry.height())

    session = OCRSession(
        options, image, build_engine(config), viewport,
        on_exit=app.exit,
        margin=config.preview_margin,
        copy_to_clipboard=config.copy_to_clipboard,
    )
    QTimer.singleShot(0, session.start)
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
