"""
Unit tests for regionocr.core.engine and the EasyOCR engine.
"""
import threading
from unittest.mock import patch

import pytest

from conftest import process_events_until
from regionocr.core.easyocr_engine import EasyOCREngine
from regionocr.core.engine import filter_results, roi_to_window
from regionocr.core.geometry import NativeRect, Size, to_flipped, to_normalized
from regionocr.errors import EngineError


def box(top, bottom, left=0, right=10):
    return [[left, top], [right, top], [right, bottom], [left, bottom]]


class TestRoiToWindow:
    """Tests for roi_to_window."""

    def test_matches_flipped_crop(self):
        size = Size(800, 600)
        region = NativeRect(20, 20, 200, 100)
        flipped = to_flipped(region, size.height)

        window = roi_to_window(to_normalized(region, size), size)

        assert window == (20, int(flipped.y), 220, int(flipped.y + flipped.height))

    def test_full_image(self):
        size = Size(800, 600)

        assert roi_to_window(to_normalized(NativeRect(0, 0, 800, 600), size), size) == (0, 0, 800, 600)

    def test_clamps_partially_outside(self):
        size = Size(800, 600)

        window = roi_to_window(to_normalized(NativeRect(700, -100, 300, 200), size), size)

        assert window == (700, 500, 800, 600)

    def test_entirely_outside(self):
        size = Size(800, 600)

        with pytest.raises(EngineError):
            roi_to_window(to_normalized(NativeRect(900, 0, 100, 100), size), size)


class TestFilterResults:
    """Tests for filter_results."""

    def test_keeps_engine_order(self):
        results = [
            (box(0, 20), "Title", 0.9),
            (box(30, 50), "Body", 0.8),
        ]

        assert filter_results(results, 100) == ["Title", "Body"]

    def test_drops_low_confidence(self):
        results = [
            (box(0, 20), "sure", 0.9),
            (box(30, 50), "unsure", 0.2),
        ]

        assert filter_results(results, 100, confidence_threshold=0.5) == ["sure"]

    def test_drops_tiny_text(self):
        results = [
            (box(0, 0.5), "speck", 0.99),
            (box(10, 30), "word", 0.99),
        ]

        assert filter_results(results, 100, min_text_height=0.01) == ["word"]

    def test_paragraph_pairs_have_no_confidence(self):
        results = [(box(0, 40), "a whole paragraph")]

        assert filter_results(results, 100, confidence_threshold=0.99) == ["a whole paragraph"]

    def test_drops_blank_text(self):
        assert filter_results([(box(0, 20), "   ", 0.9)], 100) == []


class RecordingCallback:
    """Records every delivery together with the thread it arrived on."""

    def __init__(self):
        self.calls = []

    def __call__(self, lines, error):
        self.calls.append((lines, error, threading.current_thread()))


@pytest.fixture
def reader_cls():
    with patch("regionocr.core.easyocr_engine.easyocr.Reader") as mock_reader_cls:
        yield mock_reader_cls


def recognize_and_wait(engine, image, roi):
    callback = RecordingCallback()
    engine.recognize(image, roi, callback)
    assert process_events_until(lambda: callback.calls)
    # Give a stray second delivery the chance to arrive
    process_events_until(lambda: False, timeout=0.2)
    return callback.calls


@pytest.mark.usefixtures("qt_app")
class TestEasyOCREngine:
    """Tests for EasyOCREngine.recognize with a mocked EasyOCR reader."""

    def test_delivers_lines_once_on_main_thread(self, reader_cls, sample_image):
        reader_cls.return_value.readtext.return_value = [(box(0, 20), "hi", 0.9)]

        calls = recognize_and_wait(EasyOCREngine(), sample_image, None)

        assert len(calls) == 1
        lines, error, thread = calls[0]
        assert lines == ["hi"]
        assert error is None
        assert thread is threading.main_thread()
        reader_cls.assert_called_once_with(["en"], gpu=False)

    def test_reads_only_the_region(self, reader_cls, sample_image):
        reader_cls.return_value.readtext.return_value = []
        size = Size(800, 600)
        roi = to_normalized(NativeRect(20, 20, 200, 100), size)

        calls = recognize_and_wait(EasyOCREngine(paragraph=True), sample_image, roi)

        assert calls[0][:2] == ([], None)
        analyzed = reader_cls.return_value.readtext.call_args[0][0]
        assert analyzed.shape == (100, 200, 3)
        # Lower-left region 20..120 is raster rows 480..580
        assert analyzed[0, 0, 0] == 480 % 256
        assert reader_cls.return_value.readtext.call_args[1] == {"detail": 1, "paragraph": True}

    def test_readtext_failure_becomes_engine_error(self, reader_cls, sample_image):
        reader_cls.return_value.readtext.side_effect = RuntimeError("CUDA out of memory")

        calls = recognize_and_wait(EasyOCREngine(), sample_image, None)

        assert len(calls) == 1
        lines, error, thread = calls[0]
        assert lines is None
        assert isinstance(error, EngineError)
        assert "CUDA out of memory" in str(error)
        assert thread is threading.main_thread()

    def test_reader_init_failure_becomes_engine_error(self, reader_cls, sample_image):
        reader_cls.side_effect = OSError("model download failed")

        calls = recognize_and_wait(EasyOCREngine(), sample_image, None)

        assert len(calls) == 1
        assert calls[0][0] is None
        assert isinstance(calls[0][1], EngineError)

    def test_region_outside_image_is_engine_error(self, reader_cls, sample_image):
        roi = to_normalized(NativeRect(900, 0, 100, 100), Size(800, 600))

        calls = recognize_and_wait(EasyOCREngine(), sample_image, roi)

        assert len(calls) == 1
        assert calls[0][0] is None
        assert isinstance(calls[0][1], EngineError)
        reader_cls.return_value.readtext.assert_not_called()

    def test_reader_is_created_once(self, reader_cls, sample_image):
        reader_cls.return_value.readtext.return_value = []
        engine = EasyOCREngine(languages=["en", "de"], gpu=True)

        recognize_and_wait(engine, sample_image, None)
        recognize_and_wait(engine, sample_image, None)

        reader_cls.assert_called_once_with(["en", "de"], gpu=True)
