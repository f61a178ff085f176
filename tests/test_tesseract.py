"""Tests for screen capture and the Tesseract OCR engine."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from overtranslate.backends.ocr.fixed import FixedTextOCREngine
from overtranslate.backends.ocr.tesseract import TesseractOCREngine, clean_text
from overtranslate.capture import ScreenCapture, bgra_to_rgb
from overtranslate.errors import OCRError
from overtranslate.geometry import Rect

DISPLAY = {"left": 0, "top": 0, "width": 1920, "height": 1080}


def _mock_mss(frame=None):
    sct = MagicMock()
    sct.monitors = [DISPLAY]
    sct.grab.return_value = frame if frame is not None else np.zeros((240, 320, 4), dtype=np.uint8)
    return sct


class TestScreenCapture:
    """Tests for ScreenCapture.grab()."""

    def test_grab_passes_region_to_mss(self):
        sct = _mock_mss()
        with patch("overtranslate.capture.mss.mss", return_value=sct):
            frame = ScreenCapture().grab(Rect(100, 100, 320, 240))

        sct.grab.assert_called_once_with({"left": 100, "top": 100, "width": 320, "height": 240})
        assert frame.shape == (240, 320, 4)

    def test_region_outside_display(self):
        sct = _mock_mss()
        with patch("overtranslate.capture.mss.mss", return_value=sct):
            with pytest.raises(OCRError, match="outside display"):
                ScreenCapture().grab(Rect(1800, 1000, 320, 240))
        sct.grab.assert_not_called()

    def test_empty_region(self):
        with patch("overtranslate.capture.mss.mss", return_value=_mock_mss()):
            with pytest.raises(OCRError, match="empty"):
                ScreenCapture().grab(Rect(0, 0, 0, 10))

    def test_empty_frame(self):
        sct = _mock_mss(np.zeros((0, 0, 4), dtype=np.uint8))
        with patch("overtranslate.capture.mss.mss", return_value=sct):
            with pytest.raises(OCRError, match="empty frame"):
                ScreenCapture().grab(Rect(0, 0, 10, 10))

    def test_bgra_to_rgb(self):
        frame = np.zeros((1, 1, 4), dtype=np.uint8)
        frame[0, 0] = [1, 2, 3, 255]  # B, G, R, A
        assert bgra_to_rgb(frame)[0, 0].tolist() == [3, 2, 1]


class TestTesseractOCREngine:
    """Tests for TesseractOCREngine.extract() with Tesseract mocked out."""

    def _engine(self):
        capture = MagicMock(spec=ScreenCapture)
        capture.grab.return_value = np.zeros((20, 40, 4), dtype=np.uint8)
        return TesseractOCREngine(language="eng", capture=capture), capture

    def test_extract_cleans_text(self):
        engine, capture = self._engine()
        with (
            patch("pytesseract.get_tesseract_version", return_value="5.3.0"),
            patch("pytesseract.image_to_string", return_value="  hello \n  world\n") as ocr,
        ):
            text = engine.extract(Rect(0, 0, 40, 20))

        assert text == "hello world"
        capture.grab.assert_called_once_with(Rect(0, 0, 40, 20))
        assert ocr.call_args.kwargs["lang"] == "eng"
        assert engine.is_loaded()

    def test_no_text_is_an_error(self):
        engine, _ = self._engine()
        with (
            patch("pytesseract.get_tesseract_version", return_value="5.3.0"),
            patch("pytesseract.image_to_string", return_value=" \n "),
        ):
            with pytest.raises(OCRError, match="no text"):
                engine.extract(Rect(0, 0, 40, 20))

    def test_missing_tesseract(self):
        engine, capture = self._engine()
        with patch("pytesseract.get_tesseract_version", side_effect=EnvironmentError("not found")):
            with pytest.raises(OCRError, match="not installed"):
                engine.extract(Rect(0, 0, 40, 20))
        capture.grab.assert_not_called()

    def test_capture_error_propagates(self):
        engine, capture = self._engine()
        capture.grab.side_effect = OCRError("outside display bounds")
        with patch("pytesseract.get_tesseract_version", return_value="5.3.0"):
            with pytest.raises(OCRError, match="outside display"):
                engine.extract(Rect(0, 0, 40, 20))

    def test_clean_text(self):
        assert clean_text("") == ""
        assert clean_text(" a\t b \n c ") == "a b c"


class TestFixedTextOCREngine:
    def test_returns_text_and_records_region(self):
        engine = FixedTextOCREngine("abc")
        assert engine.extract(Rect(1, 2, 3, 4)) == "abc"
        assert engine.regions == [Rect(1, 2, 3, 4)]

    def test_empty_text_fails(self):
        with pytest.raises(OCRError):
            FixedTextOCREngine("").extract(Rect(0, 0, 1, 1))
