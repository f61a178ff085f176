"""Deterministic OCR engine that returns a configured string."""

import threading

from ...errors import OCRError
from ...geometry import Rect
from ..base import OCRBackendInfo, OCREngine

DEFAULT_TEXT = "stubbed OCR text"


class FixedTextOCREngine(OCREngine):
    """Returns the same text for every region.

    Stands in for a real engine in tests and in offline demo runs. It
    records every region it was asked to read; an empty text makes every
    extraction fail, like a real engine that found nothing.
    """

    def __init__(self, text: str = DEFAULT_TEXT):
        self._text = text
        self._lock = threading.Lock()
        self.regions: list[Rect] = []

    @classmethod
    def get_info(cls) -> OCRBackendInfo:
        return OCRBackendInfo(
            id="fixed",
            name="Fixed text",
            description="Returns a fixed string, no capture",
        )

    def extract(self, region: Rect) -> str:
        with self._lock:
            self.regions.append(region)
        if not self._text:
            raise OCRError(f"no text recognized in region {region}")
        return self._text
