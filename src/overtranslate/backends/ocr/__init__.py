"""OCR engine implementations."""

from .fixed import FixedTextOCREngine
from .tesseract import TesseractOCREngine

__all__ = ["FixedTextOCREngine", "TesseractOCREngine"]
