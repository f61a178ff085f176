"""OCR engines and translation providers."""

from .base import (
    OCRBackendInfo,
    OCREngine,
    TranslationBackendInfo,
    TranslationProvider,
)
from .registry import BackendRegistry, get_registry

__all__ = [
    "BackendRegistry",
    "OCRBackendInfo",
    "OCREngine",
    "TranslationBackendInfo",
    "TranslationProvider",
    "get_registry",
]
