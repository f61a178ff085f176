"""Translation provider implementations."""

from .http import HTTPTranslationProvider
from .prefix import PrefixTranslationProvider

__all__ = ["HTTPTranslationProvider", "PrefixTranslationProvider"]
