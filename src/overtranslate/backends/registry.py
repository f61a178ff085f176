"""Registry for available OCR engines and translation providers."""

from ..config import Config
from ..errors import ConfigError
from .base import (
    OCRBackendInfo,
    OCREngine,
    TranslationBackendInfo,
    TranslationProvider,
)


class BackendRegistry:
    """Registry for available OCR engines and translation providers.

    Backends are registered by class and looked up by the id in their
    info, which is also the id used in the config file and on the command
    line.
    """

    def __init__(self):
        self._ocr_backends: list[type[OCREngine]] = []
        self._translation_backends: list[type[TranslationProvider]] = []

    def register_ocr_backend(self, backend_class: type[OCREngine]) -> None:
        """Register an OCR engine.

        Args:
            backend_class: The OCR engine class to register.
        """
        if backend_class not in self._ocr_backends:
            self._ocr_backends.append(backend_class)

    def register_translation_backend(self, backend_class: type[TranslationProvider]) -> None:
        """Register a translation provider.

        Args:
            backend_class: The translation provider class to register.
        """
        if backend_class not in self._translation_backends:
            self._translation_backends.append(backend_class)

    def get_ocr_backends(self) -> list[OCRBackendInfo]:
        return [backend.get_info() for backend in self._ocr_backends]

    def get_translation_backends(self) -> list[TranslationBackendInfo]:
        return [backend.get_info() for backend in self._translation_backends]

    def get_ocr_backend_by_id(self, backend_id: str) -> type[OCREngine] | None:
        """Get an OCR engine class by its ID, or None if not found."""
        for backend in self._ocr_backends:
            if backend.get_info().id == backend_id:
                return backend
        return None

    def get_translation_backend_by_id(self, backend_id: str) -> type[TranslationProvider] | None:
        """Get a translation provider class by its ID, or None if not found."""
        for backend in self._translation_backends:
            if backend.get_info().id == backend_id:
                return backend
        return None

    def create_ocr_engine(self, config: Config) -> OCREngine:
        """Instantiate the OCR engine named by config.ocr_backend.

        Raises:
            ConfigError: If no engine with that id is registered.
        """
        backend = self.get_ocr_backend_by_id(config.ocr_backend)
        if backend is None:
            known = ", ".join(info.id for info in self.get_ocr_backends())
            raise ConfigError(f"unknown OCR backend {config.ocr_backend!r} (known: {known})")

        from .ocr.tesseract import TesseractOCREngine

        if issubclass(backend, TesseractOCREngine):
            return backend(language=config.ocr_language)
        return backend()

    def create_translation_provider(self, config: Config) -> TranslationProvider:
        """Instantiate the translation provider named by config.translation_backend.

        Raises:
            ConfigError: If no provider with that id is registered.
        """
        backend = self.get_translation_backend_by_id(config.translation_backend)
        if backend is None:
            known = ", ".join(info.id for info in self.get_translation_backends())
            raise ConfigError(
                f"unknown translation backend {config.translation_backend!r} (known: {known})"
            )
        return backend(config.translation)


# Global registry instance
_registry = BackendRegistry()
_initialized = False


def get_registry() -> BackendRegistry:
    """Get the global backend registry."""
    global _initialized
    if not _initialized:
        _initialize_registry()
        _initialized = True
    return _registry


def _initialize_registry() -> None:
    """Initialize the registry with all available backends."""
    from .ocr.fixed import FixedTextOCREngine
    from .ocr.tesseract import TesseractOCREngine
    from .translation.http import HTTPTranslationProvider
    from .translation.prefix import PrefixTranslationProvider

    _registry.register_ocr_backend(TesseractOCREngine)
    _registry.register_ocr_backend(FixedTextOCREngine)

    _registry.register_translation_backend(HTTPTranslationProvider)
    _registry.register_translation_backend(PrefixTranslationProvider)
