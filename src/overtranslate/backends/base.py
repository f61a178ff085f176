"""Abstract base classes for OCR engines and translation providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..config import TranslationConfig
from ..geometry import Rect


@dataclass
class OCRBackendInfo:
    """Metadata about an OCR engine."""

    id: str
    name: str
    description: str = ""


@dataclass
class TranslationBackendInfo:
    """Metadata about a translation provider."""

    id: str
    name: str
    description: str = ""
    requires_network: bool = True


class OCREngine(ABC):
    """Extracts text from a region of the screen."""

    def load(self) -> None:
        """Prepare the engine for use. No-op unless overridden."""

    def close(self) -> None:
        """Release capture resources. No-op unless overridden."""

    @abstractmethod
    def extract(self, region: Rect) -> str:
        """Extract text from a screen region.

        Args:
            region: Area of the display to capture and recognize.

        Returns:
            Recognized text. Never empty.

        Raises:
            OCRError: If capture or recognition failed or found no text.
        """
        pass

    @classmethod
    @abstractmethod
    def get_info(cls) -> OCRBackendInfo:
        """Get metadata about this engine."""
        pass


class TranslationProvider(ABC):
    """Translates text through a configured endpoint."""

    def __init__(self, config: TranslationConfig):
        self._config = config

    @property
    def config(self) -> TranslationConfig:
        return self._config

    def verify(self) -> bool:
        """Cheap usability check: endpoint and credential are both set.

        This does not touch the network.
        """
        return bool(self._config.api_url.strip()) and bool(self._config.api_key.strip())

    def close(self) -> None:
        """Release network resources. No-op unless overridden."""

    @abstractmethod
    def translate(self, text: str) -> str:
        """Translate text.

        Args:
            text: Source text to translate.

        Returns:
            Translated text.

        Raises:
            TranslationError: On empty input, network or provider failure.
        """
        pass

    @classmethod
    @abstractmethod
    def get_info(cls) -> TranslationBackendInfo:
        """Get metadata about this provider."""
        pass
