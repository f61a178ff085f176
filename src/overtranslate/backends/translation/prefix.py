"""Deterministic translation provider that prefixes its input."""

from ...config import TranslationConfig
from ...errors import TranslationError
from ..base import TranslationBackendInfo, TranslationProvider

DEFAULT_PREFIX = "[translated] "


class PrefixTranslationProvider(TranslationProvider):
    """Returns the input with a fixed prefix.

    A placeholder for tests and offline runs. Callers must not rely on the
    transformation; a real provider returns an actual translation.
    """

    def __init__(self, config: TranslationConfig | None = None, prefix: str = DEFAULT_PREFIX):
        super().__init__(config or TranslationConfig())
        self._prefix = prefix

    @classmethod
    def get_info(cls) -> TranslationBackendInfo:
        return TranslationBackendInfo(
            id="prefix",
            name="Prefix (offline)",
            description="Prepends a fixed marker, no network",
            requires_network=False,
        )

    def translate(self, text: str) -> str:
        if not text or not text.strip():
            raise TranslationError("nothing to translate")
        return f"{self._prefix}{text}"
