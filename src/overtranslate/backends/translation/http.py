"""Translation provider backed by a remote HTTP endpoint."""

from typing import Any

import requests

from ... import log
from ...config import TranslationConfig
from ...errors import TranslationError
from ..base import TranslationBackendInfo, TranslationProvider

logger = log.get_logger()

# Keys checked, in order, for the translated string in a JSON reply
RESPONSE_TEXT_KEYS = ("translation", "translated_text", "text", "result")


def extract_translation(payload: Any) -> str:
    """Pull the translated string out of a decoded reply body.

    Accepts a bare string, a mapping with one of RESPONSE_TEXT_KEYS, or a
    DeepL-style {"translations": [{"text": ...}]} mapping.

    Returns:
        The stripped translation, or "" if none was found.
    """
    if isinstance(payload, str):
        return payload.strip()
    if not isinstance(payload, dict):
        return ""

    for key in RESPONSE_TEXT_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    translations = payload.get("translations")
    if isinstance(translations, list) and translations:
        first = translations[0]
        if isinstance(first, dict) and isinstance(first.get("text"), str):
            return first["text"].strip()

    return ""


class HTTPTranslationProvider(TranslationProvider):
    """POSTs text to the configured endpoint and returns its translation.

    The request body is JSON {"text", "source_lang", "target_lang"} with
    the API key sent as a bearer token. Timeouts, connection errors,
    non-2xx replies and empty translations all raise TranslationError.
    """

    def __init__(self, config: TranslationConfig, session: requests.Session | None = None):
        super().__init__(config)
        self._session = session or requests.Session()

    @classmethod
    def get_info(cls) -> TranslationBackendInfo:
        return TranslationBackendInfo(
            id="http",
            name="HTTP API",
            description="Remote translation endpoint over HTTP",
        )

    def translate(self, text: str) -> str:
        if not text or not text.strip():
            raise TranslationError("nothing to translate")

        config = self._config
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        payload = {
            "text": text,
            "source_lang": config.source_language,
            "target_lang": config.target_language,
        }

        try:
            response = self._session.post(
                config.api_url,
                json=payload,
                headers=headers,
                timeout=config.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise TranslationError(f"request timed out after {config.timeout}s") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise TranslationError(f"HTTP {status} from translation endpoint") from e
        except requests.RequestException as e:
            raise TranslationError(f"request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = response.text

        translated = extract_translation(body)
        if not translated:
            raise TranslationError("translation endpoint returned no text")

        logger.debug("translated", chars_in=len(text), chars_out=len(translated))
        return translated

    def close(self) -> None:
        self._session.close()
