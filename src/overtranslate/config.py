"""Configuration management for overtranslate.

Configuration is read once at startup into immutable values and passed
explicitly to the components that need it. Nothing here is reloaded while
the process runs.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError
from .geometry import Rect

# Protocol-boundary limits on configuration strings
MAX_API_URL_LENGTH = 255
MAX_API_KEY_LENGTH = 127
MAX_LOG_PATH_LENGTH = 259

DEFAULT_API_URL = "https://api.example.com/translate"
DEFAULT_API_KEY = "your-api-key"
DEFAULT_TIMEOUT = 10.0

DEFAULT_BOUNDS = Rect(x=100, y=100, width=320, height=240)
DEFAULT_OPACITY = 0.8

CONFIG_DIR = Path.home() / ".overtranslate"


def _check_length(name: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ConfigError(f"{name} is {len(value)} characters long (max {limit})")


@dataclass(frozen=True)
class TranslationConfig:
    """Translation provider settings."""

    api_url: str = DEFAULT_API_URL
    api_key: str = DEFAULT_API_KEY
    verify_before_use: bool = True
    timeout: float = DEFAULT_TIMEOUT
    source_language: str = "auto"
    target_language: str = "en"

    def __post_init__(self):
        _check_length("api_url", self.api_url, MAX_API_URL_LENGTH)
        _check_length("api_key", self.api_key, MAX_API_KEY_LENGTH)
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")


@dataclass(frozen=True)
class LoggingConfig:
    """Targets for the info, error and translation-history streams.

    An empty path disables the file stream for that event kind.
    """

    console_enabled: bool = True
    file_enabled: bool = True
    info_log_path: str = "./ocr_info.log"
    error_log_path: str = "./ocr_error.log"
    translate_log_path: str = "./ocr_translate.log"
    level: str = "WARNING"

    def __post_init__(self):
        _check_length("info_log_path", self.info_log_path, MAX_LOG_PATH_LENGTH)
        _check_length("error_log_path", self.error_log_path, MAX_LOG_PATH_LENGTH)
        _check_length("translate_log_path", self.translate_log_path, MAX_LOG_PATH_LENGTH)


@dataclass(frozen=True)
class OverlayConfig:
    """Initial overlay placement and appearance."""

    bounds: Rect = DEFAULT_BOUNDS
    opacity: float = DEFAULT_OPACITY
    start_locked: bool = False


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    translation: TranslationConfig = field(default_factory=TranslationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    ocr_backend: str = "tesseract"
    translation_backend: str = "http"
    ocr_language: str = "eng"
    refresh_rate: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Build a configuration from a parsed YAML mapping.

        Missing keys keep their defaults. Unknown keys are ignored.

        Raises:
            ConfigError: If a value has the wrong shape or is out of bounds.
        """
        try:
            translation = data.get("translation") or {}
            logging_ = data.get("logging") or {}
            overlay = data.get("overlay") or {}

            bounds = DEFAULT_BOUNDS
            if overlay.get("bounds"):
                bounds = Rect.from_dict(overlay["bounds"])

            return cls(
                translation=TranslationConfig(
                    api_url=str(translation.get("api_url", DEFAULT_API_URL) or ""),
                    api_key=str(translation.get("api_key", DEFAULT_API_KEY) or ""),
                    verify_before_use=bool(translation.get("verify_before_use", True)),
                    timeout=float(translation.get("timeout", DEFAULT_TIMEOUT)),
                    source_language=str(translation.get("source_language", "auto")),
                    target_language=str(translation.get("target_language", "en")),
                ),
                logging=LoggingConfig(
                    console_enabled=bool(logging_.get("console_enabled", True)),
                    file_enabled=bool(logging_.get("file_enabled", True)),
                    info_log_path=str(logging_.get("info_log_path", "./ocr_info.log") or ""),
                    error_log_path=str(logging_.get("error_log_path", "./ocr_error.log") or ""),
                    translate_log_path=str(
                        logging_.get("translate_log_path", "./ocr_translate.log") or ""
                    ),
                    level=str(logging_.get("level", "WARNING")),
                ),
                overlay=OverlayConfig(
                    bounds=bounds,
                    opacity=float(overlay.get("opacity", DEFAULT_OPACITY)),
                    start_locked=bool(data.get("start_locked", overlay.get("start_locked", False))),
                ),
                ocr_backend=str(data.get("ocr_backend", "tesseract")),
                translation_backend=str(data.get("translation_backend", "http")),
                ocr_language=str(data.get("ocr_language", "eng")),
                refresh_rate=float(data.get("refresh_rate", 1.0)),
            )
        except ConfigError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"invalid configuration: {e}") from e

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, looks for config.yml
                        in common locations.

        Returns:
            Config instance with loaded values.
        """
        if config_path is None:
            search_paths = [
                Path("config.yml"),
                CONFIG_DIR / "config.yml",
            ]
            for path in search_paths:
                if path.exists():
                    config_path = str(path)
                    break

        if config_path and os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"could not parse {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a mapping")
            return cls.from_dict(data)

        # No config file found - create default in home directory
        config = cls()
        config.create_default_file()
        return config

    @staticmethod
    def create_default_file(config_dir: Path = CONFIG_DIR) -> Path | None:
        """Write a commented default config file unless one already exists.

        Returns:
            Path of the written file, or None if it already existed or the
            directory is not writable.
        """
        config_path = config_dir / "config.yml"

        # Don't overwrite if it already exists
        if config_path.exists():
            return None

        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(DEFAULT_CONFIG_YAML)
        except OSError:
            return None
        return config_path


DEFAULT_CONFIG_YAML = """# Translation provider
translation:
  api_url: "https://api.example.com/translate"
  api_key: "your-api-key"
  # Check endpoint and key before each run
  verify_before_use: true
  # Seconds before a translation request is abandoned
  timeout: 10.0
  source_language: auto
  target_language: en

# Event logs (one line per event, appended)
logging:
  console_enabled: true
  file_enabled: true
  info_log_path: "./ocr_info.log"
  error_log_path: "./ocr_error.log"
  translate_log_path: "./ocr_translate.log"

# Overlay placement, also used as the OCR capture region
overlay:
  bounds: {x: 100, y: 100, width: 320, height: 240}
  opacity: 0.8

start_locked: false

# Backends: tesseract|fixed for OCR, http|prefix for translation
ocr_backend: tesseract
translation_backend: http
ocr_language: eng

# Seconds between pipeline runs in --loop mode
refresh_rate: 1.0
"""
