"""Tests for configuration loading."""

import pytest

from overtranslate.config import (
    Config,
    LoggingConfig,
    MAX_API_KEY_LENGTH,
    MAX_API_URL_LENGTH,
    TranslationConfig,
)
from overtranslate.errors import ConfigError
from overtranslate.geometry import Rect


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults(self):
        config = Config()
        assert config.translation.api_url == "https://api.example.com/translate"
        assert config.translation.api_key == "your-api-key"
        assert config.translation.verify_before_use is True
        assert config.logging.console_enabled is True
        assert config.logging.file_enabled is True
        assert config.logging.info_log_path == "./ocr_info.log"
        assert config.logging.error_log_path == "./ocr_error.log"
        assert config.logging.translate_log_path == "./ocr_translate.log"
        assert config.overlay.start_locked is False
        assert config.overlay.bounds == Rect(100, 100, 320, 240)

    def test_immutable(self):
        config = Config()
        with pytest.raises(AttributeError):
            config.refresh_rate = 5


class TestValidation:
    """Tests for bounds checks at the configuration boundary."""

    def test_long_url_rejected(self):
        with pytest.raises(ConfigError):
            TranslationConfig(api_url="h" * (MAX_API_URL_LENGTH + 1))

    def test_long_key_rejected(self):
        with pytest.raises(ConfigError):
            TranslationConfig(api_key="k" * (MAX_API_KEY_LENGTH + 1))

    def test_max_lengths_accepted(self):
        config = TranslationConfig(api_url="h" * MAX_API_URL_LENGTH, api_key="k" * MAX_API_KEY_LENGTH)
        assert len(config.api_url) == MAX_API_URL_LENGTH

    def test_nonpositive_timeout_rejected(self):
        with pytest.raises(ConfigError):
            TranslationConfig(timeout=0)

    def test_long_log_path_rejected(self):
        with pytest.raises(ConfigError):
            LoggingConfig(info_log_path="p" * 300)


class TestLoad:
    """Tests for Config.load()."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(
            """
translation:
  api_url: "https://translate.example.test"
  api_key: "abc"
  verify_before_use: false
  timeout: 2.5
logging:
  console_enabled: false
  info_log_path: "info.log"
overlay:
  bounds: {x: 1, y: 2, width: 30, height: 40}
  opacity: 0.5
start_locked: true
ocr_backend: fixed
translation_backend: prefix
refresh_rate: 0.25
""",
            encoding="utf-8",
        )

        config = Config.load(str(path))

        assert config.translation.api_url == "https://translate.example.test"
        assert config.translation.api_key == "abc"
        assert config.translation.verify_before_use is False
        assert config.translation.timeout == 2.5
        assert config.logging.console_enabled is False
        assert config.logging.info_log_path == "info.log"
        # Unspecified keys keep their defaults
        assert config.logging.error_log_path == "./ocr_error.log"
        assert config.overlay.bounds == Rect(1, 2, 30, 40)
        assert config.overlay.opacity == 0.5
        assert config.overlay.start_locked is True
        assert config.ocr_backend == "fixed"
        assert config.translation_backend == "prefix"
        assert config.refresh_rate == 0.25

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")
        assert Config.load(str(path)) == Config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("translation: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_negative_bounds_rejected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("overlay:\n  bounds: {x: 0, y: 0, width: -1, height: 5}\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_default_file_written_once(self, tmp_path):
        written = Config.create_default_file(tmp_path)
        assert written == tmp_path / "config.yml"
        assert Config.load(str(written)) == Config()
        assert Config.create_default_file(tmp_path) is None
