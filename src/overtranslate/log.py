"""Logging for overtranslate.

Two layers live here:

Diagnostics use structlog with zerolog-style output and aligned 3-letter
level names:
    12:30:45 INF tesseract ready version=5.3.0
    12:30:46 DBG pipeline stage stage=capturing
    12:30:48 ERR render failed err=...

Pipeline events go through a LogSink, which writes the user-facing info,
error and translation-history streams in a fixed line format:
    [INFO 2024-05-01 12:30:45] Starting OCR overlay
    [ERROR 2024-05-01 12:30:46] OCR failed; no text captured
    [2024-05-01 12:30:47] [translated] hello
"""

import logging
import os
import sys
import threading
from datetime import datetime

import structlog

from .config import LoggingConfig

# 3-letter level names for alignment (like zerolog)
LEVEL_NAMES = {
    "debug": "DBG",
    "info": "INF",
    "warning": "WRN",
    "error": "ERR",
    "critical": "CRT",
}

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level debug flag (set by configure())
_debug_enabled = False


def _level_to_3letter(logger, method_name, event_dict):
    """Convert log level to 3-letter abbreviation."""
    level = event_dict.get("level", method_name)
    event_dict["level"] = LEVEL_NAMES.get(level, level.upper()[:3])
    return event_dict


def _format_timestamp(logger, method_name, event_dict):
    """Add timestamp in HH:MM:SS format."""
    event_dict["timestamp"] = datetime.now().strftime("%H:%M:%S")
    return event_dict


def _render_kv_pairs(logger, method_name, event_dict):
    """Render event dict as 'timestamp LEVEL message key=value ...' string."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "???")
    event = event_dict.pop("event", "")

    kv_parts = []
    for key, value in event_dict.items():
        if key.startswith("_"):
            continue
        if isinstance(value, str) and " " in value:
            kv_parts.append(f'{key}="{value}"')
        else:
            kv_parts.append(f"{key}={value}")

    kv_str = " ".join(kv_parts)
    if kv_str:
        return f"{timestamp} {level} {event} {kv_str}"
    return f"{timestamp} {level} {event}"


def configure(level: str = "WARNING", debug: bool = False) -> None:
    """Configure structlog for diagnostic console output.

    Diagnostics go to stderr so they never mix with the info stream that
    LogSink mirrors to stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        debug: If True, sets level to DEBUG.
    """
    global _debug_enabled
    if debug:
        level = "DEBUG"
    _debug_enabled = level.upper() == "DEBUG"

    processors = [
        structlog.stdlib.add_log_level,
        _format_timestamp,
        _level_to_3letter,
        _render_kv_pairs,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.WARNING)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name (for context).

    Returns:
        A structlog BoundLogger instance.
    """
    logger = structlog.get_logger()
    if name:
        return logger.bind(logger=name)
    return logger


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return _debug_enabled


def timestamp() -> str:
    """Current local time with second resolution."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


# One lock per log file, shared by every sink writing to it
_file_locks: dict[str, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    key = os.path.abspath(path)
    with _file_locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = threading.Lock()
        return lock


class LogSink:
    """Best-effort writer for the info, error and translation-history streams.

    Each stream is mirrored to the console and/or appended to its own file
    according to the LoggingConfig. Write failures are swallowed: logging
    never aborts the pipeline.
    """

    def __init__(self, config: LoggingConfig):
        self._config = config
        self._stdout = structlog.PrintLogger(file=sys.stdout)
        self._stderr = structlog.PrintLogger(file=sys.stderr)

    @property
    def config(self) -> LoggingConfig:
        return self._config

    def info(self, message: str) -> None:
        line = f"[INFO {timestamp()}] {message}"
        if self._config.console_enabled:
            self._write_console(self._stdout, line)
        self._write_file(self._config.info_log_path, line)

    def error(self, message: str) -> None:
        line = f"[ERROR {timestamp()}] {message}"
        if self._config.console_enabled:
            self._write_console(self._stderr, line)
        self._write_file(self._config.error_log_path, line)

    def translation(self, text: str) -> None:
        """Append translated text to the history file (never the console)."""
        self._write_file(self._config.translate_log_path, f"[{timestamp()}] {text}")

    def _write_console(self, stream: structlog.PrintLogger, line: str) -> None:
        try:
            stream.msg(line)
        except (OSError, ValueError):
            # Closed or broken console stream
            pass

    def _write_file(self, path: str, line: str) -> None:
        if not self._config.file_enabled or not path:
            return
        try:
            with _lock_for(path):
                # Unencodable text (e.g. lone surrogates) is escaped, not dropped
                with open(path, "a", encoding="utf-8", errors="backslashreplace") as f:
                    f.write(line + "\n")
        except (OSError, ValueError):
            pass


class MemoryLogSink(LogSink):
    """LogSink that records lines in memory instead of touching any stream.

    Used by tests and by callers that want to inspect the event history.
    """

    def __init__(self):
        super().__init__(LoggingConfig(console_enabled=False, file_enabled=False))
        self._lock = threading.Lock()
        self.records: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self._record("info", f"[INFO {timestamp()}] {message}")

    def error(self, message: str) -> None:
        self._record("error", f"[ERROR {timestamp()}] {message}")

    def translation(self, text: str) -> None:
        self._record("translation", f"[{timestamp()}] {text}")

    def _record(self, stream: str, line: str) -> None:
        with self._lock:
            self.records.append((stream, line))

    def lines(self, stream: str | None = None) -> list[str]:
        """Recorded lines, optionally filtered to one stream."""
        with self._lock:
            return [line for kind, line in self.records if stream is None or kind == stream]
