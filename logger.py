"""Logging from settings.

Levels (inclusive):
- error: failures only
- warn: non-critical issues and errors
- info: service messages, warnings and errors
- debug: everything above plus debugging output

Configure via env LOG_LEVEL, LOG_OUTPUT (stdout or file) and LOG_FILE_PATH.
"""

import logging
import sys

from config import Settings

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

DEFAULT_LEVEL = "info"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.lower().strip(), logging.INFO)


def _build_handler(output: str, file_path: str) -> logging.Handler:
    """Stream handler for stdout, file handler when output is ``file``.

    Raises:
        OSError: If the log file can't be opened
    """
    if output.lower().strip() == "file":
        return logging.FileHandler(file_path, encoding="utf-8")
    return logging.StreamHandler(sys.stdout)


class ServiceLogging:
    """Configures the root logger from Settings (LOG_LEVEL, LOG_OUTPUT, LOG_FILE_PATH)."""

    def __init__(self, settings: Settings) -> None:
        self._level = _resolve_level(settings.log_level)
        self._output = settings.log_output
        self._file_path = settings.log_file_path

    def setup(self) -> None:
        """Apply level, format and handler to the root logger.

        Falls back to stdout if the log file can't be opened.
        """
        file_error = None
        try:
            handler = _build_handler(self._output, self._file_path)
        except OSError as e:
            file_error = e
            handler = logging.StreamHandler(sys.stdout)

        logging.basicConfig(
            level=self._level,
            format=DEFAULT_FORMAT,
            handlers=[handler],
            force=True,
        )
        if file_error is not None:
            self.get_logger(__name__).warning(
                "cannot open log file %s, logging to stdout: %s", self._file_path, file_error
            )

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
