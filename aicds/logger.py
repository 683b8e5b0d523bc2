"""Leveled logger writing coloured lines to a console stream and plain lines to a file."""

from __future__ import annotations

import enum
import sys
import threading
from datetime import datetime
from typing import IO, Any


class LogLevel(enum.IntEnum):
    """Severity levels, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5


_LEVEL_TAGS = {
    LogLevel.TRACE: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO ",
    LogLevel.WARNING: "WARN ",
    LogLevel.ERROR: "ERROR",
    LogLevel.CRITICAL: "CRIT ",
}

_LEVEL_COLOURS = {
    LogLevel.TRACE: "\033[90m",
    LogLevel.DEBUG: "\033[36m",
    LogLevel.INFO: "\033[32m",
    LogLevel.WARNING: "\033[33m",
    LogLevel.ERROR: "\033[31m",
    LogLevel.CRITICAL: "\033[35m",
}

_RESET = "\033[0m"


def format_timestamp(moment: datetime) -> str:
    """Render a moment as ``YYYY-MM-DD HH:MM:SS.mmm``."""
    return f"{moment.strftime('%Y-%m-%d %H:%M:%S')}.{moment.microsecond // 1000:03d}"


class Logger:
    """Thread-safe logger with a minimum level and an optional log file."""

    def __init__(self, level: LogLevel = LogLevel.TRACE, stream: IO[str] | None = None) -> None:
        self.level = LogLevel(level)
        self._stream = stream
        self._file: IO[str] | None = None
        self._lock = threading.Lock()

    def set_log_file(self, filename: str) -> None:
        """Append log lines to ``filename``; on failure, report on stderr and log to console only."""
        with self._lock:
            self._close_file()
            try:
                self._file = open(filename, "a", encoding="utf-8")
            except OSError:
                print(f"Failed to open log file: {filename}", file=sys.stderr)
                self._file = None

    def log(self, level: LogLevel, message: str, *args: Any) -> None:
        """Write ``message`` (formatted with ``args`` if any) when ``level`` passes the filter."""
        if level < self.level:
            return
        text = message.format(*args) if args else message
        self._write(LogLevel(level), text)

    def trace(self, message: str, *args: Any) -> None:
        self.log(LogLevel.TRACE, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self.log(LogLevel.INFO, message, *args)

    def warning(self, message: str, *args: Any) -> None:
        self.log(LogLevel.WARNING, message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, message, *args)

    def critical(self, message: str, *args: Any) -> None:
        self.log(LogLevel.CRITICAL, message, *args)

    def close(self) -> None:
        """Close the log file, if one is open."""
        with self._lock:
            self._close_file()

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def _write(self, level: LogLevel, text: str) -> None:
        with self._lock:
            line = f"[{format_timestamp(datetime.now())}] [{_LEVEL_TAGS[level]}] {text}\n"
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(f"{_LEVEL_COLOURS[level]}{line}{_RESET}")
            stream.flush()
            if self._file is not None:
                self._file.write(line)
                self._file.flush()


_default_logger: Logger | None = None
_default_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the process-wide logger, creating it on first use."""
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            _default_logger = Logger()
        return _default_logger