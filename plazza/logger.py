"""Coloured, thread-safe logging to the console and optionally to a file."""

from __future__ import annotations

import re
import sys
import threading
import time
from enum import IntEnum
from pathlib import Path
from typing import TextIO

_RESET = "\033[0m"
_ANSI_SEQUENCE = re.compile(r"\033\[[^m]*m")


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4


_COLORS = {
    LogLevel.DEBUG: "\033[36m",
    LogLevel.INFO: "\033[32m",
    LogLevel.WARN: "\033[33m",
    LogLevel.ERROR: "\033[31m",
    LogLevel.FATAL: "\033[35m",
}


class Logger:
    """Writes messages at or above a threshold level; errors go to stderr."""

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._level = LogLevel(level)
        self._stdout = stdout
        self._stderr = stderr
        self._lock = threading.Lock()
        self._file: TextIO | None = None
        self._filename = ""

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def logging_to_file(self) -> bool:
        return self._file is not None

    def _out(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def _err(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def set_level(self, level: LogLevel) -> None:
        """Set the lowest level that is written."""
        with self._lock:
            self._level = LogLevel(level)

    def set_log_to_file(self, enable: bool, filename: str = "plazza.log") -> None:
        """Start appending plain-text copies of messages to ``filename``, or stop."""
        with self._lock:
            self._close_file()
            if not enable:
                return
            self._filename = filename
            path = Path(filename)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(path, "a", encoding="utf-8")
            except OSError:
                print(f"Failed to open log file: {filename}", file=self._err(), flush=True)
                self._file = None

    def close(self) -> None:
        """Close the log file if one is open."""
        with self._lock:
            self._close_file()

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def log(self, level: LogLevel, message: str) -> None:
        """Write ``message`` if ``level`` is at or above the threshold."""
        level = LogLevel(level)
        with self._lock:
            if level < self._level:
                return
            formatted = self._format(level, message)
            stream = self._err() if level >= LogLevel.ERROR else self._out()
            print(formatted, file=stream, flush=True)
            if self._file is not None:
                self._file.write(_ANSI_SEQUENCE.sub("", formatted) + "\n")
                self._file.flush()

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        self.log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: str) -> None:
        """Log ``message`` and exit with status 1."""
        self.log(LogLevel.FATAL, message)
        raise SystemExit(1)

    @staticmethod
    def _format(level: LogLevel, message: str) -> str:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        return (
            f"{_COLORS[level]}[{timestamp}] [{level.name}] "
            f"[T-ID:{threading.get_ident()}] {message}{_RESET}"
        )


_instance: Logger | None = None
_instance_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the process-wide logger, creating it on first use."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Logger()
        return _instance