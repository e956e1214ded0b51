"""
PHC Reporter
============
Injectable observer for diagnostic output.

The parser, evaluators and sessions never print or log directly. They
receive a Reporter at construction and call its leveled methods; the
caller decides where the messages go (nowhere, a callback, a list, or a
stdlib logger).
"""
import logging
from datetime import datetime
from typing import Callable


LEVELS = ("DEBUG", "INFO", "WARN", "ERROR", "SUCCESS")


class Reporter:
    """
    Silent reporter. Subclasses override `emit`.

    Usage:
        reporter = ConsoleReporter()
        evaluator = Evaluator(reporter=reporter)
    """

    def emit(self, level: str, message: str) -> None:
        pass

    def debug(self, message: str) -> None:
        self.emit("DEBUG", message)

    def info(self, message: str) -> None:
        self.emit("INFO", message)

    def warn(self, message: str) -> None:
        self.emit("WARN", message)

    def error(self, message: str) -> None:
        self.emit("ERROR", message)

    def success(self, message: str) -> None:
        self.emit("SUCCESS", message)


class ConsoleReporter(Reporter):
    """Timestamped lines handed to an output function (print by default)."""

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, output_fn: Callable[[str], None] | None = None,
                 clock: Callable[[], datetime] | None = None,
                 min_level: str = "INFO"):
        if min_level not in LEVELS:
            raise ValueError(f"Unknown level: {min_level}")
        self.output_fn = output_fn or (lambda s: print(s))
        self.clock = clock or datetime.now
        self.min_level = min_level

    def format(self, level: str, message: str) -> str:
        stamp = self.clock().strftime(self.TIMESTAMP_FORMAT)
        return f"[{level}] [{stamp}] {message}"

    def emit(self, level: str, message: str) -> None:
        if LEVELS.index(level) < LEVELS.index(self.min_level):
            return
        self.output_fn(self.format(level, message))


class RecordingReporter(Reporter):
    """Keeps every (level, message) pair in memory."""

    def __init__(self):
        self.entries: list[tuple[str, str]] = []

    def emit(self, level: str, message: str) -> None:
        self.entries.append((level, message))

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, m in self.entries if level is None or lvl == level]

    def clear(self) -> None:
        self.entries.clear()


class LoggingReporter(Reporter):
    """Forwards to a stdlib logger. SUCCESS maps to INFO."""

    _LEVEL_MAP = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "SUCCESS": logging.INFO,
    }

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("phc")

    def emit(self, level: str, message: str) -> None:
        self.logger.log(self._LEVEL_MAP[level], message)


NULL_REPORTER = Reporter()
