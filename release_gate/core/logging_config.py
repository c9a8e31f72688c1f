"""
Diagnostic logging for the gate.

Diagnostics always go to stderr. stdout carries only the annotation lines
written by the reporters, which the CI system parses.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Record attributes set by release_gate.utils.error_handling.log_and_raise
ERROR_FIELDS = ("error_type", "exception_class", "context")

# httpx logs every request at INFO, hpack every HTTP/2 header frame at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log files and log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(getattr(record, "extra_fields", {}))
        entry.update({key: getattr(record, key) for key in ERROR_FIELDS if hasattr(record, key)})

        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """
    Console formatter that colors the level name on a terminal.

    The record is shared with other handlers (the JSON file handler), so the
    colored level name is restored after formatting.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if sys.stderr.isatty() and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _console_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JSONFormatter()
    return ContextFormatter(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)


def setup_logging(level: str = "INFO", log_file: Path | None = None, json_output: bool = False) -> None:
    """
    Configure the root logger for one gate run.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (--log-level)
        log_file: Also append JSON records here (--log-file)
        json_output: JSON instead of text on stderr (--json-logs)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_console_formatter(json_output))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log a message with structured fields that JSONFormatter merges into the entry.

    Example:
        log_with_context(logger, "debug", "Suite 10:20 has 12 test points", plan_id=10, suite_id=20)
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
