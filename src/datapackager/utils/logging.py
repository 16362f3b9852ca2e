"""Build logging.

Three output modes are available:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] module: message
- CI/JSON mode: {"level":"...","ts":"...","logger":"...","msg":"..."}

Every datapackager module logs through a child of the "datapackager" logger,
so configuring that one logger covers the whole build. Structured fields for
JSON mode travel on the record as ``extra_data``; messages logged while a
processing unit runs carry the unit's identifier there.
"""

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "datapackager"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


RESET = "\033[0m"

# Level to ANSI color
LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


def _supports_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class HumanFormatter(logging.Formatter):
    """Formatter for human-readable output.

    Format: [LEVEL] message
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def level_tag(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if not self.use_colors:
            return tag
        return f"{LEVEL_COLORS.get(record.levelno, RESET)}{tag}{RESET}"

    def format(self, record: logging.LogRecord) -> str:
        return f"{self.level_tag(record)} {record.getMessage()}"


class VerboseFormatter(HumanFormatter):
    """Formatter for verbose output with timestamps and module names.

    Format: [LEVEL][HH:MM:SS] module: message
    Tracebacks attached to the record are appended.
    """

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        module = record.name.removeprefix(f"{ROOT_LOGGER}.")
        text = f"{self.level_tag(record)}[{clock}] {module}: {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable).

    Format: {"level":"INFO","ts":"2026-01-31T19:45:23+00:00","logger":"...","msg":"..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "extra_data", None) or {})
        return json.dumps(entry, default=str)


_FORMATTERS = {
    LogMode.HUMAN: HumanFormatter,
    LogMode.VERBOSE: VerboseFormatter,
}


class UnitLogger(logging.LoggerAdapter):
    """Logger adapter tagging records with the processing unit being run.

    Usage:
        log = UnitLogger(logger, "01_load.py")
        log.info("%d required data objects created", 2)
    """

    def __init__(self, logger: logging.Logger, unit_id: str) -> None:
        super().__init__(logger, {"unit": unit_id})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["extra_data"] = {**self.extra, **extra.get("extra_data", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a datapackager logger instance.

    Args:
        name: Logger name (a child of "datapackager" for module loggers)

    Returns:
        The standard library logger
    """
    return logging.getLogger(name)


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Install a single handler on the datapackager logger.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr, leaving stdout to command output)
    """
    stream = stream or sys.stderr

    if mode is LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = _FORMATTERS[mode](use_colors=_supports_color(stream))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable verbose mode with timestamps
        quiet: Suppress info messages (warnings and errors only)
        ci: Enable JSON output for CI/CD
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level)
