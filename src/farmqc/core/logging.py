"""Structured logging for farmqc.

Every module logs through a child of the ``farmqc`` logger. The parent
logger carries a single stderr handler whose format (JSON lines or plain
text) and level come from FarmqcSettings.
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any

from farmqc.core.config import get_settings

ROOT_LOGGER = "farmqc"

# Attributes present on every LogRecord; anything else was passed via ``extra``.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log output for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class PlainFormatter(logging.Formatter):
    """Human-readable plain text log format."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _make_handler(level: int, format: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if format == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(PlainFormatter())
    return handler


def setup_logging(level: str = "INFO", format: str = "plain") -> None:
    """Configure the ``farmqc`` logger, replacing any existing handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format ("plain" or "structured")
    """
    root = logging.getLogger(ROOT_LOGGER)
    numeric = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric)

    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(_make_handler(numeric, format))
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    The first call configures the ``farmqc`` parent logger from settings;
    module loggers propagate to it.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format)

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)


class LogContext:
    """Context manager that attaches fields to every record of one logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, entity_kind="animal", batch_size=25):
        ...     logger.info("Validating batch")
    """

    def __init__(self, logger: logging.Logger, **extra: Any) -> None:
        self.logger = logger
        self.extra = extra

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra.items():
            setattr(record, key, value)
        return True

    def __enter__(self) -> "LogContext":
        self.logger.addFilter(self.filter)
        return self

    def __exit__(self, *args: Any) -> None:
        self.logger.removeFilter(self.filter)
