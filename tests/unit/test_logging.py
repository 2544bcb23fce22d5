"""Tests for logging helpers."""

import json
import logging

from farmqc.core.logging import (
    ROOT_LOGGER,
    LogContext,
    PlainFormatter,
    StructuredFormatter,
    get_logger,
    setup_logging,
)


class _Collect(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {"name": "farmqc.test", "levelname": "INFO", "levelno": logging.INFO, "msg": "hello %s", "args": ("farm",)}
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Tests for log formatters."""

    def test_structured_output(self):
        """Test JSON line output."""
        data = json.loads(StructuredFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "farmqc.test"
        assert data["message"] == "hello farm"
        assert "timestamp" in data

    def test_structured_includes_extra(self):
        """Test that extra attributes become JSON fields."""
        data = json.loads(StructuredFormatter().format(_record(entity_kind="crop", batch_size=3)))
        assert data["entity_kind"] == "crop"
        assert data["batch_size"] == 3
        assert "args" not in data

    def test_plain_output(self):
        """Test human-readable output."""
        line = PlainFormatter().format(_record())
        assert "INFO" in line
        assert "farmqc.test" in line
        assert line.endswith("hello farm")


class TestLoggers:
    """Tests for logger setup."""

    def test_get_logger_is_child_of_root(self):
        """Test module loggers hang off the farmqc logger."""
        assert get_logger("farmqc.validate.engine").name == "farmqc.validate.engine"
        assert get_logger("plugins.custom").name == "farmqc.plugins.custom"
        assert logging.getLogger(ROOT_LOGGER).handlers

    def test_setup_logging_replaces_handler(self):
        """Test that repeated setup keeps a single handler."""
        setup_logging("DEBUG", "structured")
        setup_logging("WARNING", "plain")
        root = logging.getLogger(ROOT_LOGGER)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, PlainFormatter)
        setup_logging("INFO", "plain")


class TestLogContext:
    """Tests for the LogContext context manager."""

    def test_fields_attached_inside_block_only(self):
        """Test that context fields are added and then removed."""
        logger = logging.getLogger("farmqc.test_log_context")
        logger.setLevel(logging.INFO)
        handler = _Collect()
        logger.addHandler(handler)
        try:
            with LogContext(logger, entity_kind="animal", batch_size=2):
                logger.info("inside")
            logger.info("outside")
        finally:
            logger.removeHandler(handler)

        inside, outside = handler.records
        assert inside.entity_kind == "animal"
        assert inside.batch_size == 2
        assert not hasattr(outside, "entity_kind")
