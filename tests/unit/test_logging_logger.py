"""Tests for logger factory and handlers."""

import io
import json
import logging

import pytest
from rich.console import Console

from rosterdesk.logutils.config import LogConfig, reset_config
from rosterdesk.logutils.formatters import CompactFormatter, JSONFormatter, StandardFormatter
from rosterdesk.logutils.handlers import RichConsoleHandler, SafeRotatingFileHandler
from rosterdesk.logutils.logger import build_handlers, get_logger, reset_logging

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_all():
    """Reset logging and config before and after each test."""
    reset_logging()
    reset_config()
    yield
    reset_logging()
    reset_config()


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger_instance(self):
        """get_logger should return a Logger instance."""
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_configured_only_once(self):
        """Logger should only be configured once."""
        logger1 = get_logger("test.logger")
        handler_count = len(logger1.handlers)

        logger2 = get_logger("test.logger")

        assert logger1 is logger2
        assert len(logger2.handlers) == handler_count

    def test_custom_config(self):
        """Logger should use provided config."""
        logger = get_logger("error.logger", config=LogConfig(level="ERROR"))
        assert logger.level == logging.ERROR

    def test_does_not_propagate(self):
        logger = get_logger("isolated.logger", config=LogConfig(use_rich=False))
        assert logger.propagate is False

    def test_invalid_level_falls_back_to_info(self):
        logger = get_logger("odd.logger", config=LogConfig(level="LOUD"))
        assert logger.level == logging.INFO

    def test_reset_logging_detaches_handlers(self):
        logger = get_logger("reset.logger", config=LogConfig(use_rich=False))
        reset_logging()
        assert logger.handlers == []


class TestBuildHandlers:
    """Tests for handler selection."""

    def test_rich_console(self):
        handlers = build_handlers(LogConfig(use_rich=True))
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichConsoleHandler)
        assert isinstance(handlers[0].formatter, CompactFormatter)

    def test_plain_console(self):
        handlers = build_handlers(LogConfig(use_rich=False))
        assert isinstance(handlers[0].formatter, StandardFormatter)

    def test_json_console_wins_over_rich(self):
        handlers = build_handlers(LogConfig(json_format=True, use_rich=True))
        assert not isinstance(handlers[0], RichConsoleHandler)
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_log_file(self, tmp_path):
        """A log file adds a JSON rotating file handler."""
        log_file = tmp_path / "logs" / "roster.log"
        handlers = build_handlers(LogConfig(use_rich=False, log_file=log_file))

        assert len(handlers) == 2
        file_handler = handlers[1]
        assert isinstance(file_handler, SafeRotatingFileHandler)
        assert isinstance(file_handler.formatter, JSONFormatter)
        assert log_file.parent.is_dir()
        file_handler.close()

    def test_file_output_is_json(self, tmp_path):
        log_file = tmp_path / "roster.log"
        logger = get_logger("file.logger", config=LogConfig(use_rich=False, log_file=log_file))

        logger.info("Fetched 2 students")
        for handler in logger.handlers:
            handler.flush()
            handler.close()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["message"] == "Fetched 2 students"


class TestRichConsoleHandler:
    """Tests for RichConsoleHandler."""

    def test_writes_level_and_message(self):
        buffer = io.StringIO()
        handler = RichConsoleHandler(console=Console(file=buffer, width=200, color_system=None))
        handler.setFormatter(CompactFormatter())
        record = logging.LogRecord("t", logging.WARNING, __file__, 1, "Roster [stale] refresh dropped", (), None)

        handler.emit(record)

        output = buffer.getvalue()
        assert "[WARNING ]" in output
        assert "Roster [stale] refresh dropped" in output
