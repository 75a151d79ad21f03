"""Tests for logging utilities."""
import io
import logging
import sys

import pytest

from pm_copilot.logging_utils import (
    LOG_FORMAT,
    SafeStreamHandler,
    configure_safe_logging,
    resolve_level,
)

TEST_LOGGER = "pm_copilot.tests.logging"


def _record(msg="test message"):
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSafeStreamHandler:
    """Exception handling in SafeStreamHandler."""

    def test_defaults_to_stderr(self):
        assert SafeStreamHandler().stream is sys.stderr

    @pytest.mark.parametrize("error", [
        BrokenPipeError("stdout closed"),
        ValueError("I/O operation on closed file"),
    ])
    def test_swallows_closed_stream_errors(self, monkeypatch, error):
        handler = SafeStreamHandler(stream=io.StringIO())

        def failing_emit(self, record):
            raise error

        monkeypatch.setattr(logging.StreamHandler, "emit", failing_emit)
        # Should not raise
        handler.emit(_record())

    def test_reraises_other_exceptions(self, monkeypatch):
        handler = SafeStreamHandler(stream=io.StringIO())

        def bad_emit(self, record):
            raise RuntimeError("unexpected error")

        monkeypatch.setattr(logging.StreamHandler, "emit", bad_emit)
        with pytest.raises(RuntimeError, match="unexpected error"):
            handler.emit(_record())

    def test_normal_logging_works(self):
        stream = io.StringIO()
        handler = SafeStreamHandler(stream=stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(_record("hello world"))

        assert "hello world" in stream.getvalue()


class TestResolveLevel:

    def test_int_passthrough(self):
        assert resolve_level(logging.WARNING) == logging.WARNING

    def test_name(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Error ") == logging.ERROR

    def test_unknown_name_falls_back_to_info(self):
        assert resolve_level("chatty") == logging.INFO


class TestConfigureSafeLogging:
    """configure_safe_logging on a scratch logger."""

    def teardown_method(self):
        logger = logging.getLogger(TEST_LOGGER)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_adds_safe_stream_handler(self):
        logger = configure_safe_logging(logger_name=TEST_LOGGER)

        handlers = [h for h in logger.handlers if isinstance(h, SafeStreamHandler)]
        assert len(handlers) == 1
        assert handlers[0].formatter._fmt == LOG_FORMAT

    def test_prevents_duplicate_handlers(self):
        configure_safe_logging(logger_name=TEST_LOGGER)
        configure_safe_logging(logger_name=TEST_LOGGER)
        logger = configure_safe_logging(logger_name=TEST_LOGGER)

        safe_handlers = [h for h in logger.handlers if isinstance(h, SafeStreamHandler)]
        assert len(safe_handlers) == 1

    def test_defaults_to_info(self):
        logger = configure_safe_logging(logger_name=TEST_LOGGER)
        assert logger.level == logging.INFO

    def test_level_by_name(self):
        logger = configure_safe_logging("DEBUG", logger_name=TEST_LOGGER)
        assert logger.level == logging.DEBUG

    def test_reconfigure_updates_level(self):
        configure_safe_logging(logging.DEBUG, logger_name=TEST_LOGGER)
        logger = configure_safe_logging(logging.WARNING, logger_name=TEST_LOGGER)

        assert logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in logger.handlers)

    def test_package_logger_is_default(self):
        logger = logging.getLogger("pm_copilot")
        before = list(logger.handlers)
        try:
            assert configure_safe_logging() is logger
        finally:
            for handler in logger.handlers[:]:
                if handler not in before:
                    logger.removeHandler(handler)
