"""Unit tests for logging configuration."""

from unittest.mock import MagicMock

import structlog


class TestLoggingSetup:
    """Test logging setup functions."""

    def test_get_logger_returns_structlog_logger(self):
        from payout_console.core.logging import get_logger

        logger = get_logger("test_module")
        assert logger is not None

    def test_setup_logging_with_json_format(self, capsys):
        from payout_console.core.logging import get_logger, setup_logging

        mock_settings = MagicMock()
        mock_settings.app.log_level = "INFO"
        mock_settings.observability.log_record_format = "json"

        setup_logging(mock_settings)
        get_logger("json_test").info("hello", payout_id="payout-001")

        out = capsys.readouterr().out
        assert '"event": "hello"' in out
        assert '"payout_id": "payout-001"' in out
        structlog.reset_defaults()

    def test_setup_logging_filters_below_level(self, capsys):
        from payout_console.core.logging import get_logger, setup_logging

        mock_settings = MagicMock()
        mock_settings.app.log_level = "WARNING"
        mock_settings.observability.log_record_format = "json"

        setup_logging(mock_settings)
        get_logger("level_test").info("quiet")

        assert "quiet" not in capsys.readouterr().out
        structlog.reset_defaults()

    def test_setup_logging_with_console_format(self):
        from payout_console.core.logging import setup_logging

        mock_settings = MagicMock()
        mock_settings.app.log_level = "DEBUG"
        mock_settings.observability.log_record_format = "console"

        setup_logging(mock_settings)
        structlog.reset_defaults()


class TestLoggerMixin:
    def test_logger_named_after_module(self):
        from payout_console.core.logging import LoggerMixin

        class Component(LoggerMixin):
            pass

        assert Component().logger is not None
