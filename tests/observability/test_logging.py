"""Tests for structured logging."""

from queryhydrate.observability.logging import get_logger, setup_logging


class TestStructuredLogging:
    """Tests for structured logging setup."""

    def test_setup_logging_with_json_format(self) -> None:
        """setup_logging should configure JSON logging."""
        setup_logging(log_level="INFO", json_logs=True)
        logger = get_logger(__name__)
        assert logger is not None

    def test_setup_logging_with_console_format(self) -> None:
        """setup_logging should configure console logging."""
        setup_logging(log_level="debug", json_logs=False)
        logger = get_logger(__name__)
        assert logger is not None

    def test_get_logger_returns_logger(self) -> None:
        """get_logger should return a logger with the usual level methods."""
        logger = get_logger("test_module")
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "error")
