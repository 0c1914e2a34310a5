"""
Tests for structured logging.
"""

import io
import json

from player_api.config import configure
from player_api.monitoring import (
    LogLevel,
    StructuredLogger,
    configure_logging,
    get_logger,
    reset_logging,
)


class TestStructuredLogger:

    def test_json_output(self):
        output = io.StringIO()
        logger = StructuredLogger(output=output)

        logger.info("setup", message="Setting up", player_id="p1")

        record = json.loads(output.getvalue())
        assert record["level"] == "info"
        assert record["event"] == "setup"
        assert record["message"] == "Setting up"
        assert record["player_id"] == "p1"

    def test_level_filtering(self):
        output = io.StringIO()
        logger = StructuredLogger(level=LogLevel.WARNING, output=output)

        logger.debug("hidden")
        logger.info("hidden")
        logger.warning("shown")

        lines = output.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "shown"

    def test_bind_adds_context(self):
        output = io.StringIO()
        logger = StructuredLogger(output=output).bind(player_id="p1")

        logger.bind(unique_id=3).info("x")

        record = json.loads(output.getvalue())
        assert record["player_id"] == "p1"
        assert record["unique_id"] == 3

    def test_binding_error(self):
        output = io.StringIO()
        logger = StructuredLogger(output=output).bind(player_id="p1")

        logger.binding_error(TypeError("not callable"), option="onReady")

        record = json.loads(output.getvalue())
        assert record["level"] == "warning"
        assert record["event"] == "binding_error"
        assert record["option"] == "onReady"
        assert record["player_id"] == "p1"

    def test_subscriber_error(self):
        output = io.StringIO()
        logger = StructuredLogger(output=output)

        logger.subscriber_error(ValueError("bad payload"), event_name="time")

        record = json.loads(output.getvalue())
        assert record["event"] == "subscriber_error"
        assert record["error_type"] == "ValueError"
        assert record["event_name"] == "time"
        assert record["message"] == "bad payload"

    def test_non_serializable_data(self):
        output = io.StringIO()
        logger = StructuredLogger(output=output)

        logger.info("x", handle=object())

        assert "handle" in json.loads(output.getvalue())


class TestGlobalLogger:

    def test_configure_replaces_global(self):
        output = io.StringIO()
        configured = configure_logging("debug", output=output)

        assert get_logger() is configured
        assert configured.level is LogLevel.DEBUG

    def test_default_logger_follows_settings(self):
        assert get_logger().level is LogLevel.INFO

        configure(log_level="error")

        assert get_logger().level is LogLevel.ERROR

    def test_configured_logger_ignores_settings(self):
        configured = configure_logging("debug", output=io.StringIO())

        configure(log_level="error")

        assert get_logger() is configured
        assert get_logger().level is LogLevel.DEBUG

    def test_reset_returns_to_settings(self):
        configure_logging("debug", output=io.StringIO())
        configure(log_level="warning")

        reset_logging()

        assert get_logger().level is LogLevel.WARNING
