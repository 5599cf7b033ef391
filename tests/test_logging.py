"""Tests for structured logging setup."""

import json
import logging

import structlog

from edge_scanner.observability import setup_logging


class TestSetupLogging:
    """Test structlog configuration."""

    def test_json_format(self, caplog):
        setup_logging(level="DEBUG", format="json")
        caplog.set_level(logging.DEBUG)

        structlog.get_logger("edge_scanner.tests").info("scan_complete", events=3)

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "scan_complete"
        assert payload["events"] == 3
        assert payload["level"] == "info"
        assert payload["logger"] == "edge_scanner.tests"
        assert "timestamp" in payload
