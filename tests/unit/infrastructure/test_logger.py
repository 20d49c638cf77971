"""Unit tests for the structured logger."""

import logging

from geo_redirect.infrastructure.logging.logger import configure_logging, log_event, logger


def test_log_event_formats_key_value_pairs(caplog):
    """Test events are logged as key=value pairs."""
    configure_logging("INFO")

    with caplog.at_level(logging.INFO, logger="geo_redirect"):
        log_event("geo", "resolved", ip="8.8.8.8", country="US")

    assert "component='geo' | event='resolved' | ip='8.8.8.8' | country='US'" in caplog.text


def test_configure_logging_sets_level():
    """Test level names are applied case-insensitively."""
    configure_logging("debug")
    assert logger.level == logging.DEBUG

    configure_logging("not-a-level")
    assert logger.level == logging.INFO
