"""Structured logger for observability."""

import logging
from typing import Any, Union

# Configure application logger with key=value structured format
_logger = logging.getLogger("geo_redirect")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def configure_logging(level: Union[str, int]) -> None:
    """
    Set the application log level.

    Args:
        level: Level name (e.g. "INFO", "debug") or numeric level
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    _logger.setLevel(level)


def log_event(
    component: str,
    event: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log a structured event.

    Args:
        component: Component name (e.g., 'storage', 'config', 'geo', 'http')
        event: Short event name
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    if not _logger.isEnabledFor(level):
        return

    fields = {"component": component, "event": event}
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    _logger.log(level, " | ".join(log_parts))


def log_storage(event: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """Log a key-value store event."""
    log_event("storage", event, level=level, **kwargs)


def log_geo(event: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """Log a geo-resolution event."""
    log_event("geo", event, level=level, **kwargs)


def log_config(event: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """Log a configuration store event."""
    log_event("config", event, level=level, **kwargs)


def log_http(event: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """Log an HTTP adapter event."""
    log_event("http", event, level=level, **kwargs)


logger = _logger
