"""
Jaipur Traffic Grid - Logging Setup

Configures the root logger from the `logging` section of the settings:
- `text`: human readable single-line records
- `json`: one JSON object per record, including any `extra={...}` context

Usage:
    from src.shared.log_config import configure_logging

    configure_logging()  # Uses get_config()
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from src.shared.config import Settings, get_config

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes present on every LogRecord; anything else came in through `extra`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as JSON lines."""

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.include_timestamp:
            payload["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def build_formatter(config: Settings) -> logging.Formatter:
    """Create the formatter selected by `logging.format`."""
    log_config = config.logging
    if log_config.format == "json":
        return JsonFormatter(include_timestamp=log_config.include_timestamp)
    if log_config.include_timestamp:
        return logging.Formatter(TEXT_FORMAT)
    return logging.Formatter("%(name)s - %(levelname)s - %(message)s")


def configure_logging(config: Settings | None = None) -> logging.Logger:
    """
    Configure the root logger.

    Replaces existing root handlers so repeated calls do not duplicate output.

    Args:
        config: Configuration object (uses default if not provided)

    Returns:
        The configured root logger
    """
    config = config or get_config()

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(config))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.logging.level.upper())

    return root
