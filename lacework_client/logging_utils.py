"""
Shared logging setup for the Lacework API client.

Every module logs through ``get_logger`` so that records land under the
``lacework_client`` namespace and honour a single configuration.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
import sys
from typing import Optional


ROOT_LOGGER_NAME = "lacework_client"
LOG_LEVEL_ENV = "LW_LOG"
LOG_FORMAT_ENV = "LW_LOG_FORMAT"

_LEVELS = {
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            log_entry.update(fields)
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def valid_level(level: str) -> bool:
    return level == "" or level.upper() in _LEVELS


def log_level_from_environment() -> str:
    """Returns ``INFO`` or ``DEBUG`` when ``LW_LOG`` holds one of them."""
    level = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if level in _LEVELS:
        return level
    return ""


def configure_logging(level: str = "", json_format: Optional[bool] = None) -> None:
    """
    Configure the ``lacework_client`` logger.

    An empty level leaves the client quiet (WARNING and above). Calling this
    again replaces the previous handler instead of stacking a new one.
    """
    if json_format is None:
        json_format = os.getenv(LOG_FORMAT_ENV, "").strip().upper() == "JSON"

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_LEVELS.get(level.upper(), logging.WARNING))

    for handler in list(root.handlers):
        if getattr(handler, "_lacework_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s [%(message)s]",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handler._lacework_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
