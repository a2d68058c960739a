"""Logging configuration and structured service events for ushort.

Service events are logged as ``"<event>: key=value, key=value"`` lines so
they read well on a console, and the same fields ride along on the record
(``record.event``, ``record.fields``) for the JSON formatter.
"""

import json
import logging
import sys
from typing import Any, Optional

ROOT_LOGGER_NAME = "ushort"

# Event names shared by the service, API, web pages and admin routes
URL_CREATED = "URL created"
URL_ACCESSED = "URL accessed"
URL_SHORTENED = "URL shortened successfully"
INVALID_URL = "Invalid URL provided"
EXPIRED_URL_ACCESSED = "Expired URL accessed"
SHORTEN_FAILED = "Failed to shorten URL"
REDIRECTING = "Redirecting to original URL"
SHORT_URL_NOT_FOUND = "Shortened URL not found"
SHORT_URL_EXPIRED = "Shortened URL expired"
ADMIN_ACCESS = "Admin accessed analytics"
ADMIN_SWEEP = "Manual sweep"
AUTH_FAILED = "Authentication failed"
REQUEST_COMPLETED = "Performance metrics"


def format_fields(**fields: Any) -> str:
    """Render fields as ``key=value`` pairs in call order."""
    return ", ".join(f"{key}={value}" for key, value in fields.items())


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    exc_info: bool = False,
    **fields: Any,
) -> None:
    """Log one service event with its fields.

    Args:
        logger: Logger to write to
        level: Logging level, e.g. ``logging.INFO``
        event: Event name, one of the constants in this module
        exc_info: Attach the active exception's traceback
        **fields: Event fields, rendered in the message and kept on the record
    """
    if not logger.isEnabledFor(level):
        return
    message = f"{event}: {format_fields(**fields)}" if fields else event
    logger.log(level, message, exc_info=exc_info, extra={"event": event, "fields": fields})


class EventJsonFormatter(logging.Formatter):
    """One JSON object per line, carrying event fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if event:
            payload["event"] = event
            payload["fields"] = getattr(record, "fields", {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Setup logging configuration.

    Handlers go on the ``ushort`` logger, so every module logger below it
    (``ushort.lib.service``, ``ushort.web``, ...) shares them.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_format: Whether to use JSON format

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if json_format:
        formatter = EventJsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the ``ushort`` hierarchy; "web" becomes "ushort.web"."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
