"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_code
from .headers import ForwardedHeaders
from .url_builder import build_short_url, normalize_path_prefix
from .logging_config import setup_logging, get_logger, log_event

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "ForwardedHeaders",
    "build_short_url",
    "normalize_path_prefix",
    "setup_logging",
    "get_logger",
    "log_event",
]
