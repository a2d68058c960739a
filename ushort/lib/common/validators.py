"""Validation utilities for URL shortener."""

import re
from typing import Tuple

MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = ("http://", "https://")

_SHORT_CODE_RE = re.compile(r'^[0-9a-zA-Z]+$')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    A URL is accepted when, once trimmed, it is non-empty, at most 2048
    characters long and starts with http:// or https://.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "URL is required"

    trimmed = url.strip()

    if len(trimmed) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if not trimmed.startswith(ALLOWED_SCHEMES):
        return False, "URL must start with http:// or https://"

    return True, ""


def is_valid_short_code(short_code: str, max_length: int = 64) -> Tuple[bool, str]:
    """Validate a short code supplied for lookup.

    Args:
        short_code: The short code to validate
        max_length: Maximum accepted length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str) or not short_code.strip():
        return False, "Short code is required"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not _SHORT_CODE_RE.match(short_code):
        return False, "Short code can only contain letters and numbers"

    return True, ""
