"""Typed exceptions raised by the URL shortener core and its stores."""


class ShortenerError(Exception):
    """Base class for all shortener errors."""


class InvalidInput(ShortenerError, ValueError):
    """Malformed or empty URL/code passed to the core (caller bug, never retried)."""


class GenerationExhausted(ShortenerError):
    """No usable short code found within the attempt budget."""

    def __init__(self, url: str, attempts: int):
        super().__init__(
            f"Unable to generate clean short code for URL after {attempts} attempts"
        )
        self.url = url
        self.attempts = attempts


class DuplicateCode(ShortenerError):
    """Store rejected an insert because the short code already exists."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code
