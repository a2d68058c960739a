"""Short code generation utilities."""

import hashlib
import logging
from typing import FrozenSet, Iterable, Iterator, Optional

from .errors import GenerationExhausted, InvalidInput


# Small fixed set of offensive tokens that must never lead or trail a code
BLOCKED_WORDS: FrozenSet[str] = frozenset({
    "damn", "shit", "hell", "fuck", "ass", "piss", "crap", "bitch",
    "bastard", "turd", "puke", "fart", "butt", "sex", "porn", "xxx",
})


class ShortCodeGenerator:
    """Derive short codes for URLs.

    Codes are the Base62 rendering of the first bytes of a SHA-256 digest of
    the trimmed URL. When a code hits the blocklist the URL is re-hashed with
    an attempt suffix (``url_1``, ``url_2``, ...) so the same URL always walks
    the same seed sequence.
    """

    # Base62 characters, digits first (case-sensitive)
    BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

    HASH_BYTES_LENGTH = 6
    MIN_CODE_LENGTH = 6
    MAX_CODE_LENGTH = 8
    MAX_ATTEMPTS = 100

    def __init__(
        self,
        blocked_words: Optional[Iterable[str]] = None,
        max_attempts: int = MAX_ATTEMPTS,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize short code generator.

        Args:
            blocked_words: Terms a code may not equal, start with or end with
            max_attempts: Number of seeds tried before giving up
            logger: Optional logger
        """
        words = BLOCKED_WORDS if blocked_words is None else blocked_words
        self.blocked_words = frozenset(w.lower() for w in words)
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, url: str) -> str:
        """Generate the short code for a URL.

        Args:
            url: The URL to derive a code from

        Returns:
            A 6-8 character Base62 code that is not blocked

        Raises:
            InvalidInput: If the URL is empty after trimming
            GenerationExhausted: If every attempt produced a blocked code
        """
        for code in self.candidates(url):
            return code
        self.logger.error(
            f"Unable to generate clean short code for URL '{url.strip()}' "
            f"after {self.max_attempts} attempts"
        )
        raise GenerationExhausted(url.strip(), self.max_attempts)

    def candidates(self, url: str) -> Iterator[str]:
        """Yield every non-blocked code of the seed sequence, in attempt order.

        Validation happens eagerly, before the first ``next()``.
        """
        if url is None or not url.strip():
            raise InvalidInput("URL cannot be null or empty")
        return self._iter_candidates(url.strip())

    def _iter_candidates(self, trimmed_url: str) -> Iterator[str]:
        for attempt in range(self.max_attempts):
            seed = trimmed_url if attempt == 0 else f"{trimmed_url}_{attempt}"
            code = self.code_for_seed(seed)
            if self.is_blocked(code):
                self.logger.debug(
                    f"Generated code '{code}' is blocked, retrying (attempt {attempt + 1})"
                )
                continue
            self.logger.debug(
                f"Generated code '{code}' for URL '{trimmed_url}' after {attempt + 1} attempts"
            )
            yield code

    def code_for_seed(self, seed: str) -> str:
        """Hash a seed and render it as a padded, truncated Base62 code."""
        digest = hashlib.sha256(seed.encode("utf-8")).digest()
        value = int.from_bytes(digest[:self.HASH_BYTES_LENGTH], "big")
        code = self._int_to_base62(value).rjust(self.MIN_CODE_LENGTH, self.BASE62_CHARS[0])
        return code[:self.MAX_CODE_LENGTH]

    def is_blocked(self, code: str) -> bool:
        """Check a code against the blocklist.

        Matching is case-insensitive and only looks at the whole code, its
        prefix and its suffix. A blocked term in the middle does not count.

        Args:
            code: Code to check

        Returns:
            True if the code is blocked
        """
        if not code:
            return False

        lower_code = code.lower()
        return any(
            lower_code == word or lower_code.startswith(word) or lower_code.endswith(word)
            for word in self.blocked_words
        )

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string.

        Args:
            num: Integer to convert

        Returns:
            Base62 string
        """
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            num, remainder = divmod(num, base)
            result.append(self.BASE62_CHARS[remainder])

        return ''.join(reversed(result))

    def _base62_to_int(self, code: str) -> int:
        """Convert base62 string to integer.

        Args:
            code: Base62 string

        Returns:
            Integer value
        """
        result = 0
        base = len(self.BASE62_CHARS)

        for char in code:
            result = result * base + self.BASE62_CHARS.index(char)

        return result

    @classmethod
    def is_valid_format(cls, code: str) -> bool:
        """Check if code has the shape of a generated code (6-8 Base62 chars).

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        if not code or not cls.MIN_CODE_LENGTH <= len(code) <= cls.MAX_CODE_LENGTH:
            return False
        return all(c in cls.BASE62_CHARS for c in code)
