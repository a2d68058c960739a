"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import MappingLifecycle
from .sweeper import ExpirySweeper
from .errors import ShortenerError, InvalidInput, GenerationExhausted, DuplicateCode

__all__ = [
    "ShortCodeGenerator",
    "MappingLifecycle",
    "ExpirySweeper",
    "ShortenerError",
    "InvalidInput",
    "GenerationExhausted",
    "DuplicateCode",
]
