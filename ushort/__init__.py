"""ushort: URL shortening service with access tracking and expiry."""

__version__ = "1.0.0"
