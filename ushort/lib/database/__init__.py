"""Storage layer for URL shortener."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import MappingStoreBase
from .memory import MemoryMappingStore
from .postgres import PostgresMappingStore
from .models import UrlMapping, ResolutionOutcome, ResolutionStatus


def create_store(
    database_url: str,
    pool_max_size: int = 10,
    connection_timeout_seconds: int = 30,
    create_tables: bool = False,
    logger: Optional[logging.Logger] = None,
) -> MappingStoreBase:
    """Build the store matching the URL scheme (memory:// or postgresql://)."""
    scheme = urlparse(database_url).scheme
    if scheme == "memory":
        return MemoryMappingStore(db_config=database_url, logger=logger)
    if scheme in ("postgresql", "postgres"):
        return PostgresMappingStore(
            db_config=database_url,
            pool_max_size=pool_max_size,
            connection_timeout_seconds=connection_timeout_seconds,
            create_tables=create_tables,
            logger=logger,
        )
    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")


__all__ = [
    "MappingStoreBase",
    "MemoryMappingStore",
    "PostgresMappingStore",
    "UrlMapping",
    "ResolutionOutcome",
    "ResolutionStatus",
    "create_store",
]
