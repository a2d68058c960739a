"""In-process store for URL shortener (tests and single-process local runs)."""

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, List, Dict, Any

from ..errors import DuplicateCode
from .base import MappingStoreBase
from .models import UrlMapping


class MemoryMappingStore(MappingStoreBase):
    """Dict-backed mapping store.

    Every mutation runs under a single ``asyncio.Lock`` so concurrent
    coroutines see the same atomicity a row-level database update gives.
    Reads hand out copies so callers can never mutate stored rows.
    """

    def __init__(
        self,
        db_config: str = "memory://",
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._rows: Dict[str, UrlMapping] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def find_by_code(self, short_code: str) -> Optional[UrlMapping]:
        row = self._rows.get(short_code)
        return replace(row) if row else None

    async def find_by_codes(self, short_codes: List[str]) -> Dict[str, UrlMapping]:
        return {code: replace(self._rows[code]) for code in short_codes if code in self._rows}

    async def insert(self, mapping: UrlMapping) -> UrlMapping:
        async with self._lock:
            if mapping.short_code in self._rows:
                self.logger.warning(f"Short code already exists: {mapping.short_code}")
                raise DuplicateCode(mapping.short_code)
            stored = replace(mapping, id=next(self._ids))
            self._rows[stored.short_code] = stored
        return replace(stored)

    async def increment_access_and_touch(self, short_code: str, now: datetime) -> int:
        async with self._lock:
            row = self._rows.get(short_code)
            if row is None:
                return 0
            row.access_count += 1
            row.last_accessed = max(row.last_accessed, now)
            return 1

    async def delete_by_code(self, short_code: str) -> None:
        async with self._lock:
            self._rows.pop(short_code, None)

    async def find_last_accessed_before(self, cutoff: datetime) -> List[UrlMapping]:
        return [replace(row) for row in self._rows.values() if row.last_accessed < cutoff]

    async def delete_all(
        self,
        mappings: List[UrlMapping],
        last_accessed_before: Optional[datetime] = None,
    ) -> int:
        deleted = 0
        async with self._lock:
            for mapping in mappings:
                row = self._rows.get(mapping.short_code)
                if row is None:
                    continue
                if last_accessed_before is not None and row.last_accessed >= last_accessed_before:
                    continue
                del self._rows[mapping.short_code]
                deleted += 1
        return deleted

    async def count(self) -> int:
        return len(self._rows)

    async def list_most_accessed(self, limit: Optional[int] = None) -> List[UrlMapping]:
        rows = sorted(self._rows.values(), key=lambda r: r.access_count, reverse=True)
        if limit is not None:
            rows = rows[:limit]
        return [replace(row) for row in rows]

    async def list_recent(self, limit: int = 100) -> List[UrlMapping]:
        rows = sorted(self._rows.values(), key=lambda r: (r.created_at, r.id), reverse=True)
        return [replace(row) for row in rows[:limit]]

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_urls": len(self._rows),
            "total_accesses": sum(row.access_count for row in self._rows.values()),
            "database": "memory",
        }

    async def close(self) -> None:
        self.logger.debug(f"Closing memory store with {len(self._rows)} mappings")

    async def health_check(self) -> bool:
        return True
