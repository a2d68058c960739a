"""Mapping lifecycle: creation, resolution with side effects, and expiry."""

import logging
from typing import Optional, Dict, Any, List, Callable
from datetime import datetime, timedelta, timezone

from .shortcode import ShortCodeGenerator
from .database.base import MappingStoreBase
from .database.models import UrlMapping, ResolutionOutcome
from .errors import DuplicateCode, GenerationExhausted, InvalidInput
from .common.validators import is_valid_url, is_valid_short_code
from .common.logging_config import (
    log_event,
    URL_CREATED,
    URL_ACCESSED,
    INVALID_URL,
    EXPIRED_URL_ACCESSED,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MappingLifecycle:
    """Orchestrates the life of each short code mapping.

    The lifecycle holds no state between calls; everything mutable lives in
    the store. Expiry is never stored: a mapping is expired when its
    ``last_accessed`` is more than ``ttl_days`` in the past, and it is deleted
    as soon as that is noticed, either on resolution or by a sweep.
    """

    def __init__(
        self,
        store: MappingStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        ttl_days: int = 90,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize mapping lifecycle.

        Args:
            store: Mapping store
            short_code_generator: Optional short code generator
            ttl_days: Days without access after which a mapping expires
            logger: Optional logger
            clock: Optional source of the current UTC time
        """
        if ttl_days < 1:
            raise ValueError("ttl_days must be at least 1")

        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.ttl_days = ttl_days
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utcnow

    async def create_or_get(self, original_url: str) -> UrlMapping:
        """Return the mapping for a URL, creating it on first sight.

        All candidate codes of the URL's seed sequence are looked up together.
        If any of them already holds this URL, that row is returned unchanged,
        even when an earlier candidate has since been freed. Otherwise the URL
        is stored at the first free candidate; codes held by other URLs are
        hash collisions and are skipped.

        Args:
            original_url: The original long URL

        Returns:
            The existing or newly stored mapping

        Raises:
            InvalidInput: If the URL fails validation
            GenerationExhausted: If every usable candidate is held by another URL
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            log_event(self.logger, logging.WARNING, INVALID_URL, url=repr(original_url), reason=error)
            raise InvalidInput(f"Invalid URL: {error}")

        url = original_url.strip()
        codes = list(self.generator.candidates(url))

        for attempt in range(2):
            taken = await self.store.find_by_codes(codes)

            for short_code in codes:
                existing = taken.get(short_code)
                if existing is not None and existing.original_url == url:
                    self.logger.debug(f"URL already exists: {short_code}")
                    return existing

            free = next((code for code in codes if code not in taken), None)
            if free is None:
                self.logger.error(
                    f"Generation exhausted for URL '{url}' "
                    f"({len(codes)} usable candidates all taken)"
                )
                raise GenerationExhausted(url, self.generator.max_attempts)

            if free != codes[0]:
                self.logger.warning(
                    f"Short code collision: shortCode={codes[0]} is held by a different URL, "
                    f"using {free} for {url}"
                )

            try:
                created = await self.store.insert(UrlMapping.new(free, url, self.clock()))
            except DuplicateCode:
                if attempt:
                    raise
                # Lost an insert race; look again at what the winner stored
                self.logger.debug(f"Concurrent insert for {free}, re-reading")
                continue

            log_event(self.logger, logging.INFO, URL_CREATED, shortCode=free, originalUrl=url)
            return created

    async def resolve(
        self,
        short_code: str,
        client_ip: Optional[str] = None,
    ) -> ResolutionOutcome:
        """Resolve a short code, counting the access.

        Args:
            short_code: The short code to resolve
            client_ip: Optional caller address, for the access log

        Returns:
            FOUND with the original URL, NOT_FOUND, or EXPIRED

        Raises:
            InvalidInput: If the code is empty or malformed
        """
        is_valid, error = is_valid_short_code(short_code)
        if not is_valid:
            raise InvalidInput(f"Invalid short code: {error}")

        mapping = await self.store.find_by_code(short_code)
        if mapping is None:
            self.logger.warning(f"Short code not found: {short_code}")
            return ResolutionOutcome.not_found()

        now = self.clock()
        if self.is_expired(mapping, now):
            log_event(
                self.logger, logging.WARNING, EXPIRED_URL_ACCESSED,
                shortCode=short_code,
                lastAccessed=mapping.last_accessed.isoformat(),
                ttlDays=self.ttl_days,
            )
            await self.store.delete_by_code(short_code)
            self.logger.info(f"Deleted expired URL: {short_code}")
            return ResolutionOutcome.expired()

        updated_rows = await self.store.increment_access_and_touch(short_code, now)
        if updated_rows > 0:
            updated = await self.store.find_by_code(short_code)
            new_count = updated.access_count if updated else -1
            log_event(
                self.logger, logging.INFO, URL_ACCESSED,
                shortCode=short_code, clientIp=client_ip, newAccessCount=new_count,
            )
        else:
            self.logger.warning(f"Failed to update access count for: {short_code}")

        return ResolutionOutcome.found(mapping.original_url)

    def is_expired(self, mapping: UrlMapping, now: Optional[datetime] = None) -> bool:
        """True when ``now`` is past the mapping's last access plus the TTL."""
        now = now or self.clock()
        return now > mapping.last_accessed + timedelta(days=self.ttl_days)

    async def sweep_expired(self, ttl_days: Optional[int] = None) -> int:
        """Delete every mapping not accessed within the TTL.

        Args:
            ttl_days: TTL override (uses the configured TTL if not specified)

        Returns:
            Number of mappings deleted
        """
        ttl_days = self.ttl_days if ttl_days is None else ttl_days
        if ttl_days < 0:
            raise InvalidInput("ttl_days must not be negative")

        cutoff = self.clock() - timedelta(days=ttl_days)
        expired = await self.store.find_last_accessed_before(cutoff)

        if not expired:
            self.logger.debug("No expired URLs found")
            return 0

        self.logger.info(f"Cleaning up {len(expired)} expired URLs")
        # Rows refreshed since the scan are kept
        deleted = await self.store.delete_all(expired, last_accessed_before=cutoff)
        self.logger.info(f"Cleanup complete: {deleted} URLs deleted")
        return deleted

    async def get_mapping(self, short_code: str) -> Optional[UrlMapping]:
        """Look up a mapping without counting an access or checking expiry."""
        return await self.store.find_by_code(short_code)

    async def total_count(self) -> int:
        return await self.store.count()

    async def list_most_accessed(self, limit: Optional[int] = None) -> List[UrlMapping]:
        return await self.store.list_most_accessed(limit)

    async def list_recent(self, limit: int = 100) -> List[UrlMapping]:
        return await self.store.list_recent(limit)

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics.

        Returns:
            Dictionary with statistics
        """
        db_stats = await self.store.get_statistics()

        return {
            **db_stats,
            "ttl_days": self.ttl_days,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
