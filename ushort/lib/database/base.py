"""Abstract base class for URL mapping store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime

from .models import UrlMapping


class MappingStoreBase(ABC):
    """Durable keyed storage for URL mappings.

    Implementations must enforce uniqueness of ``short_code`` and make
    ``increment_access_and_touch`` a single atomic operation per code.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def find_by_code(self, short_code: str) -> Optional[UrlMapping]:
        """Look up a mapping by short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The mapping if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_codes(self, short_codes: List[str]) -> Dict[str, UrlMapping]:
        """Look up several codes at once.

        Returns:
            Stored mappings keyed by short code; absent codes are left out
        """
        pass

    @abstractmethod
    async def insert(self, mapping: UrlMapping) -> UrlMapping:
        """Persist a new mapping.

        Args:
            mapping: Mapping to store

        Returns:
            The stored mapping (with ``id`` assigned where the store has one)

        Raises:
            DuplicateCode: If the short code is already present
        """
        pass

    @abstractmethod
    async def increment_access_and_touch(self, short_code: str, now: datetime) -> int:
        """Atomically add one to the access count and set last_accessed.

        ``last_accessed`` never moves backwards: the later of the stored value
        and ``now`` is kept.

        Args:
            short_code: The short code to update
            now: Access timestamp

        Returns:
            Number of rows affected (0 if the code is absent)
        """
        pass

    @abstractmethod
    async def delete_by_code(self, short_code: str) -> None:
        """Delete a mapping. Deleting an absent code is a no-op."""
        pass

    @abstractmethod
    async def find_last_accessed_before(self, cutoff: datetime) -> List[UrlMapping]:
        """Find mappings whose last access is strictly older than ``cutoff``."""
        pass

    @abstractmethod
    async def delete_all(
        self,
        mappings: List[UrlMapping],
        last_accessed_before: Optional[datetime] = None,
    ) -> int:
        """Delete a batch of mappings by their short codes.

        Args:
            mappings: Mappings to delete
            last_accessed_before: When given, a row is only deleted if its
                last access is still older than this at delete time

        Returns:
            Number of rows actually deleted
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored mappings."""
        pass

    @abstractmethod
    async def list_most_accessed(self, limit: Optional[int] = None) -> List[UrlMapping]:
        """List mappings ordered by access count, highest first.

        Args:
            limit: Maximum number of mappings to return (all if None)

        Returns:
            List of mappings
        """
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[UrlMapping]:
        """List recently created mappings, newest first.

        Args:
            limit: Maximum number of mappings to return

        Returns:
            List of mappings
        """
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with total_urls, total_accesses and database
        """
        pass

    async def ensure_schema(self) -> None:
        """Create backing tables if the store has any."""
        return None

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
