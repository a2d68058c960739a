"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


@dataclass
class UrlMapping:
    """A short code -> original URL mapping as stored."""

    short_code: str
    original_url: str
    created_at: datetime
    last_accessed: datetime
    access_count: int = 0
    id: Optional[int] = None

    @classmethod
    def new(cls, short_code: str, original_url: str, now: datetime) -> "UrlMapping":
        """Build a fresh, never-accessed mapping with both timestamps set to ``now``."""
        return cls(
            short_code=short_code,
            original_url=original_url,
            created_at=now,
            last_accessed=now,
            access_count=0,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "short_code": self.short_code,
            "original_url": self.original_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "access_count": self.access_count,
            "last_accessed": self.last_accessed.isoformat() if self.last_accessed else None,
        }

    @classmethod
    def from_record(cls, record: Any) -> "UrlMapping":
        """Create from a dict or an asyncpg Record."""
        return cls(
            id=record.get("id"),
            short_code=record["short_code"],
            original_url=record["original_url"],
            created_at=_as_utc(record["created_at"]),
            last_accessed=_as_utc(record["last_accessed"]),
            access_count=record.get("access_count") or 0,
        )


def _as_utc(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ResolutionStatus(str, Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    FOUND = "found"


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of resolving a short code. Only ``FOUND`` carries a URL."""

    status: ResolutionStatus
    original_url: Optional[str] = None

    @classmethod
    def not_found(cls) -> "ResolutionOutcome":
        return cls(ResolutionStatus.NOT_FOUND)

    @classmethod
    def expired(cls) -> "ResolutionOutcome":
        return cls(ResolutionStatus.EXPIRED)

    @classmethod
    def found(cls, original_url: str) -> "ResolutionOutcome":
        return cls(ResolutionStatus.FOUND, original_url)

    @property
    def is_found(self) -> bool:
        return self.status is ResolutionStatus.FOUND
