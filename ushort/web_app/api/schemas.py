"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime, timedelta

from ...lib.common.validators import is_valid_url
from ...lib.database.models import UrlMapping


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="http(s) URL to shorten, at most 2048 characters once trimmed")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Apply the same rules the service does, so bad input never reaches it."""
        is_valid, error = is_valid_url(v)
        if not is_valid:
            raise ValueError(error)
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_code: str = Field(..., description="6-8 character Base62 code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The stored (trimmed) URL")
    created_at: datetime = Field(..., description="When the mapping was first stored")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "aB3xY9kQ",
                    "short_url": "https://sho.rt/aB3xY9kQ",
                    "original_url": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """A live mapping with its counters and the moment it will expire if left alone."""

    short_code: str
    original_url: str
    created_at: datetime
    access_count: int
    last_accessed: datetime
    expires_at: datetime = Field(..., description="last_accessed plus the TTL")

    @classmethod
    def from_mapping(cls, mapping: UrlMapping, ttl_days: int) -> "URLInfoResponse":
        return cls(
            short_code=mapping.short_code,
            original_url=mapping.original_url,
            created_at=mapping.created_at,
            access_count=mapping.access_count,
            last_accessed=mapping.last_accessed,
            expires_at=mapping.last_accessed + timedelta(days=ttl_days),
        )


class HealthResponse(BaseModel):
    status: str = Field(..., description="healthy or unhealthy")
    database: str = Field(..., description="Mapping store status")
    sweeper: str = Field(..., description="running, stopped or disabled")
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: Optional[str] = Field(None, description="Error category, set for request validation failures")
    detail: str = Field(..., description="Human readable reason")


class StatisticsResponse(BaseModel):
    total_urls: int
    total_accesses: int
    database: str
    ttl_days: int


class AnalyticsResponse(BaseModel):
    """Admin analytics report, mappings ordered by access count."""

    username: str
    total_urls: int
    total_access_count: int
    has_urls: bool
    url_statistics: List[URLInfoResponse]


class SweepResponse(BaseModel):
    """Result of a manual expiry sweep."""

    deleted: int
    ttl_days: int
