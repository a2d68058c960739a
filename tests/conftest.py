"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from ushort.config import Config
from ushort.lib.database.memory import MemoryMappingStore
from ushort.lib.service import MappingLifecycle
from ushort.lib.shortcode import ShortCodeGenerator
from ushort.lib.common.logging_config import setup_logging
from ushort.web_app import create_app


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    """Clock pinned to a fixed instant; tests move it forward explicitly."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
async def store(logger) -> AsyncGenerator[MemoryMappingStore, None]:
    """Create test store instance."""
    db = MemoryMappingStore(logger=logger)

    yield db

    await db.close()


@pytest.fixture
def short_code_generator(logger):
    """Create short code generator."""
    return ShortCodeGenerator(logger=logger)


@pytest.fixture
def service(store, short_code_generator, clock, logger) -> MappingLifecycle:
    """Create lifecycle instance with a 90 day TTL."""
    return MappingLifecycle(
        store=store,
        short_code_generator=short_code_generator,
        ttl_days=90,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config():
    """Test configuration with admin access enabled."""
    return Config(
        database_url="memory://",
        base_url="http://testserver",
        admin_username="admin",
        admin_password="s3cret",
        sweep_interval_seconds=0,
    )


@pytest.fixture
def app(store, service, config):
    """Create test FastAPI app."""
    return create_app(
        store_instance=store,
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
