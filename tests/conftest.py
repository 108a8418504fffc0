"""Shared fixtures: fake Redis, throwaway SQLite databases and wired services."""

import os

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./storefront-test.db")
os.environ["APP_ENV"] = "test"
os.environ["REDIS_URL"] = ""
os.environ["CACHE_PREFIX"] = "test"

import fakeredis.aioredis
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.database import create_engine, create_session_factory, init_db
from storefront.services.cache_service import CacheStore
from storefront.services.config_service import ConfigService
from storefront.services.menu_service import MenuService
from storefront.services.settings_service import SettingsService

CACHE_PREFIX = "test:"


class CountingSessionFactory:
    """Session factory wrapper counting how many sessions were opened."""

    def __init__(self, factory: async_sessionmaker[AsyncSession]):
        self.factory = factory
        self.calls = 0

    def __call__(self) -> AsyncSession:
        self.calls += 1
        return self.factory()


class FailingSessionFactory:
    """Session factory whose sessions cannot be opened."""

    def __call__(self):
        raise ConnectionError("database is down")


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await init_db(engine)

    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def db_calls(session_factory) -> CountingSessionFactory:
    return CountingSessionFactory(session_factory)


@pytest.fixture
async def fake_redis():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache(fake_redis) -> CacheStore:
    return CacheStore(client=fake_redis, prefix=CACHE_PREFIX)


@pytest.fixture
def no_cache() -> CacheStore:
    """A cache store that never connected."""
    return CacheStore(prefix=CACHE_PREFIX)


@pytest.fixture
def config_service(cache, db_calls) -> ConfigService:
    return ConfigService(cache=cache, session_factory=db_calls)


@pytest.fixture
def settings_service(cache, db_calls) -> SettingsService:
    return SettingsService(cache=cache, session_factory=db_calls)


@pytest.fixture
def menu_service(cache, db_calls) -> MenuService:
    return MenuService(cache=cache, session_factory=db_calls)
