"""Database engine and session factory.

Services open one short-lived session per operation from a session factory;
an AsyncSession must not be shared between concurrently awaited calls.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from storefront.config import settings


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create an async database engine, by default for the configured database."""
    url = url or settings.async_database_url

    engine_kwargs = {
        "echo": settings.app_debug,
        "future": True,
    }

    # NullPool in development and for SQLite, which does not take pool sizing
    if settings.is_development or url.startswith("sqlite"):
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs["pool_size"] = settings.database_pool_size
        engine_kwargs["max_overflow"] = settings.database_max_overflow
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(url, **engine_kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay readable after commit."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Global engine instance
engine = create_engine()

# Session factory
async_session_factory = create_session_factory(engine)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create any missing tables (tests and local setups; production uses Alembic)."""
    from storefront.models.base import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
