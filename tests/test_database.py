"""Tests for engine and session factory construction."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import NullPool

from storefront.database import create_engine, create_session_factory, init_db
from storefront.models import Configuration


@pytest.mark.asyncio
async def test_sqlite_engine_uses_null_pool(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'pool.db'}")

    assert isinstance(engine.pool, NullPool)
    await engine.dispose()


@pytest.mark.asyncio
async def test_init_db_creates_every_table(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")

    await init_db(engine)

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert {"configurations", "site_settings", "pages", "menus", "menu_items"} <= set(tables)
    await engine.dispose()


@pytest.mark.asyncio
async def test_objects_stay_readable_after_commit(session_factory):
    async with session_factory() as db:
        row = Configuration(key="site_name", value="Acme")
        db.add(row)
        await db.commit()

    assert row.key == "site_name"
    assert row.id is not None
