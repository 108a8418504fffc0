"""Configuration service for arbitrary application-wide values.

Reads go cache-first (``config:<key>``) and fall back to the
``configurations`` table; writes go to the table and then evict the cache
entry so the next read repopulates it.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.database import async_session_factory
from storefront.exceptions import SettingsWriteError
from storefront.models.configuration import Configuration
from storefront.services.cache_service import CacheStore, get_cache

logger = logging.getLogger(__name__)

CONFIG_CACHE_PREFIX = "config:"
CONFIG_CACHE_TTL = 86400  # 24 hours


class ConfigKeys:
    """Well-known configuration keys."""

    SETUP_COMPLETE = "setup_complete"
    SITE_NAME = "site_name"
    SITE_DESCRIPTION = "site_description"
    SITE_LOGO = "site_logo"
    SITE_FAVICON = "site_favicon"
    CONTACT_EMAIL = "contact_email"
    CONTACT_PHONE = "contact_phone"
    SOCIAL_FACEBOOK = "social_facebook"
    SOCIAL_TWITTER = "social_twitter"
    SOCIAL_INSTAGRAM = "social_instagram"
    CURRENCY = "currency"
    CURRENCY_SYMBOL = "currency_symbol"
    TAX_RATE = "tax_rate"
    SHIPPING_ENABLED = "shipping_enabled"
    PAYMENT_METHODS = "payment_methods"


@dataclass(frozen=True)
class JsonValue:
    """A stored value that decoded as JSON."""

    value: Any


@dataclass(frozen=True)
class RawValue:
    """A stored value kept as the plain string it was saved as."""

    value: str


StoredValue = JsonValue | RawValue


def decode_value(stored: str) -> StoredValue:
    """Decode a persisted string, keeping legacy plain strings as-is."""
    try:
        return JsonValue(json.loads(stored))
    except ValueError:
        return RawValue(stored)


def encode_value(value: Any) -> str:
    """Encode a value for persistence. Strings are stored verbatim."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _cache_key(key: str) -> str:
    return f"{CONFIG_CACHE_PREFIX}{key}"


class ConfigService:
    """Service for reading and writing configuration entries."""

    def __init__(
        self,
        cache: CacheStore | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.cache = cache or get_cache()
        self.session_factory = session_factory or async_session_factory

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, or ``default`` if unset or unreadable.

        Never raises: any cache or database failure is logged and the
        default returned.
        """
        cache_key = _cache_key(key)
        try:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return cached

            async with self.session_factory() as db:
                result = await db.execute(
                    select(Configuration.value).where(Configuration.key == key)
                )
                stored = result.scalar_one_or_none()

            if stored is None:
                return default

            value = decode_value(stored).value
            await self.cache.set(cache_key, value, CONFIG_CACHE_TTL)
            return value
        except Exception as e:
            logger.error(f"Failed to get config {key}: {e}")
            return default

    async def set(self, key: str, value: Any) -> None:
        """Upsert a configuration value and evict its cache entry."""
        stored = encode_value(value)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(Configuration).where(Configuration.key == key)
                )
                row = result.scalar_one_or_none()
                if row:
                    row.value = stored
                else:
                    db.add(Configuration(key=key, value=stored))
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to set config {key}: {e}")
            raise

        await self.cache.delete(_cache_key(key))

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Get several values at once, omitting keys that resolve to None."""
        outcomes = await asyncio.gather(
            *(self.get(key) for key in keys), return_exceptions=True
        )

        values = {}
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Failed to get config {key}: {outcome}")
                continue
            if outcome is not None:
                values[key] = outcome
        return values

    async def set_many(self, configs: dict[str, Any]) -> None:
        """Set several values at once.

        Every key is attempted; if any failed, SettingsWriteError lists them.
        """
        items = list(configs.items())
        outcomes = await asyncio.gather(
            *(self.set(key, value) for key, value in items), return_exceptions=True
        )

        failures = {
            key: outcome
            for (key, _), outcome in zip(items, outcomes)
            if isinstance(outcome, Exception)
        }
        if failures:
            raise SettingsWriteError(failures)

    async def delete(self, key: str) -> bool:
        """Delete a configuration entry. Returns whether a row existed."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    delete(Configuration).where(Configuration.key == key)
                )
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to delete config {key}: {e}")
            raise

        await self.cache.delete(_cache_key(key))
        return result.rowcount > 0

    async def delete_all(self) -> int:
        """Delete every configuration entry and clear the config cache."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(delete(Configuration))
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to delete all configs: {e}")
            raise

        await self.clear_cache()
        return result.rowcount

    async def get_all(self) -> dict[str, Any]:
        """Read every entry straight from the database (not cached)."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(select(Configuration.key, Configuration.value))
                rows = result.all()
        except Exception as e:
            logger.error(f"Failed to get all configs: {e}")
            return {}

        return {key: decode_value(stored).value for key, stored in rows}

    async def clear_cache(self) -> int:
        """Evict every cached configuration entry."""
        return await self.cache.delete_pattern(f"{CONFIG_CACHE_PREFIX}*")

    async def is_setup_complete(self) -> bool:
        """Check whether the initial store setup has been completed."""
        return await self.get(ConfigKeys.SETUP_COMPLETE) is True

    async def mark_setup_complete(self) -> None:
        """Record that the initial store setup has been completed."""
        await self.set(ConfigKeys.SETUP_COMPLETE, True)


# Singleton instance
_config_service: ConfigService | None = None


def get_config_service() -> ConfigService:
    """Get the config service singleton."""
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service
