"""Redis-backed cache store.

The cache is always optional: when Redis is not configured, unreachable, or
fails mid-operation, every call degrades to a miss or a no-op and the
failure is only logged.
"""

import asyncio
import json
import logging
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from storefront.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_TTL = 3600

# Bump when the shape of cached values changes so older blobs read as misses
CACHE_SCHEMA_VERSION = 1

_CONNECTION_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


def _with_database(url: str, db: int | None) -> str:
    """Point a Redis URL at a specific database index."""
    if db is None:
        return url
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, f"/{db}", parts.query, parts.fragment))


class CacheStore:
    """Best-effort JSON key/value cache with TTLs and pattern deletion.

    Keys passed in are logical names such as ``settings:header``; the
    store prepends its site prefix before talking to Redis.
    """

    def __init__(self, client: aioredis.Redis | None = None, prefix: str | None = None):
        self._client = client
        self.prefix = settings.cache_key_prefix if prefix is None else prefix

    @property
    def is_available(self) -> bool:
        """True while a connection is initialized and has not failed."""
        return self._client is not None

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _disable(self, action: str, error: Exception) -> None:
        """Drop the client after a connection-level failure."""
        logger.error(f"Cache {action} failed, disabling cache: {error}")
        self._client = None

    async def connect(self, url: str | None = None, db: int | None = None) -> bool:
        """Connect to Redis, returning whether the cache is usable."""
        if url is None and settings.redis_available:
            url = settings.redis_url
        if not url:
            logger.info("Redis not configured, caching disabled")
            return False

        try:
            client = aioredis.from_url(
                _with_database(url, settings.redis_db if db is None else db),
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=settings.redis_connect_timeout,
            )
        except ValueError as e:
            logger.warning(f"Invalid Redis URL, continuing without cache: {e}")
            self._client = None
            return False

        try:
            await asyncio.wait_for(client.ping(), timeout=settings.redis_connect_timeout)
        except _CONNECTION_ERRORS as e:
            logger.warning(f"Failed to connect to Redis, continuing without cache: {e}")
            await client.aclose()
            self._client = None
            return False

        self._client = client
        logger.info(f"Redis connected (prefix={self.prefix!r})")
        return True

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")

    async def get(self, key: str) -> Any | None:
        """Get a cached value, or None on a miss or any failure."""
        if not self.is_available:
            return None

        try:
            raw = await self._client.get(self._key(key))
        except _CONNECTION_ERRORS as e:
            self._disable(f"get {key}", e)
            return None

        if raw is None:
            return None

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

        if (
            not isinstance(payload, dict)
            or payload.get("v") != CACHE_SCHEMA_VERSION
            or "data" not in payload
        ):
            logger.debug(f"Ignoring cache entry {key} with stale schema")
            return None
        return payload["data"]

    async def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        """Store a JSON-serializable value with an expiry in seconds."""
        if not self.is_available:
            return

        try:
            raw = json.dumps({"v": CACHE_SCHEMA_VERSION, "data": value})
        except (TypeError, ValueError) as e:
            logger.warning(f"Value for cache key {key} is not JSON-serializable: {e}")
            return

        try:
            await self._client.set(self._key(key), raw, ex=ttl)
        except _CONNECTION_ERRORS as e:
            self._disable(f"set {key}", e)

    async def delete(self, key: str) -> None:
        """Remove one key."""
        if not self.is_available:
            return

        try:
            await self._client.delete(self._key(key))
        except _CONNECTION_ERRORS as e:
            self._disable(f"delete {key}", e)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern, returning how many went."""
        if not self.is_available:
            return 0

        try:
            keys = [key async for key in self._client.scan_iter(match=self._key(pattern))]
            if keys:
                await self._client.delete(*keys)
        except _CONNECTION_ERRORS as e:
            self._disable(f"delete pattern {pattern}", e)
            return 0

        logger.debug(f"Deleted {len(keys)} cache keys matching {pattern}")
        return len(keys)

    async def exists(self, key: str) -> bool:
        """Check whether a key is cached."""
        if not self.is_available:
            return False

        try:
            return await self._client.exists(self._key(key)) == 1
        except _CONNECTION_ERRORS as e:
            self._disable(f"exists {key}", e)
            return False

    async def clear(self) -> int:
        """Delete every key belonging to this site."""
        deleted = await self.delete_pattern("*")
        if deleted:
            logger.info(f"Cleared {deleted} cache keys with prefix {self.prefix!r}")
        return deleted

    async def get_stats(self) -> dict[str, Any]:
        """Cache statistics for the admin diagnostics screen."""
        stats = {
            "available": self.is_available,
            "keys": 0,
            "prefix": self.prefix,
            "database": settings.redis_db if settings.redis_db is not None else 0,
        }
        if not self.is_available:
            return stats

        try:
            stats["keys"] = len([key async for key in self._client.scan_iter(match=self._key("*"))])
        except _CONNECTION_ERRORS as e:
            logger.error(f"Failed to get cache stats: {e}")
        return stats


# Singleton instance
_cache_store: CacheStore | None = None


def get_cache() -> CacheStore:
    """Get the process-wide cache store."""
    global _cache_store
    if _cache_store is None:
        _cache_store = CacheStore()
    return _cache_store


async def init_cache() -> bool:
    """Connect the process-wide cache store if Redis is configured."""
    return await get_cache().connect()


async def close_cache() -> None:
    """Close the process-wide cache store."""
    if _cache_store is not None:
        await _cache_store.close()
