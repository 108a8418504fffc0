"""Application configuration using pydantic-settings."""

import re
from functools import lru_cache
from typing import Literal
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_APP_NAME = "My Store"


def _slugify_prefix(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", value.lower())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = DEFAULT_APP_NAME
    app_env: Literal["development", "staging", "production", "test"] = "development"
    app_url: str = "http://localhost:3000"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Database
    database_url: str
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Redis (optional, caching is disabled without it)
    redis_url: str | None = None
    redis_db: int | None = None
    redis_connect_timeout: float = 5.0
    cache_prefix: str | None = None

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def async_database_url(self) -> str:
        """Get database URL with asyncpg driver for async SQLAlchemy."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url

    @property
    def sync_database_url(self) -> str:
        """Get database URL with psycopg2 driver for sync operations (Alembic)."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if "+asyncpg" in url:
            url = url.replace("+asyncpg", "", 1)
        if "+aiosqlite" in url:
            url = url.replace("+aiosqlite", "", 1)
        return url

    @property
    def redis_available(self) -> bool:
        """Check if Redis is configured."""
        return bool(self.redis_url)

    @property
    def cache_key_prefix(self) -> str:
        """Prefix isolating this site's keys when several sites share one Redis.

        Priority: CACHE_PREFIX, then APP_NAME (unless left at the default),
        then the hostname of APP_URL.
        """
        if self.cache_prefix:
            return f"{self.cache_prefix}:"
        if self.app_name and self.app_name != DEFAULT_APP_NAME:
            return f"{_slugify_prefix(self.app_name)}:"
        hostname = urlsplit(self.app_url).hostname
        if hostname:
            return f"{_slugify_prefix(hostname)}:"
        return "site:"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
