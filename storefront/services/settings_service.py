"""Settings service for the named storefront setting groups.

Each group is cached under ``settings:<group>``; the combined view of every
group is cached separately under ``settings:all``. Writing any group evicts
both its own entry and the combined one.
"""

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.database import async_session_factory
from storefront.models.site_settings import SiteSettings
from storefront.schemas.settings import (
    SETTINGS_MODELS,
    AllSettings,
    AppearanceSettings,
    FooterSettings,
    GeneralSettings,
    HeaderSettings,
    HomepageSettings,
    PWASettings,
    SEOSettings,
    SettingGroup,
    SettingsGroupBase,
    SocialSettings,
    ThemeSettings,
    WhatsAppSettings,
)
from storefront.services.cache_service import CacheStore, get_cache
from storefront.services.config_service import decode_value

logger = logging.getLogger(__name__)

SETTINGS_CACHE_PREFIX = "settings:"
ALL_SETTINGS_CACHE_KEY = "settings:all"
SETTINGS_CACHE_TTL = 3600  # 1 hour


def _label(value: SettingGroup | str) -> str:
    return value.value if isinstance(value, SettingGroup) else value


class SettingsService:
    """Service for reading and writing site setting groups."""

    def __init__(
        self,
        cache: CacheStore | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.cache = cache or get_cache()
        self.session_factory = session_factory or async_session_factory

    async def get_setting(self, key: SettingGroup | str, default: Any) -> Any:
        """Get the stored document for a setting key, or ``default``.

        Never raises. A row holding invalid JSON yields ``default``.
        """
        key = _label(key)
        cache_key = f"{SETTINGS_CACHE_PREFIX}{key}"
        try:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return cached

            async with self.session_factory() as db:
                result = await db.execute(
                    select(SiteSettings.value).where(SiteSettings.key == key)
                )
                stored = result.scalar_one_or_none()

            if stored is None:
                return default

            value = json.loads(stored)
            await self.cache.set(cache_key, value, SETTINGS_CACHE_TTL)
            return value
        except Exception as e:
            logger.error(f"Failed to get setting {key}: {e}")
            return default

    async def set_setting(
        self,
        key: SettingGroup | str,
        value: Any,
        setting_type: SettingGroup | str | None = None,
    ) -> None:
        """Upsert a setting document, replacing any previous value wholesale.

        ``setting_type`` defaults to the key itself.
        """
        key = _label(key)
        setting_type = _label(setting_type) if setting_type else key
        if isinstance(value, SettingsGroupBase):
            value = value.to_document()
        stored = json.dumps(value)

        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(SiteSettings).where(SiteSettings.key == key)
                )
                row = result.scalar_one_or_none()
                if row:
                    row.value = stored
                    row.type = setting_type
                else:
                    db.add(SiteSettings(key=key, value=stored, type=setting_type))
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to set setting {key}: {e}")
            raise

        await self.cache.delete(f"{SETTINGS_CACHE_PREFIX}{key}")
        await self.cache.delete(ALL_SETTINGS_CACHE_KEY)

    async def get_group(self, group: SettingGroup) -> SettingsGroupBase:
        """Get a setting group as its typed model, falling back to defaults."""
        model = SETTINGS_MODELS[group]
        default = model()
        value = await self.get_setting(group, default.to_document())
        try:
            return model.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Stored {group.value} settings are invalid, using defaults: {e}")
            return default

    async def set_group(self, group: SettingGroup, value: SettingsGroupBase | dict) -> None:
        """Validate and store a setting group."""
        model = SETTINGS_MODELS[group]
        if not isinstance(value, model):
            value = model.model_validate(value)
        await self.set_setting(group, value, group)

    async def get_general_settings(self) -> GeneralSettings:
        return await self.get_group(SettingGroup.GENERAL)

    async def set_general_settings(self, value: GeneralSettings | dict) -> None:
        await self.set_group(SettingGroup.GENERAL, value)

    async def get_appearance_settings(self) -> AppearanceSettings:
        return await self.get_group(SettingGroup.APPEARANCE)

    async def set_appearance_settings(self, value: AppearanceSettings | dict) -> None:
        await self.set_group(SettingGroup.APPEARANCE, value)

    async def get_social_settings(self) -> SocialSettings:
        return await self.get_group(SettingGroup.SOCIAL)

    async def set_social_settings(self, value: SocialSettings | dict) -> None:
        await self.set_group(SettingGroup.SOCIAL, value)

    async def get_header_settings(self) -> HeaderSettings:
        return await self.get_group(SettingGroup.HEADER)

    async def set_header_settings(self, value: HeaderSettings | dict) -> None:
        await self.set_group(SettingGroup.HEADER, value)

    async def get_footer_settings(self) -> FooterSettings:
        return await self.get_group(SettingGroup.FOOTER)

    async def set_footer_settings(self, value: FooterSettings | dict) -> None:
        await self.set_group(SettingGroup.FOOTER, value)

    async def get_seo_settings(self) -> SEOSettings:
        return await self.get_group(SettingGroup.SEO)

    async def set_seo_settings(self, value: SEOSettings | dict) -> None:
        await self.set_group(SettingGroup.SEO, value)

    async def get_theme_settings(self) -> ThemeSettings:
        return await self.get_group(SettingGroup.THEME)

    async def set_theme_settings(self, value: ThemeSettings | dict) -> None:
        await self.set_group(SettingGroup.THEME, value)

    async def get_homepage_settings(self) -> HomepageSettings:
        return await self.get_group(SettingGroup.HOMEPAGE)

    async def set_homepage_settings(self, value: HomepageSettings | dict) -> None:
        await self.set_group(SettingGroup.HOMEPAGE, value)

    async def get_whatsapp_settings(self) -> WhatsAppSettings:
        return await self.get_group(SettingGroup.WHATSAPP)

    async def set_whatsapp_settings(self, value: WhatsAppSettings | dict) -> None:
        await self.set_group(SettingGroup.WHATSAPP, value)

    async def get_pwa_settings(self) -> PWASettings:
        return await self.get_group(SettingGroup.PWA)

    async def set_pwa_settings(self, value: PWASettings | dict) -> None:
        await self.set_group(SettingGroup.PWA, value)

    async def _fetch_all_groups(self) -> AllSettings:
        groups = list(SettingGroup)
        values = await asyncio.gather(*(self.get_group(group) for group in groups))
        return AllSettings(**{group.value: value for group, value in zip(groups, values)})

    async def get_all_settings(self) -> AllSettings:
        """Get every setting group, cached as one combined entry.

        On a miss the groups are fetched in parallel (each through its own
        cache entry) and the combined result is cached.
        """
        try:
            cached = await self.cache.get(ALL_SETTINGS_CACHE_KEY)
            if cached is not None:
                try:
                    return AllSettings.model_validate(cached)
                except ValidationError as e:
                    logger.warning(f"Cached settings are invalid, rebuilding: {e}")

            all_settings = await self._fetch_all_groups()
            await self.cache.set(
                ALL_SETTINGS_CACHE_KEY, all_settings.to_document(), SETTINGS_CACHE_TTL
            )
            return all_settings
        except Exception as e:
            logger.error(f"Failed to build combined settings, fetching uncached: {e}")
            return await self._fetch_all_groups()

    async def get_settings_by_type(self, setting_type: SettingGroup | str) -> dict[str, Any]:
        """List stored settings of one type straight from the database."""
        setting_type = _label(setting_type)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(SiteSettings.key, SiteSettings.value)
                    .where(SiteSettings.type == setting_type)
                    .order_by(SiteSettings.key)
                )
                rows = result.all()
        except Exception as e:
            logger.error(f"Failed to get settings by type {setting_type}: {e}")
            return {}

        return {key: decode_value(stored).value for key, stored in rows}

    async def reset_settings(self, setting_type: SettingGroup | str | None = None) -> int:
        """Delete stored settings (all, or one type) so defaults apply again."""
        query = delete(SiteSettings)
        if setting_type:
            query = query.where(SiteSettings.type == _label(setting_type))

        try:
            async with self.session_factory() as db:
                result = await db.execute(query)
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to reset settings: {e}")
            raise

        await self.cache.delete_pattern(f"{SETTINGS_CACHE_PREFIX}*")
        return result.rowcount


# Singleton instance
_settings_service: SettingsService | None = None


def get_settings_service() -> SettingsService:
    """Get the settings service singleton."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service
