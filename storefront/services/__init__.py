"""Service layer for business logic."""

from storefront.services.cache_service import CacheStore, close_cache, get_cache, init_cache
from storefront.services.config_service import ConfigKeys, ConfigService, get_config_service
from storefront.services.menu_service import (
    MenuService,
    build_menu_tree,
    get_menu_item_url,
    get_menu_service,
)
from storefront.services.settings_service import SettingsService, get_settings_service

__all__ = [
    "CacheStore",
    "get_cache",
    "init_cache",
    "close_cache",
    "ConfigKeys",
    "ConfigService",
    "get_config_service",
    "SettingsService",
    "get_settings_service",
    "MenuService",
    "get_menu_service",
    "build_menu_tree",
    "get_menu_item_url",
]
