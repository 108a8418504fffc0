"""Pydantic schemas for request/response validation."""

from storefront.schemas.menu import (
    MenuCreate,
    MenuItemCreate,
    MenuItemNode,
    MenuItemOrder,
    MenuItemResponse,
    MenuItemUpdate,
    MenuResponse,
    MenuTree,
    MenuUpdate,
    PageSummary,
)
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
    SocialSettings,
    ThemeSettings,
    WhatsAppSettings,
)

__all__ = [
    # Menu
    "MenuCreate",
    "MenuUpdate",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemOrder",
    "MenuItemResponse",
    "MenuItemNode",
    "MenuResponse",
    "MenuTree",
    "PageSummary",
    # Settings
    "SettingGroup",
    "SETTINGS_MODELS",
    "AllSettings",
    "GeneralSettings",
    "AppearanceSettings",
    "SocialSettings",
    "HeaderSettings",
    "FooterSettings",
    "SEOSettings",
    "ThemeSettings",
    "HomepageSettings",
    "WhatsAppSettings",
    "PWASettings",
]
