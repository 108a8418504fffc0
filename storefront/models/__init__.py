"""SQLAlchemy models for the storefront."""

from storefront.models.base import Base, BaseModel, TimestampMixin
from storefront.models.configuration import Configuration
from storefront.models.site_settings import SiteSettings
from storefront.models.page import Page
from storefront.models.menu import Menu, MenuItem, MenuItemTarget, MenuItemType

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # Configuration
    "Configuration",
    "SiteSettings",
    # Content
    "Page",
    "Menu",
    "MenuItem",
    "MenuItemTarget",
    "MenuItemType",
]
