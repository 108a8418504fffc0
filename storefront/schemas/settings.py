"""Pydantic schemas for the storefront setting groups.

Each group is stored as one JSON document in ``site_settings``. Field
defaults are the values a fresh store renders with. Documents use camelCase
keys; attributes are snake_case.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SettingGroup(str, Enum):
    """Named setting groups (also the ``site_settings.type`` labels)."""

    GENERAL = "general"
    APPEARANCE = "appearance"
    SOCIAL = "social"
    HEADER = "header"
    FOOTER = "footer"
    SEO = "seo"
    THEME = "theme"
    HOMEPAGE = "homepage"
    WHATSAPP = "whatsapp"
    PWA = "pwa"


class SettingsGroupBase(BaseModel):
    """Base schema for a setting group document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        # Undeclared keys are kept and written back unchanged
        extra="allow",
    )

    def to_document(self) -> dict:
        """JSON-ready dict with the stored (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class GeneralSettings(SettingsGroupBase):
    site_name: str = "My Store"
    tagline: str = "Your tagline here"
    description: str = "An e-commerce platform"
    timezone: str = "UTC"
    currency: str = "USD"
    language: str = "en"


class AppearanceSettings(SettingsGroupBase):
    logo_id: str | None = None
    favicon_id: str | None = None
    primary_color: str = "#0070f3"
    secondary_color: str = "#ff0080"
    font_family: str = "Inter, sans-serif"


class SocialSettings(SettingsGroupBase):
    facebook: str = ""
    twitter: str = ""
    instagram: str = ""
    linkedin: str = ""
    youtube: str = ""
    github: str = ""


class HeaderSettings(SettingsGroupBase):
    show_logo_image: bool = True
    show_logo_text: bool = False
    logo_text: str = ""
    logo_image_size: Literal["sm", "md", "lg", "xl"] = "md"
    logo_text_size: Literal["sm", "md", "lg", "xl", "2xl", "3xl"] = "md"
    show_tagline: bool = True
    show_search: bool = True
    sticky: bool = True
    header_height: Literal["sm", "md", "lg", "xl"] = "md"
    header_style: Literal["normal", "bold", "minimal", "modern"] = "normal"
    hamburger_icon: Literal["menu", "bars", "grid", "list", "more"] = "menu"
    account_icon: Literal["user", "person", "profile", "account", "avatar"] = "user"

    # Announcement bar
    show_announcement_bar: bool = False
    announcement_text: str = "🎉 Free shipping on orders over $50!"
    announcement_bg_color: str = "#0070f3"
    announcement_text_color: str = "#ffffff"
    announcement_link: str = ""
    announcement_closeable: bool = True

    # Layout
    header_layout: Literal["default", "centered", "split", "minimal"] = "default"
    logo_position: Literal["left", "center", "right"] = "left"
    navigation_position: Literal["left", "center", "right"] = "center"

    # Navigation
    nav_menu_style: Literal["default", "underline", "pills", "bordered"] = "default"
    nav_menu_spacing: Literal["compact", "normal", "relaxed"] = "normal"
    nav_menu_font_size: Literal["sm", "md", "lg"] = "md"
    nav_menu_font_weight: Literal["normal", "medium", "semibold", "bold"] = "medium"
    show_nav_menu_icons: bool = False

    # Mobile
    mobile_menu_style: Literal["dropdown", "fullscreen"] = "dropdown"
    mobile_menu_animation: Literal["fade", "slide", "scale"] = "slide"
    show_mobile_search: bool = True
    mobile_menu_list_style: Literal[
        "default", "bordered", "pills", "cards", "minimal", "underline",
        "gradient", "outlined", "divided", "compact", "spacious", "modern",
    ] = "default"


class FooterSettings(SettingsGroupBase):
    text: str = "Thank you for shopping with us!"
    show_social: bool = True
    copyright_text: str = "© 2024 My Store. All rights reserved."
    show_payment_methods: bool = True


class SEOSettings(SettingsGroupBase):
    meta_title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""
    google_analytics_id: str = ""
    google_tag_manager_id: str = ""
    facebook_pixel_id: str = ""


class ThemeSettings(SettingsGroupBase):
    # primary/secondary colour and font are kept in sync with AppearanceSettings
    primary_color: str = "#0070f3"
    secondary_color: str = "#6c757d"
    accent_color: str = "#ff6b35"
    background_color: str = "#ffffff"
    text_color: str = "#1a1a1a"
    header_background_color: str = "#ffffff"
    header_text_color: str = "#1a1a1a"
    footer_background_color: str = "#1a1a1a"
    footer_text_color: str = "#ffffff"
    border_radius: Literal["none", "sm", "md", "lg", "xl"] = "md"
    font_family: str = "Inter, sans-serif"
    dark_mode: bool = False


class HomepageSettings(SettingsGroupBase):
    layout: Literal["sections"] = "sections"
    show_hero: bool = True
    hero_title: str = "Welcome to Our Store"
    hero_subtitle: str = "Discover amazing products at great prices"
    hero_image_id: str | None = None
    hero_button_text: str = "Shop Now"
    hero_button_url: str = "/products"
    show_featured_products: bool = True
    featured_products_title: str = "Featured Products"
    featured_products_count: int = Field(default=8, ge=0)
    show_categories: bool = True
    categories_title: str = "Shop by Category"
    categories_count: int = Field(default=6, ge=0)
    show_newsletter: bool = True
    newsletter_title: str = "Stay Updated"
    newsletter_subtitle: str = "Subscribe to get special offers and updates"


class WhatsAppSettings(SettingsGroupBase):
    enabled: bool = False
    phone_number: str = ""
    message: str = "Hello! I'm interested in your products."
    position: Literal["bottom-left", "bottom-right"] = "bottom-right"
    background_color: str = "#25D366"
    icon_color: str = "#ffffff"
    show_animation: bool = True


class PWASettings(SettingsGroupBase):
    """Web app manifest and install prompt settings."""

    enabled: bool = False
    app_name: str = "My Store"
    short_name: str = "Store"
    description: str = "Shop our amazing products on the go"
    theme_color: str = "#10b981"
    background_color: str = "#ffffff"
    display_mode: Literal["standalone", "fullscreen", "minimal-ui", "browser"] = "standalone"
    orientation: Literal["any", "portrait", "landscape"] = "any"
    icon_id: str | None = None
    icon192_id: str | None = Field(default=None, alias="icon192Id")
    enable_offline_mode: bool = True
    enable_push_notifications: bool = False
    install_prompt_enabled: bool = True
    install_prompt_delay: int = Field(default=5, ge=0)


SETTINGS_MODELS: dict[SettingGroup, type[SettingsGroupBase]] = {
    SettingGroup.GENERAL: GeneralSettings,
    SettingGroup.APPEARANCE: AppearanceSettings,
    SettingGroup.SOCIAL: SocialSettings,
    SettingGroup.HEADER: HeaderSettings,
    SettingGroup.FOOTER: FooterSettings,
    SettingGroup.SEO: SEOSettings,
    SettingGroup.THEME: ThemeSettings,
    SettingGroup.HOMEPAGE: HomepageSettings,
    SettingGroup.WHATSAPP: WhatsAppSettings,
    SettingGroup.PWA: PWASettings,
}


class AllSettings(SettingsGroupBase):
    """Every setting group, keyed by group name."""

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)
    social: SocialSettings = Field(default_factory=SocialSettings)
    header: HeaderSettings = Field(default_factory=HeaderSettings)
    footer: FooterSettings = Field(default_factory=FooterSettings)
    seo: SEOSettings = Field(default_factory=SEOSettings)
    theme: ThemeSettings = Field(default_factory=ThemeSettings)
    homepage: HomepageSettings = Field(default_factory=HomepageSettings)
    whatsapp: WhatsAppSettings = Field(default_factory=WhatsAppSettings)
    pwa: PWASettings = Field(default_factory=PWASettings)
