"""SiteSettings model for the named storefront setting groups."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import BaseModel


class SiteSettings(BaseModel):
    """One row per setting group (general, header, seo, ...).

    ``value`` is the JSON-encoded settings object for the group. ``type`` is a
    category label, normally equal to ``key``, used for grouped admin queries.
    """

    __tablename__ = "site_settings"

    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="general",
        index=True,
    )

    def __repr__(self) -> str:
        return f"<SiteSettings {self.key} ({self.type})>"
