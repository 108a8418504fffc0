"""Configuration model for arbitrary application-wide key/value entries."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import BaseModel


class Configuration(BaseModel):
    """Key-value store for application configuration.

    ``value`` holds a JSON document for most entries. Entries written before
    values were JSON-encoded hold the plain string instead.
    """

    __tablename__ = "configurations"

    key: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Configuration {self.key}>"
