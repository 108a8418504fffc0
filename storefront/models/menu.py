"""Navigation menu models."""

import uuid
from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import BaseModel


class MenuItemType(str, Enum):
    """What a menu item points at."""

    PAGE = "page"
    CUSTOM = "custom"
    EXTERNAL = "external"


class MenuItemTarget(str, Enum):
    """Browser window a menu link opens in."""

    SELF = "_self"
    BLANK = "_blank"


class Menu(BaseModel):
    """A navigation menu placed at a location such as "header" or "footer".

    One menu per location is expected but not enforced.
    """

    __tablename__ = "menus"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    location: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Relationships
    items = relationship(
        "MenuItem",
        back_populates="menu",
        order_by="MenuItem.order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Menu {self.slug} @ {self.location}>"


class MenuItem(BaseModel):
    """A single entry of a menu.

    ``order`` sorts siblings sharing the same ``parent_id`` and is not unique.
    """

    __tablename__ = "menu_items"
    __table_args__ = (
        Index("idx_menu_items_menu_parent", "menu_id", "parent_id"),
    )

    menu_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("menus.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MenuItemType.CUSTOM.value,
    )
    page_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("pages.id", ondelete="SET NULL"),
        nullable=True,
    )
    target: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MenuItemTarget.SELF.value,
    )
    css_class: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("menu_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    menu = relationship("Menu", back_populates="items")
    page = relationship("Page", lazy="selectin")

    def __repr__(self) -> str:
        return f"<MenuItem {self.label} ({self.type})>"
