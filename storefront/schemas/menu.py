"""Pydantic schemas for Menu and MenuItem entities."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.menu import MenuItemTarget, MenuItemType


class MenuBase(BaseModel):
    """Base schema for menu data."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=50, description="Placement, e.g. 'header' or 'footer'")


class MenuCreate(MenuBase):
    """Schema for creating a menu."""

    pass


class MenuUpdate(BaseModel):
    """Schema for updating a menu."""

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=50)


class MenuItemCreate(BaseModel):
    """Schema for creating a menu item."""

    menu_id: uuid.UUID
    label: str = Field(..., min_length=1, max_length=255)
    url: str | None = None
    type: MenuItemType
    page_id: uuid.UUID | None = None
    target: MenuItemTarget = MenuItemTarget.SELF
    css_class: str | None = None
    parent_id: uuid.UUID | None = None
    order: int | None = Field(None, ge=0, description="Appended after the last sibling when omitted")


class MenuItemUpdate(BaseModel):
    """Schema for updating a menu item.

    Only fields that are explicitly set are applied. Setting ``page_id`` or
    ``parent_id`` to None unlinks the page or parent.
    """

    label: str | None = Field(None, min_length=1, max_length=255)
    url: str | None = None
    type: MenuItemType | None = None
    page_id: uuid.UUID | None = None
    target: MenuItemTarget | None = None
    css_class: str | None = None
    parent_id: uuid.UUID | None = None
    order: int | None = Field(None, ge=0)


class MenuItemOrder(BaseModel):
    """New position of one menu item."""

    id: uuid.UUID
    order: int = Field(..., ge=0)


class PageSummary(BaseModel):
    """Linked page info embedded in menu items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str


class MenuItemResponse(BaseModel):
    """Flat menu item."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    menu_id: uuid.UUID
    label: str
    url: str | None = None
    type: str
    page_id: uuid.UUID | None = None
    target: str = MenuItemTarget.SELF.value
    css_class: str | None = None
    parent_id: uuid.UUID | None = None
    order: int = 0
    page: PageSummary | None = None


class MenuItemNode(MenuItemResponse):
    """Menu item with its nested children."""

    children: list["MenuItemNode"] = Field(default_factory=list)


class MenuResponse(MenuBase):
    """Menu with its flat item list, ordered by ``order``."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    items: list[MenuItemResponse] = Field(default_factory=list)


class MenuTree(MenuBase):
    """Menu with its items nested into a tree of root items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    items: list[MenuItemNode] = Field(default_factory=list)
