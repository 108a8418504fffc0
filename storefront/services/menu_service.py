"""Service for navigation menus and their items.

Menus are rendered by location (``header``, ``footer``, ...) from a cached,
nested tree. Every menu or item write clears the whole ``menu:*`` cache
namespace; menu edits are rare admin actions.
"""

import logging
import uuid
from enum import Enum
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.database import async_session_factory
from storefront.exceptions import ConflictException, ValidationException
from storefront.models.menu import Menu, MenuItem, MenuItemType
from storefront.schemas.menu import (
    MenuCreate,
    MenuItemCreate,
    MenuItemNode,
    MenuItemOrder,
    MenuItemUpdate,
    MenuTree,
    MenuUpdate,
)
from storefront.services.cache_service import CacheStore, get_cache

logger = logging.getLogger(__name__)

MENU_CACHE_PREFIX = "menu:"
MENU_LOCATION_CACHE_PREFIX = "menu:location:"
MENU_CACHE_TTL = 3600  # 1 hour

# Item fields an explicit None clears; None is ignored for the rest
_NULLABLE_ITEM_FIELDS = {"url", "css_class", "page_id", "parent_id"}


def build_menu_tree(items: list[Any]) -> list[MenuItemNode]:
    """Nest a flat, ordered list of menu items under their parents.

    Items whose parent is missing from the list are placed at the root. An
    item naming itself as parent belongs to no branch and is left out.
    Sibling order follows the input order.
    """
    nodes: dict[uuid.UUID, MenuItemNode] = {}
    ordered: list[MenuItemNode] = []

    for item in items:
        node = MenuItemNode.model_validate(item).model_copy(update={"children": []})
        nodes[node.id] = node
        ordered.append(node)

    roots: list[MenuItemNode] = []
    for node in ordered:
        parent = nodes.get(node.parent_id) if node.parent_id else None
        if parent is None:
            roots.append(node)
        elif parent is not node:
            parent.children.append(node)
    return roots


def get_menu_item_url(item: Any) -> str:
    """Resolve the href of a menu item.

    Page items link to the page slug (an empty slug is the homepage);
    everything else uses the item's own URL, or ``#`` when it has none.
    """
    page = getattr(item, "page", None)
    if item.type == MenuItemType.PAGE and page is not None:
        return "/" if page.slug == "" else f"/{page.slug}"
    return item.url or "#"


def _to_tree(menu: Menu) -> MenuTree:
    return MenuTree(
        id=menu.id,
        name=menu.name,
        slug=menu.slug,
        location=menu.location,
        items=build_menu_tree(menu.items),
    )


class MenuService:
    """Service for managing menus and menu items."""

    def __init__(
        self,
        cache: CacheStore | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.cache = cache or get_cache()
        self.session_factory = session_factory or async_session_factory

    async def _load_menu(self, db: AsyncSession, menu_id: uuid.UUID) -> Menu | None:
        result = await db.execute(
            select(Menu)
            .where(Menu.id == menu_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _load_item(self, db: AsyncSession, item_id: uuid.UUID) -> MenuItem | None:
        result = await db.execute(
            select(MenuItem)
            .where(MenuItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _ensure_slug_free(
        self, db: AsyncSession, slug: str, menu_id: uuid.UUID | None = None
    ) -> None:
        query = select(Menu.id).where(Menu.slug == slug)
        if menu_id is not None:
            query = query.where(Menu.id != menu_id)
        if (await db.execute(query)).first():
            raise ConflictException(f"A menu with slug '{slug}' already exists")

    async def get_menus(self) -> list[Menu]:
        """List all menus, newest first, each with its flat ordered items."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(Menu).order_by(Menu.created_at.desc(), Menu.id.desc())
                )
                return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list menus: {e}")
            return []

    async def get_menu(self, menu_id: uuid.UUID) -> MenuTree | None:
        """Get a menu by ID with its items nested into a tree."""
        try:
            async with self.session_factory() as db:
                menu = await self._load_menu(db, menu_id)
                if not menu:
                    return None
                return _to_tree(menu)
        except Exception as e:
            logger.error(f"Failed to get menu {menu_id}: {e}")
            return None

    async def get_menu_by_location(self, location: str) -> MenuTree | None:
        """Get the menu placed at a location, as a cached tree."""
        cache_key = f"{MENU_LOCATION_CACHE_PREFIX}{location}"
        try:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                try:
                    return MenuTree.model_validate(cached)
                except ValidationError as e:
                    logger.warning(f"Cached menu for {location} is invalid, rebuilding: {e}")

            async with self.session_factory() as db:
                result = await db.execute(
                    select(Menu)
                    .where(Menu.location == location)
                    .order_by(Menu.created_at, Menu.id)
                    .limit(1)
                )
                menu = result.scalars().first()
                if not menu:
                    return None
                tree = _to_tree(menu)

            await self.cache.set(cache_key, tree.model_dump(mode="json"), MENU_CACHE_TTL)
            return tree
        except Exception as e:
            logger.error(f"Failed to get menu for location {location}: {e}")
            return None

    async def create_menu(self, data: MenuCreate) -> Menu:
        """Create a new menu.

        Raises:
            ConflictException: If another menu already uses the slug
        """
        try:
            async with self.session_factory() as db:
                await self._ensure_slug_free(db, data.slug)
                menu = Menu(name=data.name, slug=data.slug, location=data.location)
                db.add(menu)
                await db.commit()
                menu = await self._load_menu(db, menu.id)
        except Exception as e:
            logger.error(f"Failed to create menu {data.slug}: {e}")
            raise

        await self.clear_menu_cache()
        return menu

    async def update_menu(self, menu_id: uuid.UUID, data: MenuUpdate) -> Menu | None:
        """Update a menu's name, slug or location.

        Raises:
            ConflictException: If another menu already uses the new slug
        """
        try:
            async with self.session_factory() as db:
                menu = await self._load_menu(db, menu_id)
                if not menu:
                    return None

                if data.slug and data.slug != menu.slug:
                    await self._ensure_slug_free(db, data.slug, menu_id)

                for key, value in data.model_dump(exclude_unset=True).items():
                    if value is not None:
                        setattr(menu, key, value)

                await db.commit()
                menu = await self._load_menu(db, menu_id)
        except Exception as e:
            logger.error(f"Failed to update menu {menu_id}: {e}")
            raise

        await self.clear_menu_cache()
        return menu

    async def delete_menu(self, menu_id: uuid.UUID) -> bool:
        """Delete a menu together with its items."""
        try:
            async with self.session_factory() as db:
                menu = await self._load_menu(db, menu_id)
                if not menu:
                    return False
                await db.delete(menu)
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to delete menu {menu_id}: {e}")
            raise

        await self.clear_menu_cache()
        return True

    async def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        """Create a menu item.

        Without an explicit ``order`` the item goes after its last sibling
        (same menu and parent), or at 0 when it has none.
        """
        try:
            async with self.session_factory() as db:
                order = data.order
                if order is None:
                    query = select(func.max(MenuItem.order)).where(
                        MenuItem.menu_id == data.menu_id
                    )
                    if data.parent_id:
                        query = query.where(MenuItem.parent_id == data.parent_id)
                    else:
                        query = query.where(MenuItem.parent_id.is_(None))
                    current_max = (await db.execute(query)).scalar()
                    order = 0 if current_max is None else current_max + 1

                item = MenuItem(
                    menu_id=data.menu_id,
                    label=data.label,
                    url=data.url or None,
                    type=data.type.value,
                    page_id=data.page_id,
                    target=data.target.value,
                    css_class=data.css_class or None,
                    parent_id=data.parent_id,
                    order=order,
                )
                db.add(item)
                await db.commit()
                item = await self._load_item(db, item.id)
        except Exception as e:
            logger.error(f"Failed to create menu item {data.label}: {e}")
            raise

        await self.clear_menu_cache()
        return item

    async def update_menu_item(
        self, item_id: uuid.UUID, data: MenuItemUpdate
    ) -> MenuItem | None:
        """Apply the explicitly set fields of ``data`` to a menu item.

        A falsy ``page_id`` or ``parent_id`` unlinks the page or parent.
        """
        fields = data.model_dump(exclude_unset=True)
        if fields.get("parent_id") and fields["parent_id"] == item_id:
            raise ValidationException(
                [{"field": "parent_id", "message": "A menu item cannot be its own parent"}]
            )

        try:
            async with self.session_factory() as db:
                item = await self._load_item(db, item_id)
                if not item:
                    return None

                for key, value in fields.items():
                    if key in ("page_id", "parent_id"):
                        value = value or None
                    elif value is None and key not in _NULLABLE_ITEM_FIELDS:
                        continue
                    if isinstance(value, Enum):
                        value = value.value
                    setattr(item, key, value)

                await db.commit()
                item = await self._load_item(db, item_id)
        except Exception as e:
            logger.error(f"Failed to update menu item {item_id}: {e}")
            raise

        await self.clear_menu_cache()
        return item

    async def delete_menu_item(self, item_id: uuid.UUID) -> bool:
        """Delete a menu item.

        Children are not deleted; they surface at the root of the menu.
        """
        try:
            async with self.session_factory() as db:
                result = await db.execute(delete(MenuItem).where(MenuItem.id == item_id))
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to delete menu item {item_id}: {e}")
            raise

        await self.clear_menu_cache()
        return result.rowcount > 0

    async def reorder_menu_items(self, items: list[MenuItemOrder]) -> None:
        """Set the order of several items in a single transaction."""
        try:
            async with self.session_factory() as db:
                for entry in items:
                    await db.execute(
                        update(MenuItem)
                        .where(MenuItem.id == entry.id)
                        .values(order=entry.order)
                    )
                await db.commit()
        except Exception as e:
            logger.error(f"Failed to reorder menu items: {e}")
            raise

        await self.clear_menu_cache()

    async def clear_menu_cache(self) -> int:
        """Evict every cached menu, whatever its location."""
        return await self.cache.delete_pattern(f"{MENU_CACHE_PREFIX}*")


# Singleton instance
_menu_service: MenuService | None = None


def get_menu_service() -> MenuService:
    """Get the menu service singleton."""
    global _menu_service
    if _menu_service is None:
        _menu_service = MenuService()
    return _menu_service
