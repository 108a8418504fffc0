"""Tests for menus, menu items and the menu tree builder."""

import uuid
from types import SimpleNamespace

import pytest

from storefront.exceptions import ConflictException, ValidationException
from storefront.models import MenuItemTarget, MenuItemType, Page
from storefront.schemas.menu import (
    MenuCreate,
    MenuItemCreate,
    MenuItemOrder,
    MenuItemUpdate,
    MenuResponse,
    MenuUpdate,
)
from storefront.services.menu_service import (
    MenuService,
    build_menu_tree,
    get_menu_item_url,
)
from tests.conftest import FailingSessionFactory


def _item(label: str, parent_id=None, order: int = 0, **extra) -> dict:
    return {
        "id": uuid.uuid4(),
        "menu_id": extra.pop("menu_id", uuid.uuid4()),
        "label": label,
        "type": MenuItemType.CUSTOM.value,
        "url": f"/{label.lower()}",
        "parent_id": parent_id,
        "order": order,
        **extra,
    }


async def _create_menu(menu_service, location: str = "header", slug: str = "main-nav"):
    return await menu_service.create_menu(
        MenuCreate(name=slug.replace("-", " ").title(), slug=slug, location=location)
    )


async def _add_item(menu_service, menu, label: str, **fields):
    return await menu_service.create_menu_item(
        MenuItemCreate(
            menu_id=menu.id,
            label=label,
            type=fields.pop("type", MenuItemType.CUSTOM),
            url=fields.pop("url", f"/{label.lower()}"),
            **fields,
        )
    )


# build_menu_tree


def test_build_menu_tree_nests_children_under_parents():
    menu_id = uuid.uuid4()
    a = _item("A", menu_id=menu_id)
    b = _item("B", parent_id=a["id"], menu_id=menu_id)
    c = _item("C", parent_id=a["id"], order=1, menu_id=menu_id)
    d = _item("D", order=1, menu_id=menu_id)

    tree = build_menu_tree([a, b, c, d])

    assert [node.label for node in tree] == ["A", "D"]
    assert [child.label for child in tree[0].children] == ["B", "C"]
    assert tree[1].children == []


def test_build_menu_tree_promotes_orphans_to_root():
    orphan = _item("Orphan", parent_id=uuid.uuid4())
    root = _item("Root", order=1)

    tree = build_menu_tree([orphan, root])

    assert [node.label for node in tree] == ["Orphan", "Root"]


def test_build_menu_tree_drops_self_parented_item():
    item = _item("Loop")
    item["parent_id"] = item["id"]

    assert build_menu_tree([item]) == []


def test_build_menu_tree_keeps_siblings_of_self_parented_item():
    loop = _item("Loop")
    loop["parent_id"] = loop["id"]
    home = _item("Home", order=1)

    tree = build_menu_tree([loop, home])

    assert [node.label for node in tree] == ["Home"]
    assert tree[0].children == []


def test_build_menu_tree_handles_deep_nesting():
    top = _item("Top")
    middle = _item("Middle", parent_id=top["id"])
    leaf = _item("Leaf", parent_id=middle["id"])

    tree = build_menu_tree([leaf, middle, top])

    assert [node.label for node in tree] == ["Top"]
    assert tree[0].children[0].label == "Middle"
    assert tree[0].children[0].children[0].label == "Leaf"


def test_build_menu_tree_empty():
    assert build_menu_tree([]) == []


# get_menu_item_url


@pytest.mark.parametrize(
    "item, expected",
    [
        (SimpleNamespace(type="page", page=SimpleNamespace(slug=""), url=None), "/"),
        (SimpleNamespace(type="page", page=SimpleNamespace(slug="about"), url=None), "/about"),
        (SimpleNamespace(type="page", page=None, url="/fallback"), "/fallback"),
        (SimpleNamespace(type="custom", page=None, url="/sale"), "/sale"),
        (SimpleNamespace(type="external", page=None, url="https://example.com"), "https://example.com"),
        (SimpleNamespace(type="custom", page=None, url=None), "#"),
        (SimpleNamespace(type="custom", page=None, url=""), "#"),
    ],
)
def test_get_menu_item_url(item, expected):
    assert get_menu_item_url(item) == expected


# Menus


@pytest.mark.asyncio
async def test_create_and_get_menu(menu_service):
    menu = await _create_menu(menu_service)

    assert menu.id is not None
    assert menu.created_at is not None
    assert menu.items == []

    tree = await menu_service.get_menu(menu.id)
    assert tree.slug == "main-nav"
    assert tree.location == "header"
    assert tree.items == []


@pytest.mark.asyncio
async def test_get_menus_newest_first(menu_service):
    first = await _create_menu(menu_service, slug="first")
    second = await _create_menu(menu_service, location="footer", slug="second")

    menus = await menu_service.get_menus()

    assert [menu.id for menu in menus] == [second.id, first.id]


@pytest.mark.asyncio
async def test_get_menus_returns_items_flat_and_ordered(menu_service):
    menu = await _create_menu(menu_service)
    parent = await _add_item(menu_service, menu, "Shop")
    await _add_item(menu_service, menu, "Shirts", parent_id=parent.id)
    await _add_item(menu_service, menu, "About")

    [loaded] = await menu_service.get_menus()
    response = MenuResponse.model_validate(loaded)

    assert sorted(item.label for item in loaded.items) == ["About", "Shirts", "Shop"]
    assert [item.order for item in loaded.items] == sorted(item.order for item in loaded.items)
    assert len(response.items) == 3


@pytest.mark.asyncio
async def test_update_menu(menu_service):
    menu = await _create_menu(menu_service)

    updated = await menu_service.update_menu(menu.id, MenuUpdate(location="footer"))

    assert updated.location == "footer"
    assert updated.slug == "main-nav"


@pytest.mark.asyncio
async def test_duplicate_menu_slug_conflicts(menu_service):
    await _create_menu(menu_service)

    with pytest.raises(ConflictException):
        await _create_menu(menu_service, location="footer")

    assert len(await menu_service.get_menus()) == 1


@pytest.mark.asyncio
async def test_update_menu_slug_conflicts_with_other_menu(menu_service):
    header = await _create_menu(menu_service)
    footer = await _create_menu(menu_service, location="footer", slug="footer-nav")

    with pytest.raises(ConflictException):
        await menu_service.update_menu(footer.id, MenuUpdate(slug="main-nav"))

    same = await menu_service.update_menu(header.id, MenuUpdate(slug="main-nav", name="Main"))
    assert same.name == "Main"


@pytest.mark.asyncio
async def test_update_and_delete_missing_menu(menu_service):
    missing = uuid.uuid4()

    assert await menu_service.update_menu(missing, MenuUpdate(name="Nope")) is None
    assert await menu_service.delete_menu(missing) is False
    assert await menu_service.get_menu(missing) is None


@pytest.mark.asyncio
async def test_delete_menu_removes_items(menu_service):
    menu = await _create_menu(menu_service)
    item = await _add_item(menu_service, menu, "Home")

    assert await menu_service.delete_menu(menu.id) is True

    assert await menu_service.get_menu(menu.id) is None
    assert await menu_service.update_menu_item(item.id, MenuItemUpdate(label="x")) is None


@pytest.mark.asyncio
async def test_read_failures_degrade(no_cache):
    service = MenuService(cache=no_cache, session_factory=FailingSessionFactory())

    assert await service.get_menus() == []
    assert await service.get_menu(uuid.uuid4()) is None
    assert await service.get_menu_by_location("header") is None


@pytest.mark.asyncio
async def test_write_failures_propagate(cache):
    service = MenuService(cache=cache, session_factory=FailingSessionFactory())

    with pytest.raises(ConnectionError):
        await service.create_menu(MenuCreate(name="Main", slug="main", location="header"))


# Menu items


@pytest.mark.asyncio
async def test_item_order_appends_per_sibling_group(menu_service):
    menu = await _create_menu(menu_service)

    home = await _add_item(menu_service, menu, "Home")
    shop = await _add_item(menu_service, menu, "Shop")
    shirts = await _add_item(menu_service, menu, "Shirts", parent_id=shop.id)
    hats = await _add_item(menu_service, menu, "Hats", parent_id=shop.id)
    pinned = await _add_item(menu_service, menu, "Pinned", order=5)
    last = await _add_item(menu_service, menu, "Contact")

    assert (home.order, shop.order) == (0, 1)
    assert (shirts.order, hats.order) == (0, 1)
    assert pinned.order == 5
    assert last.order == 6


@pytest.mark.asyncio
async def test_item_defaults(menu_service):
    menu = await _create_menu(menu_service)

    item = await _add_item(menu_service, menu, "Docs", type=MenuItemType.EXTERNAL, url="https://docs.example.com")

    assert item.type == "external"
    assert item.target == MenuItemTarget.SELF.value
    assert item.parent_id is None
    assert item.page is None


@pytest.mark.asyncio
async def test_page_items_resolve_linked_page(menu_service, session_factory):
    async with session_factory() as db:
        page = Page(title="About us", slug="about")
        db.add(page)
        await db.commit()

    menu = await _create_menu(menu_service)
    await _add_item(menu_service, menu, "About", type=MenuItemType.PAGE, url=None, page_id=page.id)

    tree = await menu_service.get_menu(menu.id)

    [node] = tree.items
    assert node.page.slug == "about"
    assert get_menu_item_url(node) == "/about"


@pytest.mark.asyncio
async def test_get_menu_nests_items(menu_service):
    menu = await _create_menu(menu_service)
    shop = await _add_item(menu_service, menu, "Shop")
    await _add_item(menu_service, menu, "Shirts", parent_id=shop.id)
    await _add_item(menu_service, menu, "About")

    tree = await menu_service.get_menu(menu.id)

    assert [node.label for node in tree.items] == ["Shop", "About"]
    assert [child.label for child in tree.items[0].children] == ["Shirts"]


@pytest.mark.asyncio
async def test_update_menu_item_only_applies_set_fields(menu_service):
    menu = await _create_menu(menu_service)
    item = await _add_item(menu_service, menu, "Sale", css_class="highlight")

    updated = await menu_service.update_menu_item(
        item.id, MenuItemUpdate(label="Big Sale", target=MenuItemTarget.BLANK)
    )

    assert updated.label == "Big Sale"
    assert updated.target == "_blank"
    assert updated.url == "/sale"
    assert updated.css_class == "highlight"


@pytest.mark.asyncio
async def test_update_menu_item_unlinks_parent(menu_service):
    menu = await _create_menu(menu_service)
    shop = await _add_item(menu_service, menu, "Shop")
    shirts = await _add_item(menu_service, menu, "Shirts", parent_id=shop.id)

    updated = await menu_service.update_menu_item(shirts.id, MenuItemUpdate(parent_id=None))

    assert updated.parent_id is None
    tree = await menu_service.get_menu(menu.id)
    assert sorted(node.label for node in tree.items) == ["Shirts", "Shop"]


@pytest.mark.asyncio
async def test_update_menu_item_rejects_self_parent(menu_service):
    menu = await _create_menu(menu_service)
    item = await _add_item(menu_service, menu, "Loop")

    with pytest.raises(ValidationException):
        await menu_service.update_menu_item(item.id, MenuItemUpdate(parent_id=item.id))


@pytest.mark.asyncio
async def test_delete_menu_item_promotes_children(menu_service):
    menu = await _create_menu(menu_service)
    shop = await _add_item(menu_service, menu, "Shop")
    await _add_item(menu_service, menu, "Shirts", parent_id=shop.id)

    assert await menu_service.delete_menu_item(shop.id) is True
    assert await menu_service.delete_menu_item(shop.id) is False

    tree = await menu_service.get_menu(menu.id)
    assert [node.label for node in tree.items] == ["Shirts"]


@pytest.mark.asyncio
async def test_reorder_menu_items_is_idempotent(menu_service):
    menu = await _create_menu(menu_service)
    home = await _add_item(menu_service, menu, "Home")
    shop = await _add_item(menu_service, menu, "Shop")
    about = await _add_item(menu_service, menu, "About")

    new_order = [
        MenuItemOrder(id=about.id, order=0),
        MenuItemOrder(id=home.id, order=1),
        MenuItemOrder(id=shop.id, order=2),
    ]
    await menu_service.reorder_menu_items(new_order)
    once = await menu_service.get_menu(menu.id)
    await menu_service.reorder_menu_items(new_order)
    twice = await menu_service.get_menu(menu.id)

    assert [node.label for node in once.items] == ["About", "Home", "Shop"]
    assert twice == once


# Caching


@pytest.mark.asyncio
async def test_menu_by_location_is_cached(menu_service, cache, db_calls):
    menu = await _create_menu(menu_service)
    await _add_item(menu_service, menu, "Home")

    first = await menu_service.get_menu_by_location("header")
    assert await cache.exists("menu:location:header")

    calls = db_calls.calls
    second = await menu_service.get_menu_by_location("header")

    assert second == first
    assert db_calls.calls == calls


@pytest.mark.asyncio
async def test_missing_location_is_not_cached(menu_service, cache):
    assert await menu_service.get_menu_by_location("sidebar") is None
    assert not await cache.exists("menu:location:sidebar")


@pytest.mark.asyncio
async def test_clear_menu_cache_forces_database_read(menu_service, db_calls):
    await _create_menu(menu_service)
    await menu_service.get_menu_by_location("header")

    assert await menu_service.clear_menu_cache() == 1

    calls = db_calls.calls
    tree = await menu_service.get_menu_by_location("header")

    assert tree.slug == "main-nav"
    assert db_calls.calls == calls + 1


@pytest.mark.asyncio
async def test_item_writes_evict_location_cache(menu_service, cache):
    menu = await _create_menu(menu_service)
    await menu_service.get_menu_by_location("header")

    item = await _add_item(menu_service, menu, "Home")
    assert not await cache.exists("menu:location:header")
    assert [node.label for node in (await menu_service.get_menu_by_location("header")).items] == ["Home"]

    await menu_service.update_menu_item(item.id, MenuItemUpdate(label="Start"))
    assert [node.label for node in (await menu_service.get_menu_by_location("header")).items] == ["Start"]

    await menu_service.delete_menu_item(item.id)
    assert (await menu_service.get_menu_by_location("header")).items == []


@pytest.mark.asyncio
async def test_menu_writes_evict_every_location(menu_service, cache):
    header = await _create_menu(menu_service)
    await _create_menu(menu_service, location="footer", slug="footer-nav")
    await menu_service.get_menu_by_location("header")
    await menu_service.get_menu_by_location("footer")

    await menu_service.update_menu(header.id, MenuUpdate(name="Top"))

    assert not await cache.exists("menu:location:header")
    assert not await cache.exists("menu:location:footer")
    assert (await menu_service.get_menu_by_location("header")).name == "Top"
