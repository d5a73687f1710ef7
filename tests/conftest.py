"""Shared catalog fixtures.

Sample tree:

    electronics
    ├── audio
    │   └── cables
    ├── computers
    │   ├── desktops
    │   └── laptops
    └── accessories   (id e-accessories)
    books
    └── accessories   (id b-accessories)

Item ages are in minutes; a lower age is newer.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from storefront.catalog.memory import InMemoryCategoryStore, InMemoryItemStore
from storefront.catalog.service import CatalogQueryEngine
from storefront.domain.entities import Category, CategoryType, ContentItem, ItemType

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def build_category(
    category_id: str,
    parent_id: str | None = None,
    slug: str | None = None,
    name: str | None = None,
    category_type: CategoryType = CategoryType.PRODUCT,
) -> Category:
    """Build a category with slug and name derived from the id."""
    return Category(
        id=category_id,
        slug=slug or category_id,
        name=name or category_id.replace("-", " ").title(),
        type=category_type,
        parent_id=parent_id,
    )


def build_item(
    slug: str,
    category_ids: tuple[str, ...] | list[str] = (),
    price: int | None = None,
    sale_price: int | None = None,
    availability: str = "in-stock",
    age: int = 0,
    item_type: ItemType = ItemType.PRODUCT,
    is_featured: bool = False,
    name: str | None = None,
) -> ContentItem:
    """Build an item whose id is derived from its slug."""
    return ContentItem(
        id=f"item-{slug}",
        slug=slug,
        name=name or slug.replace("-", " ").title(),
        type=item_type,
        price=price,
        sale_price=sale_price,
        availability=availability,
        category_ids=tuple(category_ids),
        is_featured=is_featured,
        created_at=BASE_TIME - timedelta(minutes=age),
    )


@pytest.fixture
def make_category() -> Callable[..., Category]:
    """Category factory."""
    return build_category


@pytest.fixture
def make_item() -> Callable[..., ContentItem]:
    """Item factory."""
    return build_item


@pytest.fixture
def sample_categories() -> list[Category]:
    """Two-root category tree with a duplicated 'accessories' slug."""
    return [
        build_category("electronics"),
        build_category("computers", parent_id="electronics"),
        build_category("laptops", parent_id="computers"),
        build_category("desktops", parent_id="computers"),
        build_category("audio", parent_id="electronics"),
        build_category("cables", parent_id="audio"),
        build_category(
            "e-accessories",
            parent_id="electronics",
            slug="accessories",
            name="Electronics Accessories",
        ),
        build_category("books"),
        build_category(
            "b-accessories",
            parent_id="books",
            slug="accessories",
            name="Book Accessories",
        ),
    ]


@pytest.fixture
def sample_items() -> list[ContentItem]:
    """Items spread over the sample tree."""
    return [
        build_item("laptop-pro", ["laptops"], price=300, age=1),
        build_item("laptop-air", ["laptops"], price=100, age=2),
        build_item("desktop-tower", ["desktops"], price=200, age=3, availability="out-of-stock"),
        build_item("headphones", ["audio"], price=150, sale_price=90, age=4, is_featured=True),
        build_item("speaker-cable", ["cables"], price=15, age=5),
        build_item("laptop-sleeve", ["e-accessories", "laptops"], price=40, age=6),
        build_item("reading-lamp", ["b-accessories"], price=35, age=7),
        build_item("novel", ["books"], price=20, age=8, is_featured=True),
        build_item(
            "laptop-repair",
            ["laptops"],
            price=5000,
            age=9,
            item_type=ItemType.SERVICE,
            is_featured=True,
        ),
    ]


@pytest.fixture
def category_store(sample_categories: list[Category]) -> InMemoryCategoryStore:
    """In-memory store holding the sample tree."""
    return InMemoryCategoryStore(sample_categories)


@pytest.fixture
def item_store(sample_items: list[ContentItem]) -> InMemoryItemStore:
    """In-memory store holding the sample items."""
    return InMemoryItemStore(sample_items)


@pytest.fixture
def catalog_engine(
    category_store: InMemoryCategoryStore,
    item_store: InMemoryItemStore,
) -> CatalogQueryEngine:
    """Query engine over the in-memory sample catalog."""
    return CatalogQueryEngine(category_store, item_store, timeout=1.0)
