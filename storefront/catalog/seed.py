"""Catalog seeding from a nested JSON document.

Document format:
    {
        "categories": [
            {"name": "Malas", "slug": "malas", "type": "PRODUCT",
             "children": [{"name": "Rudraksha Malas", "slug": "rudraksha-malas"}]}
        ],
        "items": [
            {"name": "5 Mukhi Mala", "slug": "5-mukhi-mala", "type": "PRODUCT",
             "price": 4500, "category_slugs": ["rudraksha-malas"]}
        ]
    }

Prices are integer cents. Category references may be bare slugs or
"parent/child" paths. Ids are derived from slugs, so re-seeding the
same document yields the same ids.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from uuid import NAMESPACE_URL, uuid5

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.memory import InMemoryCategoryStore, InMemoryItemStore
from storefront.catalog.models import CategoryModel, ContentItemModel, ItemCategoryModel
from storefront.domain.entities import Category, CategoryType, ContentItem, ItemType

logger = structlog.get_logger()


def _stable_id(kind: str, key: str) -> str:
    return str(uuid5(NAMESPACE_URL, f"storefront:{kind}:{key}"))


@dataclass
class SeedCatalog:
    """Parsed seed document.

    Attributes:
        categories: Categories, parents before children.
        items: Items with resolved category ids.
        skipped: Slugs of items dropped for lack of a known category.
    """

    categories: list[Category] = field(default_factory=list)
    items: list[ContentItem] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def to_memory_stores(self) -> tuple[InMemoryCategoryStore, InMemoryItemStore]:
        """Build in-memory stores holding this catalog.

        Returns:
            Category store and item store.
        """
        return InMemoryCategoryStore(self.categories), InMemoryItemStore(self.items)


class SeedParser:
    """Turns a seed document into catalog records.

    Example usage:
        catalog = SeedParser().parse_file("scripts/seed_content.json")
        categories, items = catalog.to_memory_stores()
    """

    def __init__(self, now: datetime | None = None) -> None:
        """Initialize parser.

        Args:
            now: Creation time of the first item. Later items in the
                document are one second older each, so document order
                is the default (newest first) order.
        """
        self.now = now or datetime.now(timezone.utc)
        self._by_path: dict[str, Category] = {}
        self._by_slug: dict[str, list[Category]] = {}

    def parse_file(self, path: str | Path) -> SeedCatalog:
        """Parse a seed document from a JSON file.

        Args:
            path: Path to the JSON document.

        Returns:
            Parsed catalog.
        """
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        return self.parse(document)

    def parse(self, document: dict[str, Any]) -> SeedCatalog:
        """Parse a seed document.

        Args:
            document: Decoded JSON document.

        Returns:
            Parsed catalog.
        """
        self._by_path.clear()
        self._by_slug.clear()

        catalog = SeedCatalog()
        for data in document.get("categories", []):
            self._add_category(data, parent=None, parent_path=[], catalog=catalog)

        for index, data in enumerate(document.get("items", [])):
            item = self._build_item(data, index)
            if item is None:
                catalog.skipped.append(data.get("slug", "<missing slug>"))
                continue
            catalog.items.append(item)

        logger.info(
            "Seed document parsed",
            categories=len(catalog.categories),
            items=len(catalog.items),
            skipped=len(catalog.skipped),
        )
        return catalog

    def _add_category(
        self,
        data: dict[str, Any],
        parent: Category | None,
        parent_path: list[str],
        catalog: SeedCatalog,
    ) -> None:
        path = [*parent_path, data["slug"]]
        path_key = "/".join(path)

        category = Category(
            id=data.get("id") or _stable_id("category", path_key),
            slug=data["slug"],
            name=data["name"],
            type=CategoryType(data.get("type", parent.type if parent else CategoryType.PRODUCT)),
            parent_id=parent.id if parent else None,
            description=data.get("description"),
            image=data.get("image"),
        )
        catalog.categories.append(category)
        self._by_path[path_key] = category
        self._by_slug.setdefault(category.slug, []).append(category)

        for child in data.get("children", []):
            self._add_category(child, category, path, catalog)

    def _resolve_category(self, reference: str) -> Category | None:
        reference = reference.strip("/")
        if reference in self._by_path:
            return self._by_path[reference]

        segments = reference.split("/")
        matches = self._by_slug.get(segments[-1], [])
        if len(segments) > 1:
            parent_slug = segments[-2]
            matches = [
                c for c in matches
                if c.parent_id is not None
                and any(p.id == c.parent_id for p in self._by_slug.get(parent_slug, []))
            ]
        return matches[0] if matches else None

    def _build_item(self, data: dict[str, Any], index: int) -> ContentItem | None:
        references = data.get("category_slugs")
        if references is None:
            single = data.get("category_slug")
            references = [single] if single else []

        category_ids: list[str] = []
        for reference in references:
            category = self._resolve_category(reference)
            if category is None:
                logger.warning(
                    "Unknown category in seed item",
                    item_slug=data.get("slug"),
                    category=reference,
                )
                continue
            if category.id not in category_ids:
                category_ids.append(category.id)

        if not category_ids:
            logger.warning(
                "Skipping seed item without a known category",
                item_slug=data.get("slug"),
            )
            return None

        return ContentItem(
            id=data.get("id") or _stable_id("item", data["slug"]),
            slug=data["slug"],
            name=data["name"],
            type=ItemType(data.get("type", ItemType.PRODUCT)),
            description=data.get("description", ""),
            price=data.get("price"),
            sale_price=data.get("sale_price"),
            availability=data.get("availability", "in-stock"),
            category_ids=tuple(category_ids),
            is_featured=bool(data.get("is_featured", False)),
            image=data.get("image"),
            vendor=data.get("vendor"),
            sku=data.get("sku"),
            created_at=self.now - timedelta(seconds=index),
        )


async def persist_seed_catalog(
    session: AsyncSession,
    catalog: SeedCatalog,
    clear_existing: bool = True,
) -> dict[str, int]:
    """Write a parsed catalog to the database.

    Args:
        session: Async SQLAlchemy session (committed by the caller).
        catalog: Parsed seed catalog.
        clear_existing: Delete current categories and items first.

    Returns:
        Counts of written rows.
    """
    if clear_existing:
        await session.execute(delete(ItemCategoryModel))
        await session.execute(delete(ContentItemModel))
        await session.execute(delete(CategoryModel))

    # Parents precede children in catalog.categories
    for category in catalog.categories:
        session.add(
            CategoryModel(
                id=category.id,
                slug=category.slug,
                name=category.name,
                description=category.description,
                image=category.image,
                type=category.type.value,
                parent_id=category.parent_id,
            )
        )
    await session.flush()

    for item in catalog.items:
        model = ContentItemModel(
            id=item.id,
            slug=item.slug,
            name=item.name,
            description=item.description,
            type=item.type.value,
            price=item.price,
            sale_price=item.sale_price,
            availability=item.availability,
            is_featured=item.is_featured,
            image=item.image,
            vendor=item.vendor,
            sku=item.sku,
            created_at=item.created_at,
        )
        model.category_links = [
            ItemCategoryModel(category_id=category_id, position=position)
            for position, category_id in enumerate(item.category_ids)
        ]
        session.add(model)
    await session.flush()

    return {
        "categories_created": len(catalog.categories),
        "items_created": len(catalog.items),
        "items_skipped": len(catalog.skipped),
    }
