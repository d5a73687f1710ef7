"""In-memory catalog stores.

Dictionary-backed implementations of the store contracts. They mirror
the ordering rules of the SQL repositories so results are comparable.
"""

from collections.abc import Collection, Iterable

from storefront.catalog.stores import CategoryStore, ItemStore
from storefront.domain.entities import Category, ContentItem, ItemType, SortOption


def sort_items(items: Iterable[ContentItem], order_by: SortOption) -> list[ContentItem]:
    """Order items the way the SQL repositories do.

    Args:
        items: Items to order.
        order_by: Requested ordering.

    Returns:
        New ordered list.
    """
    # Tie-break first: newest first, then id. Later sorts are stable.
    ordered = sorted(items, key=lambda i: i.id)
    ordered.sort(key=lambda i: i.created_at, reverse=True)

    if order_by is SortOption.NAME_ASC:
        ordered.sort(key=lambda i: i.name)
    elif order_by in (SortOption.PRICE_ASC, SortOption.PRICE_DESC):
        priced = [i for i in ordered if i.effective_price is not None]
        unpriced = [i for i in ordered if i.effective_price is None]
        priced.sort(
            key=lambda i: i.effective_price,
            reverse=order_by is SortOption.PRICE_DESC,
        )
        ordered = priced + unpriced

    return ordered


class InMemoryCategoryStore(CategoryStore):
    """In-memory category store."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[str, Category] = {}
        for category in categories:
            self.add(category)

    def add(self, category: Category) -> None:
        """Add or replace a category."""
        self._categories[category.id] = category

    async def find_by_id(self, category_id: str) -> Category | None:
        """Get category by id."""
        return self._categories.get(category_id)

    async def find_by_slug_and_parent_slug(
        self,
        slug: str,
        parent_slug: str | None = None,
    ) -> Category | None:
        """Get category by slug, optionally pinned to a parent slug."""
        candidates = [c for c in self._categories.values() if c.slug == slug]

        if parent_slug is not None:
            candidates = [
                c for c in candidates
                if c.parent_id is not None
                and c.parent_id in self._categories
                and self._categories[c.parent_id].slug == parent_slug
            ]

        candidates.sort(key=lambda c: (not c.is_root, c.id))
        return candidates[0] if candidates else None

    async def find_children_of(self, category_id: str) -> list[Category]:
        """Get immediate children of a category."""
        children = [c for c in self._categories.values() if c.parent_id == category_id]
        children.sort(key=lambda c: (c.name, c.id))
        return children

    async def find_root_categories(self) -> list[Category]:
        """Get top-level categories."""
        roots = [c for c in self._categories.values() if c.is_root]
        roots.sort(key=lambda c: (c.name, c.id))
        return roots


class InMemoryItemStore(ItemStore):
    """In-memory content item store."""

    def __init__(self, items: Iterable[ContentItem] = ()) -> None:
        self._items: dict[str, ContentItem] = {}
        for item in items:
            self.add(item)

    def add(self, item: ContentItem) -> None:
        """Add or replace an item."""
        self._items[item.id] = item

    async def find_by_slug(
        self,
        slug: str,
        item_type: ItemType | None = None,
    ) -> ContentItem | None:
        """Get item by slug."""
        for item in self._items.values():
            if item.slug == slug and (item_type is None or item.type == item_type):
                return item
        return None

    async def find_by_category_ids_in(
        self,
        category_ids: Collection[str],
        availability: Collection[str] | None = None,
        order_by: SortOption = SortOption.FEATURED,
        item_type: ItemType | None = None,
    ) -> list[ContentItem]:
        """Get items belonging to any of the given categories."""
        wanted = set(category_ids)
        allowed = set(availability) if availability else None

        matches = [
            item for item in self._items.values()
            if wanted.intersection(item.category_ids)
            and (allowed is None or item.availability in allowed)
            and (item_type is None or item.type == item_type)
        ]
        return sort_items(matches, order_by)

    async def find_all(
        self,
        item_type: ItemType | None = None,
        order_by: SortOption = SortOption.FEATURED,
    ) -> list[ContentItem]:
        """Get all items, optionally of one type."""
        matches = [
            item for item in self._items.values()
            if item_type is None or item.type == item_type
        ]
        return sort_items(matches, order_by)

    async def find_featured(
        self,
        item_type: ItemType | None = None,
        limit: int = 8,
    ) -> list[ContentItem]:
        """Get featured items, newest first."""
        matches = [
            item for item in self._items.values()
            if item.is_featured and (item_type is None or item.type == item_type)
        ]
        return sort_items(matches, SortOption.FEATURED)[:limit]
