"""Store contracts consumed by the catalog.

The hierarchy resolvers and the query engine only talk to these
interfaces. ``CategoryRepository``/``ItemRepository`` implement them on
SQLAlchemy; ``InMemoryCategoryStore``/``InMemoryItemStore`` implement
them on dictionaries for tests and local runs.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Collection
from typing import TypeVar

import structlog

from storefront.domain.entities import Category, ContentItem, ItemType, SortOption
from storefront.domain.exceptions import CatalogUnavailableError

T = TypeVar("T")

logger = structlog.get_logger()


class CategoryStore(ABC):
    """Read access to category records."""

    @abstractmethod
    async def find_by_id(self, category_id: str) -> Category | None:
        """Get category by id.

        Args:
            category_id: Category id.

        Returns:
            Category if found, None otherwise.
        """

    @abstractmethod
    async def find_by_slug_and_parent_slug(
        self,
        slug: str,
        parent_slug: str | None = None,
    ) -> Category | None:
        """Get category by slug, optionally pinned to a parent slug.

        With ``parent_slug=None`` the slug may sit under any parent;
        root categories win, then the lowest id.

        Args:
            slug: Category slug.
            parent_slug: Required slug of the immediate parent.

        Returns:
            Category if found, None otherwise.
        """

    @abstractmethod
    async def find_children_of(self, category_id: str) -> list[Category]:
        """Get immediate children of a category, ordered by name then id.

        Args:
            category_id: Parent category id.

        Returns:
            Child categories (empty for a leaf).
        """

    @abstractmethod
    async def find_root_categories(self) -> list[Category]:
        """Get top-level categories, ordered by name then id.

        Returns:
            Categories with no parent.
        """


class ItemStore(ABC):
    """Read access to content items."""

    @abstractmethod
    async def find_by_slug(
        self,
        slug: str,
        item_type: ItemType | None = None,
    ) -> ContentItem | None:
        """Get item by slug.

        Args:
            slug: Item slug.
            item_type: Optional type restriction.

        Returns:
            Item if found, None otherwise.
        """

    @abstractmethod
    async def find_by_category_ids_in(
        self,
        category_ids: Collection[str],
        availability: Collection[str] | None = None,
        order_by: SortOption = SortOption.FEATURED,
        item_type: ItemType | None = None,
    ) -> list[ContentItem]:
        """Get items belonging to any of the given categories.

        Args:
            category_ids: Category ids to match against each item's set.
            availability: Allowed availability tags (empty/None = all).
            order_by: Result ordering.
            item_type: Optional type restriction.

        Returns:
            Matching items, each listed once.
        """

    @abstractmethod
    async def find_all(
        self,
        item_type: ItemType | None = None,
        order_by: SortOption = SortOption.FEATURED,
    ) -> list[ContentItem]:
        """Get all items, optionally of one type.

        Args:
            item_type: Optional type restriction.
            order_by: Result ordering.

        Returns:
            Matching items.
        """

    @abstractmethod
    async def find_featured(
        self,
        item_type: ItemType | None = None,
        limit: int = 8,
    ) -> list[ContentItem]:
        """Get featured items, newest first.

        Args:
            item_type: Optional type restriction.
            limit: Maximum results.

        Returns:
            Featured items.
        """


async def call_store(operation: str, call: Awaitable[T], timeout: float | None) -> T:
    """Await a store call under a timeout.

    Args:
        operation: Store operation name, used in errors and logs.
        call: The pending store call.
        timeout: Seconds to wait, or None to wait indefinitely.

    Returns:
        The store call's result.

    Raises:
        CatalogUnavailableError: If the call does not finish in time.
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(
            "Catalog store call timed out",
            operation=operation,
            timeout_seconds=timeout,
        )
        raise CatalogUnavailableError(operation, f"timed out after {timeout}s") from e
