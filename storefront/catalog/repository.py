"""Catalog repositories for database operations.

SQLAlchemy implementations of the category and item store contracts.
Driver and SQL failures surface as ``CatalogUnavailableError``.
"""

import functools
from collections.abc import Awaitable, Callable, Collection
from typing import Any, TypeVar

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from storefront.catalog.models import CategoryModel, ContentItemModel, ItemCategoryModel
from storefront.catalog.stores import CategoryStore, ItemStore
from storefront.domain.entities import Category, ContentItem, ItemType, SortOption
from storefront.domain.exceptions import CatalogUnavailableError

logger = structlog.get_logger()

R = TypeVar("R")


def store_operation(
    func: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """Translate database failures into CatalogUnavailableError.

    Args:
        func: Repository coroutine method.

    Returns:
        Wrapped method.
    """

    @functools.wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
        try:
            return await func(self, *args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Catalog store query failed",
                operation=func.__name__,
                error=str(e),
            )
            raise CatalogUnavailableError(func.__name__, type(e).__name__) from e

    return wrapper


class CategoryRepository(CategoryStore):
    """Repository for category reads.

    Example usage:
        async with async_session_factory() as session:
            repo = CategoryRepository(session)
            laptops = await repo.find_by_slug_and_parent_slug("laptops", "computers")
            children = await repo.find_children_of(laptops.id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    @store_operation
    async def find_by_id(self, category_id: str) -> Category | None:
        """Get category by id."""
        model = await self.session.get(CategoryModel, category_id)
        return model.to_entity() if model else None

    @store_operation
    async def find_by_slug_and_parent_slug(
        self,
        slug: str,
        parent_slug: str | None = None,
    ) -> Category | None:
        """Get category by slug, optionally pinned to a parent slug."""
        query = select(CategoryModel).where(CategoryModel.slug == slug)

        if parent_slug is not None:
            parent = aliased(CategoryModel)
            query = query.join(parent, CategoryModel.parent_id == parent.id).where(
                parent.slug == parent_slug
            )

        # Roots first, then lowest id
        query = query.order_by(
            CategoryModel.parent_id.is_not(None),
            CategoryModel.id,
        ).limit(1)

        result = await self.session.execute(query)
        model = result.scalars().first()
        return model.to_entity() if model else None

    @store_operation
    async def find_children_of(self, category_id: str) -> list[Category]:
        """Get immediate children of a category."""
        query = (
            select(CategoryModel)
            .where(CategoryModel.parent_id == category_id)
            .order_by(CategoryModel.name, CategoryModel.id)
        )
        result = await self.session.execute(query)
        return [m.to_entity() for m in result.scalars().all()]

    @store_operation
    async def find_root_categories(self) -> list[Category]:
        """Get top-level categories."""
        query = (
            select(CategoryModel)
            .where(CategoryModel.parent_id.is_(None))
            .order_by(CategoryModel.name, CategoryModel.id)
        )
        result = await self.session.execute(query)
        return [m.to_entity() for m in result.scalars().all()]


class ItemRepository(ItemStore):
    """Repository for content item reads.

    Handles category-membership filtering, availability filtering
    and the storefront orderings.

    Example usage:
        async with async_session_factory() as session:
            repo = ItemRepository(session)
            items = await repo.find_by_category_ids_in(
                {"cat-1", "cat-2"},
                availability={"in-stock"},
                order_by=SortOption.PRICE_ASC,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    @store_operation
    async def find_by_slug(
        self,
        slug: str,
        item_type: ItemType | None = None,
    ) -> ContentItem | None:
        """Get item by slug."""
        query = self._base_query().where(ContentItemModel.slug == slug)
        if item_type is not None:
            query = query.where(ContentItemModel.type == item_type.value)

        result = await self.session.execute(query)
        model = result.scalars().first()
        return model.to_entity() if model else None

    @store_operation
    async def find_by_category_ids_in(
        self,
        category_ids: Collection[str],
        availability: Collection[str] | None = None,
        order_by: SortOption = SortOption.FEATURED,
        item_type: ItemType | None = None,
    ) -> list[ContentItem]:
        """Get items belonging to any of the given categories."""
        if not category_ids:
            return []

        membership = select(ItemCategoryModel.item_id).where(
            ItemCategoryModel.category_id.in_(list(category_ids))
        )
        query = self._base_query().where(ContentItemModel.id.in_(membership))

        if availability:
            query = query.where(ContentItemModel.availability.in_(list(availability)))

        if item_type is not None:
            query = query.where(ContentItemModel.type == item_type.value)

        query = self._apply_ordering(query, order_by)

        result = await self.session.execute(query)
        return [m.to_entity() for m in result.scalars().all()]

    @store_operation
    async def find_all(
        self,
        item_type: ItemType | None = None,
        order_by: SortOption = SortOption.FEATURED,
    ) -> list[ContentItem]:
        """Get all items, optionally of one type."""
        query = self._base_query()
        if item_type is not None:
            query = query.where(ContentItemModel.type == item_type.value)

        query = self._apply_ordering(query, order_by)

        result = await self.session.execute(query)
        return [m.to_entity() for m in result.scalars().all()]

    @store_operation
    async def find_featured(
        self,
        item_type: ItemType | None = None,
        limit: int = 8,
    ) -> list[ContentItem]:
        """Get featured items, newest first."""
        query = self._base_query().where(ContentItemModel.is_featured.is_(True))
        if item_type is not None:
            query = query.where(ContentItemModel.type == item_type.value)

        query = self._apply_ordering(query, SortOption.FEATURED).limit(limit)

        result = await self.session.execute(query)
        return [m.to_entity() for m in result.scalars().all()]

    def _base_query(self) -> Select:
        """Select items with their category links eagerly loaded."""
        return select(ContentItemModel).options(
            selectinload(ContentItemModel.category_links)
        )

    def _apply_ordering(self, query: Select, order_by: SortOption) -> Select:
        """Apply a storefront ordering.

        Args:
            query: Item query.
            order_by: Requested ordering.

        Returns:
            Ordered query.
        """
        effective_price = func.coalesce(ContentItemModel.sale_price, ContentItemModel.price)

        columns: list[Any] = []
        if order_by is SortOption.PRICE_ASC:
            columns.append(effective_price.asc().nulls_last())
        elif order_by is SortOption.PRICE_DESC:
            columns.append(effective_price.desc().nulls_last())
        elif order_by is SortOption.NAME_ASC:
            columns.append(ContentItemModel.name.asc())

        # Newest first breaks every tie
        columns.extend([ContentItemModel.created_at.desc(), ContentItemModel.id.asc()])

        return query.order_by(*columns)
