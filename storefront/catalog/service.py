"""Catalog query engine.

Composes the hierarchy resolvers with item lookups to answer the
storefront's page queries: category pages (items across a subtree,
breadcrumbs, optional grouping by subcategory) and product/service
detail pages (item plus breadcrumbs).
"""

from collections.abc import Collection, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.hierarchy import AncestryResolver, DescendantResolver, IntegrityHook
from storefront.catalog.repository import CategoryRepository, ItemRepository
from storefront.catalog.stores import CategoryStore, ItemStore, call_store
from storefront.domain.entities import (
    Category,
    CategoryPageResult,
    ContentItem,
    ItemType,
    ProductPageResult,
    SortOption,
)
from storefront.domain.exceptions import CategoryNotFoundError, ItemNotFoundError
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


def split_slug_path(slug_path: str) -> list[str]:
    """Split a category slug path into non-empty segments.

    Args:
        slug_path: Bare slug or "parent/child" style path.

    Returns:
        Path segments, outermost first.
    """
    return [segment.strip() for segment in slug_path.split("/") if segment.strip()]


def group_by_subcategory(
    items: Sequence[ContentItem],
    children: Sequence[Category],
    parent_id: str,
) -> dict[str, list[ContentItem]]:
    """Partition items by the immediate subcategory they belong to.

    Each item lands under the first category in its category set that
    is a direct child of ``parent_id``. Items under no direct child are
    left out. Keys follow child order; empty groups are dropped.

    Args:
        items: Items in display order.
        children: Direct children of the resolved category.
        parent_id: Id of the resolved category.

    Returns:
        Mapping of subcategory name to its items.
    """
    names = {c.id: c.name for c in children if c.id != parent_id}
    grouped: dict[str, list[ContentItem]] = {name: [] for name in names.values()}

    for item in items:
        child_id = next((cid for cid in item.category_ids if cid in names), None)
        if child_id is not None:
            grouped[names[child_id]].append(item)

    return {name: group for name, group in grouped.items() if group}


class CatalogQueryEngine:
    """Answers storefront catalog queries.

    Stores are injected, so the engine runs against SQL repositories in
    production and in-memory stores in tests.

    Example usage:
        engine = CatalogQueryEngine(category_store, item_store, timeout=5.0)

        page = await engine.get_category_page_data(
            "electronics/computers",
            sort_by="price-asc",
            availability={"in-stock"},
        )
        detail = await engine.get_product_page_data("acme-laptop-14")
    """

    def __init__(
        self,
        categories: CategoryStore,
        items: ItemStore,
        timeout: float | None = None,
        on_integrity_warning: IntegrityHook | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            categories: Category store.
            items: Item store.
            timeout: Per-call store timeout in seconds.
            on_integrity_warning: Observer for corrupt-graph warnings.
            request_id: Request ID for log correlation.
        """
        self.categories = categories
        self.items = items
        self.timeout = timeout
        self.request_id = request_id
        self.ancestry = AncestryResolver(categories, timeout, on_integrity_warning)
        self.descendants = DescendantResolver(categories, timeout, on_integrity_warning)

    # ------------------------------------------------------------------
    # Page queries
    # ------------------------------------------------------------------

    async def get_category_page_data(
        self,
        slug_path: str,
        sort_by: SortOption | str | None = None,
        availability: Collection[str] | None = None,
    ) -> CategoryPageResult:
        """Get everything a category page shows.

        Args:
            slug_path: Bare slug or "parent/child" path. With two or more
                segments the category's immediate parent must carry the
                second-to-last slug.
            sort_by: featured (default), price-asc, price-desc or name-asc.
            availability: Allowed availability tags; empty means all.

        Returns:
            Category, items across its subtree, breadcrumbs and items
            grouped by immediate subcategory.

        Raises:
            CategoryNotFoundError: If the path does not resolve.
            CatalogUnavailableError: If the store fails or times out.
        """
        category = await self._find_category(slug_path)
        if category is None:
            logger.info(
                "Category not found",
                slug_path=slug_path,
                request_id=self.request_id,
            )
            raise CategoryNotFoundError(slug_path)

        order = SortOption.parse(sort_by)
        tags = {tag.strip() for tag in availability or () if tag and tag.strip()}

        breadcrumbs = await self.ancestry.resolve_ancestry(category.id)
        closure = await self.descendants.resolve_descendant_ids(category.id)

        items = await call_store(
            "find_by_category_ids_in",
            self.items.find_by_category_ids_in(closure, tags or None, order),
            self.timeout,
        )

        children = await call_store(
            "find_children_of",
            self.categories.find_children_of(category.id),
            self.timeout,
        )
        grouped = group_by_subcategory(items, children, category.id) if children else {}

        logger.info(
            "Category page resolved",
            slug_path=slug_path,
            category_id=category.id,
            descendant_count=len(closure) - 1,
            item_count=len(items),
            group_count=len(grouped),
            sort_by=order.value,
            request_id=self.request_id,
        )

        return CategoryPageResult(
            category=category,
            items=items,
            breadcrumbs=breadcrumbs,
            grouped_items=grouped,
        )

    async def get_product_page_data(
        self,
        slug: str,
        item_type: ItemType | None = None,
    ) -> ProductPageResult:
        """Get everything a product or service detail page shows.

        Breadcrumbs follow the first category in the item's category set.

        Args:
            slug: Item slug.
            item_type: Optional type restriction.

        Returns:
            Item and its breadcrumb trail.

        Raises:
            ItemNotFoundError: If no item has this slug.
            CatalogUnavailableError: If the store fails or times out.
        """
        item = await self.get_item(slug, item_type)
        breadcrumbs = await self.ancestry.resolve_ancestry(item.primary_category_id)

        logger.info(
            "Product page resolved",
            slug=slug,
            item_id=item.id,
            breadcrumb_depth=len(breadcrumbs),
            request_id=self.request_id,
        )

        return ProductPageResult(item=item, breadcrumbs=breadcrumbs)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_item(self, slug: str, item_type: ItemType | None = None) -> ContentItem:
        """Get a single item by slug.

        Args:
            slug: Item slug.
            item_type: Optional type restriction.

        Returns:
            The item.

        Raises:
            ItemNotFoundError: If no item has this slug.
        """
        item = await call_store(
            "find_by_slug",
            self.items.find_by_slug(slug, item_type),
            self.timeout,
        )
        if item is None:
            logger.info(
                "Item not found",
                slug=slug,
                item_type=item_type.value if item_type else None,
                request_id=self.request_id,
            )
            raise ItemNotFoundError(slug, item_type.value if item_type else None)
        return item

    async def list_root_categories(self) -> list[Category]:
        """Get top-level categories."""
        return await call_store(
            "find_root_categories",
            self.categories.find_root_categories(),
            self.timeout,
        )

    async def list_items(
        self,
        item_type: ItemType | None = None,
        category_slug: str | None = None,
        sort_by: SortOption | str | None = None,
    ) -> list[ContentItem]:
        """List items, optionally scoped to a category subtree.

        An unknown category yields an empty list rather than an error.

        Args:
            item_type: Optional type restriction.
            category_slug: Category slug or slug path to scope to.
            sort_by: Requested ordering.

        Returns:
            Matching items.
        """
        order = SortOption.parse(sort_by)

        if not category_slug:
            return await call_store(
                "find_all",
                self.items.find_all(item_type, order),
                self.timeout,
            )

        category = await self._find_category(category_slug)
        if category is None:
            return []

        closure = await self.descendants.resolve_descendant_ids(category.id)
        return await call_store(
            "find_by_category_ids_in",
            self.items.find_by_category_ids_in(closure, None, order, item_type),
            self.timeout,
        )

    async def list_featured_items(
        self,
        item_type: ItemType | None = None,
        limit: int | None = None,
    ) -> list[ContentItem]:
        """Get featured items for the home page.

        Args:
            item_type: Optional type restriction.
            limit: Maximum results (defaults to settings).

        Returns:
            Featured items, newest first.
        """
        return await call_store(
            "find_featured",
            self.items.find_featured(item_type, limit or settings.featured_items_limit),
            self.timeout,
        )

    async def _find_category(self, slug_path: str) -> Category | None:
        segments = split_slug_path(slug_path)
        if not segments:
            return None

        parent_slug = segments[-2] if len(segments) > 1 else None
        return await call_store(
            "find_by_slug_and_parent_slug",
            self.categories.find_by_slug_and_parent_slug(segments[-1], parent_slug),
            self.timeout,
        )


def get_catalog_engine(
    session: AsyncSession,
    request_id: str | None = None,
) -> CatalogQueryEngine:
    """Build a query engine over the database.

    Args:
        session: Async SQLAlchemy session.
        request_id: Optional request ID for log correlation.

    Returns:
        CatalogQueryEngine backed by SQL repositories.
    """
    return CatalogQueryEngine(
        CategoryRepository(session),
        ItemRepository(session),
        timeout=settings.store_timeout_seconds,
        request_id=request_id,
    )
