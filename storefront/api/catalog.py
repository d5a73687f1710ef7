"""Catalog API endpoints.

Read-only endpoints behind the storefront's category pages, detail
pages and listings.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.schemas import (
    CategoryPageResponse,
    CategorySchema,
    ContentItemSchema,
    ErrorResponse,
    PriceSchema,
    ProductPageResponse,
)
from storefront.catalog.service import CatalogQueryEngine, get_catalog_engine
from storefront.domain.entities import Category, ContentItem, ItemType
from storefront.domain.exceptions import CatalogNotFoundError
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_session

router = APIRouter(prefix="/content", tags=["Catalog"])


# ============================================================================
# Dependencies
# ============================================================================


def get_engine(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogQueryEngine:
    """Get catalog query engine with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_catalog_engine(session, request_id=request_id)


EngineDep = Annotated[CatalogQueryEngine, Depends(get_engine)]
ItemTypeQuery = Annotated[
    ItemType | None, Query(alias="type", description="Restrict to one item type")
]


# ============================================================================
# Converters
# ============================================================================


def _price(amount: int | None) -> PriceSchema | None:
    return PriceSchema(amount=amount, currency=settings.currency) if amount is not None else None


def category_to_schema(category: Category) -> CategorySchema:
    """Convert Category entity to response schema."""
    return CategorySchema(
        id=category.id,
        slug=category.slug,
        name=category.name,
        type=category.type,
        parent_id=category.parent_id,
        description=category.description,
        image=category.image,
    )


def item_to_schema(item: ContentItem) -> ContentItemSchema:
    """Convert ContentItem entity to response schema."""
    return ContentItemSchema(
        id=item.id,
        slug=item.slug,
        name=item.name,
        type=item.type,
        description=item.description,
        price=_price(item.price),
        sale_price=_price(item.sale_price),
        availability=item.availability,
        category_ids=list(item.category_ids),
        is_featured=item.is_featured,
        image=item.image,
        vendor=item.vendor,
        sku=item.sku,
        created_at=item.created_at,
    )


def parse_availability(raw: str | None) -> set[str]:
    """Parse a comma-separated availability filter.

    Args:
        raw: Query value such as "in-stock,pre-order".

    Returns:
        Set of tags (empty means no filter).
    """
    if not raw:
        return set()
    return {tag.strip() for tag in raw.split(",") if tag.strip()}


def not_found(error: CatalogNotFoundError) -> HTTPException:
    """Build a 404 for a lookup error."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error_code": error.error_code,
            "message": error.message,
        },
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/category-data/{slug_path:path}",
    response_model=CategoryPageResponse,
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Get category page data",
    description="Category, breadcrumbs and items across the category's whole subtree.",
)
async def get_category_page(
    slug_path: str,
    engine: EngineDep,
    sort_by: Annotated[
        str | None,
        Query(description="featured, price-asc, price-desc or name-asc"),
    ] = None,
    availability: Annotated[
        str | None,
        Query(description="Comma-separated availability tags"),
    ] = None,
) -> CategoryPageResponse:
    """Get a category page.

    Args:
        slug_path: Category slug or "parent/child" path.
        engine: Catalog query engine.
        sort_by: Item ordering.
        availability: Comma-separated availability filter.

    Returns:
        Category page data.

    Raises:
        HTTPException: If the category path does not resolve.
    """
    try:
        page = await engine.get_category_page_data(
            slug_path,
            sort_by=sort_by,
            availability=parse_availability(availability),
        )
    except CatalogNotFoundError as e:
        raise not_found(e) from e

    return CategoryPageResponse(
        category=category_to_schema(page.category),
        items=[item_to_schema(i) for i in page.items],
        item_count=len(page.items),
        breadcrumbs=[category_to_schema(c) for c in page.breadcrumbs],
        grouped_items={
            name: [item_to_schema(i) for i in group]
            for name, group in page.grouped_items.items()
        },
    )


@router.get(
    "/product-data/{slug}",
    response_model=ProductPageResponse,
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Get product page data",
    description="Item details and the breadcrumb trail of its primary category.",
)
async def get_product_page(
    slug: str,
    engine: EngineDep,
    item_type: ItemTypeQuery = None,
) -> ProductPageResponse:
    """Get a product or service detail page.

    Raises:
        HTTPException: If no item has this slug.
    """
    try:
        page = await engine.get_product_page_data(slug, item_type)
    except CatalogNotFoundError as e:
        raise not_found(e) from e

    return ProductPageResponse(
        item=item_to_schema(page.item),
        breadcrumbs=[category_to_schema(c) for c in page.breadcrumbs],
    )


@router.get(
    "/product/{slug}",
    response_model=ContentItemSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get item by slug",
)
async def get_item(slug: str, engine: EngineDep) -> ContentItemSchema:
    """Quick item lookup without breadcrumbs."""
    try:
        item = await engine.get_item(slug)
    except CatalogNotFoundError as e:
        raise not_found(e) from e
    return item_to_schema(item)


@router.get(
    "/categories",
    response_model=list[CategorySchema],
    summary="List top-level categories",
)
async def list_categories(engine: EngineDep) -> list[CategorySchema]:
    """List root categories."""
    categories = await engine.list_root_categories()
    return [category_to_schema(c) for c in categories]


@router.get(
    "/products",
    response_model=list[ContentItemSchema],
    summary="List items",
    description="Items of a type, optionally scoped to a category subtree.",
)
async def list_items(
    engine: EngineDep,
    item_type: ItemTypeQuery = None,
    category: Annotated[
        str | None, Query(description="Category slug or slug path")
    ] = None,
    sort_by: Annotated[str | None, Query()] = None,
) -> list[ContentItemSchema]:
    """List catalog items."""
    items = await engine.list_items(item_type, category, sort_by)
    return [item_to_schema(i) for i in items]


@router.get(
    "/featured",
    response_model=list[ContentItemSchema],
    summary="List featured items",
)
async def list_featured(
    engine: EngineDep,
    item_type: ItemTypeQuery = None,
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> list[ContentItemSchema]:
    """List featured items, newest first."""
    items = await engine.list_featured_items(item_type, limit)
    return [item_to_schema(i) for i in items]
