"""API schemas for the storefront catalog.

Pydantic models for response validation and serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.domain.entities import CategoryType, ItemType


# ============================================================================
# Common Schemas
# ============================================================================


class PriceSchema(BaseModel):
    """Price representation."""

    amount: int = Field(..., description="Amount in smallest currency unit (cents)")
    currency: str = Field(default="USD", description="Currency code")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog Schemas
# ============================================================================


class CategorySchema(BaseModel):
    """Category in API responses."""

    id: str = Field(..., description="Category ID")
    slug: str = Field(..., description="URL-safe identifier")
    name: str = Field(..., description="Display name")
    type: CategoryType = Field(..., description="Content kind held by the category")
    parent_id: str | None = Field(default=None, description="Parent category ID")
    description: str | None = Field(default=None, description="Category description")
    image: str | None = Field(default=None, description="Image URL")


class ContentItemSchema(BaseModel):
    """Product, service or article in API responses."""

    id: str = Field(..., description="Item ID")
    slug: str = Field(..., description="URL-safe identifier")
    name: str = Field(..., description="Display name")
    type: ItemType = Field(..., description="Item kind")
    description: str = Field(default="", description="Short description")
    price: PriceSchema | None = Field(default=None, description="Regular price")
    sale_price: PriceSchema | None = Field(default=None, description="Sale price")
    availability: str = Field(..., description="Availability tag")
    category_ids: list[str] = Field(
        default_factory=list, description="Category IDs, primary category first"
    )
    is_featured: bool = Field(default=False, description="Promoted on the home page")
    image: str | None = Field(default=None, description="Primary image URL")
    vendor: str | None = Field(default=None, description="Vendor name")
    sku: str | None = Field(default=None, description="Stock keeping unit")
    created_at: datetime = Field(..., description="Creation timestamp")


class CategoryPageResponse(BaseModel):
    """Category page data."""

    category: CategorySchema
    items: list[ContentItemSchema] = Field(
        ..., description="Items across the category and all its subcategories"
    )
    item_count: int = Field(..., description="Number of items")
    breadcrumbs: list[CategorySchema] = Field(
        ..., description="Categories from root to this category"
    )
    grouped_items: dict[str, list[ContentItemSchema]] = Field(
        default_factory=dict, description="Items keyed by immediate subcategory name"
    )


class ProductPageResponse(BaseModel):
    """Product or service detail page data."""

    item: ContentItemSchema
    breadcrumbs: list[CategorySchema] = Field(
        ..., description="Categories from root to the item's primary category"
    )
