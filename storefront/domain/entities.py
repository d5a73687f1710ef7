"""Domain entities for the storefront catalog.

Categories and content items are read-only records from the catalog's
point of view; they are created by catalog management and only ever
read here. Page results are derived per request and never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


# ============================================================================
# Enumerations
# ============================================================================


class CategoryType(str, Enum):
    """Kind of content a category holds."""

    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


class ItemType(str, Enum):
    """Kind of content item."""

    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"
    ARTICLE = "ARTICLE"


class SortOption(str, Enum):
    """Item orderings offered on category pages.

    FEATURED orders newest first. Price orderings use the effective
    price (sale price when present) and put unpriced items last.
    Every ordering breaks ties newest first, then by id.
    """

    FEATURED = "featured"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"

    @classmethod
    def parse(cls, value: "str | SortOption | None") -> "SortOption":
        """Parse a sort parameter, falling back to FEATURED.

        Args:
            value: Raw sort value from a caller.

        Returns:
            Matching option, or FEATURED for missing/unknown values.
        """
        if isinstance(value, SortOption):
            return value
        if not value:
            return cls.FEATURED
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.FEATURED


class Availability(str, Enum):
    """Availability tags used by the storefront.

    Items may carry other tags; filtering works on raw strings.
    """

    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"
    PRE_ORDER = "pre-order"


# ============================================================================
# Catalog Records
# ============================================================================


@dataclass(frozen=True)
class Category:
    """A node in the category tree.

    Attributes:
        id: Unique category id.
        slug: URL-safe identifier, unique within its parent.
        name: Display name.
        type: Whether the category holds products or services.
        parent_id: Id of the parent category (None for a root).
        description: Optional long description.
        image: Optional image URL.
    """

    id: str
    slug: str
    name: str
    type: CategoryType = CategoryType.PRODUCT
    parent_id: str | None = None
    description: str | None = None
    image: str | None = None

    @property
    def is_root(self) -> bool:
        """Check if this category has no parent."""
        return self.parent_id is None


@dataclass(frozen=True)
class ContentItem:
    """A product, service or article in the catalog.

    Attributes:
        id: Unique item id.
        slug: Unique URL-safe identifier.
        name: Display name.
        type: Item kind.
        description: Short description.
        price: Price in cents, if priced.
        sale_price: Discounted price in cents, if on sale.
        availability: Availability tag (e.g. "in-stock").
        category_ids: Categories the item belongs to, in store order.
        is_featured: Whether the item is promoted on the home page.
        image: Optional primary image URL.
        vendor: Optional vendor name.
        sku: Optional stock keeping unit.
        created_at: Creation timestamp.
    """

    id: str
    slug: str
    name: str
    type: ItemType = ItemType.PRODUCT
    description: str = ""
    price: int | None = None
    sale_price: int | None = None
    availability: str = Availability.IN_STOCK.value
    category_ids: tuple[str, ...] = ()
    is_featured: bool = False
    image: str | None = None
    vendor: str | None = None
    sku: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def effective_price(self) -> int | None:
        """Get the price a customer pays.

        Returns:
            Sale price when set, otherwise the regular price.
        """
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def primary_category_id(self) -> str | None:
        """Get the category that supplies the item's breadcrumb trail.

        Returns:
            First id of the category set, or None if uncategorized.
        """
        return self.category_ids[0] if self.category_ids else None


# ============================================================================
# Page Results
# ============================================================================


@dataclass
class CategoryPageResult:
    """Everything a category page needs.

    Attributes:
        category: The resolved category.
        items: Items across the category's full descendant closure.
        breadcrumbs: Categories from root to the resolved category.
        grouped_items: Items keyed by immediate subcategory name.
    """

    category: Category
    items: list[ContentItem] = field(default_factory=list)
    breadcrumbs: list[Category] = field(default_factory=list)
    grouped_items: dict[str, list[ContentItem]] = field(default_factory=dict)


@dataclass
class ProductPageResult:
    """Everything a product or service detail page needs."""

    item: ContentItem
    breadcrumbs: list[Category] = field(default_factory=list)
