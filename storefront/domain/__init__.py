"""Domain layer - Catalog records, page results and domain errors.

- **Entities**: Category and ContentItem records, page result containers
- **Enumerations**: CategoryType, ItemType, SortOption, Availability
- **Exceptions**: Lookup, availability and data-integrity errors

Example usage:
    from storefront.domain import Category, SortOption

    category = Category(id="c1", slug="incense", name="Incense")
    order = SortOption.parse("price-asc")
"""

# Entities
from storefront.domain.entities import (
    Availability,
    Category,
    CategoryPageResult,
    CategoryType,
    ContentItem,
    ItemType,
    ProductPageResult,
    SortOption,
)

# Exceptions
from storefront.domain.exceptions import (
    CatalogNotFoundError,
    CatalogUnavailableError,
    CategoryNotFoundError,
    DataIntegrityWarning,
    DomainError,
    ItemNotFoundError,
)

__all__ = [
    # Entities
    "Availability",
    "Category",
    "CategoryPageResult",
    "CategoryType",
    "ContentItem",
    "ItemType",
    "ProductPageResult",
    "SortOption",
    # Exceptions
    "CatalogNotFoundError",
    "CatalogUnavailableError",
    "CategoryNotFoundError",
    "DataIntegrityWarning",
    "DomainError",
    "ItemNotFoundError",
]
