"""Storefront Catalog Service.

Resolves category trees (breadcrumb ancestry, descendant closures) and
answers category and product page queries over pluggable stores.
"""

from storefront.catalog.hierarchy import AncestryResolver, DescendantResolver
from storefront.catalog.memory import InMemoryCategoryStore, InMemoryItemStore
from storefront.catalog.repository import CategoryRepository, ItemRepository
from storefront.catalog.seed import SeedCatalog, SeedParser, persist_seed_catalog
from storefront.catalog.service import CatalogQueryEngine, get_catalog_engine
from storefront.catalog.stores import CategoryStore, ItemStore

__all__ = [
    # Hierarchy
    "AncestryResolver",
    "DescendantResolver",
    # Stores
    "CategoryStore",
    "ItemStore",
    "CategoryRepository",
    "ItemRepository",
    "InMemoryCategoryStore",
    "InMemoryItemStore",
    # Seeding
    "SeedCatalog",
    "SeedParser",
    "persist_seed_catalog",
    # Service
    "CatalogQueryEngine",
    "get_catalog_engine",
]
