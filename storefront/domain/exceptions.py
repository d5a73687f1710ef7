"""Domain exceptions.

All domain-level errors raised by the catalog. The API layer maps
``CatalogNotFoundError`` to 404 and ``CatalogUnavailableError`` to 503.
``DataIntegrityWarning`` is never raised to callers: resolvers build it,
log it and carry on with partial data.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Lookup Errors
# ============================================================================


class CatalogNotFoundError(DomainError):
    """Base class for slugs or paths that resolve to no record."""

    error_code = "NOT_FOUND"


class CategoryNotFoundError(CatalogNotFoundError):
    """Raised when a category slug path does not resolve."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, slug_path: str) -> None:
        """Initialize category not found error.

        Args:
            slug_path: The requested slug or slug path.
        """
        super().__init__(
            f"Category not found: {slug_path}",
            details={"slug_path": slug_path},
        )


class ItemNotFoundError(CatalogNotFoundError):
    """Raised when an item slug does not resolve."""

    error_code = "ITEM_NOT_FOUND"

    def __init__(self, slug: str, item_type: str | None = None) -> None:
        """Initialize item not found error.

        Args:
            slug: The requested item slug.
            item_type: Type restriction applied to the lookup, if any.
        """
        super().__init__(
            f"Item not found: {slug}",
            details={"slug": slug, "item_type": item_type},
        )


# ============================================================================
# Store Errors
# ============================================================================


class CatalogUnavailableError(DomainError):
    """Raised when the backing store times out or fails.

    Callers may retry with backoff.
    """

    error_code = "CATALOG_UNAVAILABLE"

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize unavailable error.

        Args:
            operation: Store operation that failed (e.g. "find_by_id").
            reason: Short description of the failure.
        """
        super().__init__(
            f"Catalog store unavailable during {operation}: {reason}",
            details={"operation": operation, "reason": reason},
        )


# ============================================================================
# Data Integrity
# ============================================================================


class DataIntegrityWarning(DomainError):
    """Corrupt category graph detected during a walk.

    Kinds:
        cycle: a category was reached twice (includes self-parenting).
        dangling_parent: a parent_id points at a missing category.
        missing_category: the walk started from an id with no record.
    """

    CYCLE = "cycle"
    DANGLING_PARENT = "dangling_parent"
    MISSING_CATEGORY = "missing_category"

    def __init__(self, kind: str, category_id: str, chain: list[str] | None = None) -> None:
        """Initialize integrity warning.

        Args:
            kind: One of CYCLE, DANGLING_PARENT, MISSING_CATEGORY.
            category_id: Category id at which the walk stopped.
            chain: Ids visited before stopping, in visit order.
        """
        chain = chain or []
        super().__init__(
            f"Category graph integrity problem ({kind}) at {category_id}",
            details={"kind": kind, "category_id": category_id, "chain": chain},
        )
        self.kind = kind
        self.category_id = category_id
        self.chain = chain
