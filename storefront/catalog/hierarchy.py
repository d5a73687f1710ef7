"""Category tree walks.

AncestryResolver builds breadcrumb trails by following parent links up
to a root. DescendantResolver collects the id closure below a category
by following child links down. Both walks are bounded by a visited set,
so a corrupt graph (self-parenting, cycles, dangling parents) truncates
the result and logs a DataIntegrityWarning instead of looping or
failing the request.
"""

from collections import deque
from collections.abc import Callable

import structlog

from storefront.catalog.stores import CategoryStore, call_store
from storefront.domain.entities import Category
from storefront.domain.exceptions import DataIntegrityWarning

logger = structlog.get_logger()

IntegrityHook = Callable[[DataIntegrityWarning], None]


def report_integrity_warning(
    warning: DataIntegrityWarning,
    hook: IntegrityHook | None = None,
) -> None:
    """Log a data integrity warning and pass it to an optional hook.

    Args:
        warning: The detected problem.
        hook: Extra observer (metrics, tests).
    """
    logger.warning(
        "Category graph integrity warning",
        kind=warning.kind,
        category_id=warning.category_id,
        chain=warning.chain,
    )
    if hook is not None:
        hook(warning)


class AncestryResolver:
    """Resolves the root-first ancestor chain of a category.

    Example usage:
        resolver = AncestryResolver(CategoryRepository(session))
        breadcrumbs = await resolver.resolve_ancestry(laptops.id)
        # [electronics, computers, laptops]
    """

    def __init__(
        self,
        categories: CategoryStore,
        timeout: float | None = None,
        on_integrity_warning: IntegrityHook | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            categories: Category store to read from.
            timeout: Per-call store timeout in seconds.
            on_integrity_warning: Observer for corrupt-graph warnings.
        """
        self.categories = categories
        self.timeout = timeout
        self.on_integrity_warning = on_integrity_warning

    async def resolve_ancestry(self, category_id: str | None) -> list[Category]:
        """Walk parent links from a category up to its root.

        Args:
            category_id: Starting category id, or None.

        Returns:
            Categories from root to the starting category. Empty for None
            or an unknown id; truncated at a cycle or dangling parent.

        Raises:
            CatalogUnavailableError: If the store fails or times out.
        """
        if category_id is None:
            return []

        chain: list[Category] = []
        visited: list[str] = []
        seen: set[str] = set()
        current_id: str | None = category_id

        while current_id is not None:
            if current_id in seen:
                self._report(DataIntegrityWarning.CYCLE, current_id, visited)
                break

            category = await call_store(
                "find_by_id",
                self.categories.find_by_id(current_id),
                self.timeout,
            )
            if category is None:
                kind = (
                    DataIntegrityWarning.DANGLING_PARENT
                    if visited
                    else DataIntegrityWarning.MISSING_CATEGORY
                )
                self._report(kind, current_id, visited)
                break

            seen.add(current_id)
            visited.append(current_id)
            chain.insert(0, category)
            current_id = category.parent_id

        return chain

    def _report(self, kind: str, category_id: str, visited: list[str]) -> None:
        report_integrity_warning(
            DataIntegrityWarning(kind, category_id, list(visited)),
            self.on_integrity_warning,
        )


class DescendantResolver:
    """Resolves the id closure of a category's subtree.

    Example usage:
        resolver = DescendantResolver(CategoryRepository(session))
        ids = await resolver.resolve_descendant_ids(electronics.id)
        # {electronics.id, computers.id, laptops.id, audio.id, ...}
    """

    def __init__(
        self,
        categories: CategoryStore,
        timeout: float | None = None,
        on_integrity_warning: IntegrityHook | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            categories: Category store to read from.
            timeout: Per-call store timeout in seconds.
            on_integrity_warning: Observer for corrupt-graph warnings.
        """
        self.categories = categories
        self.timeout = timeout
        self.on_integrity_warning = on_integrity_warning

    async def resolve_descendant_ids(self, category_id: str) -> set[str]:
        """Collect a category id and every id reachable through child links.

        Breadth-first; an id already collected is never expanded again.

        Args:
            category_id: Root of the subtree.

        Returns:
            Set containing category_id and all descendant ids.

        Raises:
            CatalogUnavailableError: If the store fails or times out.
        """
        closure = {category_id}
        pending = deque([category_id])

        while pending:
            parent_id = pending.popleft()
            children = await call_store(
                "find_children_of",
                self.categories.find_children_of(parent_id),
                self.timeout,
            )
            for child in children:
                if child.id in closure:
                    report_integrity_warning(
                        DataIntegrityWarning(
                            DataIntegrityWarning.CYCLE, child.id, [parent_id]
                        ),
                        self.on_integrity_warning,
                    )
                    continue
                closure.add(child.id)
                pending.append(child.id)

        return closure
