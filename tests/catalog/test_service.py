"""Tests for the catalog query engine."""

import asyncio

import pytest

from storefront.catalog.memory import InMemoryCategoryStore, InMemoryItemStore
from storefront.catalog.service import (
    CatalogQueryEngine,
    group_by_subcategory,
    split_slug_path,
)
from storefront.domain.entities import Category, ItemType, SortOption
from storefront.domain.exceptions import (
    CatalogUnavailableError,
    CategoryNotFoundError,
    DataIntegrityWarning,
    ItemNotFoundError,
)


def slugs(items) -> list[str]:
    """Get item slugs in order."""
    return [i.slug for i in items]


class SlowCategoryStore(InMemoryCategoryStore):
    """Category store whose lookups never finish in time."""

    async def find_by_slug_and_parent_slug(
        self,
        slug: str,
        parent_slug: str | None = None,
    ) -> Category | None:
        await asyncio.sleep(1)
        return await super().find_by_slug_and_parent_slug(slug, parent_slug)


class TestSplitSlugPath:
    """Tests for slug path splitting."""

    def test_bare_slug(self) -> None:
        """A bare slug is one segment."""
        assert split_slug_path("laptops") == ["laptops"]

    def test_nested_path(self) -> None:
        """Segments keep their order."""
        assert split_slug_path("electronics/computers/laptops") == [
            "electronics",
            "computers",
            "laptops",
        ]

    def test_empty_segments_dropped(self) -> None:
        """Leading, trailing and doubled slashes are ignored."""
        assert split_slug_path("/electronics//computers/") == ["electronics", "computers"]

    def test_empty_path(self) -> None:
        """An empty path has no segments."""
        assert split_slug_path("") == []


class TestGroupBySubcategory:
    """Tests for grouping items under immediate subcategories."""

    def test_groups_follow_child_order(self, make_category, make_item) -> None:
        """Keys follow the children's order, not item order."""
        children = [
            make_category("a", parent_id="p", name="Alpha"),
            make_category("b", parent_id="p", name="Beta"),
        ]
        items = [make_item("y", ["b"]), make_item("x", ["a"])]

        grouped = group_by_subcategory(items, children, "p")

        assert list(grouped) == ["Alpha", "Beta"]
        assert slugs(grouped["Alpha"]) == ["x"]
        assert slugs(grouped["Beta"]) == ["y"]

    def test_empty_groups_dropped(self, make_category, make_item) -> None:
        """Children without items produce no key."""
        children = [
            make_category("a", parent_id="p", name="Alpha"),
            make_category("b", parent_id="p", name="Beta"),
        ]

        grouped = group_by_subcategory([make_item("x", ["a"])], children, "p")

        assert list(grouped) == ["Alpha"]

    def test_first_matching_category_wins(self, make_category, make_item) -> None:
        """An item in two children is grouped once, by its first one."""
        children = [
            make_category("a", parent_id="p", name="Alpha"),
            make_category("b", parent_id="p", name="Beta"),
        ]

        grouped = group_by_subcategory([make_item("x", ["b", "a"])], children, "p")

        assert list(grouped) == ["Beta"]

    def test_self_child_excluded(self, make_category, make_item) -> None:
        """A self-parented category is not its own subcategory."""
        children = [make_category("p", parent_id="p", name="Self")]

        assert group_by_subcategory([make_item("x", ["p"])], children, "p") == {}


class TestCategoryPage:
    """Tests for get_category_page_data."""

    @pytest.mark.asyncio
    async def test_leaf_category(self, catalog_engine: CatalogQueryEngine) -> None:
        """A leaf page has its items and no groups."""
        page = await catalog_engine.get_category_page_data("computers/laptops")

        assert page.category.id == "laptops"
        assert slugs(page.items) == ["laptop-pro", "laptop-air", "laptop-sleeve", "laptop-repair"]
        assert [c.id for c in page.breadcrumbs] == ["electronics", "computers", "laptops"]
        assert page.grouped_items == {}

    @pytest.mark.asyncio
    async def test_items_cover_whole_subtree(self, catalog_engine: CatalogQueryEngine) -> None:
        """Items from every descendant appear on an ancestor's page."""
        page = await catalog_engine.get_category_page_data("electronics")

        assert set(slugs(page.items)) == {
            "laptop-pro",
            "laptop-air",
            "desktop-tower",
            "headphones",
            "speaker-cable",
            "laptop-sleeve",
            "laptop-repair",
        }
        assert "novel" not in slugs(page.items)

    @pytest.mark.asyncio
    async def test_items_listed_once(self, catalog_engine: CatalogQueryEngine) -> None:
        """An item in two subtree categories appears once."""
        page = await catalog_engine.get_category_page_data("electronics")

        assert slugs(page.items).count("laptop-sleeve") == 1

    @pytest.mark.asyncio
    async def test_grouped_by_immediate_child(self, catalog_engine: CatalogQueryEngine) -> None:
        """Groups are keyed by child name in child order."""
        page = await catalog_engine.get_category_page_data("computers")

        assert list(page.grouped_items) == ["Desktops", "Laptops"]
        assert slugs(page.grouped_items["Desktops"]) == ["desktop-tower"]
        assert slugs(page.grouped_items["Laptops"]) == [
            "laptop-pro",
            "laptop-air",
            "laptop-sleeve",
            "laptop-repair",
        ]

    @pytest.mark.asyncio
    async def test_grouping_skips_grandchild_items(self, catalog_engine: CatalogQueryEngine) -> None:
        """Items only under a grandchild are listed but not grouped."""
        page = await catalog_engine.get_category_page_data("electronics")

        assert list(page.grouped_items) == ["Audio", "Electronics Accessories"]
        assert slugs(page.grouped_items["Audio"]) == ["headphones"]
        assert slugs(page.grouped_items["Electronics Accessories"]) == ["laptop-sleeve"]

    @pytest.mark.asyncio
    async def test_default_order_is_newest_first(self, catalog_engine: CatalogQueryEngine) -> None:
        """Featured ordering lists the newest items first."""
        page = await catalog_engine.get_category_page_data("computers")

        assert slugs(page.items) == [
            "laptop-pro",
            "laptop-air",
            "desktop-tower",
            "laptop-sleeve",
            "laptop-repair",
        ]

    @pytest.mark.asyncio
    async def test_price_ascending(self, catalog_engine: CatalogQueryEngine) -> None:
        """price-asc orders by effective price."""
        page = await catalog_engine.get_category_page_data("electronics", sort_by="price-asc")

        assert [i.effective_price for i in page.items] == [15, 40, 90, 100, 200, 300, 5000]

    @pytest.mark.asyncio
    async def test_price_descending(self, catalog_engine: CatalogQueryEngine) -> None:
        """price-desc is the reverse for distinct prices."""
        page = await catalog_engine.get_category_page_data(
            "electronics", sort_by=SortOption.PRICE_DESC
        )

        assert [i.effective_price for i in page.items] == [5000, 300, 200, 100, 90, 40, 15]

    @pytest.mark.asyncio
    async def test_name_ascending(self, catalog_engine: CatalogQueryEngine) -> None:
        """name-asc orders alphabetically."""
        page = await catalog_engine.get_category_page_data("computers", sort_by="name-asc")

        assert slugs(page.items) == [
            "desktop-tower",
            "laptop-air",
            "laptop-pro",
            "laptop-repair",
            "laptop-sleeve",
        ]

    @pytest.mark.asyncio
    async def test_unknown_sort_falls_back(self, catalog_engine: CatalogQueryEngine) -> None:
        """An unrecognized sort behaves like featured."""
        default = await catalog_engine.get_category_page_data("computers")
        unknown = await catalog_engine.get_category_page_data("computers", sort_by="cheapest")

        assert slugs(unknown.items) == slugs(default.items)

    @pytest.mark.asyncio
    async def test_availability_filter(self, catalog_engine: CatalogQueryEngine) -> None:
        """Only items with an allowed tag are returned."""
        page = await catalog_engine.get_category_page_data(
            "computers", availability={"in-stock"}
        )

        assert "desktop-tower" not in slugs(page.items)
        assert all(i.availability == "in-stock" for i in page.items)
        assert "Desktops" not in page.grouped_items

    @pytest.mark.asyncio
    async def test_empty_availability_means_all(self, catalog_engine: CatalogQueryEngine) -> None:
        """An empty filter does not restrict items."""
        page = await catalog_engine.get_category_page_data("computers", availability=set())

        assert "desktop-tower" in slugs(page.items)

    @pytest.mark.asyncio
    async def test_path_selects_duplicate_slug(self, catalog_engine: CatalogQueryEngine) -> None:
        """The parent segment disambiguates a repeated slug."""
        electronics = await catalog_engine.get_category_page_data("electronics/accessories")
        books = await catalog_engine.get_category_page_data("books/accessories")

        assert electronics.category.id == "e-accessories"
        assert slugs(electronics.items) == ["laptop-sleeve"]
        assert books.category.id == "b-accessories"
        assert slugs(books.items) == ["reading-lamp"]

    @pytest.mark.asyncio
    async def test_bare_duplicate_slug_picks_lowest_id(self, catalog_engine: CatalogQueryEngine) -> None:
        """Without a parent, ties between non-roots go to the lowest id."""
        page = await catalog_engine.get_category_page_data("accessories")

        assert page.category.id == "b-accessories"

    @pytest.mark.asyncio
    async def test_wrong_parent_not_found(self, catalog_engine: CatalogQueryEngine) -> None:
        """A real slug under the wrong parent does not resolve."""
        with pytest.raises(CategoryNotFoundError) as exc_info:
            await catalog_engine.get_category_page_data("computers/cables")

        assert exc_info.value.details == {"slug_path": "computers/cables"}

    @pytest.mark.asyncio
    async def test_unknown_slug_not_found(self, catalog_engine: CatalogQueryEngine) -> None:
        """An unknown slug raises CategoryNotFoundError."""
        with pytest.raises(CategoryNotFoundError):
            await catalog_engine.get_category_page_data("garden")

    @pytest.mark.asyncio
    async def test_empty_path_not_found(self, catalog_engine: CatalogQueryEngine) -> None:
        """An empty path raises CategoryNotFoundError."""
        with pytest.raises(CategoryNotFoundError):
            await catalog_engine.get_category_page_data("/")

    @pytest.mark.asyncio
    async def test_store_timeout(self, sample_categories, item_store: InMemoryItemStore) -> None:
        """A slow store surfaces as CatalogUnavailableError."""
        engine = CatalogQueryEngine(SlowCategoryStore(sample_categories), item_store, timeout=0.01)

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await engine.get_category_page_data("electronics")

        assert exc_info.value.details["operation"] == "find_by_slug_and_parent_slug"

    @pytest.mark.asyncio
    async def test_corrupt_tree_still_answers(self, make_category, make_item) -> None:
        """A self-parented category is reported, not fatal."""
        categories = InMemoryCategoryStore([make_category("loop", parent_id="loop")])
        items = InMemoryItemStore([make_item("thing", ["loop"])])
        warnings: list[DataIntegrityWarning] = []
        engine = CatalogQueryEngine(categories, items, on_integrity_warning=warnings.append)

        page = await engine.get_category_page_data("loop")

        assert [c.id for c in page.breadcrumbs] == ["loop"]
        assert slugs(page.items) == ["thing"]
        assert page.grouped_items == {}
        assert {w.kind for w in warnings} == {DataIntegrityWarning.CYCLE}


class TestProductPage:
    """Tests for get_product_page_data."""

    @pytest.mark.asyncio
    async def test_breadcrumbs_follow_primary_category(self, catalog_engine: CatalogQueryEngine) -> None:
        """Breadcrumbs come from the first category in the item's set."""
        page = await catalog_engine.get_product_page_data("laptop-sleeve")

        assert page.item.slug == "laptop-sleeve"
        assert [c.id for c in page.breadcrumbs] == ["electronics", "e-accessories"]

    @pytest.mark.asyncio
    async def test_deep_item(self, catalog_engine: CatalogQueryEngine) -> None:
        """A deeply nested item gets the full trail."""
        page = await catalog_engine.get_product_page_data("speaker-cable")

        assert [c.slug for c in page.breadcrumbs] == ["electronics", "audio", "cables"]

    @pytest.mark.asyncio
    async def test_service_item(self, catalog_engine: CatalogQueryEngine) -> None:
        """Services resolve when the type matches."""
        page = await catalog_engine.get_product_page_data("laptop-repair", ItemType.SERVICE)

        assert page.item.type == ItemType.SERVICE

    @pytest.mark.asyncio
    async def test_type_mismatch_not_found(self, catalog_engine: CatalogQueryEngine) -> None:
        """A product slug is not found when asking for a service."""
        with pytest.raises(ItemNotFoundError) as exc_info:
            await catalog_engine.get_product_page_data("novel", ItemType.SERVICE)

        assert exc_info.value.details == {"slug": "novel", "item_type": "SERVICE"}

    @pytest.mark.asyncio
    async def test_unknown_item(self, catalog_engine: CatalogQueryEngine) -> None:
        """An unknown slug raises ItemNotFoundError."""
        with pytest.raises(ItemNotFoundError):
            await catalog_engine.get_product_page_data("nonexistent")

    @pytest.mark.asyncio
    async def test_uncategorized_item(self, make_item) -> None:
        """An item without categories has no breadcrumbs."""
        engine = CatalogQueryEngine(
            InMemoryCategoryStore(),
            InMemoryItemStore([make_item("orphan")]),
        )

        page = await engine.get_product_page_data("orphan")

        assert page.breadcrumbs == []


class TestListings:
    """Tests for listing queries."""

    @pytest.mark.asyncio
    async def test_root_categories(self, catalog_engine: CatalogQueryEngine) -> None:
        """Root categories are ordered by name."""
        roots = await catalog_engine.list_root_categories()

        assert [c.id for c in roots] == ["books", "electronics"]

    @pytest.mark.asyncio
    async def test_list_items_by_type(self, catalog_engine: CatalogQueryEngine) -> None:
        """Type restriction applies to unscoped listings."""
        items = await catalog_engine.list_items(ItemType.SERVICE)

        assert slugs(items) == ["laptop-repair"]

    @pytest.mark.asyncio
    async def test_list_items_in_category(self, catalog_engine: CatalogQueryEngine) -> None:
        """Category scoping covers the whole subtree."""
        items = await catalog_engine.list_items(
            ItemType.PRODUCT, "electronics/audio", "price-asc"
        )

        assert slugs(items) == ["speaker-cable", "headphones"]

    @pytest.mark.asyncio
    async def test_list_items_unknown_category(self, catalog_engine: CatalogQueryEngine) -> None:
        """An unknown category yields no items."""
        assert await catalog_engine.list_items(category_slug="garden") == []

    @pytest.mark.asyncio
    async def test_featured_newest_first(self, catalog_engine: CatalogQueryEngine) -> None:
        """Featured items are newest first."""
        items = await catalog_engine.list_featured_items()

        assert slugs(items) == ["headphones", "novel", "laptop-repair"]

    @pytest.mark.asyncio
    async def test_featured_limit_and_type(self, catalog_engine: CatalogQueryEngine) -> None:
        """Limit and type restrict featured items."""
        assert slugs(await catalog_engine.list_featured_items(limit=1)) == ["headphones"]
        assert slugs(await catalog_engine.list_featured_items(ItemType.SERVICE)) == [
            "laptop-repair"
        ]
