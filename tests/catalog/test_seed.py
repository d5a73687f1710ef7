"""Tests for catalog seed parsing."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from storefront.catalog.seed import SeedCatalog, SeedParser
from storefront.catalog.service import CatalogQueryEngine
from storefront.domain.entities import CategoryType, ItemType

SEED_FILE = Path(__file__).parents[2] / "scripts" / "seed_content.json"

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)

DOCUMENT = {
    "categories": [
        {
            "name": "Malas",
            "slug": "malas",
            "children": [
                {"name": "Rudraksha", "slug": "rudraksha"},
                {"name": "Crystal", "slug": "crystal"},
            ],
        },
        {
            "name": "Pujas",
            "slug": "pujas",
            "type": "SERVICE",
            "children": [{"name": "Rudraksha", "slug": "rudraksha"}],
        },
    ],
    "items": [
        {"name": "Rudraksha Mala", "slug": "rudraksha-mala", "price": 4500,
         "category_slugs": ["malas/rudraksha", "malas/crystal"]},
        {"name": "Rudra Abhishek", "slug": "rudra-abhishek", "type": "SERVICE",
         "price": 11000, "category_slug": "pujas/rudraksha"},
        {"name": "Lost Item", "slug": "lost-item", "category_slugs": ["nowhere"]},
        {"name": "Crystal Mala", "slug": "crystal-mala", "sale_price": 900, "price": 1200,
         "category_slugs": ["crystal"]},
    ],
}


@pytest.fixture
def catalog() -> SeedCatalog:
    """Parsed sample document."""
    return SeedParser(now=NOW).parse(DOCUMENT)


class TestSeedParser:
    """Tests for SeedParser."""

    def test_categories_parents_first(self, catalog: SeedCatalog) -> None:
        """Categories are emitted depth first, parents before children."""
        assert [c.slug for c in catalog.categories] == [
            "malas",
            "rudraksha",
            "crystal",
            "pujas",
            "rudraksha",
        ]

    def test_parent_links(self, catalog: SeedCatalog) -> None:
        """Children point at their parent's id."""
        malas, rudraksha, _, pujas, puja_rudraksha = catalog.categories

        assert malas.parent_id is None
        assert rudraksha.parent_id == malas.id
        assert puja_rudraksha.parent_id == pujas.id
        assert rudraksha.id != puja_rudraksha.id

    def test_type_inherited_from_parent(self, catalog: SeedCatalog) -> None:
        """Children without a type take their parent's."""
        assert catalog.categories[1].type == CategoryType.PRODUCT
        assert catalog.categories[4].type == CategoryType.SERVICE

    def test_ids_are_stable(self, catalog: SeedCatalog) -> None:
        """Parsing the same document twice yields the same ids."""
        again = SeedParser(now=NOW).parse(DOCUMENT)

        assert [c.id for c in again.categories] == [c.id for c in catalog.categories]
        assert [i.id for i in again.items] == [i.id for i in catalog.items]

    def test_path_references(self, catalog: SeedCatalog) -> None:
        """Path references pick the category under the named parent."""
        categories = {(c.parent_id, c.slug): c for c in catalog.categories}
        malas, pujas = catalog.categories[0], catalog.categories[3]
        mala, service = catalog.items[0], catalog.items[1]

        assert mala.category_ids == (
            categories[(malas.id, "rudraksha")].id,
            categories[(malas.id, "crystal")].id,
        )
        assert service.category_ids == (categories[(pujas.id, "rudraksha")].id,)
        assert service.type == ItemType.SERVICE

    def test_unknown_category_skips_item(self, catalog: SeedCatalog) -> None:
        """Items with no known category are skipped."""
        assert catalog.skipped == ["lost-item"]
        assert "lost-item" not in [i.slug for i in catalog.items]

    def test_document_order_is_newest_first(self, catalog: SeedCatalog) -> None:
        """Each later item is one second older."""
        created = {i.slug: i.created_at for i in catalog.items}

        assert created["rudraksha-mala"] == NOW
        assert created["rudra-abhishek"] == NOW - timedelta(seconds=1)
        assert created["crystal-mala"] == NOW - timedelta(seconds=3)

    def test_prices(self, catalog: SeedCatalog) -> None:
        """Prices are kept in cents."""
        crystal = catalog.items[2]

        assert crystal.price == 1200
        assert crystal.sale_price == 900
        assert crystal.effective_price == 900

    def test_parse_file(self, tmp_path: Path) -> None:
        """Documents can be read from disk."""
        path = tmp_path / "seed.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

        catalog = SeedParser(now=NOW).parse_file(path)

        assert len(catalog.categories) == 5
        assert len(catalog.items) == 3


class TestBundledSeed:
    """Tests against the bundled seed document."""

    @pytest.mark.asyncio
    async def test_bundled_seed_pages(self) -> None:
        """The bundled document answers category and product pages."""
        categories, items = SeedParser(now=NOW).parse_file(SEED_FILE).to_memory_stores()
        engine = CatalogQueryEngine(categories, items)

        rudraksha = await engine.get_category_page_data("rudraksha")
        gem_malas = await engine.get_category_page_data("gemstones/malas")
        mala = await engine.get_product_page_data("108-bead-rudraksha-mala")

        assert len(rudraksha.items) == 3
        # Bead items sit in grandchildren, so only the mala is grouped
        assert list(rudraksha.grouped_items) == ["Malas"]
        assert [i.slug for i in gem_malas.items] == ["amethyst-mala"]
        assert [c.slug for c in mala.breadcrumbs] == ["rudraksha", "malas"]
