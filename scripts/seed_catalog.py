#!/usr/bin/env python3
"""Seed storefront catalog script.

Loads a nested category/item JSON document into the database.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --file path/to/seed_content.json
    python scripts/seed_catalog.py --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.catalog.seed import SeedParser, persist_seed_catalog
from storefront.infrastructure.database import async_session_factory, create_tables, engine
from storefront.infrastructure.logging import configure_logging

DEFAULT_SEED_FILE = Path(__file__).parent / "seed_content.json"


async def seed(path: Path, clear: bool = True) -> dict:
    """Parse a seed file and write it to the database.

    Args:
        path: Seed document path.
        clear: Whether to clear existing catalog rows.

    Returns:
        Seeding result.
    """
    catalog = SeedParser().parse_file(path)

    async with async_session_factory() as session:
        result = await persist_seed_catalog(session, catalog, clear_existing=clear)
        await session.commit()
        return result


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront catalog",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_SEED_FILE,
        help="Seed document (default: scripts/seed_content.json)",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing categories and items before seeding",
    )

    args = parser.parse_args()
    configure_logging(json_output=False)

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"File: {args.file}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed(args.file, clear=not args.no_clear)

    print(f"  ✓ Categories: {result['categories_created']}")
    print(f"  ✓ Items: {result['items_created']}")
    print(f"  ✓ Skipped items: {result['items_skipped']}")
    print()

    await engine.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
