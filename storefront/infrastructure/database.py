"""Database engine, sessions and schema helpers.

Production runs on PostgreSQL through asyncpg. SQLite URLs
(``sqlite+aiosqlite://``) are accepted for local runs and tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from storefront.infrastructure.config import settings

# Base class for models
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a database URL.

    In-memory SQLite gets a single shared connection, otherwise every
    pooled connection would see its own empty database.

    Args:
        database_url: SQLAlchemy URL.
        echo: Log emitted SQL.

    Returns:
        Configured engine.
    """
    url = make_url(database_url)
    options: dict[str, Any] = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True

    return create_async_engine(url, **options)


engine = build_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Catalog reads never write, so the session is rolled back on error
    and otherwise simply closed.

    Yields:
        AsyncSession for database operations.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create catalog tables that don't exist yet.

    Args:
        bind: Engine to create tables on (defaults to the app engine).
    """
    # Register catalog tables on Base.metadata
    import storefront.catalog.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(session: AsyncSession) -> None:
    """Run a trivial query.

    Raises:
        SQLAlchemyError: If the database cannot answer.
    """
    await session.execute(text("SELECT 1"))
