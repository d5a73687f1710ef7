"""SQLAlchemy models for the storefront catalog.

Defines categories (a self-referencing tree), content items and the
ordered many-to-many link between them.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain.entities import Category, CategoryType, ContentItem, ItemType
from storefront.infrastructure.database import Base


class CategoryModel(Base):
    """Category row.

    Attributes:
        id: Unique category identifier.
        slug: URL-safe identifier (unique per parent).
        name: Display name.
        description: Optional description.
        image: Optional image URL.
        type: PRODUCT or SERVICE.
        parent_id: Parent category id (None for roots).
        created_at: Creation timestamp.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CategoryType.PRODUCT.value
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("parent_id", "slug", name="uq_categories_parent_slug"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryModel(id={self.id}, slug={self.slug}, parent_id={self.parent_id})>"

    def to_entity(self) -> Category:
        """Convert to domain record.

        Returns:
            Category entity.
        """
        return Category(
            id=self.id,
            slug=self.slug,
            name=self.name,
            type=CategoryType(self.type),
            parent_id=self.parent_id,
            description=self.description,
            image=self.image,
        )


class ContentItemModel(Base):
    """Content item row (product, service or article).

    Attributes:
        id: Unique item identifier.
        slug: Unique URL-safe identifier.
        name: Display name.
        description: Short description.
        type: PRODUCT, SERVICE or ARTICLE.
        price: Price in cents.
        sale_price: Sale price in cents.
        availability: Availability tag.
        is_featured: Promoted on the home page.
        image: Primary image URL.
        vendor: Vendor name.
        sku: Stock keeping unit.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "content_items"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ItemType.PRODUCT.value, index=True
    )
    price: Mapped[int | None] = mapped_column(Integer, nullable=True)  # in cents
    sale_price: Mapped[int | None] = mapped_column(Integer, nullable=True)  # in cents
    availability: Mapped[str] = mapped_column(
        String(50), nullable=False, default="in-stock", index=True
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    vendor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    category_links: Mapped[list["ItemCategoryModel"]] = relationship(
        "ItemCategoryModel",
        order_by=lambda: [ItemCategoryModel.position, ItemCategoryModel.category_id],
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ContentItemModel(id={self.id}, slug={self.slug}, type={self.type})>"

    def to_entity(self) -> ContentItem:
        """Convert to domain record.

        ``category_links`` must be loaded (use ``selectinload``).

        Returns:
            ContentItem entity.
        """
        return ContentItem(
            id=self.id,
            slug=self.slug,
            name=self.name,
            type=ItemType(self.type),
            description=self.description,
            price=self.price,
            sale_price=self.sale_price,
            availability=self.availability,
            category_ids=tuple(link.category_id for link in self.category_links),
            is_featured=self.is_featured,
            image=self.image,
            vendor=self.vendor,
            sku=self.sku,
            created_at=self.created_at,
        )


class ItemCategoryModel(Base):
    """Ordered link between an item and one of its categories.

    ``position`` fixes the order of an item's category set; the lowest
    position is the item's primary (breadcrumb) category.
    """

    __tablename__ = "item_categories"

    item_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content_items.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ItemCategoryModel(item_id={self.item_id}, "
            f"category_id={self.category_id}, position={self.position})>"
        )
