"""Create categories, content_items and item_categories tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog tables."""
    # Category tree (self-referencing parent link)
    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(200), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='PRODUCT'),
        sa.Column('parent_id', sa.String(36),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Slugs are unique within a parent
    op.create_unique_constraint(
        'uq_categories_parent_slug',
        'categories',
        ['parent_id', 'slug'],
    )

    # Content items
    op.create_table(
        'content_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('type', sa.String(20), nullable=False, server_default='PRODUCT', index=True),
        sa.Column('price', sa.Integer(), nullable=True),
        sa.Column('sale_price', sa.Integer(), nullable=True),
        sa.Column('availability', sa.String(50), nullable=False, server_default='in-stock', index=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.Column('vendor', sa.String(200), nullable=True),
        sa.Column('sku', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()'), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Ordered item <-> category links
    op.create_table(
        'item_categories',
        sa.Column('item_id', sa.String(36),
                  sa.ForeignKey('content_items.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('category_id', sa.String(36),
                  sa.ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('item_categories')
    op.drop_table('content_items')
    op.drop_table('categories')
