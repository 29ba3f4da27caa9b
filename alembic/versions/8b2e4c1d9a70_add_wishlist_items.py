"""add_wishlist_items

Revision ID: 8b2e4c1d9a70
Revises: 3f9c2a7d1b64
Create Date: 2026-10-19 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4c1d9a70'
down_revision: Union[str, Sequence[str], None] = '3f9c2a7d1b64'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Add customer wishlist items."""
    op.create_table(
        'store_wishlist_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['store_products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'product_id', name='unique_user_wishlist_product')
    )
    op.create_index(
        op.f('ix_store_wishlist_items_user_id'), 'store_wishlist_items', ['user_id']
    )


def downgrade() -> None:
    """Downgrade schema - Drop customer wishlist items."""
    op.drop_index(op.f('ix_store_wishlist_items_user_id'), table_name='store_wishlist_items')
    op.drop_table('store_wishlist_items')
