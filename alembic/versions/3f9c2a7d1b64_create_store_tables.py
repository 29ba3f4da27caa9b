"""create_store_tables

Revision ID: 3f9c2a7d1b64
Revises:
Create Date: 2026-10-18 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONVariant = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')

user_role_enum = sa.Enum('owner', 'user', name='user_role_enum')
store_type_enum = sa.Enum(
    'kirana', 'supermarket', 'convenience', 'specialty', 'other', name='store_type_enum'
)
product_unit_enum = sa.Enum(
    'kg', 'g', 'l', 'ml', 'piece', 'pack', 'dozen', 'bottle', 'box', 'packet',
    name='store_product_unit_enum',
)
payment_method_enum = sa.Enum('cod', 'online', 'card', 'upi', name='store_payment_method_enum')
payment_status_enum = sa.Enum(
    'pending', 'completed', 'failed', 'refunded', name='store_payment_status_enum'
)
order_status_enum = sa.Enum(
    'pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled', 'returned',
    name='store_order_status_enum',
)


def upgrade() -> None:
    """Upgrade schema - Add users, catalog, orders and order counters."""

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('role', user_role_enum, server_default='user', nullable=False),
        sa.Column('store_name', sa.String(length=100), nullable=True),
        sa.Column('store_type', store_type_enum, server_default='kirana', nullable=False),
        sa.Column('gst_number', sa.String(length=20), nullable=True),
        sa.Column('avatar', sa.String(length=512), nullable=True),
        sa.Column('email_verified', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'store_products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('store_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('barcode', sa.String(length=100), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('subcategory', sa.String(length=100), nullable=True),
        sa.Column('brand', sa.String(length=100), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('cost_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('mrp', sa.Numeric(12, 2), nullable=True),
        sa.Column('discount', sa.Numeric(5, 2), server_default='0', nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 2), server_default='0', nullable=False),
        sa.Column('stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('min_stock_level', sa.Integer(), server_default='10', nullable=False),
        sa.Column('max_stock_level', sa.Integer(), nullable=True),
        sa.Column('unit', product_unit_enum, server_default='piece', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('images', JSONVariant, nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=False),
        sa.Column('updated_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('stock >= 0', name='positive_stock'),
        sa.CheckConstraint('discount >= 0 AND discount <= 100', name='valid_discount'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('store_id', 'sku', name='unique_store_sku')
    )
    op.create_index(op.f('ix_store_products_store_id'), 'store_products', ['store_id'])
    op.create_index(op.f('ix_store_products_name'), 'store_products', ['name'])
    op.create_index(op.f('ix_store_products_category'), 'store_products', ['category'])
    op.create_index(op.f('ix_store_products_is_active'), 'store_products', ['is_active'])
    op.create_index(
        'ix_store_products_store_category', 'store_products', ['store_id', 'category']
    )

    op.create_table(
        'store_orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('store_id', sa.String(length=64), nullable=False),
        sa.Column('order_number', sa.String(length=20), nullable=True),
        sa.Column('reference', sa.String(length=30), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=False),
        sa.Column('customer_address', JSONVariant, nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('tax_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('shipping_charge', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', payment_method_enum, server_default='cod', nullable=False),
        sa.Column('payment_status', payment_status_enum, server_default='pending', nullable=False),
        sa.Column('payment_transaction_id', sa.String(length=100), nullable=True),
        sa.Column('paid_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('status', order_status_enum, server_default='pending', nullable=False),
        sa.Column('delivery', JSONVariant, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=64), nullable=True),
        sa.Column('updated_by', sa.String(length=64), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('total_amount > 0', name='positive_total'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('store_id', 'order_number', name='unique_store_order_number')
    )
    op.create_index(op.f('ix_store_orders_store_id'), 'store_orders', ['store_id'])
    op.create_index(op.f('ix_store_orders_reference'), 'store_orders', ['reference'], unique=True)
    op.create_index(op.f('ix_store_orders_customer_email'), 'store_orders', ['customer_email'])
    op.create_index(op.f('ix_store_orders_status'), 'store_orders', ['status'])
    op.create_index('ix_store_orders_store_created', 'store_orders', ['store_id', 'created_at'])

    op.create_table(
        'store_order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('line_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount', sa.Numeric(5, 2), server_default='0', nullable=False),
        sa.CheckConstraint('quantity > 0', name='positive_quantity'),
        sa.ForeignKeyConstraint(['order_id'], ['store_orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'store_order_counters',
        sa.Column('store_id', sa.String(length=64), nullable=False),
        sa.Column('business_date', sa.Date(), nullable=False),
        sa.Column('last_serial', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('store_id', 'business_date')
    )


def downgrade() -> None:
    """Downgrade schema - Drop store tables."""
    op.drop_table('store_order_counters')
    op.drop_table('store_order_items')
    op.drop_index('ix_store_orders_store_created', table_name='store_orders')
    op.drop_index(op.f('ix_store_orders_status'), table_name='store_orders')
    op.drop_index(op.f('ix_store_orders_customer_email'), table_name='store_orders')
    op.drop_index(op.f('ix_store_orders_reference'), table_name='store_orders')
    op.drop_index(op.f('ix_store_orders_store_id'), table_name='store_orders')
    op.drop_table('store_orders')
    op.drop_index('ix_store_products_store_category', table_name='store_products')
    op.drop_index(op.f('ix_store_products_is_active'), table_name='store_products')
    op.drop_index(op.f('ix_store_products_category'), table_name='store_products')
    op.drop_index(op.f('ix_store_products_name'), table_name='store_products')
    op.drop_index(op.f('ix_store_products_store_id'), table_name='store_products')
    op.drop_table('store_products')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (
        order_status_enum,
        payment_status_enum,
        payment_method_enum,
        product_unit_enum,
        store_type_enum,
        user_role_enum,
    ):
        enum.drop(bind, checkfirst=True)
