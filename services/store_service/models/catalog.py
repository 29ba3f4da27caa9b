"""Store catalog model: products with pricing and stock."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import ProductUnit, StockStatus, enum_values
from services.store_service.pricing import resolve_price, round_price
from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

# ============================================================================
# CATALOG MODELS
# ============================================================================


class Product(Base):
    """Products a store sells (e.g., 'Sugar 5kg')."""

    __tablename__ = "store_products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    # Basic info
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    barcode: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Classification
    category: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    subcategory: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    mrp: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2), nullable=True
    )  # printed maximum retail price
    discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=0, server_default="0"
    )  # percent
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=0, server_default="0"
    )

    # Inventory
    stock: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    min_stock_level: Mapped[int] = mapped_column(
        Integer, default=10, server_default="10", nullable=False
    )
    max_stock_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    unit: Mapped[ProductUnit] = mapped_column(
        SAEnum(ProductUnit, values_callable=enum_values, name="store_product_unit_enum"),
        default=ProductUnit.PIECE,
        server_default="piece",
    )

    # Details
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    images: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), default=list
    )

    # Flags
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", index=True
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    # Audit
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        UniqueConstraint("store_id", "sku", name="unique_store_sku"),
        CheckConstraint("stock >= 0", name="positive_stock"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="valid_discount"),
        Index("ix_store_products_store_category", "store_id", "category"),
    )

    @property
    def final_price(self) -> Decimal:
        """Sale price after MRP/discount, rounded for display."""
        return round_price(resolve_price(self.price, self.mrp, self.discount))

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def stock_status(self) -> StockStatus:
        if self.stock == 0:
            return StockStatus.OUT_OF_STOCK
        if self.stock < self.min_stock_level:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def __repr__(self):
        return f"<Product {self.sku} stock={self.stock}>"
