"""Store Service models package."""

from services.store_service.models.accounts import User
from services.store_service.models.catalog import Product
from services.store_service.models.commerce import Order, OrderCounter, OrderItem
from services.store_service.models.enums import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductUnit,
    StockStatus,
    StoreType,
    UserRole,
)
from services.store_service.models.wishlist import WishlistItem

__all__ = [
    "Order",
    "OrderCounter",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "Product",
    "ProductUnit",
    "StockStatus",
    "StoreType",
    "User",
    "UserRole",
    "WishlistItem",
]
