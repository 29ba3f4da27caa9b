"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    OWNER = "owner"
    USER = "user"


class StoreType(str, enum.Enum):
    KIRANA = "kirana"
    SUPERMARKET = "supermarket"
    CONVENIENCE = "convenience"
    SPECIALTY = "specialty"
    OTHER = "other"


class ProductUnit(str, enum.Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    PIECE = "piece"
    PACK = "pack"
    DOZEN = "dozen"
    BOTTLE = "bottle"
    BOX = "box"
    PACKET = "packet"


class StockStatus(str, enum.Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(str, enum.Enum):
    COD = "cod"
    ONLINE = "online"
    CARD = "card"
    UPI = "upi"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
