"""Pydantic schemas for store service.

Wire format is camelCase (``storeId``, ``totalAmount``); Python code uses the
snake_case field names. Money is ``Decimal`` internally and a JSON number on
the wire.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel
from services.store_service.models import (
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductUnit,
    StockStatus,
    WishlistItem,
)

Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductBase(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: NonEmptyStr = Field(..., max_length=255)
    category: NonEmptyStr = Field(..., max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    price: Money = Field(..., ge=0)
    cost_price: Money = Field(..., ge=0)
    mrp: Optional[Money] = Field(None, ge=0)
    discount: Money = Field(Decimal("0"), ge=0, le=100)
    tax_rate: Money = Field(Decimal("0"), ge=0, le=100)
    stock: int = Field(0, ge=0)
    min_stock_level: int = Field(10, ge=0)
    max_stock_level: Optional[int] = Field(None, ge=0)
    unit: ProductUnit = ProductUnit.PIECE
    description: Optional[str] = None
    image: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False


class ProductCreate(ProductBase):
    sku: Optional[str] = Field(None, max_length=100)


NOT_NULL_PRODUCT_FIELDS = frozenset(
    {
        "name",
        "sku",
        "category",
        "price",
        "cost_price",
        "discount",
        "tax_rate",
        "stock",
        "min_stock_level",
        "unit",
        "images",
        "is_active",
        "is_featured",
    }
)


class ProductUpdate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[NonEmptyStr] = Field(None, max_length=255)
    sku: Optional[NonEmptyStr] = Field(None, max_length=100)
    category: Optional[NonEmptyStr] = Field(None, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    price: Optional[Money] = Field(None, ge=0)
    cost_price: Optional[Money] = Field(None, ge=0)
    mrp: Optional[Money] = Field(None, ge=0)
    discount: Optional[Money] = Field(None, ge=0, le=100)
    tax_rate: Optional[Money] = Field(None, ge=0, le=100)
    stock: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    max_stock_level: Optional[int] = Field(None, ge=0)
    unit: Optional[ProductUnit] = None
    description: Optional[str] = None
    image: Optional[str] = None
    images: Optional[list[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required(self) -> "ProductUpdate":
        # Omitting a field leaves it alone; sending null would clear a NOT NULL column
        cleared = sorted(
            field
            for field in self.model_fields_set & NOT_NULL_PRODUCT_FIELDS
            if getattr(self, field) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class ProductResponse(ProductBase):
    id: uuid.UUID
    store_id: str
    sku: str
    final_price: Money
    in_stock: bool
    stock_status: StockStatus
    created_by: str
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PublicProductResponse(CamelModel):
    """Storefront view of a product (no cost price, no audit fields)."""

    id: uuid.UUID
    store_id: str
    name: str
    sku: str
    category: str
    brand: Optional[str] = None
    description: Optional[str] = None
    price: Money
    mrp: Optional[Money] = None
    discount: Money
    final_price: Money
    stock: int
    unit: ProductUnit
    image: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    is_featured: bool
    in_stock: bool
    stock_status: StockStatus


class ProductEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    product: ProductResponse


class PublicProductEnvelope(CamelModel):
    success: bool = True
    product: PublicProductResponse


class ProductListResponse(CamelModel):
    success: bool = True
    products: list[ProductResponse]
    pagination: Pagination


class PublicProductListResponse(CamelModel):
    success: bool = True
    products: list[PublicProductResponse]
    categories: list[str]
    pagination: Pagination


class CategoryListResponse(CamelModel):
    success: bool = True
    categories: list[str]


class StockUpdate(CamelModel):
    stock: int = Field(..., ge=0)


class ProductStatusUpdate(CamelModel):
    is_active: bool


class ProductDeleteRequest(CamelModel):
    product_ids: list[str] = Field(..., min_length=1)


class ProductDeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_count: int


# ============================================================================
# ORDER SCHEMAS (input)
# ============================================================================


class AddressIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    street: NonEmptyStr
    city: NonEmptyStr
    state: NonEmptyStr
    pincode: NonEmptyStr
    landmark: Optional[str] = None


class CustomerIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: NonEmptyStr = Field(..., max_length=255)
    email: EmailStr
    phone: NonEmptyStr = Field(..., max_length=30)
    address: AddressIn


class OrderItemIn(CamelModel):
    """One cart line. The client's price is a hint; the catalog decides."""

    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: Optional[str] = None
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Money] = Field(None, ge=0)
    discount: Optional[Money] = Field(None, ge=0, le=100)
    unit: Optional[str] = None
    image: Optional[str] = None

    @model_validator(mode="after")
    def require_identifier(self) -> "OrderItemIn":
        if not (self.product_id or self.name or self.sku):
            raise ValueError("Each item needs a productId, name or sku")
        return self

    @property
    def label(self) -> str:
        return self.name or self.sku or self.product_id or ""


class PaymentIn(CamelModel):
    method: PaymentMethod = PaymentMethod.COD
    status: Optional[PaymentStatus] = None
    transaction_id: Optional[str] = None


class DeliveryIn(CamelModel):
    expected_date: Optional[datetime] = None
    tracking_number: Optional[str] = None
    delivery_agent: Optional[str] = None


class OrderCreate(CamelModel):
    store_id: NonEmptyStr
    customer: CustomerIn
    items: list[OrderItemIn] = Field(..., min_length=1)
    payment: PaymentIn = Field(default_factory=PaymentIn)
    delivery: Optional[DeliveryIn] = None
    notes: Optional[str] = None
    subtotal: Optional[Money] = Field(None, ge=0)
    discount_amount: Money = Field(Decimal("0"), ge=0)
    tax_amount: Money = Field(Decimal("0"), ge=0)
    shipping_charge: Money = Field(Decimal("0"), ge=0)
    # Checked by the workflow so a non-positive total gets its own error
    total_amount: Optional[Money] = None


class OrderStatusUpdate(CamelModel):
    status: Optional[str] = None


# ============================================================================
# ORDER SCHEMAS (output)
# ============================================================================


class OrderItemSummary(CamelModel):
    name: str
    quantity: int
    price: Money
    total: Money


class CustomerSummary(CamelModel):
    name: str
    email: str


class OrderPlacedData(CamelModel):
    order_id: uuid.UUID
    order_number: str
    reference: str
    status: OrderStatus
    total_amount: Money
    payment_method: PaymentMethod
    items: list[OrderItemSummary]
    customer: CustomerSummary
    created_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderPlacedData":
        return cls(
            order_id=order.id,
            order_number=order.order_number,
            reference=order.reference,
            status=order.status,
            total_amount=order.total_amount,
            payment_method=order.payment_method,
            items=[
                OrderItemSummary(
                    name=item.name,
                    quantity=item.quantity,
                    price=item.unit_price,
                    total=item.line_total,
                )
                for item in order.items
            ],
            customer=CustomerSummary(name=order.customer_name, email=order.customer_email),
            created_at=order.created_at,
        )


class OrderPlacedResponse(CamelModel):
    success: bool = True
    message: str = "Order placed successfully!"
    data: OrderPlacedData


class AddressOut(CamelModel):
    street: str
    city: str
    state: str
    pincode: str
    landmark: Optional[str] = None


class CustomerOut(CamelModel):
    name: str
    email: str
    phone: str
    address: AddressOut


class PaymentOut(CamelModel):
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str] = None
    paid_amount: Money


class OrderLineResponse(CamelModel):
    product_id: Optional[uuid.UUID] = None
    name: str
    sku: str
    quantity: int
    unit_price: Money
    line_total: Money
    discount: Money
    unit: str
    image: Optional[str] = None


class OrderResponse(CamelModel):
    id: uuid.UUID
    store_id: str
    order_number: Optional[str] = None
    reference: str
    customer: CustomerOut
    items: list[OrderLineResponse]
    item_count: int
    subtotal: Money
    discount_amount: Money
    tax_amount: Money
    shipping_charge: Money
    total_amount: Money
    payment: PaymentOut
    status: OrderStatus
    delivery: dict[str, Any] = Field(default_factory=dict)
    notes: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            store_id=order.store_id,
            order_number=order.order_number,
            reference=order.reference,
            customer=CustomerOut(
                name=order.customer_name,
                email=order.customer_email,
                phone=order.customer_phone,
                address=AddressOut(**order.customer_address),
            ),
            items=[OrderLineResponse.model_validate(item) for item in order.items],
            item_count=order.item_count,
            subtotal=order.subtotal,
            discount_amount=order.discount_amount,
            tax_amount=order.tax_amount,
            shipping_charge=order.shipping_charge,
            total_amount=order.total_amount,
            payment=PaymentOut(
                method=order.payment_method,
                status=order.payment_status,
                transaction_id=order.payment_transaction_id,
                paid_amount=order.paid_amount,
            ),
            status=order.status,
            delivery=order.delivery or {},
            notes=order.notes,
            created_by=order.created_by,
            updated_by=order.updated_by,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    order: OrderResponse


class OrderListData(CamelModel):
    orders: list[OrderResponse]
    pagination: Pagination


class OrderListResponse(CamelModel):
    success: bool = True
    data: OrderListData


class CustomerOrdersResponse(CamelModel):
    success: bool = True
    orders: list[OrderResponse]
    count: int


# ============================================================================
# WISHLIST SCHEMAS
# ============================================================================


class WishlistAdd(CamelModel):
    # Checked by the service so a missing id gets its own message
    product_id: Optional[str] = None


class WishlistItemResponse(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    sku: str
    category: str
    price: Money
    final_price: Money
    image: Optional[str] = None
    stock: int
    in_stock: bool
    added_at: datetime

    @classmethod
    def from_entry(cls, entry: WishlistItem) -> "WishlistItemResponse":
        product = entry.product
        return cls(
            id=entry.id,
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            category=product.category,
            price=product.price,
            final_price=product.final_price,
            image=product.image or next(iter(product.images or []), None),
            stock=product.stock,
            in_stock=product.in_stock,
            added_at=entry.added_at,
        )


class WishlistResponse(CamelModel):
    success: bool = True
    wishlist: list[WishlistItemResponse]
    count: int


class WishlistAddedItem(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    price: Money


class WishlistAddResponse(CamelModel):
    success: bool = True
    message: str
    is_new: bool
    wishlist_item: WishlistAddedItem


class WishlistRemoveResponse(CamelModel):
    success: bool = True
    message: str = "Removed from wishlist"
    deleted_id: uuid.UUID
