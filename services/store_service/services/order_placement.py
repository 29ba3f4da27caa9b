"""Order placement: validate a cart against the catalog and persist it.

Every line is checked before anything is written. Persistence then happens
in a single transaction: conditional stock decrements, the order number,
and the order with its lines. Any failure rolls all of it back.
"""

from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import (
    InsufficientStockError,
    InvalidAmountError,
    ProductNotFoundError,
    StoreError,
    StoreMismatchError,
)
from libs.common.logging import get_logger
from services.store_service.models import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Product,
)
from services.store_service.pricing import round_price
from services.store_service.schemas import OrderCreate, OrderItemIn
from services.store_service.services.directory import parse_uuid
from services.store_service.services.order_numbers import assign_order_number
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

logger = get_logger(__name__)


async def find_product(
    db: AsyncSession, item: OrderItemIn, store_id: str
) -> Optional[Product]:
    """Resolve a cart line: by id, then by name, then by SKU within the store."""
    if item.product_id:
        product_id = parse_uuid(item.product_id)
        if product_id is not None:
            product = await db.get(Product, product_id)
            if product is not None:
                return product

    if item.name:
        result = await db.execute(
            select(Product)
            .where(Product.name == item.name, Product.store_id == store_id)
            .limit(1)
        )
        product = result.scalars().first()
        if product is not None:
            return product

    if item.sku:
        result = await db.execute(
            select(Product).where(
                Product.sku == item.sku.upper(), Product.store_id == store_id
            )
        )
        return result.scalar_one_or_none()

    return None


def build_line(product: Product, item: OrderItemIn, position: int) -> OrderItem:
    """Snapshot a line. Name, SKU and unit always come from the catalog."""
    if item.unit_price is not None:
        unit_price = round_price(item.unit_price)
    else:
        unit_price = product.final_price

    return OrderItem(
        position=position,
        product_id=product.id,
        name=product.name,
        sku=product.sku,
        unit=product.unit.value,
        image=item.image or product.image,
        quantity=item.quantity,
        unit_price=unit_price,
        line_total=unit_price * item.quantity,
        discount=item.discount if item.discount is not None else product.discount,
    )


async def decrement_stock(db: AsyncSession, product: Product, quantity: int) -> None:
    """Take ``quantity`` off the shelf only if that much is still there."""
    result = await db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity, updated_at=utc_now())
        .returning(Product.stock)
        .execution_options(synchronize_session=False)
    )
    remaining = result.scalar_one_or_none()
    if remaining is None:
        available = await db.scalar(
            select(Product.stock).where(Product.id == product.id)
        )
        raise InsufficientStockError(product.name, available or 0, quantity)
    set_committed_value(product, "stock", remaining)


async def place_order(
    db: AsyncSession,
    request: OrderCreate,
    created_by: Optional[str] = None,
) -> Order:
    """Validate, price and persist an order. Returns the committed order."""
    store_id = request.store_id
    try:
        # Validation: nothing is written until every line checks out
        demand: dict = {}
        lines: list[OrderItem] = []
        for position, item in enumerate(request.items):
            product = await find_product(db, item, store_id)
            if product is None:
                raise ProductNotFoundError(item.label)
            if product.store_id != store_id:
                raise StoreMismatchError(product.name, store_id)

            _, requested = demand.get(product.id, (product, 0))
            requested += item.quantity
            if requested > product.stock:
                raise InsufficientStockError(product.name, product.stock, requested)
            demand[product.id] = (product, requested)

            lines.append(build_line(product, item, position))

        computed_subtotal = sum((line.line_total for line in lines), Decimal("0"))
        subtotal = (
            request.subtotal if request.subtotal is not None else computed_subtotal
        )
        if request.total_amount is not None:
            total = request.total_amount
        else:
            total = (
                subtotal
                - request.discount_amount
                + request.tax_amount
                + request.shipping_charge
            )
        if total <= 0:
            raise InvalidAmountError(total)

        is_cod = request.payment.method == PaymentMethod.COD
        payment_status = request.payment.status or (
            PaymentStatus.PENDING if is_cod else PaymentStatus.COMPLETED
        )

        # Persistence
        for product, quantity in demand.values():
            await decrement_stock(db, product, quantity)

        order = Order(
            store_id=store_id,
            reference=Order.generate_reference(),
            customer_name=request.customer.name,
            customer_email=str(request.customer.email).lower(),
            customer_phone=request.customer.phone,
            customer_address=request.customer.address.model_dump(),
            subtotal=subtotal,
            discount_amount=request.discount_amount,
            tax_amount=request.tax_amount,
            shipping_charge=request.shipping_charge,
            total_amount=total,
            payment_method=request.payment.method,
            payment_status=payment_status,
            payment_transaction_id=request.payment.transaction_id,
            paid_amount=Decimal("0") if is_cod else total,
            status=OrderStatus.PENDING if is_cod else OrderStatus.CONFIRMED,
            delivery=(
                request.delivery.model_dump(mode="json", exclude_none=True)
                if request.delivery
                else {}
            ),
            notes=request.notes,
            created_by=created_by,
            items=lines,
        )
        await assign_order_number(db, order)
        db.add(order)
        await db.commit()
    except StoreError as exc:
        await db.rollback()
        logger.warning("Order rejected for store %s: %s", store_id, exc.message)
        raise
    except Exception:
        await db.rollback()
        logger.exception("Order placement failed for store %s", store_id)
        raise

    logger.info(
        "Placed order %s (%s) for store %s: %d lines, total=%s, payment=%s",
        order.order_number,
        order.reference,
        store_id,
        len(lines),
        total,
        order.payment_method.value,
    )
    return order
