"""Unit tests for the order placement workflow.

Tests call place_order directly with the db_session fixture.
"""

import uuid
from decimal import Decimal

import pytest
from libs.common.errors import (
    InsufficientStockError,
    InvalidAmountError,
    ProductNotFoundError,
    StoreMismatchError,
)
from services.store_service.models import (
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from services.store_service.schemas import OrderCreate
from services.store_service.services.order_placement import (
    decrement_stock,
    place_order,
)
from sqlalchemy import func, select
from tests.factories import ProductFactory, UserFactory, order_payload

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _seed_store(db, *product_fields):
    """Insert an owner and one product per kwargs dict."""
    owner = UserFactory.create_owner()
    products = [
        ProductFactory.create(store_id=owner.store_id, **fields)
        for fields in product_fields
    ]
    db.add(owner)
    db.add_all(products)
    await db.commit()
    return owner, products


def _request(store_id, items, **overrides) -> OrderCreate:
    return OrderCreate.model_validate(order_payload(store_id, items, **overrides))


async def _order_count(db) -> int:
    result = await db.execute(select(func.count()).select_from(Order))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_place_order_snapshots_lines_and_totals(db_session):
    owner, (rice, dal) = await _seed_store(
        db_session,
        {"name": "Basmati Rice", "price": Decimal("100"), "mrp": Decimal("120"),
         "discount": Decimal("10"), "stock": 10},
        {"name": "Toor Dal", "price": Decimal("50"), "stock": 5},
    )

    order = await place_order(
        db_session,
        _request(
            owner.store_id,
            [
                {"productId": str(rice.id), "quantity": 2},
                {"productId": str(dal.id), "quantity": 1},
            ],
        ),
    )

    assert [item.name for item in order.items] == ["Basmati Rice", "Toor Dal"]
    assert order.items[0].unit_price == Decimal("108.00")
    assert order.items[0].line_total == Decimal("216.00")
    assert order.items[0].discount == Decimal("10")
    assert order.items[1].line_total == Decimal("50")
    assert order.subtotal == sum(item.line_total for item in order.items)
    assert order.subtotal == Decimal("266.00")
    assert order.total_amount == Decimal("266.00")
    assert order.customer_email == "asha@example.com"
    assert order.reference.startswith("ON-")

    await db_session.refresh(rice)
    await db_session.refresh(dal)
    assert rice.stock == 8
    assert dal.stock == 4


@pytest.mark.asyncio
@pytest.mark.unit
async def test_order_number_format(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})

    order = await place_order(
        db_session, _request(owner.store_id, [{"productId": str(product.id), "quantity": 1}])
    )

    assert order.order_number.startswith("ORD")
    assert len(order.order_number) == 13
    assert order.order_number.endswith("0001")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cod_order_is_pending_and_unpaid(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})

    order = await place_order(
        db_session, _request(owner.store_id, [{"productId": str(product.id), "quantity": 1}])
    )

    assert order.payment_method == PaymentMethod.COD
    assert order.status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.PENDING
    assert order.paid_amount == Decimal("0")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sku_lookup_with_charges_and_online_payment(db_session):
    """2 x SUG-5KG at 250 with tax 25, shipping 40 and discount 10."""
    owner, (sugar,) = await _seed_store(
        db_session,
        {"name": "Sugar 5kg", "sku": "SUG-5KG", "price": Decimal("250"), "stock": 10},
    )

    order = await place_order(
        db_session,
        _request(
            owner.store_id,
            [{"sku": "sug-5kg", "quantity": 2}],
            taxAmount=25,
            shippingCharge=40,
            discountAmount=10,
            payment={"method": "upi", "transactionId": "UPI-123"},
        ),
    )

    assert order.subtotal == Decimal("500.00")
    assert order.total_amount == Decimal("555.00")
    assert order.status == OrderStatus.CONFIRMED
    assert order.payment_status == PaymentStatus.COMPLETED
    assert order.paid_amount == Decimal("555.00")
    assert order.payment_transaction_id == "UPI-123"

    await db_session.refresh(sugar)
    assert sugar.stock == 8


@pytest.mark.asyncio
@pytest.mark.unit
async def test_name_lookup_is_scoped_to_store(db_session):
    owner, (mine,) = await _seed_store(db_session, {"name": "Amul Butter", "stock": 3})
    db_session.add(ProductFactory.create(name="Amul Butter", stock=50))
    await db_session.commit()

    order = await place_order(
        db_session, _request(owner.store_id, [{"name": "Amul Butter", "quantity": 1}])
    )

    assert order.items[0].product_id == mine.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_supplied_unit_price_and_line_overrides(db_session):
    owner, (product,) = await _seed_store(
        db_session, {"price": Decimal("100"), "discount": Decimal("5"),
                     "image": "catalog.png", "stock": 5}
    )

    order = await place_order(
        db_session,
        _request(
            owner.store_id,
            [{"productId": str(product.id), "quantity": 2, "unitPrice": 90,
              "discount": 0, "image": "cart.png", "name": "Client Name"}],
        ),
    )

    line = order.items[0]
    assert line.unit_price == Decimal("90.00")
    assert line.line_total == Decimal("180.00")
    assert line.discount == Decimal("0")
    assert line.image == "cart.png"
    assert line.name == product.name


@pytest.mark.asyncio
@pytest.mark.unit
async def test_created_by_is_recorded(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})

    order = await place_order(
        db_session,
        _request(owner.store_id, [{"productId": str(product.id), "quantity": 1}]),
        created_by="user-42",
    )

    assert order.created_by == "user-42"


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_same_product_on_two_lines_is_decremented_once_in_total(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})
    items = [
        {"productId": str(product.id), "quantity": 3},
        {"sku": product.sku, "quantity": 2},
    ]

    await place_order(db_session, _request(owner.store_id, items))

    await db_session.refresh(product)
    assert product.stock == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_accumulated_quantity_over_stock_is_rejected(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})
    items = [
        {"productId": str(product.id), "quantity": 3},
        {"productId": str(product.id), "quantity": 3},
    ]

    with pytest.raises(InsufficientStockError) as exc_info:
        await place_order(db_session, _request(owner.store_id, items))

    assert exc_info.value.available == 5
    assert exc_info.value.requested == 6
    await db_session.refresh(product)
    assert product.stock == 5
    assert await _order_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_insufficient_stock_message_names_available_units(db_session):
    owner, (product,) = await _seed_store(db_session, {"name": "Ghee 1L", "stock": 2})

    with pytest.raises(InsufficientStockError) as exc_info:
        await place_order(
            db_session,
            _request(owner.store_id, [{"productId": str(product.id), "quantity": 3}]),
        )

    assert exc_info.value.message == (
        'Only 2 units of "Ghee 1L" available. Please update quantity.'
    )
    await db_session.refresh(product)
    assert product.stock == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_decrement_stock_refuses_to_go_negative(db_session):
    """The conditional update is the last line of defence against races."""
    _, (product,) = await _seed_store(db_session, {"stock": 1})

    with pytest.raises(InsufficientStockError) as exc_info:
        await decrement_stock(db_session, product, 2)
    await db_session.rollback()

    assert exc_info.value.available == 1
    await db_session.refresh(product)
    assert product.stock == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_decrement_stock_updates_loaded_product(db_session):
    _, (product,) = await _seed_store(db_session, {"stock": 4})

    await decrement_stock(db_session, product, 3)

    assert product.stock == 1


# ---------------------------------------------------------------------------
# Rejections leave no trace
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_sku_rejects_whole_order(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})
    items = [
        {"productId": str(product.id), "quantity": 1},
        {"sku": "NOPE", "quantity": 1},
    ]

    with pytest.raises(ProductNotFoundError) as exc_info:
        await place_order(db_session, _request(owner.store_id, items))

    assert exc_info.value.status_code == 404
    assert '"NOPE"' in exc_info.value.message
    await db_session.refresh(product)
    assert product.stock == 5
    assert await _order_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unparseable_product_id_falls_back_to_not_found(db_session):
    owner, _ = await _seed_store(db_session, {"stock": 5})

    with pytest.raises(ProductNotFoundError):
        await place_order(
            db_session, _request(owner.store_id, [{"productId": "abc", "quantity": 1}])
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_product_from_another_store_is_rejected(db_session):
    _, (product,) = await _seed_store(db_session, {"stock": 5})
    other_store = str(uuid.uuid4())

    with pytest.raises(StoreMismatchError):
        await place_order(
            db_session,
            _request(other_store, [{"productId": str(product.id), "quantity": 1}]),
        )

    await db_session.refresh(product)
    assert product.stock == 5
    assert await _order_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_non_positive_total_is_rejected(db_session):
    owner, (product,) = await _seed_store(
        db_session, {"price": Decimal("100"), "stock": 5}
    )

    with pytest.raises(InvalidAmountError):
        await place_order(
            db_session,
            _request(
                owner.store_id,
                [{"productId": str(product.id), "quantity": 1}],
                discountAmount=150,
            ),
        )

    await db_session.refresh(product)
    assert product.stock == 5
    assert await _order_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_supplied_zero_total_is_rejected(db_session):
    owner, (product,) = await _seed_store(db_session, {"stock": 5})

    with pytest.raises(InvalidAmountError):
        await place_order(
            db_session,
            _request(
                owner.store_id,
                [{"productId": str(product.id), "quantity": 1}],
                totalAmount=0,
            ),
        )
