"""Order repository: numbering and queries.

Order numbers look like ``ORD2610180001``: prefix, the business date as
YYMMDD, then a 4-digit serial that restarts every local day per store. The
serial comes from one atomic upsert on ``store_order_counters`` so two
concurrent placements can never read the same value.
"""

from datetime import date, datetime
from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import local_day_bounds, local_today
from libs.common.errors import InternalError, NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.store_service.models import Order, OrderCounter, OrderStatus
from services.store_service.services.directory import parse_uuid
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


# ---------------------------------------------------------------------------
# Numbering
# ---------------------------------------------------------------------------


def business_date(now: Optional[datetime] = None) -> date:
    """The store's calendar day for ``now`` (defaults to the current time)."""
    return local_today(now)


def format_order_number(day: date, serial: int) -> str:
    prefix = get_settings().ORDER_NUMBER_PREFIX
    return f"{prefix}{day:%y%m%d}{serial:04d}"


async def next_order_serial(db: AsyncSession, store_id: str, day: date) -> int:
    """Atomically bump and return the serial for ``(store_id, day)``.

    Runs inside the caller's transaction; rolling back releases the number.
    """
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise InternalError(f"Order counters are not supported on {dialect}")

    stmt = insert(OrderCounter).values(
        store_id=store_id, business_date=day, last_serial=1
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["store_id", "business_date"],
        set_={"last_serial": OrderCounter.last_serial + 1},
    ).returning(OrderCounter.last_serial)

    result = await db.execute(stmt)
    return result.scalar_one()


async def assign_order_number(
    db: AsyncSession, order: Order, now: Optional[datetime] = None
) -> str:
    """Give ``order`` its number. An order that already has one keeps it."""
    if order.order_number:
        return order.order_number

    day = business_date(now)
    serial = await next_order_serial(db, order.store_id, day)
    order.order_number = format_order_number(day, serial)
    logger.debug("Assigned %s to store %s", order.order_number, order.store_id)
    return order.order_number


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_order(db: AsyncSession, order_id) -> Order:
    """Load an order with its lines.

    Raises ValidationError for a malformed id and NotFoundError when absent.
    """
    parsed = parse_uuid(order_id)
    if parsed is None:
        raise ValidationError("Invalid order ID")

    result = await db.execute(
        select(Order).where(Order.id == parsed).options(selectinload(Order.items))
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError("Order not found")
    return order


async def list_store_orders(
    db: AsyncSession,
    store_id: str,
    *,
    status: Optional[OrderStatus] = None,
    customer_email: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Order], int]:
    """Newest-first page of a store's orders and the total match count.

    Date bounds are inclusive local calendar days.
    """
    query = select(Order).where(Order.store_id == store_id)
    if status is not None:
        query = query.where(Order.status == status)
    if customer_email:
        query = query.where(Order.customer_email == customer_email.strip().lower())
    if start_date is not None:
        query = query.where(Order.created_at >= local_day_bounds(start_date)[0])
    if end_date is not None:
        query = query.where(Order.created_at < local_day_bounds(end_date)[1])

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar_one()

    query = (
        query.options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def list_customer_orders(
    db: AsyncSession, email: str, limit: int = 50
) -> list[Order]:
    """A customer's most recent orders across all stores."""
    result = await db.execute(
        select(Order)
        .where(Order.customer_email == email.strip().lower())
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())

