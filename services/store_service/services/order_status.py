"""Order status workflow."""

from typing import Optional

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.errors import (
    IllegalTransitionError,
    InvalidStatusError,
    ValidationError,
)
from libs.common.logging import get_logger
from services.store_service.models import Order, OrderStatus
from services.store_service.policies import ensure_store_access
from services.store_service.services.order_numbers import get_order
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.RETURNED})

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED}
    ),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.CANCELLED}
    ),
    OrderStatus.DELIVERED: frozenset({OrderStatus.RETURNED, OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}


def parse_status(value: Optional[str]) -> OrderStatus:
    if value is None or not str(value).strip():
        raise ValidationError("Status is required")
    try:
        return OrderStatus(str(value).strip())
    except ValueError:
        raise InvalidStatusError(value)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


async def update_order_status(
    db: AsyncSession,
    order_id,
    status: Optional[str],
    actor: AuthUser,
) -> Order:
    """Move an order to ``status`` on behalf of the store's owner.

    Transition legality is only checked when ENFORCE_ORDER_TRANSITIONS is on.
    """
    target = parse_status(status)
    order = await get_order(db, order_id)
    await ensure_store_access(db, actor, order.store_id)

    current = order.status
    if get_settings().ENFORCE_ORDER_TRANSITIONS and not can_transition(
        current, target
    ):
        logger.warning(
            "Illegal transition for order %s: %s -> %s",
            order.order_number,
            current.value,
            target.value,
        )
        raise IllegalTransitionError(current.value, target.value)

    if current == target:
        return order

    now = utc_now()
    order.status = target
    order.updated_at = now
    order.updated_by = actor.user_id
    if target == OrderStatus.DELIVERED:
        order.delivered_at = now
        order.delivery = {**(order.delivery or {}), "delivered_date": now.isoformat()}
    elif target == OrderStatus.CANCELLED:
        order.cancelled_at = now

    await db.commit()

    logger.info(
        "Order %s status %s -> %s by %s",
        order.order_number,
        current.value,
        target.value,
        actor.user_id,
    )
    return order
