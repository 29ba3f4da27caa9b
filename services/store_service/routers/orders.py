"""Store orders router: placement, order history and status updates."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, get_optional_user
from libs.auth.models import AuthUser
from libs.common.errors import ValidationError
from libs.db.session import get_async_db
from services.store_service.models import OrderStatus
from services.store_service.policies import ensure_store_access
from services.store_service.schemas import (
    CustomerOrdersResponse,
    OrderCreate,
    OrderEnvelope,
    OrderListData,
    OrderListResponse,
    OrderPlacedData,
    OrderPlacedResponse,
    OrderResponse,
    OrderStatusUpdate,
    Pagination,
)
from services.store_service.services.order_numbers import (
    get_order,
    list_customer_orders,
    list_store_orders,
)
from services.store_service.services.order_placement import place_order
from services.store_service.services.order_status import update_order_status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["orders"])


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post(
    "/orders",
    response_model=OrderPlacedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    order_in: OrderCreate,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order. Guests may order; signed-in users are recorded as creator."""
    order = await place_order(
        db, order_in, created_by=current_user.user_id if current_user else None
    )
    return OrderPlacedResponse(data=OrderPlacedData.from_order(order))


# ============================================================================
# ORDER HISTORY
# ============================================================================


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    store_id: str = Query(..., alias="storeId"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    customer_email: Optional[str] = Query(None, alias="customerEmail"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List a store's orders (store owner only)."""
    await ensure_store_access(db, current_user, store_id)
    orders, total = await list_store_orders(
        db,
        store_id,
        status=status_filter,
        customer_email=customer_email,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return OrderListResponse(
        data=OrderListData(
            orders=[OrderResponse.from_order(o) for o in orders],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/orders/me", response_model=CustomerOrdersResponse)
async def list_my_orders(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Orders placed with the caller's email address, newest first."""
    if not current_user.email:
        raise ValidationError("Your account has no email address")
    orders = await list_customer_orders(db, current_user.email)
    return CustomerOrdersResponse(
        orders=[OrderResponse.from_order(o) for o in orders], count=len(orders)
    )


@router.get("/orders/{order_id}", response_model=OrderEnvelope)
async def get_order_detail(
    order_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Order detail for the store's owner or the customer who placed it."""
    order = await get_order(db, order_id)
    is_customer = bool(current_user.email) and (
        order.customer_email == current_user.email.lower()
    )
    if not is_customer:
        await ensure_store_access(db, current_user, order.store_id)
    return OrderEnvelope(order=OrderResponse.from_order(order))


# ============================================================================
# STATUS
# ============================================================================


@router.patch("/orders/{order_id}/status", response_model=OrderEnvelope)
async def change_order_status(
    order_id: str,
    update_in: OrderStatusUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Move an order through its lifecycle (store owner only)."""
    order = await update_order_status(db, order_id, update_in.status, current_user)
    return OrderEnvelope(
        message=f"Order status updated to {order.status.value}",
        order=OrderResponse.from_order(order),
    )
