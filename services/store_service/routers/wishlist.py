"""Wishlist router for signed-in users."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    WishlistAdd,
    WishlistAddedItem,
    WishlistAddResponse,
    WishlistItemResponse,
    WishlistRemoveResponse,
    WishlistResponse,
)
from services.store_service.services import wishlist_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/user/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistResponse)
async def get_wishlist(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """The caller's saved products, newest first."""
    entries = await wishlist_ops.list_wishlist(db, current_user.user_id)
    items = [WishlistItemResponse.from_entry(entry) for entry in entries]
    return WishlistResponse(wishlist=items, count=len(items))


@router.post("", response_model=WishlistAddResponse)
async def add_wishlist_item(
    wishlist_in: WishlistAdd,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    entry, product, is_new = await wishlist_ops.add_to_wishlist(
        db, current_user.user_id, wishlist_in.product_id
    )
    return WishlistAddResponse(
        message="Added to wishlist" if is_new else "Already in wishlist",
        is_new=is_new,
        wishlist_item=WishlistAddedItem(
            id=entry.id, product_id=product.id, name=product.name, price=product.price
        ),
    )


@router.delete("/{item_id}", response_model=WishlistRemoveResponse)
async def remove_wishlist_item(
    item_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    deleted_id = await wishlist_ops.remove_from_wishlist(
        db, current_user.user_id, item_id
    )
    return WishlistRemoveResponse(deleted_id=deleted_id)
