"""Wishlist operations for signed-in users."""

import uuid
from typing import Optional

from libs.common.errors import NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.store_service.models import Product, WishlistItem
from services.store_service.services.directory import parse_uuid
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

logger = get_logger(__name__)


async def list_wishlist(db: AsyncSession, user_id: str) -> list[WishlistItem]:
    """The user's saved products, most recently added first.

    Entries whose product has been removed from the catalog are skipped.
    """
    result = await db.execute(
        select(WishlistItem)
        .join(WishlistItem.product)
        .options(contains_eager(WishlistItem.product))
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.added_at.desc())
    )
    return list(result.scalars().all())


async def _find_entry(
    db: AsyncSession, user_id: str, product_id: uuid.UUID
) -> Optional[WishlistItem]:
    result = await db.execute(
        select(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
    )
    return result.scalar_one_or_none()


async def add_to_wishlist(
    db: AsyncSession, user_id: str, product_id: Optional[str]
) -> tuple[WishlistItem, Product, bool]:
    """Save a product for the user.

    Returns the entry, its product and whether the entry is new. Adding a
    product that is already saved is not an error.
    """
    if not product_id or not str(product_id).strip():
        raise ValidationError("Product ID is required")

    parsed = parse_uuid(str(product_id).strip())
    product = await db.get(Product, parsed) if parsed else None
    if product is None:
        raise NotFoundError("Product not found")

    existing = await _find_entry(db, user_id, product.id)
    if existing is not None:
        return existing, product, False

    entry = WishlistItem(user_id=user_id, product_id=product.id)
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request saved the same product first
        await db.rollback()
        existing = await _find_entry(db, user_id, parsed)
        if existing is None:
            raise
        return existing, await db.get(Product, parsed), False

    logger.info("User %s added product %s to wishlist", user_id, product.id)
    return entry, product, True


async def remove_from_wishlist(db: AsyncSession, user_id: str, item_id) -> uuid.UUID:
    """Delete one of the user's wishlist entries and return its id."""
    parsed = parse_uuid(item_id)
    if parsed is None:
        raise ValidationError("Invalid wishlist item ID")

    entry = await db.get(WishlistItem, parsed)
    if entry is None or entry.user_id != user_id:
        raise NotFoundError("Wishlist item not found")

    await db.delete(entry)
    await db.commit()

    logger.info("User %s removed wishlist item %s", user_id, parsed)
    return parsed
