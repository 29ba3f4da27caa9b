"""Catalog operations: storefront queries and owner product management."""

import random
import time
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import DuplicateSkuError, NotFoundError
from libs.common.logging import get_logger
from services.store_service.models import Product, User
from services.store_service.schemas import ProductCreate, ProductUpdate
from services.store_service.services.directory import parse_uuid
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SORT_ORDERS = {
    "newest": (Product.created_at.desc(),),
    "price_low": (Product.price.asc(), Product.name.asc()),
    "price_high": (Product.price.desc(), Product.name.asc()),
    "name": (Product.name.asc(),),
}


def _matches(search: str, *columns):
    term = f"%{search.strip()}%"
    return or_(*(column.ilike(term) for column in columns))


async def _page(db: AsyncSession, query, order_by, page: int, limit: int):
    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar() or 0
    result = await db.execute(
        query.order_by(*order_by).offset((page - 1) * limit).limit(limit)
    )
    return list(result.scalars().all()), total


async def list_categories(
    db: AsyncSession, store_id: str, active_only: bool = False
) -> list[str]:
    query = select(Product.category).where(Product.store_id == store_id).distinct()
    if active_only:
        query = query.where(Product.is_active.is_(True))
    result = await db.execute(query.order_by(Product.category))
    return list(result.scalars().all())


# ============================================================================
# STOREFRONT
# ============================================================================


async def list_public_products(
    db: AsyncSession,
    store_id: str,
    *,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = "newest",
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Product], int]:
    """Active products of one store, filtered and sorted for the storefront."""
    query = select(Product).where(
        Product.store_id == store_id, Product.is_active.is_(True)
    )
    if category:
        query = query.where(Product.category == category)
    if search and search.strip():
        query = query.where(
            _matches(
                search,
                Product.name,
                Product.description,
                Product.category,
                Product.brand,
            )
        )
    return await _page(db, query, SORT_ORDERS.get(sort, SORT_ORDERS["newest"]), page, limit)


async def get_public_product(db: AsyncSession, product_id) -> Product:
    parsed = parse_uuid(product_id)
    product = await db.get(Product, parsed) if parsed else None
    if product is None or not product.is_active:
        raise NotFoundError("Product not found")
    return product


# ============================================================================
# OWNER CATALOG
# ============================================================================


def generate_sku(store_name: Optional[str]) -> str:
    """``<store prefix>-<6 timestamp digits><2 random digits>``, e.g. SHA-83715242."""
    prefix = (store_name or "").strip()[:3].upper() or "PRO"
    stamp = str(int(time.time() * 1000))[-6:]
    return f"{prefix}-{stamp}{random.randint(0, 99):02d}"


async def _ensure_sku_free(
    db: AsyncSession, store_id: str, sku: str, exclude_id=None
) -> None:
    query = select(Product.id).where(Product.store_id == store_id, Product.sku == sku)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise DuplicateSkuError(sku)


def _is_duplicate_sku(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the columns
    message = str(exc.orig)
    return (
        "unique_store_sku" in message
        or "store_products.store_id, store_products.sku" in message
    )


async def _commit_product(db: AsyncSession, product: Product) -> None:
    # Rollback expires loaded attributes, so read the SKU while it is still loaded
    sku = product.sku
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if _is_duplicate_sku(exc):
            raise DuplicateSkuError(sku) from exc
        raise
    await db.refresh(product)


async def list_owner_products(
    db: AsyncSession,
    store_id: str,
    *,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Product], int]:
    query = select(Product).where(Product.store_id == store_id)
    if category:
        query = query.where(Product.category == category)
    if search and search.strip():
        query = query.where(
            _matches(search, Product.name, Product.sku, Product.category, Product.brand)
        )
    return await _page(db, query, SORT_ORDERS["newest"], page, limit)


async def list_low_stock(db: AsyncSession, store_id: str) -> list[Product]:
    """Active products below their minimum stock level, emptiest first."""
    result = await db.execute(
        select(Product)
        .where(
            Product.store_id == store_id,
            Product.is_active.is_(True),
            Product.stock < Product.min_stock_level,
        )
        .order_by(Product.stock.asc(), Product.name.asc())
    )
    return list(result.scalars().all())


async def get_store_product(db: AsyncSession, store_id: str, product_id) -> Product:
    parsed = parse_uuid(product_id)
    product = await db.get(Product, parsed) if parsed else None
    if product is None or product.store_id != store_id:
        raise NotFoundError("Product not found")
    return product


async def create_product(db: AsyncSession, owner: User, data: ProductCreate) -> Product:
    sku = data.sku.strip().upper() if data.sku and data.sku.strip() else None
    sku = sku or generate_sku(owner.store_name)
    await _ensure_sku_free(db, owner.store_id, sku)

    product = Product(
        **data.model_dump(exclude={"sku"}),
        sku=sku,
        store_id=owner.store_id,
        created_by=owner.store_id,
    )
    db.add(product)
    await _commit_product(db, product)

    logger.info("Created product %s (%s) in store %s", product.id, sku, owner.store_id)
    return product


async def update_product(
    db: AsyncSession, owner: User, product_id, data: ProductUpdate
) -> Product:
    product = await get_store_product(db, owner.store_id, product_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("sku"):
        changes["sku"] = changes["sku"].upper()
        await _ensure_sku_free(db, owner.store_id, changes["sku"], exclude_id=product.id)
    for field, value in changes.items():
        setattr(product, field, value)
    product.updated_by = owner.store_id
    product.updated_at = utc_now()

    await _commit_product(db, product)
    return product


async def set_stock(db: AsyncSession, owner: User, product_id, stock: int) -> Product:
    product = await get_store_product(db, owner.store_id, product_id)
    previous = product.stock
    product.stock = stock
    product.updated_by = owner.store_id
    product.updated_at = utc_now()
    await db.commit()
    await db.refresh(product)

    logger.info("Stock for %s set %d -> %d", product.sku, previous, stock)
    return product


async def set_active(
    db: AsyncSession, owner: User, product_id, is_active: bool
) -> Product:
    product = await get_store_product(db, owner.store_id, product_id)
    product.is_active = is_active
    product.updated_by = owner.store_id
    product.updated_at = utc_now()
    await db.commit()
    await db.refresh(product)
    return product


async def delete_products(db: AsyncSession, owner: User, product_ids: list[str]) -> int:
    """Delete the listed products that belong to the owner's store."""
    ids = [parsed for parsed in map(parse_uuid, product_ids) if parsed is not None]
    if not ids:
        return 0

    result = await db.execute(
        delete(Product)
        .where(Product.id.in_(ids), Product.store_id == owner.store_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    logger.info("Deleted %d products from store %s", result.rowcount, owner.store_id)
    return result.rowcount
