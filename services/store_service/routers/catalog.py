"""Public storefront catalog router."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from libs.db.session import get_async_db
from services.store_service.schemas import (
    Pagination,
    PublicProductEnvelope,
    PublicProductListResponse,
    PublicProductResponse,
)
from services.store_service.services.catalog_ops import (
    get_public_product,
    list_categories,
    list_public_products,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["catalog"])


@router.get("/products/public", response_model=PublicProductListResponse)
async def browse_products(
    store_id: str = Query(..., alias="storeId"),
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Literal["newest", "price_low", "price_high", "name"] = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """List a store's active products with filters, sorting and pagination."""
    products, total = await list_public_products(
        db,
        store_id,
        category=category,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    categories = await list_categories(db, store_id, active_only=True)
    return PublicProductListResponse(
        products=[PublicProductResponse.model_validate(p) for p in products],
        categories=categories,
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/products/public/{product_id}", response_model=PublicProductEnvelope)
async def get_public_product_detail(
    product_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    """Active product detail."""
    product = await get_public_product(db, product_id)
    return PublicProductEnvelope(product=PublicProductResponse.model_validate(product))
