"""Owner catalog router: products, stock and availability for the owner's store."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from libs.db.session import get_async_db
from services.store_service.models import User
from services.store_service.routers._helpers import current_store_owner
from services.store_service.schemas import (
    CategoryListResponse,
    Pagination,
    ProductCreate,
    ProductDeleteRequest,
    ProductDeleteResponse,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductStatusUpdate,
    ProductUpdate,
    StockUpdate,
)
from services.store_service.services import catalog_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["owner-catalog"])


# ============================================================================
# LISTING
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """All products of the owner's store, including inactive ones."""
    products, total = await catalog_ops.list_owner_products(
        db, owner.store_id, category=category, search=search, page=page, limit=limit
    )
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/products/categories", response_model=CategoryListResponse)
async def list_product_categories(
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    categories = await catalog_ops.list_categories(db, owner.store_id)
    return CategoryListResponse(categories=categories)


@router.get("/products/low-stock", response_model=ProductListResponse)
async def list_low_stock_products(
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Active products below their minimum stock level."""
    products = await catalog_ops.list_low_stock(db, owner.store_id)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        pagination=Pagination.build(1, max(len(products), 1), len(products)),
    )


# ============================================================================
# PRODUCTS
# ============================================================================


@router.post(
    "/products", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED
)
async def create_product(
    product_in: ProductCreate,
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    product = await catalog_ops.create_product(db, owner, product_in)
    return ProductEnvelope(
        message="Product created successfully",
        product=ProductResponse.model_validate(product),
    )


@router.delete("/products", response_model=ProductDeleteResponse)
async def delete_products(
    delete_in: ProductDeleteRequest = Body(...),
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete several products at once. Ids from other stores are ignored."""
    deleted = await catalog_ops.delete_products(db, owner, delete_in.product_ids)
    return ProductDeleteResponse(
        message=f"{deleted} product(s) deleted successfully", deleted_count=deleted
    )


@router.get("/products/{product_id}", response_model=ProductEnvelope)
async def get_product(
    product_id: str,
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    product = await catalog_ops.get_store_product(db, owner.store_id, product_id)
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.patch("/products/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    product_in: ProductUpdate,
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    product = await catalog_ops.update_product(db, owner, product_id, product_in)
    return ProductEnvelope(
        message="Product updated successfully",
        product=ProductResponse.model_validate(product),
    )


@router.patch("/products/{product_id}/stock", response_model=ProductEnvelope)
async def update_stock(
    product_id: str,
    stock_in: StockUpdate,
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Set the absolute stock level."""
    product = await catalog_ops.set_stock(db, owner, product_id, stock_in.stock)
    return ProductEnvelope(
        message="Stock updated successfully",
        product=ProductResponse.model_validate(product),
    )


@router.patch("/products/{product_id}/status", response_model=ProductEnvelope)
async def update_product_status(
    product_id: str,
    status_in: ProductStatusUpdate,
    owner: User = Depends(current_store_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Show or hide a product on the storefront."""
    product = await catalog_ops.set_active(db, owner, product_id, status_in.is_active)
    state = "activated" if product.is_active else "deactivated"
    return ProductEnvelope(
        message=f"Product {state} successfully",
        product=ProductResponse.model_validate(product),
    )
