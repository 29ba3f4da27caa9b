"""Store service routers package."""

from services.store_service.routers.admin_catalog import router as admin_catalog_router
from services.store_service.routers.catalog import router as catalog_router
from services.store_service.routers.orders import router as orders_router
from services.store_service.routers.wishlist import router as wishlist_router

__all__ = [
    "admin_catalog_router",
    "catalog_router",
    "orders_router",
    "wishlist_router",
]
