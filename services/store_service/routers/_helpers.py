"""Shared dependencies for store routers."""

from fastapi import Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import User
from services.store_service.policies import require_store_owner
from sqlalchemy.ext.asyncio import AsyncSession


async def current_store_owner(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """Resolve the caller to an active store owner (401 otherwise)."""
    return await require_store_owner(db, current_user)
