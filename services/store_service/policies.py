"""Authorization policy for store-scoped operations.

Token claims identify the caller; the user directory decides. Every owner
endpoint goes through ``require_store_owner`` or ``ensure_store_access``.
"""

from libs.auth.models import AuthUser
from libs.common.errors import AuthenticationError, PermissionDeniedError
from libs.common.logging import get_logger
from services.store_service.models import User
from services.store_service.services.directory import get_user_by_id
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def require_store_owner(db: AsyncSession, user: AuthUser) -> User:
    """Return the caller's directory record if it is an active store owner."""
    owner = await get_user_by_id(db, user.user_id)
    if owner is None or not owner.is_active or not owner.is_owner:
        logger.warning("Rejected non-owner %s on store endpoint", user.user_id)
        raise AuthenticationError("Access denied. Store owner privileges required.")
    return owner


async def ensure_store_access(db: AsyncSession, user: AuthUser, store_id: str) -> User:
    """Like ``require_store_owner``, and the owner must own ``store_id``."""
    owner = await require_store_owner(db, user)
    if owner.store_id != str(store_id):
        logger.warning(
            "Owner %s denied access to store %s", owner.store_id, store_id
        )
        raise PermissionDeniedError("Access denied to this store")
    return owner
