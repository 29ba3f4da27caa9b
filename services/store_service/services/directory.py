"""User directory lookups."""

import uuid
from typing import Optional

from services.store_service.models import User
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


def parse_uuid(value) -> Optional[uuid.UUID]:
    """Return the UUID for ``value`` or None when it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


async def get_user_by_id(db: AsyncSession, user_id) -> Optional[User]:
    parsed = parse_uuid(user_id)
    if parsed is None:
        return None
    return await db.get(User, parsed)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()
