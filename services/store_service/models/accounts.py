"""User directory model: store owners and customers."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import StoreType, UserRole, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class User(Base):
    """Accounts. Owners double as tenants: their id is the store id."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, values_callable=enum_values, name="user_role_enum"),
        default=UserRole.USER,
        server_default="user",
    )

    # Store profile (owners only)
    store_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    store_type: Mapped[StoreType] = mapped_column(
        SAEnum(StoreType, values_callable=enum_values, name="store_type_enum"),
        default=StoreType.KIRANA,
        server_default="kirana",
    )
    gst_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def store_id(self) -> str:
        return str(self.id)

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"
