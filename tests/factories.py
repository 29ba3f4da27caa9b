"""
Model factories and auth helpers for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    owner = UserFactory.create_owner(store_name="Sharma Kirana")
    product = ProductFactory.create(store_id=owner.store_id, stock=10)
    db_session.add_all([owner, product])
    await db_session.commit()
"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


def _unique_sku() -> str:
    return f"SKU-{uuid.uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# User directory
# ---------------------------------------------------------------------------


class UserFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import User, UserRole

        defaults = {
            "id": uuid.uuid4(),
            "name": "Test Customer",
            "email": _unique_email(),
            "phone": "9876543210",
            "role": UserRole.USER,
            "is_active": True,
            "email_verified": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return User(**defaults)

    @staticmethod
    def create_owner(**overrides):
        from services.store_service.models import UserRole

        defaults = {
            "name": "Test Owner",
            "role": UserRole.OWNER,
            "store_name": "Sharma Kirana",
        }
        defaults.update(overrides)
        return UserFactory.create(**defaults)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Product, ProductUnit

        store_id = overrides.pop("store_id", None) or str(uuid.uuid4())
        defaults = {
            "id": uuid.uuid4(),
            "store_id": store_id,
            "name": f"Product {uuid.uuid4().hex[:6]}",
            "sku": _unique_sku(),
            "category": "Groceries",
            "price": Decimal("100.00"),
            "cost_price": Decimal("80.00"),
            "mrp": None,
            "discount": Decimal("0"),
            "tax_rate": Decimal("0"),
            "stock": 10,
            "min_stock_level": 5,
            "unit": ProductUnit.PIECE,
            "images": [],
            "is_active": True,
            "is_featured": False,
            "created_by": store_id,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Product(**defaults)


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


def order_payload(store_id: str, items: list[dict], **overrides) -> dict:
    """A valid POST /orders body for ``store_id``."""
    payload = {
        "storeId": store_id,
        "customer": {
            "name": "Asha Rao",
            "email": "asha@example.com",
            "phone": "9123456780",
            "address": {
                "street": "12 MG Road",
                "city": "Bengaluru",
                "state": "Karnataka",
                "pincode": "560001",
            },
        },
        "items": items,
        "payment": {"method": "cod"},
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def make_auth_user(user=None, **overrides):
    """AuthUser for a directory user (or a bare identity when ``user`` is None)."""
    from libs.auth.models import AuthUser

    claims = {"sub": str(uuid.uuid4()), "email": _unique_email(), "role": "user"}
    if user is not None:
        claims = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
        }
    claims.update(overrides)
    return AuthUser(**claims)


@contextmanager
def override_auth(app, auth_user):
    """Authenticate every request made inside the block as ``auth_user``."""
    from libs.auth.dependencies import get_current_user, get_optional_user

    app.dependency_overrides[get_current_user] = lambda: auth_user
    app.dependency_overrides[get_optional_user] = lambda: auth_user
    try:
        yield auth_user
    finally:
        app.dependency_overrides.pop(get_current_user, None)
        app.dependency_overrides.pop(get_optional_user, None)
