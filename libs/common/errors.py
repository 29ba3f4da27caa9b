"""Tagged error taxonomy shared by the services.

Service code raises these; ``libs.common.error_handler`` turns them into
JSON envelopes at the HTTP boundary. Callers match on the class, never on
the message text.
"""

from typing import Any, Optional


class StoreError(Exception):
    """Base exception for all service errors."""

    status_code = 500
    tag = "internal"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(StoreError):
    """Missing or malformed input."""

    status_code = 400
    tag = "validation"


class NotFoundError(StoreError):
    """A referenced entity does not exist."""

    status_code = 404
    tag = "not_found"


class ConflictError(StoreError):
    """The request collides with existing state (duplicates, illegal moves)."""

    status_code = 409
    tag = "conflict"


class AuthenticationError(StoreError):
    """Caller is not authenticated or lacks the required role."""

    status_code = 401
    tag = "unauthenticated"


class PermissionDeniedError(StoreError):
    """Caller is authenticated but may not act on this resource."""

    status_code = 403
    tag = "forbidden"


class InternalError(StoreError):
    """Unclassified persistence or runtime failure."""


# ---------------------------------------------------------------------------
# Order / catalog variants
# ---------------------------------------------------------------------------


class ProductNotFoundError(NotFoundError):
    def __init__(self, name: str, details: Optional[dict[str, Any]] = None):
        self.name = name
        super().__init__(
            f'Product "{name}" not found in our inventory. Please refresh cart.',
            details,
        )


class StoreMismatchError(ValidationError):
    def __init__(self, name: str, store_id: str):
        self.name = name
        self.store_id = store_id
        super().__init__(
            f'Product "{name}" is not available in your selected store.',
            {"storeId": store_id},
        )


class InsufficientStockError(ValidationError):
    def __init__(self, name: str, available: int, requested: int):
        self.name = name
        self.available = available
        self.requested = requested
        super().__init__(
            f'Only {available} units of "{name}" available. Please update quantity.',
            {"available": available, "requested": requested},
        )


class InvalidAmountError(ValidationError):
    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__("Invalid total amount", {"totalAmount": str(amount)})


class InvalidStatusError(ValidationError):
    def __init__(self, status: Any):
        self.status = status
        super().__init__(f"Invalid status: {status}")


class IllegalTransitionError(ConflictError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move order from {current} to {target}",
            {"currentStatus": current, "requestedStatus": target},
        )


class DuplicateSkuError(ConflictError):
    def __init__(self, sku: str):
        self.sku = sku
        super().__init__("SKU already exists. Please use a different SKU.", {"sku": sku})
