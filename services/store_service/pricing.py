"""Price resolution for catalog products.

All arithmetic is done in ``Decimal``. ``resolve_price`` keeps full
precision; ``round_price`` is applied once, where a price is shown or
snapshotted onto an order line.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Coerce a numeric input to Decimal (floats via their repr)."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def resolve_price(
    base_price: Number,
    mrp: Optional[Number] = None,
    discount_percent: Optional[Number] = None,
) -> Decimal:
    """Compute the final sale price.

    A zero MRP or zero discount counts as absent:

    - MRP and discount: discount applies to the MRP
    - discount only: discount applies to the base price
    - otherwise: the base price
    """
    base = to_decimal(base_price)
    mrp = to_decimal(mrp)
    discount = to_decimal(discount_percent)

    if mrp and discount:
        return mrp - mrp * discount / HUNDRED
    if discount:
        return base - base * discount / HUNDRED
    return base


def round_price(value: Number) -> Decimal:
    """Round half-up to two decimal places."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
