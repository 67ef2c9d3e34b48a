from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional


CENT = Decimal("0.01")


def as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_currency(value: Any) -> Decimal:
    return as_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_number(value: Any) -> Optional[float]:
    """Convert a stored fixed-precision amount into the numeric value exposed to callers.

    Every read path goes through this function so the storage representation
    (``Decimal`` from ``Numeric`` columns, or decimal text on some drivers) never
    leaks past the service boundary.
    """
    if value is None:
        return None
    if isinstance(value, float):
        return value
    return float(quantize_currency(value))
