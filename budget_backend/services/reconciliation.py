from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from ..constants import AMOUNT_TOLERANCE
from .exceptions import AmountMismatch
from .money import as_decimal, quantize_currency


@dataclass(frozen=True)
class ReconciliationResult:
    expected: Decimal
    actual: Decimal
    difference: Decimal

    @property
    def is_match(self) -> bool:
        return self.difference <= AMOUNT_TOLERANCE


def line_total(quantity: Any, unit_price: Any) -> Decimal:
    return quantize_currency(Decimal(int(quantity)) * quantize_currency(unit_price))


def line_items_total(line_items: Iterable[Any]) -> Decimal:
    """Sum ``quantity * unit_price`` over objects or mappings exposing both."""
    total = Decimal("0")
    for item in line_items:
        if isinstance(item, dict):
            quantity, unit_price = item["quantity"], item["unit_price"]
        else:
            quantity, unit_price = item.quantity, item.unit_price
        total += line_total(quantity, unit_price)
    return quantize_currency(total)


def reconcile(requested_amount: Any, line_items: Iterable[Any]) -> ReconciliationResult:
    expected = line_items_total(line_items)
    actual = as_decimal(requested_amount)
    return ReconciliationResult(expected=expected, actual=actual, difference=abs(actual - expected))


def ensure_reconciled(requested_amount: Any, line_items: Iterable[Any]) -> ReconciliationResult:
    result = reconcile(requested_amount, line_items)
    if not result.is_match:
        raise AmountMismatch(expected=result.expected, actual=result.actual)
    return result
