from decimal import Decimal

import pytest

from budget_backend.services.exceptions import AmountMismatch
from budget_backend.services.reconciliation import ensure_reconciled, line_total, line_items_total, reconcile


def test_line_total_rounds_unit_price_to_cents_before_multiplying():
    assert line_total(10, Decimal("100.00")) == Decimal("1000.00")
    assert line_total(3, "19.995") == Decimal("60.00")
    assert line_total(1000, Decimal("0.005")) == Decimal("10.00")


def test_line_items_total_accepts_mappings_and_objects():
    class Item:
        quantity = 5
        unit_price = Decimal("300.00")

    total = line_items_total([{"quantity": 10, "unit_price": Decimal("100.00")}, Item()])

    assert total == Decimal("2500.00")


def test_reconcile_matches_within_one_cent():
    items = [{"quantity": 3, "unit_price": Decimal("33.33")}]

    assert reconcile(Decimal("100.00"), items).is_match
    assert reconcile(Decimal("99.98"), items).is_match
    assert not reconcile(Decimal("100.01"), items).is_match


def test_ensure_reconciled_raises_with_expected_and_actual():
    items = [
        {"quantity": 2, "unit_price": Decimal("400.00")},
        {"quantity": 1, "unit_price": Decimal("400.00")},
    ]

    with pytest.raises(AmountMismatch, match="(?i)requested amount does not match") as excinfo:
        ensure_reconciled(Decimal("1500.00"), items)

    assert excinfo.value.expected == Decimal("1200.00")
    assert excinfo.value.actual == Decimal("1500.00")
