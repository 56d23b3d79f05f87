from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import pytest

from invoicer.core.invoice import InvoiceDraft, LineItem, draft_from_rows
from invoicer.core.totals import TAX_RATE, Totals, recompute


def test_single_consulting_item() -> None:
    draft = draft_from_rows("Client", [{"description": "Consulting", "quantity": 10, "rate": "100.00"}])

    assert draft.items[0].amount == Decimal("1000.00")
    assert draft.totals == Totals(Decimal("1000.00"), Decimal("100.00"), Decimal("1100.00"))


def test_two_items_with_cents() -> None:
    draft = draft_from_rows("Client", [
        {"quantity": 3, "rate": "50.00"},
        {"quantity": 1, "rate": "25.50"},
    ])

    assert [it.amount for it in draft.items] == [Decimal("150.00"), Decimal("25.50")]
    assert draft.subtotal == Decimal("175.50")
    assert draft.tax == Decimal("17.55")
    assert draft.total == Decimal("193.05")


def test_recompute_is_idempotent() -> None:
    items = [LineItem("1", "a", 7, Decimal("13.37")), LineItem("2", "b", 2, Decimal("0.99"))]
    first = recompute(items)
    second = recompute(items)
    assert first == second
    assert first.subtotal == sum((it.amount for it in items), Decimal("0"))
    assert first.tax == (first.subtotal * TAX_RATE).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    assert first.total == first.subtotal + first.tax


def test_zero_quantity_or_rate_contributes_nothing() -> None:
    items = [LineItem("1", "free", 0, Decimal("99.00")), LineItem("2", "gift", 5, Decimal("0"))]
    assert recompute(items) == Totals(Decimal("0"), Decimal("0.00"), Decimal("0.00"))


def test_calculator_passes_negative_amounts_through() -> None:
    class Credit:
        amount = Decimal("-20.00")

    totals = recompute([LineItem("1", "x", 1, Decimal("100")), Credit()])
    assert totals.subtotal == Decimal("80.00")
    assert totals.tax == Decimal("8.00")
    assert totals.total == Decimal("88.00")


def test_calculator_trusts_item_amounts() -> None:
    class Fixed:
        def __init__(self, amount: str) -> None:
            self.amount = Decimal(amount)

    totals = recompute([Fixed("10.00"), Fixed("5.25")])
    assert totals.subtotal == Decimal("15.25")
    assert totals.tax == Decimal("1.53")
    assert totals.total == Decimal("16.78")


def test_fresh_draft_totals_are_zero() -> None:
    draft = InvoiceDraft()
    assert len(draft.items) == 1
    assert draft.total == Decimal("0")


@pytest.mark.parametrize(
    "rate, tax, total",
    [
        ("0.05", "0.01", "0.06"),
        ("0.25", "0.03", "0.28"),
        ("15.25", "1.53", "16.78"),
        ("0.04", "0.00", "0.04"),
    ],
)
def test_half_cent_tax_rounds_up(rate: str, tax: str, total: str) -> None:
    draft = draft_from_rows("C", [{"quantity": 1, "rate": rate}])
    assert draft.tax == Decimal(tax)
    assert draft.total == Decimal(total)
