from __future__ import annotations

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from invoicer.core.errors import InvoiceValidationError
from invoicer.core.invoice import InvoiceDraft, LineItem


@pytest.mark.parametrize(
    "quantity, rate",
    [(0, "0"), (1, "0.01"), (3, "19.99"), (12, "250"), (1000, "0.33")],
)
def test_amount_follows_quantity_and_rate(quantity: int, rate: str) -> None:
    item = LineItem("1")
    item.set_quantity(quantity)
    item.set_rate(rate)
    assert item.amount == quantity * Decimal(rate)

    item.set_quantity(quantity + 1)
    assert item.amount == (quantity + 1) * Decimal(rate)


def test_description_change_keeps_amount() -> None:
    item = LineItem("1", quantity=2, rate=Decimal("5"))
    item.set_description("Widgets")
    assert item.description == "Widgets"
    assert item.amount == Decimal("10")


def test_negative_values_are_rejected() -> None:
    item = LineItem("1", quantity=2, rate=Decimal("5"))
    with pytest.raises(ValueError):
        item.set_quantity(-1)
    with pytest.raises(ValueError):
        item.set_rate("-0.01")
    # unchanged after rejected edits
    assert (item.quantity, item.rate, item.amount) == (2, Decimal("5"), Decimal("10"))


def test_fractional_quantity_is_rejected() -> None:
    with pytest.raises(ValueError):
        LineItem("1", quantity=1.5)  # type: ignore[arg-type]


@pytest.mark.parametrize("bad", ["abc", "", "NaN", "sNaN", "Infinity", "-Infinity", None, True])
def test_unparseable_values_are_rejected(bad: object) -> None:
    item = LineItem("1", quantity=2, rate=Decimal("5"))
    with pytest.raises(ValueError):
        item.set_rate(bad)
    with pytest.raises(ValueError):
        item.set_quantity(bad)
    assert (item.quantity, item.rate, item.amount) == (2, Decimal("5"), Decimal("10"))


def test_numeric_strings_and_floats_are_accepted() -> None:
    item = LineItem("1")
    item.set_quantity(" 3 ")
    item.set_rate(25.5)
    assert (item.quantity, item.rate, item.amount) == (3, Decimal("25.5"), Decimal("76.5"))


def test_item_ids_are_unique_within_draft() -> None:
    draft = InvoiceDraft()
    a = draft.add_item()
    b = draft.add_item()
    ids = [it.id for it in draft.items]
    assert len(ids) == len(set(ids)) == 3
    draft.remove_item(a.id)
    c = draft.add_item()
    assert c.id not in {draft.items[0].id, b.id}


def test_removing_sole_item_is_rejected() -> None:
    draft = InvoiceDraft()
    only = draft.items[0]
    with pytest.raises(ValueError):
        draft.remove_item(only.id)
    assert draft.items == [only]


def test_removing_item_updates_totals() -> None:
    draft = InvoiceDraft()
    draft.set_quantity(draft.items[0].id, 3)
    draft.set_rate(draft.items[0].id, "50.00")
    extra = draft.add_item("Extra", 1, "25.50")
    assert draft.total == Decimal("193.05")

    draft.remove_item(extra.id)
    assert draft.subtotal == Decimal("150.00")
    assert draft.tax == Decimal("15.00")
    assert draft.total == Decimal("165.00")


def test_unknown_item_id() -> None:
    draft = InvoiceDraft()
    with pytest.raises(KeyError):
        draft.set_rate("nope", 1)


def test_finalize_requires_client_name() -> None:
    draft = InvoiceDraft(client_name="   ")
    assert not draft.is_ready
    with pytest.raises(InvoiceValidationError):
        draft.finalize("INV-1", "01/01/2026")


def test_finalize_snapshot_is_immutable_and_detached() -> None:
    draft = InvoiceDraft(client_name=" Acme ", client_email="a@b.c", client_address="Line 1\nLine 2", notes="Thanks")
    draft.set_description(draft.items[0].id, "Consulting")
    draft.set_quantity(draft.items[0].id, 10)
    draft.set_rate(draft.items[0].id, "100.00")

    invoice = draft.finalize("INV-1", "10/19/2026")
    assert invoice.client_name == "Acme"
    assert invoice.items[0].amount == Decimal("1000.00")
    assert (invoice.subtotal, invoice.tax, invoice.total) == (Decimal("1000.00"), Decimal("100.00"), Decimal("1100.00"))

    with pytest.raises(FrozenInstanceError):
        invoice.total = Decimal("0")  # type: ignore[misc]

    draft.set_quantity(draft.items[0].id, 1)
    assert invoice.items[0].quantity == 10


def test_reset_returns_to_blank_draft() -> None:
    draft = InvoiceDraft(client_name="Acme", notes="x")
    draft.add_item("more", 2, 3)
    draft.reset()
    assert draft.client_name == "" and draft.notes == ""
    assert len(draft.items) == 1
    assert draft.items[0].quantity == 1 and draft.items[0].rate == 0
