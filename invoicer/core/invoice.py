from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from invoicer.core.errors import InvoiceValidationError
from invoicer.core.totals import Totals, recompute


def _parse_number(value: object, what: str) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{what} must be a number: {value!r}")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"{what} must be a number: {value!r}") from exc
    if not d.is_finite():
        raise ValueError(f"{what} must be a finite number: {value!r}")
    return d


def _coerce_quantity(value: object) -> int:
    d = _parse_number(value, "Quantity")
    if d != d.to_integral_value():
        raise ValueError(f"Quantity must be a whole number: {value!r}")
    n = int(d)
    if n < 0:
        raise ValueError(f"Quantity cannot be negative: {value!r}")
    return n


def _coerce_rate(value: object) -> Decimal:
    d = _parse_number(value, "Rate")
    if d < 0:
        raise ValueError(f"Rate cannot be negative: {value!r}")
    return d


@dataclass
class LineItem:
    """One billable row. ``amount`` follows quantity and rate and is never set directly."""

    id: str
    description: str = ""
    quantity: int = 1
    rate: Decimal = Decimal("0")
    amount: Decimal = field(init=False)

    def __post_init__(self) -> None:
        self.quantity = _coerce_quantity(self.quantity)
        self.rate = _coerce_rate(self.rate)
        self._recalc()

    def _recalc(self) -> None:
        self.amount = Decimal(self.quantity) * self.rate

    def set_description(self, text: str) -> None:
        self.description = text or ""

    def set_quantity(self, value: object) -> None:
        self.quantity = _coerce_quantity(value)
        self._recalc()

    def set_rate(self, value: object) -> None:
        self.rate = _coerce_rate(value)
        self._recalc()


@dataclass(frozen=True)
class FinalizedLine:
    description: str
    quantity: int
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class FinalizedInvoice:
    """Snapshot of a draft taken at generation time."""

    invoice_number: str
    issue_date: str
    client_name: str
    items: Tuple[FinalizedLine, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    client_email: str = ""
    client_address: str = ""
    notes: str = ""


@dataclass
class InvoiceDraft:
    """In-memory invoice being edited.

    Totals are derived from ``items`` on every access, so they cannot drift.
    """

    client_name: str = ""
    client_email: str = ""
    client_address: str = ""
    notes: str = ""
    items: List[LineItem] = field(default_factory=list)
    _next_id: int = field(default=1, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.items:
            used = [int(it.id) for it in self.items if str(it.id).isdigit()]
            self._next_id = max(used, default=0) + 1
        else:
            self.add_item()

    # Items
    def add_item(self, description: str = "", quantity: object = 1, rate: object = 0) -> LineItem:
        item = LineItem(str(self._next_id), description, quantity, rate)  # type: ignore[arg-type]
        self._next_id += 1
        self.items.append(item)
        return item

    def item(self, item_id: str) -> LineItem:
        for it in self.items:
            if it.id == item_id:
                return it
        raise KeyError(item_id)

    def remove_item(self, item_id: str) -> None:
        target = self.item(item_id)
        if len(self.items) <= 1:
            raise ValueError("An invoice needs at least one line item")
        self.items.remove(target)

    def set_description(self, item_id: str, text: str) -> None:
        self.item(item_id).set_description(text)

    def set_quantity(self, item_id: str, value: object) -> None:
        self.item(item_id).set_quantity(value)

    def set_rate(self, item_id: str, value: object) -> None:
        self.item(item_id).set_rate(value)

    # Totals
    @property
    def totals(self) -> Totals:
        return recompute(self.items)

    @property
    def subtotal(self) -> Decimal:
        return self.totals.subtotal

    @property
    def tax(self) -> Decimal:
        return self.totals.tax

    @property
    def total(self) -> Decimal:
        return self.totals.total

    @property
    def is_ready(self) -> bool:
        return bool((self.client_name or "").strip()) and len(self.items) > 0

    def finalize(self, invoice_number: str, issue_date: str) -> FinalizedInvoice:
        if not (self.client_name or "").strip():
            raise InvoiceValidationError("Client name is required")
        if not self.items:
            raise InvoiceValidationError("At least one line item is required")
        totals = self.totals
        return FinalizedInvoice(
            invoice_number=invoice_number,
            issue_date=issue_date,
            client_name=self.client_name.strip(),
            client_email=(self.client_email or "").strip(),
            client_address=(self.client_address or "").strip(),
            notes=(self.notes or "").strip(),
            items=tuple(
                FinalizedLine(it.description, it.quantity, it.rate, it.amount)
                for it in self.items
            ),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
        )

    def reset(self) -> None:
        self.client_name = ""
        self.client_email = ""
        self.client_address = ""
        self.notes = ""
        self.items = []
        self._next_id = 1
        self.add_item()


def draft_from_rows(client_name: str, rows: List[dict], *, client_email: str = "",
                    client_address: str = "", notes: str = "") -> InvoiceDraft:
    """Build a draft from plain dict rows ``{description, quantity, rate}``."""
    draft = InvoiceDraft(client_name=client_name, client_email=client_email,
                         client_address=client_address, notes=notes)
    first: Optional[LineItem] = draft.items[0] if draft.items else None
    for i, row in enumerate(rows):
        if i == 0 and first is not None:
            first.set_description(str(row.get("description", "")))
            first.set_quantity(row.get("quantity", 1))
            first.set_rate(row.get("rate", 0))
        else:
            draft.add_item(str(row.get("description", "")), row.get("quantity", 1), row.get("rate", 0))
    return draft
