from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Protocol

from invoicer.core.currency import round_money_dec, sum_money

# Flat tax applied to every invoice
TAX_RATE = Decimal("0.10")


class HasAmount(Protocol):
    amount: Decimal


class Totals(NamedTuple):
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def recompute(items: Iterable[HasAmount], tax_rate: Decimal = TAX_RATE) -> Totals:
    """Derive subtotal, tax and total from already-computed item amounts.

    Amounts are summed as given; negative values pass through unchanged.
    Tax rounds half-up to the cent (0.025 -> 0.03).
    """
    subtotal = sum_money(item.amount for item in items)
    tax = round_money_dec(subtotal * tax_rate, rounding=ROUND_HALF_UP)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
