from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Iterable

CENT = Decimal("0.01")


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	if isinstance(x, Decimal):
		return x
	try:
		return Decimal(str(x).strip())
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money_dec(x: object, rounding: str = ROUND_HALF_EVEN) -> Decimal:
	"""Round to 2 decimals (banker's rounding unless told otherwise) and return Decimal."""
	return to_decimal(x).quantize(CENT, rounding=rounding)


def fmt_money(x: object, symbol: str = "") -> str:
	"""
	Format a monetary value with exactly two decimals and an optional leading symbol.

	No thousands grouping: 1100 -> "1100.00", or "$1100.00" with symbol="$".
	"""
	q = round_money_dec(x)
	if q < 0:
		return f"-{symbol}{-q:.2f}"
	return f"{symbol}{q:.2f}"


def sum_money(values: Iterable[object]) -> Decimal:
	"""Accumulate monetary values using Decimal, without intermediate rounding."""
	total = Decimal("0")
	for v in values:
		total += to_decimal(v)
	return total
