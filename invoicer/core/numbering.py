from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def _format(prefix: str, n: int) -> str:
	return f"{prefix}{n}"


def new_invoice_number(prefix: str = "INV-", now: Optional[datetime] = None) -> str:
	"""
	Return an invoice number like 'INV-1760889600000' (prefix + epoch milliseconds).

	Numbers are assigned once, at generation time. Millisecond resolution is enough
	for a single user clicking "Generate".
	"""
	now = now or datetime.now(timezone.utc)
	if now.tzinfo is None:
		now = now.astimezone()
	return _format(prefix, int(now.timestamp() * 1000))
