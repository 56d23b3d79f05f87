from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

from invoicer.core.invoice import FinalizedInvoice


class HistoryRecord(SQLModel, table=True):
	"""Summary of one generated invoice plus its PDF bytes.

	``seq`` only records insertion order; ``id`` is the invoice number.
	"""

	seq: Optional[int] = Field(default=None, primary_key=True)
	id: str = Field(index=True)
	client_name: str = ""
	total: float = 0.0
	# ISO-8601 timestamp of generation
	date: str = ""
	# Empty for seeded sample entries
	document: bytes = b""

	@classmethod
	def from_invoice(cls, invoice: FinalizedInvoice, document: bytes, when: Optional[datetime] = None) -> "HistoryRecord":
		when = when or datetime.now(timezone.utc)
		return cls(
			id=invoice.invoice_number,
			client_name=invoice.client_name,
			total=float(invoice.total),
			date=when.isoformat(),
			document=bytes(document),
		)

	@property
	def has_document(self) -> bool:
		return bool(self.document)
