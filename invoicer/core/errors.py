"""Error kinds raised by the invoice workflow."""

from __future__ import annotations


class InvoiceValidationError(ValueError):
    """The draft is not ready to be generated (no client name or no items)."""


class RenderError(RuntimeError):
    """Laying out or serialising the PDF failed."""


class PersistenceError(RuntimeError):
    """Reading or writing the history store failed."""


class SampleDataUnavailable(LookupError):
    """A history record carries no document bytes (seeded demo entry)."""

    def __init__(self, record_id: str) -> None:
        super().__init__("This is a sample invoice. PDF data is not available for download.")
        self.record_id = record_id
