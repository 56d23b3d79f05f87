"""Generate & Download: finalize a draft, render it, write the file, remember it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from invoicer.core.errors import SampleDataUnavailable
from invoicer.core.invoice import FinalizedInvoice, InvoiceDraft
from invoicer.core.numbering import new_invoice_number
from invoicer.core.settings import Settings
from invoicer.data.history import HistoryStore
from invoicer.data.models import HistoryRecord
from invoicer.pdf.renderer import render_invoice_pdf

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"


@dataclass(frozen=True)
class GeneratedInvoice:
    invoice: FinalizedInvoice
    document: bytes
    record: HistoryRecord
    path: Path


def download_path(out_dir: Union[str, Path], number: str) -> Path:
    return Path(out_dir) / f"{number}{PDF_SUFFIX}"


def _write_download(out_dir: Union[str, Path], number: str, document: bytes) -> Path:
    out = download_path(out_dir, number)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(document)
    logger.info("Wrote %s (%d bytes)", out, len(document))
    return out


def generate_invoice(
    draft: InvoiceDraft,
    store: HistoryStore,
    settings: Settings,
    out_dir: Union[str, Path],
    now: Optional[datetime] = None,
) -> GeneratedInvoice:
    """
    Turn the draft into a PDF, write ``<number>.pdf`` to out_dir and save a history record.

    Raises InvoiceValidationError if the draft has no client name or items,
    RenderError if the PDF cannot be produced, and OSError if the file cannot be
    written. In each case nothing is saved to history. A history failure is logged
    by the store and does not undo the download.
    """
    now = now or datetime.now(timezone.utc)
    number = new_invoice_number(settings.invoice_prefix, now)
    invoice = draft.finalize(number, now.astimezone().strftime(settings.date_format))
    logger.info("Generating invoice %s for %s (%d items)", number, invoice.client_name, len(invoice.items))

    document = render_invoice_pdf(invoice, settings)

    path = _write_download(out_dir, number, document)

    record = HistoryRecord.from_invoice(invoice, document, now)
    store.save(record)
    return GeneratedInvoice(invoice=invoice, document=document, record=record, path=path)


def export_record(record: HistoryRecord, out_dir: Union[str, Path]) -> Path:
    """Write a stored invoice back out as ``<id>.pdf``.

    Raises SampleDataUnavailable for seeded entries that carry no PDF bytes.
    """
    if not record.has_document:
        raise SampleDataUnavailable(record.id)
    return _write_download(out_dir, record.id, bytes(record.document))
