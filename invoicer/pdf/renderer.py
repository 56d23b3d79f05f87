from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Tuple

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen.canvas import Canvas

from invoicer.core.currency import fmt_money
from invoicer.core.errors import RenderError
from invoicer.core.invoice import FinalizedInvoice
from invoicer.core.settings import Settings

logger = logging.getLogger(__name__)


# ===== Layout constants (tweak here) =====
PAGE_SIZE = LETTER
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE  # 612 x 792 pt

MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

# Issuer block
ISSUER_NAME_SIZE = 24
ISSUER_LINE_SIZE = 12
ISSUER_NAME_PITCH = 25
ISSUER_LINE_PITCH = 15

# Title block (right side)
TITLE_GAP = 50
TITLE_SIZE = 28
TITLE_RAISE = 20
INFO_SIZE = 12

# Bill To
BILL_TO_GAP = 60
BILL_TO_LABEL_SIZE = 14
BILL_TO_TEXT_SIZE = 12
BILL_TO_FIRST_PITCH = 20
BILL_TO_PITCH = 15

# Items table: Description (widest), Qty, Rate, Amount
TABLE_GAP = 50
COLUMN_LABELS = ("Description", "Qty", "Rate", "Amount")
COLUMN_WIDTHS = (300, 60, 80, 80)
COLUMN_X = (MARGIN, MARGIN + 300, MARGIN + 360, MARGIN + 440)
HEADER_ROW_HEIGHT = 25
HEADER_LABEL_SIZE = 12
HEADER_TO_ROWS = 35
ROW_HEIGHT = 20
ROW_PITCH = 25
ROW_TEXT_SIZE = 10

# Totals block (right side)
TOTALS_GAP = 20
TOTALS_X = PAGE_WIDTH - MARGIN - 150
TOTALS_SIZE = 12
TOTALS_PITCH = 20
TOTAL_ROW_GAP = 25
TOTAL_BOX_WIDTH = 160
TOTAL_BOX_HEIGHT = 25
TOTAL_SIZE = 14

# Notes
NOTES_GAP = 60
NOTES_LABEL_SIZE = 12
NOTES_FIRST_PITCH = 20
NOTES_SIZE = 10
NOTES_PITCH = 15

# Footer
FOOTER_Y = 50
FOOTER_SIZE = 12

# Colors
ACCENT = Color(0.45, 0.20, 0.60)
TEXT_COLOR = Color(0, 0, 0)
MUTED = Color(0.4, 0.4, 0.4)
FOOTER_COLOR = Color(0.5, 0.5, 0.5)
ZEBRA = Color(0.98, 0.98, 0.98)
ON_ACCENT = Color(1, 1, 1)


# ===== Helpers =====
def _text(c: Canvas, x: float, y: float, text: str, *, size: float, font: str = FONT,
          color: Color = TEXT_COLOR, right: bool = False) -> None:
    c.setFont(font, size)
    c.setFillColor(color)
    if right:
        c.drawRightString(x, y, text)
    else:
        c.drawString(x, y, text)


def _fill_rect(c: Canvas, x: float, y: float, w: float, h: float, color: Color) -> None:
    c.setFillColor(color)
    c.rect(x, y, w, h, stroke=0, fill=1)


def _lines(text: str) -> Iterable[str]:
    return str(text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _draw_issuer(c: Canvas, settings: Settings, y: float) -> float:
    _text(c, MARGIN, y, settings.issuer_name, size=ISSUER_NAME_SIZE, font=BOLD_FONT, color=ACCENT)
    pitch = ISSUER_NAME_PITCH
    for line in settings.issuer_lines[:3]:
        y -= pitch
        _text(c, MARGIN, y, line, size=ISSUER_LINE_SIZE, color=MUTED)
        pitch = ISSUER_LINE_PITCH
    return y


def _draw_title_block(c: Canvas, invoice: FinalizedInvoice, y: float) -> float:
    """Draw "INVOICE" with number and date beneath, right-aligned on the right margin."""
    y -= TITLE_GAP
    right_x = PAGE_WIDTH - MARGIN
    _text(c, right_x, y + TITLE_RAISE, "INVOICE", size=TITLE_SIZE, font=BOLD_FONT, color=ACCENT, right=True)
    _text(c, right_x, y - 5, f"Invoice #: {invoice.invoice_number}", size=INFO_SIZE, right=True)
    _text(c, right_x, y - 20, f"Date: {invoice.issue_date}", size=INFO_SIZE, right=True)
    return y


def _draw_bill_to(c: Canvas, invoice: FinalizedInvoice, y: float) -> float:
    y -= BILL_TO_GAP
    _text(c, MARGIN, y, "Bill To:", size=BILL_TO_LABEL_SIZE, font=BOLD_FONT)
    y -= BILL_TO_FIRST_PITCH
    _text(c, MARGIN, y, invoice.client_name, size=BILL_TO_TEXT_SIZE)
    if invoice.client_email:
        y -= BILL_TO_PITCH
        _text(c, MARGIN, y, invoice.client_email, size=BILL_TO_TEXT_SIZE)
    if invoice.client_address:
        for ln in _lines(invoice.client_address):
            y -= BILL_TO_PITCH
            _text(c, MARGIN, y, ln, size=BILL_TO_TEXT_SIZE)
    return y


def _draw_items_table(c: Canvas, invoice: FinalizedInvoice, symbol: str, y: float) -> float:
    """Header row on an accent band, then one row per item in input order.

    No page breaks: rows past the bottom margin are drawn off the visible page.
    """
    y -= TABLE_GAP
    _fill_rect(c, MARGIN, y - 20, CONTENT_WIDTH, HEADER_ROW_HEIGHT, ACCENT)
    for label, x in zip(COLUMN_LABELS, COLUMN_X):
        _text(c, x, y - 10, label, size=HEADER_LABEL_SIZE, font=BOLD_FONT, color=ON_ACCENT)

    y -= HEADER_TO_ROWS
    for index, item in enumerate(invoice.items):
        if index % 2 == 0:
            _fill_rect(c, MARGIN, y - 15, CONTENT_WIDTH, ROW_HEIGHT, ZEBRA)
        cells: Tuple[str, str, str, str] = (
            item.description,
            str(item.quantity),
            fmt_money(item.rate, symbol),
            fmt_money(item.amount, symbol),
        )
        for text, x in zip(cells, COLUMN_X):
            _text(c, x, y - 5, text, size=ROW_TEXT_SIZE)
        y -= ROW_PITCH
    if y < FOOTER_Y:
        logger.warning("Invoice %s has %d items; rows run past the page bottom",
                       invoice.invoice_number, len(invoice.items))
    return y


def _draw_totals(c: Canvas, invoice: FinalizedInvoice, symbol: str, y: float) -> float:
    y -= TOTALS_GAP
    _text(c, TOTALS_X, y, f"Subtotal: {fmt_money(invoice.subtotal, symbol)}", size=TOTALS_SIZE)
    y -= TOTALS_PITCH
    _text(c, TOTALS_X, y, f"Tax: {fmt_money(invoice.tax, symbol)}", size=TOTALS_SIZE)
    y -= TOTAL_ROW_GAP
    _fill_rect(c, TOTALS_X - 10, y - 15, TOTAL_BOX_WIDTH, TOTAL_BOX_HEIGHT, ACCENT)
    _text(c, TOTALS_X, y - 5, f"Total: {fmt_money(invoice.total, symbol)}",
          size=TOTAL_SIZE, font=BOLD_FONT, color=ON_ACCENT)
    return y


def _draw_notes(c: Canvas, invoice: FinalizedInvoice, y: float) -> float:
    if not invoice.notes:
        return y
    y -= NOTES_GAP
    _text(c, MARGIN, y, "Notes:", size=NOTES_LABEL_SIZE, font=BOLD_FONT)
    y -= NOTES_FIRST_PITCH
    for ln in _lines(invoice.notes):
        _text(c, MARGIN, y, ln, size=NOTES_SIZE)
        y -= NOTES_PITCH
    return y


def _draw_footer(c: Canvas, settings: Settings) -> None:
    if settings.footer_message:
        _text(c, MARGIN, FOOTER_Y, settings.footer_message, size=FOOTER_SIZE, color=FOOTER_COLOR)


def _draw_page(c: Canvas, invoice: FinalizedInvoice, settings: Settings) -> None:
    symbol = settings.currency_symbol
    y = PAGE_HEIGHT - MARGIN
    y = _draw_issuer(c, settings, y)
    y = _draw_title_block(c, invoice, y)
    y = _draw_bill_to(c, invoice, y)
    y = _draw_items_table(c, invoice, symbol, y)
    y = _draw_totals(c, invoice, symbol, y)
    _draw_notes(c, invoice, y)
    _draw_footer(c, settings)


# ===== Public API =====
def render_invoice_pdf(invoice: FinalizedInvoice, settings: Optional[Settings] = None) -> bytes:
    """Draw a one-page Letter invoice and return the PDF bytes.

    The same invoice and settings always produce the same bytes (reportlab invariant mode).
    Raises RenderError if drawing or serialisation fails.
    """
    settings = settings or Settings()
    buffer = BytesIO()
    try:
        c = Canvas(buffer, pagesize=PAGE_SIZE, invariant=1)
        c.setAuthor(settings.issuer_name)
        c.setTitle(f"Invoice {invoice.invoice_number}")
        _draw_page(c, invoice, settings)
        c.showPage()
        c.save()
    except Exception as exc:
        logger.exception("Could not render invoice %s", invoice.invoice_number)
        raise RenderError(f"Could not render invoice {invoice.invoice_number}: {exc}") from exc
    return buffer.getvalue()


def build_invoice_pdf(out_path: Path | str, invoice: FinalizedInvoice, settings: Optional[Settings] = None) -> Path:
    """Render the invoice and write it to out_path (parent folders are created)."""
    document = render_invoice_pdf(invoice, settings)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(document)
    return out
