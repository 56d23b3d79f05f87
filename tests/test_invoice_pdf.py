from __future__ import annotations

import io
import math
import re
from pathlib import Path

import pytest
from pypdf import PdfReader

from invoicer.core.errors import RenderError
from invoicer.core.invoice import FinalizedInvoice, draft_from_rows
from invoicer.core.settings import Settings
from invoicer.pdf import renderer
from invoicer.pdf.renderer import build_invoice_pdf, render_invoice_pdf


def _sample_invoice(**extra) -> FinalizedInvoice:
    draft = draft_from_rows(
        "Test Customer",
        [
            {"description": "Item A", "quantity": 3, "rate": "50.00"},
            {"description": "Item B", "quantity": 1, "rate": "25.50"},
        ],
        **extra,
    )
    return draft.finalize("INV-1760000000000", "10/19/2026")


def _page_text(document: bytes) -> str:
    reader = PdfReader(io.BytesIO(document))
    assert len(reader.pages) == 1
    return reader.pages[0].extract_text() or ""


def test_single_letter_page() -> None:
    document = render_invoice_pdf(_sample_invoice())
    assert document.startswith(b"%PDF-")

    reader = PdfReader(io.BytesIO(document))
    assert len(reader.pages) == 1
    box = reader.pages[0].mediabox
    assert math.isclose(float(box.width), 612.0, abs_tol=0.5)
    assert math.isclose(float(box.height), 792.0, abs_tol=0.5)
    assert reader.metadata.title == "Invoice INV-1760000000000"


def test_layout_text_present() -> None:
    text = _page_text(render_invoice_pdf(_sample_invoice()))

    assert "ACME CORPORATION" in text
    assert "INVOICE" in text
    assert "Invoice #: INV-1760000000000" in text
    assert "Date: 10/19/2026" in text
    assert "Bill To:" in text and "Test Customer" in text
    for header in ("Description", "Qty", "Rate", "Amount"):
        assert header in text
    assert "Item A" in text and "Item B" in text
    assert "$150.00" in text and "$25.50" in text
    assert re.search(r"Subtotal:\s*\$175\.50", text)
    assert re.search(r"Tax:\s*\$17\.55", text)
    assert re.search(r"Total:\s*\$193\.05", text)
    assert "Thank you for your business!" in text


def test_optional_blocks() -> None:
    bare = _page_text(render_invoice_pdf(_sample_invoice()))
    assert "Notes:" not in bare

    full = _page_text(render_invoice_pdf(_sample_invoice(
        client_email="billing@example.com",
        client_address="1 Main St\nSpringfield",
        notes="Net 30\nThanks again",
    )))
    for expected in ("billing@example.com", "1 Main St", "Springfield", "Notes:", "Net 30", "Thanks again"):
        assert expected in full


def test_items_keep_input_order() -> None:
    draft = draft_from_rows("C", [{"description": f"Row {n:02d}", "quantity": 1, "rate": 1} for n in range(5, 0, -1)])
    text = _page_text(render_invoice_pdf(draft.finalize("INV-2", "01/01/2026")))
    positions = [text.index(f"Row {n:02d}") for n in range(5, 0, -1)]
    assert positions == sorted(positions)


def test_settings_drive_issuer_and_footer() -> None:
    settings = Settings(issuer_name="Globex", issuer_lines=["1 Loop Rd"], footer_message="Danke", currency_symbol="€")
    text = _page_text(render_invoice_pdf(_sample_invoice(), settings))
    assert "Globex" in text and "1 Loop Rd" in text and "Danke" in text
    assert "ACME CORPORATION" not in text


def test_rendering_is_deterministic() -> None:
    invoice = _sample_invoice(notes="same")
    assert render_invoice_pdf(invoice) == render_invoice_pdf(invoice)


def test_many_items_still_one_page() -> None:
    rows = [{"description": f"Line {i}", "quantity": 1, "rate": 1} for i in range(40)]
    invoice = draft_from_rows("Overflow Co", rows).finalize("INV-3", "01/01/2026")
    reader = PdfReader(io.BytesIO(render_invoice_pdf(invoice)))
    assert len(reader.pages) == 1


def test_build_writes_file(tmp_path: Path) -> None:
    out = build_invoice_pdf(tmp_path / "nested" / "inv.pdf", _sample_invoice())
    assert out.exists()
    assert out.read_bytes() == render_invoice_pdf(_sample_invoice())


def test_drawing_failure_raises_render_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*_args, **_kwargs):
        raise OSError("font table missing")

    monkeypatch.setattr(renderer, "_draw_page", boom)
    with pytest.raises(RenderError) as info:
        render_invoice_pdf(_sample_invoice())
    assert isinstance(info.value.__cause__, OSError)
