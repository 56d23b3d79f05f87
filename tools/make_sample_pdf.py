from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on sys.path when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoicer.core.invoice import draft_from_rows
from invoicer.pdf.renderer import build_invoice_pdf

# Generates a sample invoice PDF for README/demo purposes.


def main() -> None:
    out_dir = ROOT / "samples"
    out_pdf = out_dir / "sample-invoice.pdf"

    draft = draft_from_rows(
        "Creative Agency Inc",
        [
            {"description": "Brand strategy workshop", "quantity": 1, "rate": "1200.00"},
            {"description": "Logo design (3 concepts)", "quantity": 3, "rate": "350.00"},
            {"description": "Business card layout", "quantity": 2, "rate": "75.50"},
        ],
        client_email="billing@creativeagency.example",
        client_address="500 Market Street\nSuite 210\nDesign City, DC 20001",
        notes="Payment due within 30 days.\nBank transfer details on request.",
    )
    invoice = draft.finalize("INV-SAMPLE-0001", "10/19/2026")
    build_invoice_pdf(out_pdf, invoice)
    print(f"Wrote sample to: {out_pdf} (total {invoice.total})")


if __name__ == "__main__":
    main()
