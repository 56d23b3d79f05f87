from __future__ import annotations

import sys
import tempfile
from pathlib import Path

# Ensure project root is on sys.path when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoicer.core.generation import generate_invoice
from invoicer.core.invoice import draft_from_rows
from invoicer.core.settings import Settings
from invoicer.data.history import JsonHistoryStore, SqlHistoryStore, seed_sample_history


def main() -> None:
    work = Path(tempfile.mkdtemp(prefix="invoicer-smoke-"))
    settings = Settings()
    for store in (SqlHistoryStore(work / "history.db"), JsonHistoryStore(work / "history.json")):
        seed_sample_history(store)
        draft = draft_from_rows("SmokeTest Customer", [
            {"description": "A", "quantity": 2, "rate": 50},
            {"description": "B", "quantity": 1, "rate": 25},
        ])
        result = generate_invoice(draft, store, settings, work / "downloads")
        print("CREATED:", result.invoice.invoice_number, result.invoice.total, result.path)
        print("HISTORY:", [(r.id, r.total, len(r.document)) for r in store.list()])
        store.delete(result.invoice.invoice_number)
        print("AFTER DELETE:", [r.id for r in store.list()])
        store.close()


if __name__ == "__main__":
    main()
