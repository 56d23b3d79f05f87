from __future__ import annotations

# Allow running this file directly (python invoicer/main.py) by ensuring the project root is on sys.path
import os
import sys
if __package__ in (None, ""):
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import logging

from PySide6.QtWidgets import QApplication, QMessageBox

from invoicer.core.errors import InvoiceValidationError, RenderError
from invoicer.core.generation import generate_invoice
from invoicer.core.opener import open_file
from invoicer.core.settings import load_settings
from invoicer.data.history import open_history_store, seed_sample_history
from invoicer.ui_main import create_main_window
from invoicer.widgets.history_dialog import HistoryDialog

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    configure_logging()
    app = QApplication(sys.argv)
    settings = load_settings()
    store = open_history_store(settings)
    if settings.seed_samples:
        seed_sample_history(store)

    win = create_main_window(settings)
    out_dir = settings.resolved_download_dir()

    def on_generate() -> None:
        if not win.draft.is_ready:
            QMessageBox.information(win, "Generate", "Enter a client name and at least one item.")
            return
        win.set_busy(True)
        try:
            result = generate_invoice(win.draft, store, settings, out_dir)
        except InvoiceValidationError as e:
            QMessageBox.information(win, "Generate", str(e))
            return
        except RenderError:
            # Form stays as it was so the user can retry
            QMessageBox.critical(win, "PDF failed", "Could not generate the PDF. Please try again.")
            return
        except OSError as e:
            logger.exception("Could not write the PDF to %s", out_dir)
            QMessageBox.critical(win, "Save failed", f"Could not save the PDF.\n\nDetails: {e}")
            return
        finally:
            win.set_busy(False)

        logger.info("Invoice %s saved to %s", result.invoice.invoice_number, result.path)
        if not (settings.open_after_download and open_file(str(result.path))):
            QMessageBox.information(win, "Saved", f"Invoice saved to:\n{result.path}")
        win.new_invoice()

    def on_show_history() -> None:
        dlg = HistoryDialog(
            store,
            out_dir,
            symbol=settings.currency_symbol,
            open_after_download=settings.open_after_download,
            parent=win,
        )
        dlg.exec()

    win.btn_generate.clicked.connect(on_generate)
    win.btn_history.clicked.connect(on_show_history)

    app.aboutToQuit.connect(store.close)

    win.show()
    app.exec()


if __name__ == "__main__":
    main()
