from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QLabel,
    QMessageBox,
)

from invoicer.core.currency import fmt_money
from invoicer.core.errors import SampleDataUnavailable
from invoicer.core.generation import export_record
from invoicer.core.opener import open_file
from invoicer.data.history import HistoryStore
from invoicer.data.models import HistoryRecord

logger = logging.getLogger(__name__)


def _display_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).astimezone().strftime("%Y-%m-%d %H:%M")
    except (TypeError, ValueError):
        return iso or ""


class HistoryDialog(QDialog):
    """Previously generated invoices, newest first, with Download and Delete."""

    def __init__(self, store: HistoryStore, out_dir: Path, symbol: str = "$",
                 open_after_download: bool = True, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Invoice History")
        self.resize(720, 440)
        self.setModal(True)

        self.store = store
        self.out_dir = Path(out_dir)
        self.symbol = symbol
        self.open_after_download = open_after_download
        self.records: List[HistoryRecord] = []

        root = QVBoxLayout(self)

        top = QHBoxLayout()
        self.count_lbl = QLabel("")
        top.addWidget(self.count_lbl)
        top.addStretch(1)
        self.btn_download = QPushButton("Download")
        self.btn_delete = QPushButton("Delete")
        self.btn_close = QPushButton("Close")
        for b in (self.btn_download, self.btn_delete, self.btn_close):
            top.addWidget(b)
        root.addLayout(top)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Invoice #", "Client", "Total", "Date"])
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        root.addWidget(self.table, 1)

        self.btn_download.clicked.connect(self._download_selected)
        self.btn_delete.clicked.connect(self._delete_selected)
        self.btn_close.clicked.connect(self.accept)
        self.table.itemDoubleClicked.connect(lambda _it: self._download_selected())

        self.refresh()

    def refresh(self) -> None:
        self.records = self.store.list()
        self.table.setRowCount(0)
        for rec in self.records:
            r = self.table.rowCount()
            self.table.insertRow(r)
            it_num = QTableWidgetItem(rec.id)
            it_num.setData(Qt.UserRole, rec.id)
            self.table.setItem(r, 0, it_num)
            self.table.setItem(r, 1, QTableWidgetItem(rec.client_name))
            it_total = QTableWidgetItem(fmt_money(rec.total, self.symbol))
            it_total.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(r, 2, it_total)
            self.table.setItem(r, 3, QTableWidgetItem(_display_date(rec.date)))
        n = len(self.records)
        self.count_lbl.setText(f"{n} invoice{'s' if n != 1 else ''}")

    def _current_record(self) -> Optional[HistoryRecord]:
        r = self.table.currentRow()
        if r < 0 or r >= len(self.records):
            return None
        return self.records[r]

    def _download_selected(self) -> None:
        rec = self._current_record()
        if rec is None:
            QMessageBox.information(self, "Download", "Please select an invoice.")
            return
        try:
            path = export_record(rec, self.out_dir)
        except SampleDataUnavailable as e:
            QMessageBox.information(self, "Download", str(e))
            return
        except OSError as e:
            logger.exception("Could not export invoice %s", rec.id)
            QMessageBox.warning(self, "Download", f"Could not save the PDF.\n\nDetails: {e}")
            return
        if not (self.open_after_download and open_file(str(path))):
            QMessageBox.information(self, "Download", f"Invoice saved to:\n{path}")

    def _delete_selected(self) -> None:
        rec = self._current_record()
        if rec is None:
            QMessageBox.information(self, "Delete", "Please select an invoice to delete.")
            return
        reply = QMessageBox.question(
            self,
            "Confirm Delete",
            f"Delete invoice '{rec.id}' from history?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if reply != QMessageBox.Yes:
            return
        self.store.delete(rec.id)
        self.refresh()
