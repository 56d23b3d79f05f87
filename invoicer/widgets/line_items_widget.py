from __future__ import annotations

from typing import Dict

from PySide6.QtCore import Qt, Signal, QLocale
from PySide6.QtWidgets import (
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
    QLabel,
    QLineEdit,
    QSpinBox,
    QDoubleSpinBox,
    QScrollArea,
    QPushButton,
    QFrame,
    QAbstractSpinBox,
)

from invoicer.core.currency import fmt_money, to_decimal
from invoicer.core.invoice import InvoiceDraft, LineItem


def _plain_spin(spin: QAbstractSpinBox) -> None:
    # C locale and no grouping so typed values parse the same everywhere
    spin.setLocale(QLocale.c())
    spin.setButtonSymbols(QAbstractSpinBox.ButtonSymbols.NoButtons)
    spin.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
    spin.setKeyboardTracking(False)


class LineItemRow(QWidget):
    """One editable line item row bound to a LineItem of the draft.

    Emits:
      - changed(): after description, quantity or rate changed
      - removeRequested(str): item id, when the row's remove button is pressed
    """

    changed = Signal()
    removeRequested = Signal(str)

    def __init__(self, draft: InvoiceDraft, item: LineItem, symbol: str = "$", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.draft = draft
        self.item_id = item.id
        self.symbol = symbol

        self.layout = QHBoxLayout()
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.layout.setSpacing(8)

        self.desc_edit = QLineEdit(item.description)
        self.desc_edit.setPlaceholderText("Item description")
        self.layout.addWidget(self.desc_edit, 1)

        # Whole units only
        self.qty_spin = QSpinBox()
        self.qty_spin.setRange(0, 1_000_000)
        self.qty_spin.setValue(item.quantity)
        self.qty_spin.setFixedWidth(80)
        _plain_spin(self.qty_spin)
        self.layout.addWidget(self.qty_spin)

        self.rate_spin = QDoubleSpinBox()
        self.rate_spin.setDecimals(2)
        self.rate_spin.setRange(0.0, 1_000_000_000.0)
        self.rate_spin.setValue(float(item.rate))
        self.rate_spin.setFixedWidth(110)
        _plain_spin(self.rate_spin)
        self.layout.addWidget(self.rate_spin)

        self.amount_lbl = QLabel(fmt_money(item.amount, symbol))
        self.amount_lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.amount_lbl.setFixedWidth(120)
        self.layout.addWidget(self.amount_lbl)

        self.remove_btn = QPushButton("X")
        self.remove_btn.setObjectName("RemoveRow")
        self.remove_btn.setFixedWidth(28)
        self.remove_btn.setToolTip("Remove item")
        self.remove_btn.clicked.connect(lambda: self.removeRequested.emit(self.item_id))
        self.layout.addWidget(self.remove_btn)

        self.desc_edit.textChanged.connect(self._on_description)
        self.qty_spin.valueChanged.connect(self._on_quantity)
        self.rate_spin.valueChanged.connect(self._on_rate)

        frame = QFrame(self)
        frame.setObjectName("CardRow")
        inner = QVBoxLayout(frame)
        inner.setContentsMargins(0, 0, 0, 0)
        inner.addLayout(self.layout)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(frame)

    def _on_description(self, text: str) -> None:
        self.draft.set_description(self.item_id, text)
        self.changed.emit()

    def _on_quantity(self, value: int) -> None:
        self.draft.set_quantity(self.item_id, value)
        self._refresh_amount()

    def _on_rate(self, value: float) -> None:
        # Round-trip through str so 25.5 stays Decimal('25.5')
        self.draft.set_rate(self.item_id, to_decimal(f"{value:.2f}"))
        self._refresh_amount()

    def _refresh_amount(self) -> None:
        self.amount_lbl.setText(fmt_money(self.draft.item(self.item_id).amount, self.symbol))
        self.changed.emit()


class LineItemsWidget(QWidget):
    """A scrollable set of LineItemRow widgets mirroring ``draft.items``.

    Emits:
      - totalsChanged(): whenever any item was added, removed or edited
    """

    totalsChanged = Signal()

    def __init__(self, draft: InvoiceDraft, symbol: str = "$", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.draft = draft
        self.symbol = symbol
        self.rows: Dict[str, LineItemRow] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        header = QHBoxLayout()
        header.setSpacing(8)
        header.addWidget(QLabel("Description"), 1)
        for text, width in (("Qty", 80), ("Rate", 110), ("Amount", 120)):
            lbl = QLabel(text)
            lbl.setFixedWidth(width)
            lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            header.addWidget(lbl)
        header.addSpacing(28)  # remove button column
        root.addLayout(header)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.rows_container = QWidget()
        self.vbox = QVBoxLayout(self.rows_container)
        self.vbox.setContentsMargins(0, 0, 0, 0)
        self.vbox.setSpacing(6)
        self.vbox.addStretch(1)
        self.scroll.setWidget(self.rows_container)
        root.addWidget(self.scroll)

        self.btn_add = QPushButton("+ Add Item")
        self.btn_add.clicked.connect(lambda: self.add_row())
        add_row = QHBoxLayout()
        add_row.addWidget(self.btn_add)
        add_row.addStretch(1)
        root.addLayout(add_row)

        self.rebuild()

    def _insert_row(self, item: LineItem) -> None:
        row = LineItemRow(self.draft, item, self.symbol)
        row.changed.connect(self.totalsChanged.emit)
        row.removeRequested.connect(self.remove_row)
        # Keep the trailing stretch last
        self.vbox.insertWidget(self.vbox.count() - 1, row)
        self.rows[item.id] = row

    def rebuild(self) -> None:
        """Drop all row widgets and recreate them from the draft."""
        for row in list(self.rows.values()):
            self.vbox.removeWidget(row)
            row.setParent(None)
            row.deleteLater()
        self.rows.clear()
        for item in self.draft.items:
            self._insert_row(item)
        self._sync_remove_buttons()
        self.totalsChanged.emit()

    def add_row(self, description: str = "", quantity: int = 1, rate: float = 0.0) -> LineItem:
        item = self.draft.add_item(description, quantity, rate)
        self._insert_row(item)
        self._sync_remove_buttons()
        self.totalsChanged.emit()
        return item

    def remove_row(self, item_id: str) -> bool:
        """Remove the item; returns False when it is the last one and was kept."""
        try:
            self.draft.remove_item(item_id)
        except ValueError:
            return False
        row = self.rows.pop(item_id)
        self.vbox.removeWidget(row)
        row.setParent(None)
        row.deleteLater()
        self._sync_remove_buttons()
        self.totalsChanged.emit()
        return True

    def _sync_remove_buttons(self) -> None:
        only_one = len(self.draft.items) <= 1
        for row in self.rows.values():
            row.remove_btn.setEnabled(not only_one)
