from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QLabel,
    QVBoxLayout,
    QHBoxLayout,
    QFormLayout,
    QFrame,
    QLineEdit,
    QTextEdit,
    QPushButton,
)

from invoicer.core.currency import fmt_money
from invoicer.core.invoice import InvoiceDraft
from invoicer.core.settings import Settings
from invoicer.core.totals import TAX_RATE
from invoicer.styles.themes import light_qss
from invoicer.widgets.line_items_widget import LineItemsWidget


def _card(title: str) -> tuple[QFrame, QVBoxLayout]:
    card = QFrame()
    card.setObjectName("Card")
    lay = QVBoxLayout(card)
    lay.setContentsMargins(12, 12, 12, 12)
    lay.setSpacing(10)
    lbl = QLabel(title)
    lbl.setObjectName("SectionTitle")
    lay.addWidget(lbl)
    return card, lay


class MainWindow(QMainWindow):
    """Invoice editor: Bill To, line items, notes and live totals.

    The window only edits ``self.draft``; generation and history are wired by invoicer.main.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.draft = InvoiceDraft()
        self.setWindowTitle("Invoice Generator")
        self.resize(900, 760)

        root = QWidget(self)
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(16, 16, 16, 16)
        root_layout.setSpacing(12)

        # Header
        header = QHBoxLayout()
        self.title_label = QLabel(self.settings.issuer_name or "Invoice Generator")
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        header.addWidget(self.title_label)
        header.addStretch(1)
        self.btn_history = QPushButton("History")
        header.addWidget(self.btn_history)
        root_layout.addLayout(header)

        # Bill To
        bill_card, bill_lay = _card("BILL TO")
        bill_form = QFormLayout()
        bill_form.setFieldGrowthPolicy(QFormLayout.AllNonFixedFieldsGrow)
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Client name (required)")
        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("client@example.com")
        self.addr_edit = QTextEdit()
        self.addr_edit.setFixedHeight(70)
        self.addr_edit.setAcceptRichText(False)
        bill_form.addRow("Name", self.name_edit)
        bill_form.addRow("Email", self.email_edit)
        bill_form.addRow("Address", self.addr_edit)
        bill_lay.addLayout(bill_form)
        root_layout.addWidget(bill_card)

        # Line items
        items_card, items_lay = _card("ITEMS")
        self.items = LineItemsWidget(self.draft, self.settings.currency_symbol)
        items_lay.addWidget(self.items)
        root_layout.addWidget(items_card, 1)

        # Notes + totals
        bottom = QHBoxLayout()
        notes_card, notes_lay = _card("NOTES")
        self.notes_edit = QTextEdit()
        self.notes_edit.setAcceptRichText(False)
        self.notes_edit.setPlaceholderText("Payment terms, thank-you note…")
        self.notes_edit.setFixedHeight(90)
        notes_lay.addWidget(self.notes_edit)
        bottom.addWidget(notes_card, 1)

        totals_card, totals_lay = _card("TOTALS")
        totals_form = QFormLayout()
        self.subtotal_value = QLabel()
        self.tax_value = QLabel()
        self.total_value = QLabel()
        self.total_value.setObjectName("TotalValue")
        for lbl in (self.subtotal_value, self.tax_value, self.total_value):
            lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            lbl.setMinimumWidth(120)
        pct = (TAX_RATE * 100).normalize()
        totals_form.addRow("Subtotal:", self.subtotal_value)
        totals_form.addRow(f"Tax ({pct:f}%):", self.tax_value)
        totals_form.addRow("Total:", self.total_value)
        totals_lay.addLayout(totals_form)
        bottom.addWidget(totals_card)
        root_layout.addLayout(bottom)

        # Actions
        actions = QHBoxLayout()
        actions.addStretch(1)
        self.btn_new_invoice = QPushButton("New Invoice")
        self.btn_generate = QPushButton("Generate && Download")
        self.btn_generate.setObjectName("Primary")
        actions.addWidget(self.btn_new_invoice)
        actions.addWidget(self.btn_generate)
        root_layout.addLayout(actions)

        self.setCentralWidget(root)

        # Wire form fields into the draft
        self.name_edit.textChanged.connect(self._on_client_name)
        self.email_edit.textChanged.connect(lambda t: setattr(self.draft, "client_email", t))
        self.addr_edit.textChanged.connect(
            lambda: setattr(self.draft, "client_address", self.addr_edit.toPlainText())
        )
        self.notes_edit.textChanged.connect(
            lambda: setattr(self.draft, "notes", self.notes_edit.toPlainText())
        )
        self.items.totalsChanged.connect(self._recalc_totals)
        self.btn_new_invoice.clicked.connect(self.new_invoice)

        self._recalc_totals()

    def _on_client_name(self, text: str) -> None:
        self.draft.client_name = text
        self._update_generate_enabled()

    def _recalc_totals(self) -> None:
        symbol = self.settings.currency_symbol
        totals = self.draft.totals
        self.subtotal_value.setText(fmt_money(totals.subtotal, symbol))
        self.tax_value.setText(fmt_money(totals.tax, symbol))
        self.total_value.setText(fmt_money(totals.total, symbol))
        self._update_generate_enabled()

    def _update_generate_enabled(self) -> None:
        self.btn_generate.setEnabled(self.draft.is_ready)

    def set_busy(self, busy: bool) -> None:
        self.btn_generate.setText("Generating…" if busy else "Generate && Download")
        self.btn_generate.setEnabled(not busy and self.draft.is_ready)
        QApplication.processEvents()

    def new_invoice(self) -> None:
        """Clear the form back to one empty item."""
        self.draft.reset()
        for w in (self.name_edit, self.email_edit):
            w.clear()
        self.addr_edit.clear()
        self.notes_edit.clear()
        self.items.rebuild()
        self._recalc_totals()


def create_main_window(settings: Settings | None = None) -> MainWindow:
    app = QApplication.instance()
    if app is not None:
        app.setStyleSheet(light_qss())
    return MainWindow(settings)
