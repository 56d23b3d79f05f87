from __future__ import annotations

import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pytestqt")

from PySide6.QtWidgets import QApplication


def _window(qtbot):  # type: ignore[no-untyped-def]
    app = QApplication.instance() or QApplication([])
    from invoicer.ui_main import create_main_window
    win = create_main_window()
    qtbot.addWidget(win)
    return win


def test_generate_disabled_until_client_named(qtbot) -> None:  # type: ignore[no-untyped-def]
    win = _window(qtbot)
    assert not win.btn_generate.isEnabled()
    win.name_edit.setText("Acme")
    assert win.btn_generate.isEnabled()
    win.name_edit.setText("   ")
    assert not win.btn_generate.isEnabled()


def test_editing_rows_updates_totals(qtbot) -> None:  # type: ignore[no-untyped-def]
    win = _window(qtbot)
    first = next(iter(win.items.rows.values()))
    first.qty_spin.setValue(3)
    first.rate_spin.setValue(50.0)
    second_item = win.items.add_row("Extra", 1, 25.5)

    assert first.amount_lbl.text() == "$150.00"
    assert win.subtotal_value.text() == "$175.50"
    assert win.tax_value.text() == "$17.55"
    assert win.total_value.text() == "$193.05"

    assert win.items.remove_row(second_item.id) is True
    assert win.total_value.text() == "$165.00"


def test_last_row_cannot_be_removed(qtbot) -> None:  # type: ignore[no-untyped-def]
    win = _window(qtbot)
    only_id = win.draft.items[0].id
    assert win.items.remove_row(only_id) is False
    assert len(win.draft.items) == 1
    assert not win.items.rows[only_id].remove_btn.isEnabled()


def test_new_invoice_clears_form(qtbot) -> None:  # type: ignore[no-untyped-def]
    win = _window(qtbot)
    win.name_edit.setText("Acme")
    win.notes_edit.setPlainText("note")
    win.items.add_row("Extra", 2, 10.0)
    win.new_invoice()
    assert win.draft.client_name == "" and win.draft.notes == ""
    assert len(win.draft.items) == 1 and len(win.items.rows) == 1
    assert win.total_value.text() == "$0.00"
