# tests/test_sales_view.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from PySide6.QtCore import QDate, Qt

from sales_ledger.config import LedgerSettings
from sales_ledger.main import MainWindow
from sales_ledger.modules.sales import controller as controller_mod
from sales_ledger.modules.sales.controller import SalesController
from sales_ledger.modules.sales.errors import EmptySelection, ExportFailed
from sales_ledger.modules.sales.filters import search_matches
from sales_ledger.modules.sales.model import SalesTableModel
from sales_ledger.modules.sales.selection import SelectionBatch
from sales_ledger.modules.sales.source import FetchResult

from conftest import build_ledger, make_item, make_sale


# --------------------------- fakes ---------------------------

class FakeSource:
    def __init__(self, items, fail: str = ""):
        self.items = list(items)
        self.fail = fail
        self.requests = []

    def fetch_page(self, request):
        self.requests.append(request)
        if self.fail:
            return FetchResult.failed(self.fail)
        return FetchResult(items=tuple(r for r in self.items if search_matches(r, request.search_term)))


class InlinePool:
    """Runs each job right away on the calling thread."""

    def start(self, runnable):
        runnable.run()


class ManualPool:
    """Holds jobs until the test runs them, in any order."""

    def __init__(self):
        self.jobs = []

    def start(self, runnable):
        self.jobs.append(runnable)


@pytest.fixture
def messages(monkeypatch):
    """Capture message boxes instead of blocking on them."""
    seen = []
    for name in ("info", "warn", "error"):
        monkeypatch.setattr(controller_mod, name, lambda parent, title, text, _n=name: seen.append((_n, title, text)))
    return seen


def _make_controller(qtbot, source, pool=None, tmp_path=None):
    settings = LedgerSettings(export_dir=str(tmp_path) if tmp_path else "")
    ctrl = SalesController(source, settings, pool=pool or InlinePool())
    qtbot.addWidget(ctrl.view)
    ctrl.view.date_from.setDate(QDate(2025, 1, 1))
    ctrl.view.date_to.setDate(QDate(2025, 1, 31))
    return ctrl


def _ids(ctrl):
    return [r.id for r in ctrl.displayed()]


# --------------------------- table model ---------------------------

def test_table_model_columns_and_checks(qtbot, ledger):
    sel = SelectionBatch(ledger)
    m = SalesTableModel(ledger, sel)
    assert m.rowCount() == 10
    assert m.columnCount() == 7
    assert m.headerData(3, Qt.Horizontal) == "Customer"
    assert m.data(m.index(1, 3)) == "Walk-in Customer"
    assert m.data(m.index(0, 2)) == "2025-01-01 14:30"
    assert m.data(m.index(0, 4)) == "$28.05"
    assert m.flags(m.index(0, 0)) & Qt.ItemIsUserCheckable

    assert m.data(m.index(2, 0), Qt.CheckStateRole) == Qt.Unchecked
    with qtbot.waitSignal(m.selectionToggled) as blocker:
        assert m.setData(m.index(2, 0), Qt.Checked, Qt.CheckStateRole)
    assert blocker.args == [3, True]
    assert sel.is_selected(3)
    assert m.data(m.index(2, 0), Qt.CheckStateRole) == Qt.Checked


# --------------------------- controller ---------------------------

def test_refresh_fills_grid_and_summary(qtbot, ledger):
    ctrl = _make_controller(qtbot, FakeSource(ledger))
    ctrl.refresh()
    assert _ids(ctrl) == list(range(1, 11))
    assert ctrl.view.lab_count.text() == "10 transactions found"
    assert ctrl.view.lab_total.text() == "Total: $280.50"
    assert ctrl.view.btn_refresh.isEnabled()
    assert ctrl.view.btn_export.isEnabled()


def test_status_and_search_filter_the_snapshot(qtbot, ledger):
    ctrl = _make_controller(qtbot, FakeSource(ledger))
    ctrl.refresh()
    v = ctrl.view
    v.status_filter.setCurrentIndex(v.status_filter.findData("Completed"))
    assert _ids(ctrl) == [1, 4, 7, 10]
    v.search.setText("alice")
    assert _ids(ctrl) == [1, 4]
    v.status_filter.setCurrentIndex(v.status_filter.findData("All"))
    assert _ids(ctrl) == [1, 4]


def test_buttons_disabled_until_latest_fetch_lands(qtbot, ledger):
    pool = ManualPool()
    ctrl = _make_controller(qtbot, FakeSource(ledger), pool=pool)
    ctrl.view.search.setText("alice")
    ctrl.refresh()
    ctrl.view.search.setText("")
    ctrl.refresh()
    assert not ctrl.view.btn_refresh.isEnabled()
    assert not ctrl.view.btn_export.isEnabled()

    pool.jobs[1].run()
    assert ctrl.view.btn_refresh.isEnabled()
    assert len(_ids(ctrl)) == 10

    # the first (stale) response must not overwrite the newer snapshot
    pool.jobs[0].run()
    assert len(ctrl.store.snapshot) == 10
    assert len(_ids(ctrl)) == 10


def test_fetch_failure_keeps_previous_rows(qtbot, ledger, messages):
    src = FakeSource(ledger)
    ctrl = _make_controller(qtbot, src)
    ctrl.refresh()
    src.fail = "Server error"
    ctrl.refresh()
    assert len(_ids(ctrl)) == 10
    assert messages and messages[-1][0] == "error"
    assert "Server error" in messages[-1][2]
    assert ctrl.view.btn_refresh.isEnabled()


def test_fetch_request_uses_settings(qtbot, ledger):
    src = FakeSource(ledger)
    ctrl = _make_controller(qtbot, src)
    ctrl.settings.page_size = 20
    ctrl.view.search.setText("bob")
    ctrl.refresh()
    assert src.requests[-1].page_size == 20
    assert src.requests[-1].search_term == "bob"


def test_select_all_respects_filter(qtbot, ledger):
    ctrl = _make_controller(qtbot, FakeSource(ledger))
    ctrl.refresh()
    v = ctrl.view
    v.status_filter.setCurrentIndex(v.status_filter.findData("Pending"))
    ctrl.select_all()
    assert ctrl.selection.selected_ids() == [2, 5, 8]
    v.status_filter.setCurrentIndex(v.status_filter.findData("All"))
    assert ctrl.toggle(9) is True
    assert [s.id for s in ctrl.selection.finalize()] == [2, 5, 8, 9]
    ctrl.clear_selection()
    assert len(ctrl.selection) == 0


def test_details_follow_current_row(qtbot, ledger):
    ctrl = _make_controller(qtbot, FakeSource(ledger))
    ctrl.refresh()
    ctrl.view.tbl.setCurrentIndex(ctrl.base.index(1, 1))
    d = ctrl.view.details
    assert ctrl.current_sale().id == 2
    assert d.lab_invoice.text() == "INV-000002"
    assert d.lab_customer.text() == "Walk-in Customer"
    assert d.lab_subtotal.text() == "$25.50"
    assert d.lab_tax.text() == "$2.55"
    assert d.lab_total.text() == "$28.05"
    assert d.lab_due.text() == "Feb 01, 2025"


def test_details_show_problem_for_bad_lines(qtbot):
    bad = make_sale(5, when=datetime(2025, 1, 5), items=(make_item("Broken", 1, "2.00", "3.00"),))
    ctrl = _make_controller(qtbot, FakeSource([bad]))
    ctrl.refresh()
    ctrl.view.tbl.setCurrentIndex(ctrl.base.index(0, 1))
    d = ctrl.view.details
    assert d.lab_invoice.text() == "-"
    assert "exceeds unit price" in d.lab_problem.text()


def test_export_csv_writes_displayed_rows(qtbot, ledger, tmp_path):
    ctrl = _make_controller(qtbot, FakeSource(ledger), tmp_path=tmp_path)
    ctrl.refresh()
    ctrl.view.status_filter.setCurrentIndex(ctrl.view.status_filter.findData("Completed"))
    dest = tmp_path / "out.csv"
    assert ctrl.export_csv(str(dest)) == 4
    lines = dest.read_text(encoding="utf-8").splitlines()
    assert [ln.split(",")[0] for ln in lines[1:]] == ["1", "4", "7", "10"]


def test_generate_invoices_in_ledger_order(qtbot, ledger, tmp_path, fake_weasyprint):
    ctrl = _make_controller(qtbot, FakeSource(ledger), tmp_path=tmp_path)
    ctrl.refresh()
    ctrl.toggle(7)
    ctrl.toggle(3)
    written, problems = ctrl.generate_invoices(str(tmp_path))
    assert problems == []
    assert [Path(p).name for p in written] == [
        "Invoice_INV-000003.pdf",
        "Invoice_INV-000007.pdf",
    ]
    assert all((tmp_path / n).exists() for n in ("Invoice_INV-000003.pdf", "Invoice_INV-000007.pdf"))


def test_generate_skips_invalid_sales(qtbot, tmp_path, fake_weasyprint):
    good = make_sale(1, when=datetime(2025, 1, 2))
    bad = make_sale(2, when=datetime(2025, 1, 3), items=(make_item("Broken", 0, "1.00"),))
    ctrl = _make_controller(qtbot, FakeSource([good, bad]), tmp_path=tmp_path)
    ctrl.refresh()
    ctrl.select_all()
    written, problems = ctrl.generate_invoices(str(tmp_path))
    assert len(written) == 1
    assert len(problems) == 1 and problems[0].startswith("Sale 2:")


def test_generate_aborts_when_pdf_cannot_be_written(qtbot, ledger, tmp_path, fake_weasyprint):
    ctrl = _make_controller(qtbot, FakeSource(ledger), tmp_path=tmp_path)
    ctrl.refresh()
    ctrl.select_all()
    fake_weasyprint.fail = OSError("disk full")
    with pytest.raises(ExportFailed) as ei:
        ctrl.generate_invoices(str(tmp_path))
    assert "disk full" in str(ei.value)
    assert fake_weasyprint.written == []


def test_generate_dialog_reports_export_failure_once(qtbot, ledger, tmp_path, fake_weasyprint,
                                                     messages, monkeypatch):
    ctrl = _make_controller(qtbot, FakeSource(ledger), tmp_path=tmp_path)
    ctrl.refresh()
    ctrl.select_all()
    fake_weasyprint.fail = OSError("disk full")
    monkeypatch.setattr(controller_mod.QFileDialog, "getExistingDirectory",
                        staticmethod(lambda *a, **k: str(tmp_path)))
    ctrl._generate()
    assert len(messages) == 1
    kind, title, text = messages[0]
    assert kind == "error"
    assert title == "Export Failed"
    assert "disk full" in text


def test_generate_with_nothing_selected(qtbot, ledger, tmp_path):
    ctrl = _make_controller(qtbot, FakeSource(ledger))
    ctrl.refresh()
    with pytest.raises(EmptySelection):
        ctrl.generate_invoices(str(tmp_path))


def test_main_window_hosts_sales_and_closes_cleanly(qtbot, ledger):
    win = MainWindow(FakeSource(ledger), LedgerSettings())
    qtbot.addWidget(win)
    assert win.nav.count() == 1
    assert win.stack.currentWidget() is win.sales.get_widget()
    win.sales._pool = InlinePool()
    win.sales.view.date_from.setDate(QDate(2025, 1, 1))
    win.sales.view.date_to.setDate(QDate(2025, 1, 31))
    win.sales.refresh()
    win.sales.select_all()
    win.sales.load_invoice(ledger[0])
    win.close()
    assert len(win.sales.selection) == 0
    assert win.sales.adapter.view is None
