from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal, Slot
from PySide6.QtWidgets import QFileDialog, QWidget

from ...config import LedgerSettings
from ..base_module import BaseModule
from ...utils.helpers import fmt_money
from ...utils.ui_helpers import error, info, warn
from ...widgets.invoice_preview import InvoicePreview
from .calculations import SaleComputation, ledger_summary
from .errors import CollaboratorError, FetchFailed, ValidationError
from .export import CsvExporter, default_export_name
from .filters import LedgerFilter
from .invoice import CompanyInfo, InvoiceAdapter, invoice_pdf_name
from .model import SalesTableModel
from .records import SaleRecord
from .selection import SelectionBatch
from .source import FetchRequest, FetchResult, LedgerSource, LedgerStore
from .view import SalesView

_log = logging.getLogger(__name__)


class _FetchSignals(QObject):
    # seq, FetchResult | None, error text
    finished = Signal(int, object, str)


class _FetchRunnable(QRunnable):
    """
    Runs one ledger page fetch on the thread pool and always reports back,
    success or not, through a queued signal.
    """
    def __init__(self, seq: int, work: Callable[[], FetchResult], signals: _FetchSignals) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._seq = seq
        self._work = work
        self._signals = signals

    @Slot()
    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._work()
        except Exception as e:
            _log.exception("Ledger fetch #%s raised", self._seq)
            self._signals.finished.emit(self._seq, None, f"{e.__class__.__name__}: {e}")
            return
        self._signals.finished.emit(self._seq, result, "")


class SalesController(BaseModule):
    """
    Wires the ledger page together:
      ledger source -> LedgerStore snapshot -> LedgerFilter -> grid
      grid checkboxes -> SelectionBatch -> batch invoice generation
      highlighted row -> SaleComputation -> details / InvoiceAdapter
    """

    title = "Sales"
    SEARCH_DEBOUNCE_MS = 400

    def __init__(self, source: LedgerSource, settings: LedgerSettings | None = None,
                 pool: QThreadPool | None = None):
        super().__init__()
        self.source = source
        self.settings = settings or LedgerSettings()
        self.view = SalesView()

        self.computation = SaleComputation.from_settings(self.settings)
        self.store = LedgerStore()
        self.ledger_filter = LedgerFilter(self.view.criteria())
        self.selection = SelectionBatch()
        self.exporter = CsvExporter()
        self.adapter = InvoiceAdapter(self.computation, CompanyInfo.from_settings(self.settings))

        self.base = SalesTableModel([], self.selection, self.settings.walk_in_label)
        self.view.tbl.setModel(self.base)
        self.view.tbl.pin_check_column(0)

        self._pool = pool or QThreadPool.globalInstance()
        self._signals = _FetchSignals()
        self._signals.finished.connect(self._on_fetch_finished)

        self._search_timer = QTimer(self.view)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(self.SEARCH_DEBOUNCE_MS)
        self._search_timer.timeout.connect(self.refresh)

        self._wire()

    def get_widget(self) -> QWidget:
        return self.view

    # ---- wiring -----------------------------------------------------------

    def _wire(self):
        v = self.view
        v.btn_refresh.clicked.connect(self.refresh)
        v.btn_export.clicked.connect(self._export)
        v.btn_invoice.clicked.connect(self._invoice)
        v.btn_select_all.clicked.connect(self.select_all)
        v.btn_clear.clicked.connect(self.clear_selection)
        v.btn_generate.clicked.connect(self._generate)

        v.date_from.dateChanged.connect(self._apply_filter)
        v.date_to.dateChanged.connect(self._apply_filter)
        v.status_filter.currentIndexChanged.connect(self._apply_filter)
        # filter what we already have right away; ask the source again once typing settles
        v.search.textChanged.connect(self._on_search_changed)

        v.tbl.selectionModel().currentRowChanged.connect(self._sync_details)
        self.base.modelReset.connect(self._sync_details)

    def _on_search_changed(self, _text: str):
        self._apply_filter()
        self._search_timer.start()

    # ---- fetch ------------------------------------------------------------

    def refresh(self):
        """Issue a new page fetch off the UI thread. The latest issued fetch wins."""
        self._search_timer.stop()
        request = FetchRequest(page_size=self.settings.page_size, search_term=self.view.search.text())
        seq = self.store.begin_fetch(request)
        _log.info("Loading sales page #%s (search=%r)", seq, request.search_term)
        self.view.set_busy(True)
        source = self.source
        self._pool.start(_FetchRunnable(seq, lambda: source.fetch_page(request), self._signals))

    @Slot(int, object, str)
    def _on_fetch_finished(self, seq: int, result: Optional[FetchResult], error_text: str):
        try:
            if result is None:
                applied = self.store.fail(seq, error_text)
            else:
                applied = self.store.complete(seq, result)
            if applied:
                _log.info("Loaded %s sales (fetch #%s)", len(self.store.snapshot), seq)
                self._apply_snapshot()
        except FetchFailed as e:
            # previous snapshot and views stay as they were
            _log.error("Fetch #%s failed: %s", seq, e.detail)
            error(self.view, e.title, str(e))
        finally:
            busy = self.store.outstanding
            self.view.set_busy(busy)

    def _apply_snapshot(self):
        self.selection.set_ledger(self.store.snapshot)
        self._apply_filter()

    # ---- filter -----------------------------------------------------------

    def _apply_filter(self, *_):
        try:
            criteria = self.view.criteria()
        except ValueError as e:
            _log.debug("ignoring invalid filter input: %s", e)
            return
        self.ledger_filter.set_criteria(criteria)
        displayed = list(self.ledger_filter.apply(self.store.snapshot))
        self.selection.set_displayed(displayed)
        self.base.replace(displayed)
        count, total = ledger_summary(displayed)
        self.view.set_summary(count, fmt_money(total, symbol="$"))

    def displayed(self) -> List[SaleRecord]:
        return self.base.rows()

    # ---- selection --------------------------------------------------------

    def select_all(self):
        self.selection.select_all()
        self.base.refresh_checks()

    def clear_selection(self):
        self.selection.clear()
        self.base.refresh_checks()

    def toggle(self, sale_id: int) -> bool:
        state = self.selection.toggle(sale_id)
        self.base.refresh_checks()
        return state

    def current_sale(self) -> Optional[SaleRecord]:
        idx = self.view.tbl.currentIndex()
        if not idx.isValid():
            return None
        return self.base.at(idx.row())

    def _sync_details(self, *_):
        sale = self.current_sale()
        if sale is None:
            self.view.details.clear()
            return
        try:
            inv = self.computation.compute(sale)
        except ValidationError as e:
            self.view.details.set_sale(sale, None, str(e), self.settings.walk_in_label)
            return
        self.view.details.set_sale(sale, inv, walk_in_label=self.settings.walk_in_label)

    # ---- export -----------------------------------------------------------

    def export_csv(self, destination: str) -> int:
        rows = self.displayed()
        _log.info("Exporting %s sales to %s", len(rows), destination)
        n = self.exporter.export(rows, destination)
        _log.info("Exported %s sales to %s", n, destination)
        return n

    def _export(self):
        if self.store.outstanding:
            return
        default = os.path.join(self.settings.export_dir, default_export_name())
        fn, _ = QFileDialog.getSaveFileName(
            self.view, "Export Sales", default, "CSV Files (*.csv);;All Files (*.*)"
        )
        if not fn:
            return
        try:
            self.export_csv(fn)
        except CollaboratorError as e:
            _log.error("CSV export failed: %s", e)
            error(self.view, e.title, str(e))
            return
        info(self.view, "Export Complete", "Sales data exported successfully!")

    # ---- invoices ---------------------------------------------------------

    def load_invoice(self, sale: Optional[SaleRecord]):
        _log.info("Loading sale data for invoice. Sale ID: %s", getattr(sale, "id", None))
        view = self.adapter.load(sale)
        _log.info("Successfully loaded sale data for invoice %s", view.invoice_number)
        return view

    def _invoice(self):
        try:
            self.load_invoice(self.current_sale())
        except ValidationError as e:
            warn(self.view, e.title, str(e))
            return
        dlg = InvoicePreview(self.adapter, self.view, export_dir=self.settings.export_dir)
        dlg.exec()

    def generate_invoices(self, directory: str) -> tuple[list[str], list[str]]:
        """
        Write one PDF per selected sale into `directory`.

        A sale whose lines are invalid is skipped and reported; it does not stop
        the rest of the batch. Raises EmptySelection when nothing is selected
        and ExportFailed (ending the batch) when a PDF cannot be written.
        """
        batch = self.selection.finalize()
        written: list[str] = []
        problems: list[str] = []
        for sale in batch:
            try:
                inv = self.load_invoice(sale)
            except ValidationError as e:
                _log.warning("Skipping sale %s: %s", sale.id, e)
                problems.append(f"Sale {sale.id}: {e}")
                continue
            path = self.adapter.export_pdf(os.path.join(directory, invoice_pdf_name(inv)))
            written.append(str(path))
        return written, problems

    def _generate(self):
        if len(self.selection) == 0:
            warn(self.view, "No Selection", "Please select at least one sale to generate invoices.")
            return
        directory = QFileDialog.getExistingDirectory(self.view, "Save Invoices To", self.settings.export_dir)
        if not directory:
            return
        try:
            written, problems = self.generate_invoices(directory)
        except ValidationError as e:
            warn(self.view, e.title, str(e))
            return
        except CollaboratorError as e:
            _log.error("Invoice generation aborted: %s", e)
            error(self.view, e.title, str(e))
            return
        msg = f"{len(written)} invoice(s) saved to:\n{directory}"
        if problems:
            msg += "\n\nSkipped:\n" + "\n".join(problems)
        info(self.view, "Generate Invoices", msg)

    # ---- lifecycle --------------------------------------------------------

    def on_close(self):
        self.selection.reset()
        self.adapter.close()
