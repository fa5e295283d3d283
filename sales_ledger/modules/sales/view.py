from datetime import date

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel,
    QSplitter, QComboBox, QDateEdit,
)
from PySide6.QtCore import Qt, QDate

from ...widgets.table_view import TableView
from .details import SaleDetails
from .records import FILTER_STATUSES, LedgerFilterCriteria


class SalesView(QWidget):
    """
    Ledger page: filter bar, sales grid with a selection checkbox column,
    details panel and the action buttons. Holds no ledger state of its own.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        # --- Filter bar ---
        filters = QHBoxLayout()
        today = QDate.currentDate()
        self.date_from = QDateEdit(today.addMonths(-1))
        self.date_to = QDateEdit(today)
        for d in (self.date_from, self.date_to):
            d.setCalendarPopup(True)
            d.setDisplayFormat("yyyy-MM-dd")
            d.setMaximumWidth(130)

        self.status_filter = QComboBox()
        for s in FILTER_STATUSES:
            self.status_filter.addItem(s, s)
        self.status_filter.setMaximumWidth(140)

        self.search = QLineEdit()
        self.search.setPlaceholderText("Search sales (id, customer)…")
        self.search.setClearButtonEnabled(True)

        filters.addWidget(QLabel("From:"))
        filters.addWidget(self.date_from)
        filters.addWidget(QLabel("To:"))
        filters.addWidget(self.date_to)
        filters.addWidget(QLabel("Status:"))
        filters.addWidget(self.status_filter)
        filters.addWidget(QLabel("Search:"))
        filters.addWidget(self.search, 2)
        root.addLayout(filters)

        # --- Toolbar ---
        bar = QHBoxLayout()
        self.btn_refresh = QPushButton("Refresh")
        self.btn_export = QPushButton("Export CSV…")
        self.btn_invoice = QPushButton("Invoice")
        self.btn_select_all = QPushButton("Select All")
        self.btn_clear = QPushButton("Deselect All")
        self.btn_generate = QPushButton("Generate Invoices")

        bar.addWidget(self.btn_refresh)
        bar.addWidget(self.btn_export)
        bar.addWidget(self.btn_invoice)
        bar.addStretch(1)
        bar.addWidget(self.btn_select_all)
        bar.addWidget(self.btn_clear)
        bar.addWidget(self.btn_generate)
        root.addLayout(bar)

        # --- Main split: grid (left), details (right) ---
        split = QSplitter(Qt.Horizontal)
        self.tbl = TableView()
        split.addWidget(self.tbl)
        self.details = SaleDetails()
        split.addWidget(self.details)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

        # --- Status line ---
        status = QHBoxLayout()
        self.lab_status = QLabel("Ready")
        self.lab_count = QLabel("")
        self.lab_total = QLabel("")
        status.addWidget(self.lab_status, 1)
        status.addWidget(self.lab_count)
        status.addWidget(self.lab_total)
        root.addLayout(status)

    # --- Public helpers ----------------------------------------------------

    def criteria(self) -> LedgerFilterCriteria:
        return LedgerFilterCriteria(
            date_from=_to_date(self.date_from.date()),
            date_to=_to_date(self.date_to.date()),
            status=self.status_filter.currentData() or self.status_filter.currentText(),
            search_term=self.search.text(),
        )

    def set_busy(self, busy: bool, message: str = ""):
        """Disable the controls that would race with an outstanding fetch."""
        self.btn_refresh.setEnabled(not busy)
        self.btn_export.setEnabled(not busy)
        self.lab_status.setText(message or ("Loading…" if busy else "Ready"))

    def set_summary(self, count: int, total_text: str):
        self.lab_count.setText(f"{count} transactions found")
        self.lab_total.setText(f"Total: {total_text}")


def _to_date(qd: QDate) -> date:
    return date(qd.year(), qd.month(), qd.day())
