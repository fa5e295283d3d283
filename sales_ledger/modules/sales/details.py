from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QGroupBox,
    QFormLayout,
    QLabel,
)
from PySide6.QtCore import Qt

from ...constants import CSV_DATE_FORMAT, WALK_IN_CUSTOMER
from ...utils.helpers import fmt_money
from .items import InvoiceLinesView


class SaleDetails(QWidget):
    """
    Read-only panel for the highlighted sale: header facts, computed totals and
    line items.

    set_sale(record, view) takes the SaleRecord plus its computed InvoiceView.
    view may be None when the sale's lines are invalid; `problem` then carries
    the validation message shown instead of the totals.
    """

    def __init__(self, parent=None):
        super().__init__(parent)

        self.box = QGroupBox("Sale Details")
        f = QFormLayout(self.box)

        self.lab_id = QLabel("-")
        self.lab_invoice = QLabel("-")
        self.lab_date = QLabel("-")
        self.lab_due = QLabel("-")
        self.lab_customer = QLabel("-")
        self.lab_status = QLabel("-")
        self.lab_payment = QLabel("-")

        self.lab_subtotal = QLabel("-")
        self.lab_tax = QLabel("-")
        self.lab_total = QLabel("-")
        self.lab_paid = QLabel("-")

        for lab in (self.lab_subtotal, self.lab_tax, self.lab_total, self.lab_paid):
            lab.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.lab_total.setStyleSheet("font-weight: bold;")

        f.addRow("ID:", self.lab_id)
        f.addRow("Invoice #:", self.lab_invoice)
        f.addRow("Date:", self.lab_date)
        f.addRow("Due Date:", self.lab_due)
        f.addRow("Customer:", self.lab_customer)
        f.addRow("Status:", self.lab_status)
        f.addRow("Payment Method:", self.lab_payment)
        f.addRow("Subtotal:", self.lab_subtotal)
        self._tax_row_label = QLabel("Tax:")
        f.addRow(self._tax_row_label, self.lab_tax)
        f.addRow("Total:", self.lab_total)
        f.addRow("Amount Paid:", self.lab_paid)

        self.lab_problem = QLabel("")
        self.lab_problem.setStyleSheet("color: #c0392b;")
        self.lab_problem.setWordWrap(True)
        self.lab_problem.setVisible(False)

        self.lines = InvoiceLinesView()

        root = QVBoxLayout(self)
        root.addWidget(self.box)
        root.addWidget(self.lab_problem)
        root.addWidget(self.lines, 1)

    def clear(self):
        for lab in (
            self.lab_id, self.lab_invoice, self.lab_date, self.lab_due, self.lab_customer,
            self.lab_status, self.lab_payment, self.lab_subtotal, self.lab_tax,
            self.lab_total, self.lab_paid,
        ):
            lab.setText("-")
        self._tax_row_label.setText("Tax:")
        self.lab_problem.setVisible(False)
        self.lines.set_rows([])

    def set_sale(self, record, view=None, problem: str = "", walk_in_label: str = WALK_IN_CUSTOMER):
        if record is None:
            self.clear()
            return
        self.lab_id.setText(str(record.id))
        self.lab_date.setText(record.date.strftime(CSV_DATE_FORMAT))
        self.lab_status.setText(record.status)
        self.lab_payment.setText(record.payment_method or "-")
        self.lab_paid.setText(fmt_money(record.total_amount, symbol="$"))

        if view is None:
            self.lab_customer.setText(record.display_customer(walk_in_label))
            for lab in (self.lab_invoice, self.lab_due, self.lab_subtotal, self.lab_tax, self.lab_total):
                lab.setText("-")
            self.lab_problem.setText(problem)
            self.lab_problem.setVisible(bool(problem))
            self.lines.set_rows([])
            return

        self.lab_customer.setText(view.customer_name)
        self.lab_invoice.setText(view.invoice_number)
        self.lab_due.setText(view.due_date.strftime("%b %d, %Y"))
        self.lab_subtotal.setText(fmt_money(view.subtotal, symbol="$"))
        self._tax_row_label.setText(f"Tax ({view.tax_percent_label}):")
        self.lab_tax.setText(fmt_money(view.tax, symbol="$"))
        self.lab_total.setText(fmt_money(view.grand_total, symbol="$"))
        self.lab_problem.setVisible(False)
        self.lines.set_rows(list(view.line_rows))
