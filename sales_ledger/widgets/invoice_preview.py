import logging
import os

from PySide6.QtWidgets import QDialog, QVBoxLayout, QToolBar, QTextBrowser, QFileDialog
from PySide6.QtCore import QUrl
from PySide6.QtGui import QAction, QKeySequence, QShortcut, QTextDocument, QDesktopServices
from PySide6.QtPrintSupport import QPrinter, QPrintDialog

from ..modules.sales.errors import SalesLedgerError
from ..modules.sales.invoice import InvoiceAdapter, invoice_email, invoice_pdf_name
from ..utils.ui_helpers import info, error

_log = logging.getLogger(__name__)


class InvoicePreview(QDialog):
    """
    Shows the invoice currently live in an InvoiceAdapter and offers
    print / save-as-PDF / email. Figures come from the adapter's InvoiceView;
    nothing is recomputed here.
    """

    def __init__(self, adapter: InvoiceAdapter, parent=None, export_dir: str = ""):
        super().__init__(parent)
        self.adapter = adapter
        self.export_dir = export_dir
        view = adapter.view
        self.setWindowTitle(f"Invoice {view.invoice_number}" if view else "Invoice")
        self.resize(780, 860)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QToolBar()
        layout.addWidget(toolbar)

        self.act_print = QAction("Print", self)
        self.act_print.triggered.connect(self.print_invoice)
        toolbar.addAction(self.act_print)

        self.act_pdf = QAction("Save as PDF…", self)
        self.act_pdf.triggered.connect(self.save_pdf)
        toolbar.addAction(self.act_pdf)

        self.act_email = QAction("Email", self)
        self.act_email.triggered.connect(self.email_invoice)
        toolbar.addAction(self.act_email)

        print_shortcut = QShortcut(QKeySequence("Ctrl+P"), self)
        print_shortcut.activated.connect(self.print_invoice)

        self.web_view = QTextBrowser()
        self.web_view.setOpenExternalLinks(True)
        layout.addWidget(self.web_view)

        self.load_invoice()

    def load_invoice(self):
        try:
            self.web_view.setHtml(self.adapter.html())
        except Exception as e:
            _log.exception("Could not render invoice")
            self.web_view.setHtml(
                f"<h2>Error Loading Invoice</h2><p>Could not render the invoice: {e}</p>"
            )

    def _send_to_printer(self, html: str) -> bool:
        printer = QPrinter(QPrinter.HighResolution)
        view = self.adapter.view
        if view is not None:
            printer.setDocName(view.invoice_number)
        dlg = QPrintDialog(printer, self)
        if dlg.exec() != QPrintDialog.Accepted:
            return False
        doc = QTextDocument()
        doc.setHtml(html)
        # PySide6 exposes QTextDocument.print as print_ in most releases
        if hasattr(doc, "print_"):
            doc.print_(printer)
        else:
            doc.print(printer)
        return True

    def print_invoice(self):
        try:
            if self.adapter.print_invoice(self._send_to_printer):
                _log.info("Printed invoice %s", self.adapter.view.invoice_number)
        except SalesLedgerError as e:
            error(self, e.title, str(e))
        except Exception as e:
            _log.exception("Print failed")
            error(self, "Print Error", f"Could not print invoice: {e}")

    def save_pdf(self):
        view = self.adapter.view
        if view is None:
            return
        default = os.path.join(self.export_dir, invoice_pdf_name(view)) if self.export_dir else invoice_pdf_name(view)
        fn, _ = QFileDialog.getSaveFileName(self, "Save Invoice", default, "PDF Files (*.pdf)")
        if not fn:
            return
        try:
            path = self.adapter.export_pdf(fn)
        except SalesLedgerError as e:
            _log.error("Invoice export failed: %s", e)
            error(self, e.title, str(e))
            return
        _log.info("Invoice %s saved to %s", view.invoice_number, path)
        info(self, "Invoice Saved", f"Invoice saved successfully to:\n{path}")

    def email_invoice(self):
        view = self.adapter.view
        if view is None:
            return
        url = invoice_email(view, self.adapter.company)
        if not QDesktopServices.openUrl(QUrl(url)):
            info(self, "Email Client Not Available",
                 "Could not open an email client. Save the invoice as PDF and attach it manually.")
