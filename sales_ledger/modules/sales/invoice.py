"""
modules/sales/invoice.py

The bridge between SaleComputation and whatever displays/prints an invoice.

InvoiceAdapter keeps exactly one live InvoiceView:

    Idle --load(sale)--> Loaded --print_invoice()--> Printed
                           |--export_pdf()-----> Exported
                           +--close()----------> Idle

load() from any state replaces the live view (no history across sales).
Print and export are independent per call and may be repeated while a view
is live. The HTML is rendered from a jinja2 template; the rendering layer
never recomputes totals.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...config import TEMPLATE_PATH
from ...constants import INVOICE_TEMPLATE
from ...utils.helpers import fmt_money
from .calculations import SaleComputation
from .errors import ExportFailed, NullSale
from .records import InvoiceView, SaleRecord

__all__ = [
    "IDLE",
    "LOADED",
    "PRINTED",
    "EXPORTED",
    "CompanyInfo",
    "InvoiceAdapter",
    "render_invoice_html",
    "invoice_pdf_name",
    "invoice_email",
]

_log = logging.getLogger(__name__)

IDLE = "idle"
LOADED = "loaded"
PRINTED = "printed"
EXPORTED = "exported"

# Margins for the PDF; the screen template carries its own layout CSS.
_INVOICE_PDF_CSS = """
    @page {
        margin: 10mm;
        size: A4;
    }
"""


class CompanyInfo:
    def __init__(self, name: str = "", address: str = "", phone: str = "", email: str = ""):
        self.name = name
        self.address = address
        self.phone = phone
        self.email = email

    @classmethod
    def from_settings(cls, settings) -> "CompanyInfo":
        return cls(
            name=settings.company_name,
            address=settings.company_address,
            phone=settings.company_phone,
            email=settings.company_email,
        )


def _environment(template_dir: str | os.PathLike | None = None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_PATH)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["money"] = lambda v: fmt_money(v, symbol="$")
    return env


def render_invoice_html(
    view: InvoiceView,
    company: Optional[CompanyInfo] = None,
    *,
    template_dir: str | os.PathLike | None = None,
    template_name: str = INVOICE_TEMPLATE,
) -> str:
    template = _environment(template_dir).get_template(template_name)
    return template.render(invoice=view, company=company or CompanyInfo())


def invoice_pdf_name(view: InvoiceView) -> str:
    return f"Invoice_{view.invoice_number}.pdf"


def invoice_email(view: InvoiceView, company: CompanyInfo, recipient: str = "") -> str:
    """mailto: URL with subject/body prefilled (attachments must be added by hand)."""
    subject = f"Invoice {view.invoice_number} from {company.name}"
    body = (
        f"Dear {view.customer_name},\n\n"
        f"Please find attached your invoice {view.invoice_number}.\n\n"
        f"Invoice Details:\n"
        f"- Invoice Number: {view.invoice_number}\n"
        f"- Date: {view.invoice_date:%b %d, %Y}\n"
        f"- Amount: {fmt_money(view.amount_paid, symbol='$')}\n\n"
        f"Thank you for your business!\n\n"
        f"Best regards,\n{company.name}"
    )
    return f"mailto:{recipient}?subject={quote(subject)}&body={quote(body)}"


class InvoiceAdapter:
    def __init__(
        self,
        computation: Optional[SaleComputation] = None,
        company: Optional[CompanyInfo] = None,
        template_dir: str | os.PathLike | None = None,
    ):
        self.computation = computation or SaleComputation()
        self.company = company or CompanyInfo()
        self.template_dir = template_dir
        self._state = IDLE
        self._view: Optional[InvoiceView] = None
        self._html: Optional[str] = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def view(self) -> Optional[InvoiceView]:
        return self._view

    def load(self, sale: Optional[SaleRecord]) -> InvoiceView:
        """
        Compute and make live the invoice for `sale`. If computation fails the
        previously loaded invoice (if any) stays live and the error propagates.
        """
        view = self.computation.compute(sale)
        self._view = view
        self._html = None
        self._state = LOADED
        return view

    def close(self) -> None:
        self._view = None
        self._html = None
        self._state = IDLE

    def html(self) -> str:
        view = self._require_view()
        if self._html is None:
            self._html = render_invoice_html(view, self.company, template_dir=self.template_dir)
        return self._html

    def print_invoice(self, printer: Callable[[str], bool]) -> bool:
        """
        Hand the rendered HTML to a printer callable (e.g. a QPrinter wrapper).

        The callable returns True once the job was sent and False when the user
        cancelled; only a sent job moves the adapter to Printed.
        """
        html = self.html()
        if not printer(html):
            return False
        self._state = PRINTED
        return True

    def export_pdf(self, destination: str | os.PathLike) -> Path:
        html = self.html()
        path = Path(destination)
        try:
            from weasyprint import CSS, HTML

            _log.debug("writing invoice %s to %s", self._view.invoice_number, path)
            HTML(string=html).write_pdf(str(path), stylesheets=[CSS(string=_INVOICE_PDF_CSS)])
        except Exception as e:
            raise ExportFailed(path, e) from e
        self._state = EXPORTED
        return path

    def _require_view(self) -> InvoiceView:
        if self._view is None:
            raise NullSale()
        return self._view
