"""
Sales ledger module package exports.

Always available (pure Python, no Qt):
- SaleItem, SaleRecord, InvoiceLine, InvoiceView, LedgerFilterCriteria
- line_total, SaleComputation, invoice_number, parse_invoice_number
- LedgerFilter, filter_sales
- SelectionBatch
- CsvExporter, write_csv
- InvoiceAdapter
- FetchRequest, FetchResult, JsonLedgerSource, LedgerStore
- the error classes

Optional UI components (imported defensively so environments
without Qt can still import this package):
- SalesController
- SalesView
- SalesTableModel
- InvoiceLinesModel
- SaleDetails
"""

from .errors import (
    SalesLedgerError,
    ValidationError,
    InvalidDiscount,
    InvalidQuantity,
    InvalidUnitPrice,
    EmptySelection,
    NullSale,
    InvalidInvoiceNumber,
    CollaboratorError,
    FetchFailed,
    ExportFailed,
)
from .records import SaleItem, SaleRecord, InvoiceLine, InvoiceView, LedgerFilterCriteria
from .calculations import SaleComputation, line_total, invoice_number, parse_invoice_number
from .filters import LedgerFilter, filter_sales
from .selection import SelectionBatch
from .export import CsvExporter, write_csv
from .invoice import InvoiceAdapter
from .source import FetchRequest, FetchResult, JsonLedgerSource, LedgerStore

# UI/model pieces are optional to avoid a hard Qt dependency during headless tests
try:
    from .controller import SalesController  # type: ignore
    from .view import SalesView  # type: ignore
    from .model import SalesTableModel, InvoiceLinesModel  # type: ignore
    from .details import SaleDetails  # type: ignore
except ImportError:  # pragma: no cover
    SalesController = None  # type: ignore
    SalesView = None  # type: ignore
    SalesTableModel = None  # type: ignore
    InvoiceLinesModel = None  # type: ignore
    SaleDetails = None  # type: ignore

__all__ = [
    "SalesLedgerError",
    "ValidationError",
    "InvalidDiscount",
    "InvalidQuantity",
    "InvalidUnitPrice",
    "EmptySelection",
    "NullSale",
    "InvalidInvoiceNumber",
    "CollaboratorError",
    "FetchFailed",
    "ExportFailed",
    "SaleItem",
    "SaleRecord",
    "InvoiceLine",
    "InvoiceView",
    "LedgerFilterCriteria",
    "SaleComputation",
    "line_total",
    "invoice_number",
    "parse_invoice_number",
    "LedgerFilter",
    "filter_sales",
    "SelectionBatch",
    "CsvExporter",
    "write_csv",
    "InvoiceAdapter",
    "FetchRequest",
    "FetchResult",
    "JsonLedgerSource",
    "LedgerStore",
    "SalesController",
    "SalesView",
    "SalesTableModel",
    "InvoiceLinesModel",
    "SaleDetails",
]
