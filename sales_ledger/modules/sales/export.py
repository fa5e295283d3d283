"""
modules/sales/export.py

Canonical CSV export of a sales ledger: one row per sale (not per line item).

Columns (fixed order):
    Sale ID, Date, Customer, Total Amount, Status, Payment Method, Items Count

- Date is 'YYYY-MM-DD HH:MM'.
- Customer is empty when the sale has no customer name.
- Total Amount is the recorded amount as a bare decimal ('43.45'): no currency
  symbol, no thousands separator.
- Fields containing commas/quotes/newlines are quoted per standard CSV rules;
  the column set and order never change.
"""
from __future__ import annotations

import csv
import logging
import os
from pathlib import Path
from typing import Iterable, List, TextIO

from ...constants import CSV_DATE_FORMAT, CSV_HEADER
from ...utils.helpers import timestamp_str
from .errors import ExportFailed
from .money import money_str
from .records import SaleRecord

__all__ = ["sale_to_row", "write_csv", "CsvExporter", "default_export_name"]

_log = logging.getLogger(__name__)


def default_export_name(now=None) -> str:
    return f"Sales_Export_{timestamp_str(now)}.csv"


def sale_to_row(sale: SaleRecord) -> List[str]:
    return [
        str(sale.id),
        sale.date.strftime(CSV_DATE_FORMAT),
        sale.customer_name or "",
        money_str(sale.total_amount),
        sale.status,
        sale.payment_method,
        str(sale.items_count),
    ]


def write_csv(sales: Iterable[SaleRecord], stream: TextIO) -> int:
    """Write header + one row per sale to an open text stream. Returns the data row count."""
    w = csv.writer(stream, lineterminator="\n")
    w.writerow(CSV_HEADER)
    n = 0
    for sale in sales:
        w.writerow(sale_to_row(sale))
        n += 1
    return n


class CsvExporter:
    """
    Writes a ledger (or a filtered subset) to a destination path.

    The file is opened for the duration of one export call only. Any OS error
    surfaces as ExportFailed; rows already flushed may remain on disk.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def export(self, sales: Iterable[SaleRecord], destination: str | os.PathLike) -> int:
        path = Path(destination)
        _log.debug("csv export -> %s", path)
        try:
            with open(path, "w", newline="", encoding=self.encoding) as f:
                return write_csv(sales, f)
        except OSError as e:
            raise ExportFailed(path, e) from e
