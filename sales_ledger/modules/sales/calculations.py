"""
modules/sales/calculations.py

Pure invoice math for sale records:
- line_total(): one line item's extended total.
- SaleComputation: subtotal / tax / grand total, invoice number, due date and
  the finished InvoiceView for one sale.

No I/O and no logging here; callers (controller/UI) log around these calls.
Every figure is rounded to cents before it is combined with another one.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ...constants import (
    DEFAULT_DUE_DAYS,
    DEFAULT_TAX_RATE,
    INVOICE_NUMBER_WIDTH,
    INVOICE_PREFIX,
    WALK_IN_CUSTOMER,
)
from .errors import InvalidDiscount, InvalidInvoiceNumber, InvalidQuantity, InvalidUnitPrice, NullSale
from .money import ZERO, money_sum, round2
from .records import InvoiceLine, InvoiceView, SaleItem, SaleRecord

__all__ = [
    "TAX_RATE",
    "line_total",
    "invoice_number",
    "parse_invoice_number",
    "due_date",
    "ledger_summary",
    "SaleComputation",
]

TAX_RATE = Decimal(DEFAULT_TAX_RATE)


# -----------------------------
# Line items
# -----------------------------

def line_total(item: SaleItem) -> Decimal:
    """
    round2((unit_price - discount_amount) * quantity)

    The discount is per unit and applied before multiplying by quantity.
    Raises InvalidQuantity for quantity <= 0, InvalidUnitPrice for a negative
    price and InvalidDiscount when the discount is negative or exceeds the
    unit price.
    """
    qty = item.quantity
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise InvalidQuantity(qty, item.product_name)
    if item.unit_price < 0:
        raise InvalidUnitPrice(item.unit_price, item.product_name)
    if item.discount_amount < 0:
        raise InvalidDiscount(item.unit_price, item.discount_amount, item.product_name)
    if item.discount_amount > item.unit_price:
        raise InvalidDiscount(item.unit_price, item.discount_amount, item.product_name)
    return round2((item.unit_price - item.discount_amount) * qty)


# -----------------------------
# Invoice identity / terms
# -----------------------------

def invoice_number(sale_id: int) -> str:
    """42 -> 'INV-000042'."""
    return f"{INVOICE_PREFIX}{int(sale_id):0{INVOICE_NUMBER_WIDTH}d}"


def parse_invoice_number(text: str) -> int:
    """
    'INV-000042' -> 42. The prefix is mandatory and the rest must be digits
    only; any other shape is rejected.
    """
    s = str(text or "").strip()
    digits = s[len(INVOICE_PREFIX):]
    if not s.startswith(INVOICE_PREFIX) or not digits.isdigit() or not digits.isascii():
        raise InvalidInvoiceNumber(text)
    return int(digits)


def due_date(sale_date: date, days: int = DEFAULT_DUE_DAYS) -> date:
    """Calendar days, not business days."""
    d = sale_date.date() if isinstance(sale_date, datetime) else sale_date
    return d + timedelta(days=days)


def ledger_summary(sales: Iterable[SaleRecord]) -> Tuple[int, Decimal]:
    """(record count, sum of recorded total amounts) for a status-bar style summary."""
    count = 0
    total = ZERO
    for s in sales:
        count += 1
        total += s.total_amount
    return count, round2(total)


# -----------------------------
# Sale totals
# -----------------------------

class SaleComputation:
    """
    Turns one SaleRecord into an InvoiceView.

    tax_rate is injected (settings) rather than read from a module constant so
    that rates can be swapped and tested; TAX_RATE is only the default.
    """

    def __init__(
        self,
        tax_rate: Decimal | str = TAX_RATE,
        due_days: int = DEFAULT_DUE_DAYS,
        walk_in_label: str = WALK_IN_CUSTOMER,
    ):
        rate = tax_rate if isinstance(tax_rate, Decimal) else Decimal(str(tax_rate))
        if rate < 0:
            raise ValueError("Tax rate cannot be negative.")
        self.tax_rate = rate
        self.due_days = int(due_days)
        self.walk_in_label = walk_in_label

    @classmethod
    def from_settings(cls, settings) -> "SaleComputation":
        return cls(
            tax_rate=settings.tax_rate,
            due_days=settings.due_days,
            walk_in_label=settings.walk_in_label,
        )

    def subtotal(self, sale: SaleRecord) -> Decimal:
        return money_sum(line_total(i) for i in sale.items)

    def tax(self, subtotal: Decimal) -> Decimal:
        return round2(subtotal * self.tax_rate)

    def grand_total(self, subtotal: Decimal, tax: Decimal) -> Decimal:
        # both operands are already at cent precision
        return subtotal + tax

    def compute(self, sale: Optional[SaleRecord]) -> InvoiceView:
        if sale is None:
            raise NullSale()

        lines = tuple(
            InvoiceLine(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=line_total(item),
            )
            for item in sale.items
        )
        subtotal = money_sum(ln.line_total for ln in lines)
        tax = self.tax(subtotal)

        return InvoiceView(
            sale_id=sale.id,
            invoice_number=invoice_number(sale.id),
            invoice_date=sale.date,
            due_date=due_date(sale.date, self.due_days),
            customer_name=sale.display_customer(self.walk_in_label),
            payment_method=sale.payment_method,
            status=sale.status,
            line_rows=lines,
            subtotal=subtotal,
            tax_rate=self.tax_rate,
            tax=tax,
            grand_total=self.grand_total(subtotal, tax),
            amount_paid=sale.total_amount,
        )
