"""
modules/sales/records.py

Value objects for the sales ledger. Records are owned by the ledger source;
the desk only holds read-only copies, so every dataclass here is frozen.

Item constraints (quantity > 0, discount <= unit price) are NOT enforced at
construction: a malformed line must still be filterable/exportable with the
rest of the ledger, and is only rejected when its totals are computed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple

from ...constants import (
    STATUS_ALL,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    WALK_IN_CUSTOMER,
)
from .money import to_money

SALE_STATUSES = (STATUS_COMPLETED, STATUS_PENDING, STATUS_CANCELLED)
FILTER_STATUSES = (STATUS_ALL,) + SALE_STATUSES


def normalize_status(value: Any, *, allow_all: bool = False) -> str:
    """Map 'completed' / ' PENDING ' etc. onto the canonical status names."""
    choices = FILTER_STATUSES if allow_all else SALE_STATUSES
    text = str(value or "").strip().lower()
    for s in choices:
        if s.lower() == text:
            return s
    raise ValueError(f"Unknown sale status {value!r}; expected one of {', '.join(choices)}.")


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value or "").strip()
    if not text:
        raise ValueError("Sale date is required.")
    # API timestamps come as ISO-8601, sometimes with a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _pick(d: Mapping[str, Any], *keys: str, default=None):
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


@dataclass(frozen=True)
class SaleItem:
    product_name: str
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal = Decimal("0.00")
    product_sku: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_money(self.unit_price))
        object.__setattr__(self, "discount_amount", to_money(self.discount_amount))
        object.__setattr__(self, "product_sku", self.product_sku or None)

    @property
    def description(self) -> str:
        name = self.product_name or ""
        return f"{name} [{self.product_sku}]" if self.product_sku else name

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SaleItem":
        qty = _pick(d, "quantity", "qty", default=0)
        return cls(
            product_name=str(_pick(d, "productName", "product_name", default="")),
            product_sku=_pick(d, "productSKU", "productSku", "product_sku"),
            quantity=int(qty),
            unit_price=_pick(d, "unitPrice", "unit_price", default=0),
            discount_amount=_pick(d, "discountAmount", "discount_amount", default=0),
        )


@dataclass(frozen=True)
class SaleRecord:
    """
    One sale as returned by the ledger source.

    total_amount is the amount actually recorded as paid. It is kept as-is and
    never reconciled against the computed grand total.
    """
    id: int
    date: datetime
    status: str
    payment_method: str = ""
    total_amount: Decimal = Decimal("0.00")
    customer_name: Optional[str] = None
    items: Tuple[SaleItem, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if isinstance(self.id, bool) or int(self.id) < 0:
            raise ValueError(f"Sale id must be a non-negative integer (got {self.id!r}).")
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "date", parse_datetime(self.date))
        object.__setattr__(self, "status", normalize_status(self.status))
        object.__setattr__(self, "payment_method", str(self.payment_method or ""))
        object.__setattr__(self, "total_amount", to_money(self.total_amount))
        name = self.customer_name
        object.__setattr__(self, "customer_name", name.strip() if name and name.strip() else None)
        object.__setattr__(self, "items", tuple(self.items or ()))

    def display_customer(self, walk_in_label: str = WALK_IN_CUSTOMER) -> str:
        return self.customer_name or walk_in_label

    @property
    def items_count(self) -> int:
        return len(self.items)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SaleRecord":
        """Build from an API/JSON payload (camelCase or snake_case keys)."""
        items = _pick(d, "items", default=None) or []
        return cls(
            id=int(_pick(d, "id", "saleId", "sale_id")),
            date=_pick(d, "date", "saleDate", "sale_date"),
            status=_pick(d, "status", default="Pending"),
            payment_method=_pick(d, "paymentMethod", "payment_method", default=""),
            total_amount=_pick(d, "totalAmount", "total_amount", default=0),
            customer_name=_pick(d, "customerName", "customer_name"),
            items=tuple(SaleItem.from_dict(i) for i in items),
        )


@dataclass(frozen=True)
class InvoiceLine:
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class InvoiceView:
    """Display-ready invoice. The rendering layer must never recompute these figures."""
    sale_id: int
    invoice_number: str
    invoice_date: datetime
    due_date: date
    customer_name: str
    payment_method: str
    status: str
    line_rows: Tuple[InvoiceLine, ...]
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    grand_total: Decimal
    amount_paid: Decimal

    @property
    def tax_percent_label(self) -> str:
        pct = (self.tax_rate * 100).normalize()
        return f"{pct:f}%"


@dataclass(frozen=True)
class LedgerFilterCriteria:
    date_from: date
    date_to: date
    status: str = STATUS_ALL
    search_term: Optional[str] = None

    def __post_init__(self):
        df, dt = self.date_from, self.date_to
        object.__setattr__(self, "date_from", df.date() if isinstance(df, datetime) else df)
        object.__setattr__(self, "date_to", dt.date() if isinstance(dt, datetime) else dt)
        object.__setattr__(self, "status", normalize_status(self.status, allow_all=True))
        term = (self.search_term or "").strip()
        object.__setattr__(self, "search_term", term or None)
