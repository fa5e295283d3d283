# sales_ledger/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - No network and no shared files: ledgers are built in memory and
#   anything written goes to tmp_path
# - Settings env overrides are cleared for every test
# - weasyprint is replaced by a recording fake wherever a PDF is written
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import re
import sys
import types
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

# headless CI has no display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6 import QtCore  # noqa: E402

from sales_ledger.modules.sales.records import SaleItem, SaleRecord, SALE_STATUSES  # noqa: E402


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Silence benign Qt warnings ----------
_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
    r"^QPixmap: Must construct a QGuiApplication",
]

@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    """Filter common harmless Qt messages during tests."""
    previous = QtCore.qInstallMessageHandler(None)
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]

    def handler(msg_type, context, message):
        text = str(message)
        for r in rx:
            if r.search(text):
                return
        QtCore.qInstallMessageHandler(None)
        try:
            QtCore.qDebug(message)
        finally:
            QtCore.qInstallMessageHandler(handler)

    QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(previous)


# ---------- Settings: no leakage from the developer's shell ----------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("SALES_LEDGER_TAX_RATE", "SALES_LEDGER_PAGE_SIZE"):
        monkeypatch.delenv(var, raising=False)


# ---------- Record builders ----------
def make_item(name="Widget", qty=1, price="10.00", discount="0.00", sku=None) -> SaleItem:
    return SaleItem(
        product_name=name,
        quantity=qty,
        unit_price=Decimal(str(price)),
        discount_amount=Decimal(str(discount)),
        product_sku=sku,
    )


def make_sale(sale_id=42, *, when=datetime(2025, 1, 15, 10, 5), customer="John Smith",
              status="Completed", payment="Card", total="43.45", items=None) -> SaleRecord:
    if items is None:
        items = (make_item("Widget", 3, "10.00", "1.50", "W-1"), make_item("Gadget", 1, "14.00"))
    return SaleRecord(
        id=sale_id,
        date=when,
        status=status,
        payment_method=payment,
        total_amount=Decimal(str(total)),
        customer_name=customer,
        items=tuple(items),
    )


# ids 1..10, one per day from 2025-01-01, statuses cycling Completed/Pending/Cancelled
CUSTOMERS = {
    1: "Alice Smith",
    2: None,
    3: "Bob Jones",
    4: "alice cooper",
    5: None,
    6: "Carol White",
    7: "Dave Brown",
    8: None,
    9: "Eve Black",
    10: "Mallory Green",
}


def build_ledger():
    out = []
    for i in range(1, 11):
        out.append(make_sale(
            i,
            when=datetime(2025, 1, i, 14, 30),
            customer=CUSTOMERS[i],
            status=SALE_STATUSES[(i - 1) % 3],
            payment="Cash" if i % 2 else "Card",
            total="28.05",
            items=(make_item("Widget", 2, "10.00", "0.00", "W-1"), make_item("Gadget", 1, "5.50")),
        ))
    return out


@pytest.fixture
def sale():
    return make_sale()


@pytest.fixture
def ledger():
    return build_ledger()


# ---------- weasyprint stand-in ----------
class _FakeWeasy:
    """Records every write_pdf call; set `fail` to make the next writes raise."""

    def __init__(self):
        self.written: list[Path] = []
        self.fail: Exception | None = None

    def module(self):
        fake = self
        mod = types.ModuleType("weasyprint")

        class HTML:
            def __init__(self, string=None, **kw):
                self.string = string

            def write_pdf(self, target, stylesheets=None):
                if fake.fail is not None:
                    raise fake.fail
                p = Path(target)
                p.write_bytes(b"%PDF-1.7\n" + self.string.encode("utf-8"))
                fake.written.append(p)

        class CSS:
            def __init__(self, string=None, **kw):
                self.string = string

        mod.HTML = HTML
        mod.CSS = CSS
        return mod


@pytest.fixture
def fake_weasyprint(monkeypatch):
    fake = _FakeWeasy()
    monkeypatch.setitem(sys.modules, "weasyprint", fake.module())
    return fake
