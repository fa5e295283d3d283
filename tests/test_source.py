# tests/test_source.py
import json

import pytest

from sales_ledger.modules.sales.errors import FetchFailed
from sales_ledger.modules.sales.source import (
    FetchRequest,
    FetchResult,
    JsonLedgerSource,
    LedgerStore,
    build_query,
)

from conftest import build_ledger


def _payload(n=5):
    names = ["Alice Smith", None, "Bob Jones", "alice cooper", "Carol White"]
    return [
        {
            "id": i,
            "date": f"2025-01-{i:02d}T09:00:00",
            "customerName": names[(i - 1) % len(names)],
            "status": "Completed",
            "paymentMethod": "Cash",
            "totalAmount": 11.0,
            "items": [{"productName": "Widget", "quantity": 1, "unitPrice": 10}],
        }
        for i in range(1, n + 1)
    ]


@pytest.fixture
def sales_file(tmp_path):
    p = tmp_path / "sales.json"
    p.write_text(json.dumps(_payload()), encoding="utf-8")
    return p


# --------------------------- requests ---------------------------

def test_request_clamps_page_size():
    assert FetchRequest(page_size=500).page_size == 100
    assert FetchRequest(page_size=0).page_size == 1
    assert FetchRequest(page_number=-3).page_number == 1
    assert FetchRequest(search_term="  bob ").search_term == "bob"


def test_build_query():
    q = build_query(FetchRequest(page_size=50, search_term="bob smith"))
    assert q == "pageNumber=1&pageSize=50&searchTerm=bob+smith&sortDirection=asc"
    assert build_query(FetchRequest(sort_direction="")) == "pageNumber=1&pageSize=100"


# --------------------------- JSON source ---------------------------

def test_json_source_reads_all(sales_file):
    res = JsonLedgerSource(sales_file).fetch_page(FetchRequest())
    assert res.success
    assert [r.id for r in res.items] == [1, 2, 3, 4, 5]
    assert res.items[1].customer_name is None


def test_json_source_search_and_paging(sales_file):
    src = JsonLedgerSource(sales_file)
    assert [r.id for r in src.fetch_page(FetchRequest(search_term="ALICE")).items] == [1, 4]
    assert [r.id for r in src.fetch_page(FetchRequest(page_size=2, page_number=2)).items] == [3, 4]
    assert src.fetch_page(FetchRequest(page_size=2, page_number=9)).items == ()


def test_json_source_accepts_paged_envelope(tmp_path):
    p = tmp_path / "page.json"
    p.write_text(json.dumps({"items": _payload(2), "totalCount": 2}), encoding="utf-8")
    assert len(JsonLedgerSource(p).fetch_page(FetchRequest()).items) == 2


def test_json_source_missing_file(tmp_path):
    res = JsonLedgerSource(tmp_path / "nope.json").fetch_page(FetchRequest())
    assert res.success is False
    assert "not found" in res.message
    assert res.items == ()


def test_json_source_bad_data(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("{not json", encoding="utf-8")
    assert JsonLedgerSource(p).fetch_page(FetchRequest()).success is False

    p.write_text(json.dumps([{"id": 1, "date": "2025-01-01", "status": "Refunded"}]), encoding="utf-8")
    res = JsonLedgerSource(p).fetch_page(FetchRequest())
    assert res.success is False
    assert "bad.json" in res.message


# --------------------------- LedgerStore ---------------------------

def test_store_applies_latest_and_drops_stale():
    ledger = build_ledger()
    store = LedgerStore()
    first = store.begin_fetch(FetchRequest(search_term="alice"))
    second = store.begin_fetch(FetchRequest())
    assert store.outstanding

    assert store.complete(second, FetchResult(items=tuple(ledger))) is True
    assert not store.outstanding
    assert len(store.snapshot) == 10
    assert store.last_request.search_term == ""

    # the older response arrives late and is ignored
    assert store.complete(first, FetchResult(items=tuple(ledger[:2]))) is False
    assert len(store.snapshot) == 10


def test_store_failure_keeps_snapshot():
    ledger = build_ledger()
    store = LedgerStore()
    store.complete(store.begin_fetch(FetchRequest()), FetchResult(items=tuple(ledger)))

    seq = store.begin_fetch(FetchRequest())
    with pytest.raises(FetchFailed) as ei:
        store.complete(seq, FetchResult.failed("HTTP 500"))
    assert ei.value.detail == "HTTP 500"
    assert "HTTP 500" in str(ei.value)
    assert len(store.snapshot) == 10
    assert not store.outstanding


def test_store_transport_exception():
    store = LedgerStore()
    seq = store.begin_fetch(FetchRequest())
    with pytest.raises(FetchFailed):
        store.fail(seq, "ConnectionError: refused")
    assert store.snapshot == ()


def test_stale_failure_is_silent():
    store = LedgerStore()
    old = store.begin_fetch(FetchRequest())
    store.begin_fetch(FetchRequest())
    assert store.fail(old, "timeout") is False
    assert store.outstanding


def test_store_find():
    store = LedgerStore()
    store.complete(store.begin_fetch(FetchRequest()), FetchResult(items=tuple(build_ledger())))
    assert store.find(7).customer_name == "Dave Brown"
    assert store.find(99) is None
