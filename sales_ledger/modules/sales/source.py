"""
modules/sales/source.py

Ledger source contract and the in-memory ledger snapshot.

Public interface
----------------
- FetchRequest / FetchResult: the page request/response exchanged with a source.
- LedgerSource: anything exposing fetch_page(request) -> FetchResult.
- JsonLedgerSource: file-backed source (JSON array of sale objects).
- LedgerStore: owns the current snapshot; tags every fetch with a sequence
  number and ignores responses older than the latest issued request.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Tuple
from urllib.parse import urlencode

from ...constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .errors import FetchFailed
from .filters import search_matches
from .records import SaleRecord

__all__ = [
    "FetchRequest",
    "FetchResult",
    "LedgerSource",
    "JsonLedgerSource",
    "LedgerStore",
    "build_query",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchRequest:
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str = ""
    page_number: int = 1
    sort_by: str = ""
    sort_direction: str = "asc"

    def __post_init__(self):
        object.__setattr__(self, "page_size", max(1, min(int(self.page_size), MAX_PAGE_SIZE)))
        object.__setattr__(self, "page_number", max(1, int(self.page_number)))
        object.__setattr__(self, "search_term", (self.search_term or "").strip())


@dataclass(frozen=True)
class FetchResult:
    items: Tuple[SaleRecord, ...] = field(default_factory=tuple)
    success: bool = True
    message: str = ""

    @classmethod
    def failed(cls, message: str) -> "FetchResult":
        return cls(items=(), success=False, message=message)


def build_query(request: FetchRequest) -> str:
    """Query string for HTTP sources: pageNumber, pageSize and the optional fields."""
    params = [("pageNumber", request.page_number), ("pageSize", request.page_size)]
    if request.search_term:
        params.append(("searchTerm", request.search_term))
    if request.sort_by:
        params.append(("sortBy", request.sort_by))
    if request.sort_direction:
        params.append(("sortDirection", request.sort_direction))
    return urlencode(params)


class LedgerSource(Protocol):
    def fetch_page(self, request: FetchRequest) -> FetchResult: ...


class JsonLedgerSource:
    """
    Reads sales from a JSON file: either a list of sale objects or
    {"items": [...]} as returned by the sales API's paged response.

    Never raises for I/O or data errors; those come back as success=False.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> List[SaleRecord]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("items") or data.get("data") or []
        return [SaleRecord.from_dict(d) for d in data]

    def fetch_page(self, request: FetchRequest) -> FetchResult:
        try:
            records = self._load()
        except FileNotFoundError:
            return FetchResult.failed(f"Ledger file not found: {self.path}")
        except (OSError, ValueError, KeyError, TypeError) as e:
            _log.debug("json source: cannot read %s: %s", self.path, e)
            return FetchResult.failed(f"Could not read {self.path.name}: {e}")

        if request.search_term:
            records = [r for r in records if search_matches(r, request.search_term)]
        start = (request.page_number - 1) * request.page_size
        page = records[start:start + request.page_size]
        return FetchResult(items=tuple(page), success=True, message="")


class LedgerStore:
    """
    Current ledger snapshot plus request sequencing.

    begin_fetch() issues a new sequence number; complete() applies a result only
    if it belongs to the latest issued request. The snapshot is replaced as a
    whole (a new tuple), so readers never see a mix of old and new records.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Tuple[SaleRecord, ...] = ()
        self._issued = 0
        self._applied = 0
        self._last_request: Optional[FetchRequest] = None

    @property
    def snapshot(self) -> Tuple[SaleRecord, ...]:
        return self._snapshot

    @property
    def last_request(self) -> Optional[FetchRequest]:
        return self._last_request

    @property
    def outstanding(self) -> bool:
        """True while the latest issued fetch has not completed."""
        return self._issued > self._applied

    def begin_fetch(self, request: FetchRequest) -> int:
        with self._lock:
            self._issued += 1
            self._last_request = request
            return self._issued

    def complete(self, seq: int, result: FetchResult) -> bool:
        """
        Returns True if the snapshot was replaced, False for a stale response.
        Raises FetchFailed (snapshot untouched) when the latest fetch failed.
        """
        with self._lock:
            if seq != self._issued:
                _log.debug("ledger: discarding stale response #%s (latest #%s)", seq, self._issued)
                return False
            self._applied = seq
            if not result.success:
                raise FetchFailed(result.message)
            self._snapshot = tuple(result.items)
            return True

    def fail(self, seq: int, message: str) -> bool:
        """Mark the latest fetch as failed after a transport exception."""
        return self.complete(seq, FetchResult.failed(message))

    def find(self, sale_id: int) -> Optional[SaleRecord]:
        for r in self._snapshot:
            if r.id == sale_id:
                return r
        return None
