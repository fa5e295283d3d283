"""
modules/sales/filters.py

Client-side ledger filtering over an already-fetched snapshot.

All predicates must hold (AND):
  - status: 'All' or an exact status match
  - date range: date-only comparison, both ends inclusive
  - search term (optional): case-insensitive substring of the customer name,
    or substring of the sale id's decimal string

The filter is stable: matching records come out in ledger order.
"""
from __future__ import annotations

from typing import Iterable, Iterator

from ...constants import STATUS_ALL
from .records import LedgerFilterCriteria, SaleRecord

__all__ = [
    "status_matches",
    "date_matches",
    "search_matches",
    "matches",
    "filter_sales",
    "LedgerFilter",
]


def status_matches(record: SaleRecord, status: str) -> bool:
    return status == STATUS_ALL or record.status == status


def date_matches(record: SaleRecord, criteria: LedgerFilterCriteria) -> bool:
    d = record.date.date()
    return criteria.date_from <= d <= criteria.date_to


def search_matches(record: SaleRecord, term: str | None) -> bool:
    if not term:
        return True
    needle = term.strip().lower()
    if not needle:
        return True
    if record.customer_name and needle in record.customer_name.lower():
        return True
    return needle in str(record.id)


def matches(record: SaleRecord, criteria: LedgerFilterCriteria) -> bool:
    return (
        status_matches(record, criteria.status)
        and date_matches(record, criteria)
        and search_matches(record, criteria.search_term)
    )


def filter_sales(records: Iterable[SaleRecord], criteria: LedgerFilterCriteria) -> Iterator[SaleRecord]:
    """Lazily yield the records that satisfy every predicate, in input order."""
    return (r for r in records if matches(r, criteria))


class LedgerFilter:
    """
    Holds the current criteria for a ledger view.

    The search term is also sent to the ledger source as a query parameter;
    re-applying it here is harmless for a source that already honoured it and
    required for one that did not (or when the term changed since the fetch).
    """

    def __init__(self, criteria: LedgerFilterCriteria):
        self.criteria = criteria

    def set_criteria(self, criteria: LedgerFilterCriteria) -> bool:
        """Returns True if the criteria actually changed."""
        if criteria == self.criteria:
            return False
        self.criteria = criteria
        return True

    def accepts(self, record: SaleRecord) -> bool:
        return matches(record, self.criteria)

    def apply(self, records: Iterable[SaleRecord]) -> Iterator[SaleRecord]:
        return filter_sales(records, self.criteria)
