"""
modules/sales/selection.py

SelectionBatch: the set of user-checked sales awaiting batch invoice generation.

Selection is keyed by sale id and lives beside the grid, never inside it.
Bulk actions (select all / clear) and toggles only touch the rows that are
currently displayed; ids selected under an earlier filter stay selected.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from .errors import EmptySelection
from .records import SaleRecord

__all__ = ["SelectionBatch"]


class SelectionBatch:
    def __init__(self, ledger: Sequence[SaleRecord] = (), displayed: Iterable[SaleRecord] | None = None):
        self._ledger: List[SaleRecord] = list(ledger)
        self._displayed_ids: List[int] = [
            r.id for r in (self._ledger if displayed is None else displayed)
        ]
        self._selected: Set[int] = set()

    # ---- snapshot / view ------------------------------------------------

    def set_ledger(self, ledger: Sequence[SaleRecord]) -> None:
        """Swap in a freshly fetched snapshot. Ids that no longer exist are dropped."""
        self._ledger = list(ledger)
        known = {r.id for r in self._ledger}
        self._selected &= known
        self._displayed_ids = [i for i in self._displayed_ids if i in known]

    def set_displayed(self, displayed: Iterable[SaleRecord]) -> None:
        self._displayed_ids = [r.id for r in displayed]

    @property
    def displayed_ids(self) -> List[int]:
        return list(self._displayed_ids)

    # ---- user actions ---------------------------------------------------

    def toggle(self, sale_id: int) -> bool:
        """Flip inclusion of a displayed sale. Returns the new state (False for hidden ids)."""
        if sale_id not in self._displayed_ids:
            return False
        if sale_id in self._selected:
            self._selected.discard(sale_id)
            return False
        self._selected.add(sale_id)
        return True

    def set_selected(self, sale_id: int, selected: bool) -> None:
        if sale_id not in self._displayed_ids:
            return
        if selected:
            self._selected.add(sale_id)
        else:
            self._selected.discard(sale_id)

    def select_all(self) -> None:
        self._selected.update(self._displayed_ids)

    def clear(self) -> None:
        self._selected.difference_update(self._displayed_ids)

    def reset(self) -> None:
        """Forget every selection, visible or not."""
        self._selected.clear()

    # ---- queries --------------------------------------------------------

    def is_selected(self, sale_id: int) -> bool:
        return sale_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def selected_ids(self) -> List[int]:
        """Selected ids in ledger order."""
        return [r.id for r in self._ledger if r.id in self._selected]

    def finalize(self) -> List[SaleRecord]:
        """
        Ordered (ledger order) list of the selected sales.
        Raises EmptySelection when nothing is selected.
        """
        out = [r for r in self._ledger if r.id in self._selected]
        if not out:
            raise EmptySelection()
        return out
