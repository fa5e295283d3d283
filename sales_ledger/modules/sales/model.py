from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex, Signal

from ...constants import CSV_DATE_FORMAT, WALK_IN_CUSTOMER
from ...utils.helpers import fmt_money
from .selection import SelectionBatch


class SalesTableModel(QAbstractTableModel):
    """
    Displayed (filtered) ledger rows. Column 0 is a checkbox bound to the
    SelectionBatch by sale id; the rows themselves carry no selection state.
    """
    HEADERS = ["", "ID", "Date", "Customer", "Total", "Status", "Payment Method"]

    selectionToggled = Signal(int, bool)

    def __init__(self, rows: list, selection: SelectionBatch | None = None, walk_in_label: str = WALK_IN_CUSTOMER):
        super().__init__()
        self._rows = list(rows)
        self._selection = selection
        self._walk_in = walk_in_label

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        r = self._rows[index.row()]
        c = index.column()
        if c == 0:
            if role == Qt.CheckStateRole and self._selection is not None:
                return Qt.Checked if self._selection.is_selected(r.id) else Qt.Unchecked
            return None
        if role in (Qt.DisplayRole, Qt.EditRole):
            mapping = [
                None,
                r.id,
                r.date.strftime(CSV_DATE_FORMAT),
                r.display_customer(self._walk_in),
                fmt_money(r.total_amount, symbol="$"),
                r.status,
                r.payment_method,
            ]
            return mapping[c]
        if role == Qt.TextAlignmentRole and c == 4:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def flags(self, index):
        if not index.isValid():
            return Qt.NoItemFlags
        f = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        if index.column() == 0 and self._selection is not None:
            f |= Qt.ItemIsUserCheckable
        return f

    def setData(self, index, value, role=Qt.EditRole):
        if not index.isValid() or index.column() != 0 or role != Qt.CheckStateRole:
            return False
        if self._selection is None:
            return False
        sale_id = self._rows[index.row()].id
        checked = Qt.CheckState(value) == Qt.Checked
        self._selection.set_selected(sale_id, checked)
        self.dataChanged.emit(index, index, [Qt.CheckStateRole])
        self.selectionToggled.emit(sale_id, checked)
        return True

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section] if section < len(self.HEADERS) else None
        return super().headerData(section, orientation, role)

    def at(self, row: int):
        return self._rows[row]

    def rows(self) -> list:
        return list(self._rows)

    def replace(self, rows: list):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def refresh_checks(self):
        """Repaint the checkbox column after a bulk select/clear."""
        if self._rows:
            top = self.index(0, 0)
            bottom = self.index(len(self._rows) - 1, 0)
            self.dataChanged.emit(top, bottom, [Qt.CheckStateRole])


class InvoiceLinesModel(QAbstractTableModel):
    HEADERS = ["#", "Description", "Qty", "Unit Price", "Line Total"]

    def __init__(self, rows: list):
        super().__init__()
        self._rows = list(rows)

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, idx, role=Qt.DisplayRole):
        if not idx.isValid():
            return None
        r = self._rows[idx.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            m = [idx.row() + 1, r.description, r.quantity,
                 fmt_money(r.unit_price, symbol="$"), fmt_money(r.line_total, symbol="$")]
            return m[idx.column()]
        if role == Qt.TextAlignmentRole and idx.column() >= 2:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, s, o, role=Qt.DisplayRole):
        return self.HEADERS[s] if o == Qt.Horizontal and role == Qt.DisplayRole else super().headerData(s, o, role)

    def replace(self, rows: list):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
