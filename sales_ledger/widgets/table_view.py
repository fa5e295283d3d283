from PySide6.QtWidgets import QAbstractItemView, QHeaderView, QTableView


class TableView(QTableView):
    """Read-only grid used for the ledger and the invoice lines."""

    CHECK_COLUMN_WIDTH = 28

    def __init__(self, parent=None):
        super().__init__(parent)
        # rows stay in ledger order; the models do not implement sort()
        self.setSortingEnabled(False)
        self.setAlternatingRowColors(True)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.horizontalHeader().setStretchLastSection(True)
        self.verticalHeader().setVisible(False)

    def pin_check_column(self, column: int = 0):
        """Keep a checkbox column narrow and out of the user's resize reach."""
        header = self.horizontalHeader()
        header.setSectionResizeMode(column, QHeaderView.Fixed)
        self.setColumnWidth(column, self.CHECK_COLUMN_WIDTH)
