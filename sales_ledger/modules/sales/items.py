from PySide6.QtWidgets import QWidget, QVBoxLayout
from ...widgets.table_view import TableView
from .model import InvoiceLinesModel


class InvoiceLinesView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.table = TableView()
        self.model = InvoiceLinesModel([])
        self.table.setModel(self.model)
        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.table, 1)

    def set_rows(self, rows):
        self.model.replace(rows)
        self.table.resizeColumnsToContents()
