import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QHBoxLayout,
    QSizePolicy,
)
from PySide6.QtCore import Qt

from sales_ledger.config import LEDGER_PATH, LOG_PATH, ensure_data_dir, load_settings
from sales_ledger.constants import APP_NAME, LOG_FILE_NAME
from sales_ledger.modules.base_module import BaseModule
from sales_ledger.modules.sales.controller import SalesController
from sales_ledger.modules.sales.source import JsonLedgerSource
from sales_ledger.utils.loggers import get_logger

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, source, settings):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        # ensure normal window controls + sensible minimum
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(980, 600)

        # ---- Central layout: left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setFixedWidth(100)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)

        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        self.modules: list[tuple[str, BaseModule]] = []
        self.nav.currentRowChanged.connect(self.stack.setCurrentIndex)

        self.sales = SalesController(source, settings)
        self.add_module(self.sales.title, self.sales)
        self.nav.setCurrentRow(0)

    def add_module(self, title: str, module: BaseModule):
        page = module.get_widget()
        item = QListWidgetItem(title)
        self.nav.addItem(item)
        self.stack.addWidget(page)
        self.modules.append((title, module))

    def closeEvent(self, event):
        for title, mod in self.modules:
            log.debug("closing module %s", title)
            mod.on_close()
        super().closeEvent(event)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="sales-ledger", description="Sales ledger desktop viewer")
    p.add_argument("ledger", nargs="?", default=str(LEDGER_PATH),
                   help="JSON file with the sales page (default: data/sales.json)")
    p.add_argument("--settings", default=None, help="path to settings.json")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    get_logger("sales_ledger", Path(LOG_PATH) / LOG_FILE_NAME)

    app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)

    ensure_data_dir()
    settings = load_settings(args.settings)
    log.info("Starting %s (ledger=%s, tax rate=%s)", APP_NAME, args.ledger, settings.tax_rate)

    win = MainWindow(JsonLedgerSource(args.ledger), settings)
    win.resize(1280, 760)
    win.show()
    for _title, mod in win.modules:
        mod.refresh()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
