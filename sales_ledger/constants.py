# constants.py
APP_NAME = "Sales Ledger"

DATA_DIR = "data"
SETTINGS_FILE_NAME = "settings.json"
LOG_DIR = "logs"
LOG_FILE_NAME = "sales_ledger.log"
TEMPLATE_DIR = "resources/templates"
INVOICE_TEMPLATE = "invoices/sale_invoice.html"
LEDGER_FILE_NAME = "sales.json"

# Invoice numbering / terms
INVOICE_PREFIX = "INV-"
INVOICE_NUMBER_WIDTH = 6
DEFAULT_DUE_DAYS = 30
DEFAULT_TAX_RATE = "0.10"

WALK_IN_CUSTOMER = "Walk-in Customer"

# Ledger source paging (the sales API caps pageSize at 100)
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100

# Sale statuses
STATUS_ALL = "All"
STATUS_COMPLETED = "Completed"
STATUS_PENDING = "Pending"
STATUS_CANCELLED = "Cancelled"

# CSV export contract
CSV_DATE_FORMAT = "%Y-%m-%d %H:%M"
CSV_HEADER = [
    "Sale ID",
    "Date",
    "Customer",
    "Total Amount",
    "Status",
    "Payment Method",
    "Items Count",
]
