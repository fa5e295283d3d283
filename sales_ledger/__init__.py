"""Sales ledger desk: invoice computation, ledger filtering and CSV export."""

__version__ = "0.1.0"
