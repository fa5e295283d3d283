"""
modules/sales/errors.py

Error taxonomy for the sales ledger.

- ValidationError: raised synchronously by the pure computation helpers.
  Always recoverable; the message is meant to be shown to the user as-is.
- CollaboratorError: failures of the ledger source or the export sink.
  The in-memory ledger snapshot and any computed invoice stay valid.
"""
from __future__ import annotations

__all__ = [
    "SalesLedgerError",
    "ValidationError",
    "InvalidDiscount",
    "InvalidQuantity",
    "InvalidUnitPrice",
    "EmptySelection",
    "NullSale",
    "InvalidInvoiceNumber",
    "CollaboratorError",
    "FetchFailed",
    "ExportFailed",
]


class SalesLedgerError(Exception):
    """Base class for every error raised by the sales ledger."""


# -----------------------------
# Validation errors
# -----------------------------

class ValidationError(SalesLedgerError, ValueError):
    title = "Validation Error"


class InvalidDiscount(ValidationError):
    title = "Invalid Discount"

    def __init__(self, unit_price, discount_amount, product_name: str = ""):
        self.unit_price = unit_price
        self.discount_amount = discount_amount
        self.product_name = product_name
        what = f" for '{product_name}'" if product_name else ""
        if discount_amount < 0:
            msg = f"Discount cannot be negative{what} (got {discount_amount})."
        else:
            msg = f"Discount {discount_amount} exceeds unit price {unit_price}{what}."
        super().__init__(msg)


class InvalidUnitPrice(ValidationError):
    title = "Invalid Price"

    def __init__(self, unit_price, product_name: str = ""):
        self.unit_price = unit_price
        self.product_name = product_name
        what = f" for '{product_name}'" if product_name else ""
        super().__init__(f"Unit price cannot be negative{what} (got {unit_price}).")


class InvalidQuantity(ValidationError):
    title = "Invalid Quantity"

    def __init__(self, quantity, product_name: str = ""):
        self.quantity = quantity
        self.product_name = product_name
        what = f" for '{product_name}'" if product_name else ""
        super().__init__(f"Quantity must be a positive whole number{what} (got {quantity!r}).")


class EmptySelection(ValidationError):
    title = "No Selection"

    def __init__(self, message: str = "Please select at least one sale to generate invoices."):
        super().__init__(message)


class NullSale(ValidationError):
    title = "No Sale Selected"

    def __init__(self, message: str = "Please select a sale to generate invoice."):
        super().__init__(message)


class InvalidInvoiceNumber(ValidationError):
    title = "Invalid Invoice Number"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Not a valid invoice number: {value!r}")


# -----------------------------
# External collaborator errors
# -----------------------------

class CollaboratorError(SalesLedgerError):
    title = "Error"


class FetchFailed(CollaboratorError):
    title = "Load Failed"

    def __init__(self, message: str = ""):
        self.detail = message
        super().__init__(f"Failed to load sales data: {message}" if message else "Failed to load sales data.")


class ExportFailed(CollaboratorError):
    title = "Export Failed"

    def __init__(self, destination, cause: BaseException | None = None):
        self.destination = str(destination)
        self.cause = cause
        msg = f"Could not export to {self.destination}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
