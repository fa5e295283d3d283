from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .constants import (
    DATA_DIR,
    DEFAULT_DUE_DAYS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TAX_RATE,
    LEDGER_FILE_NAME,
    LOG_DIR,
    MAX_PAGE_SIZE,
    SETTINGS_FILE_NAME,
    TEMPLATE_DIR,
    WALK_IN_CUSTOMER,
)

_log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = Path(os.environ.get("SALES_LEDGER_DATA_DIR") or (BASE_DIR / DATA_DIR))
SETTINGS_PATH = DATA_PATH / SETTINGS_FILE_NAME
LEDGER_PATH = DATA_PATH / LEDGER_FILE_NAME
LOG_PATH = DATA_PATH / LOG_DIR
TEMPLATE_PATH = BASE_DIR / TEMPLATE_DIR


def ensure_data_dir() -> Path:
    DATA_PATH.mkdir(parents=True, exist_ok=True)
    return DATA_PATH


@dataclass
class LedgerSettings:
    """
    User-tunable settings for the sales ledger.

    tax_rate is a single flat rate applied to every invoice; it is threaded into
    SaleComputation instead of being hard-coded so other rates can be tested.
    """
    tax_rate: Decimal = Decimal(DEFAULT_TAX_RATE)
    due_days: int = DEFAULT_DUE_DAYS
    page_size: int = DEFAULT_PAGE_SIZE
    walk_in_label: str = WALK_IN_CUSTOMER
    company_name: str = "Your Company Name"
    company_address: str = ""
    company_phone: str = ""
    company_email: str = ""
    export_dir: str = field(default_factory=lambda: str(Path.home()))

    def __post_init__(self):
        try:
            self.tax_rate = Decimal(str(self.tax_rate))
        except InvalidOperation as e:
            raise ValueError(f"Invalid tax rate: {self.tax_rate!r}") from e
        if self.tax_rate < 0:
            raise ValueError("Tax rate cannot be negative.")
        self.due_days = int(self.due_days)
        # Same clamp the sales API applies to pageSize
        self.page_size = max(1, min(int(self.page_size), MAX_PAGE_SIZE))


def settings_from_dict(d: dict) -> LedgerSettings:
    known = {f.name for f in fields(LedgerSettings)}
    unknown = set(d) - known
    if unknown:
        _log.debug("settings: ignoring unknown keys %s", sorted(unknown))
    return LedgerSettings(**{k: v for k, v in d.items() if k in known})


def load_settings(path: str | os.PathLike | None = None) -> LedgerSettings:
    """
    Load settings from JSON (data/settings.json by default), then apply
    SALES_LEDGER_TAX_RATE / SALES_LEDGER_PAGE_SIZE environment overrides.
    A missing file yields defaults.
    """
    p = Path(path) if path else SETTINGS_PATH
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        data = {}

    env_rate = os.environ.get("SALES_LEDGER_TAX_RATE")
    if env_rate:
        data["tax_rate"] = env_rate
    env_page = os.environ.get("SALES_LEDGER_PAGE_SIZE")
    if env_page:
        data["page_size"] = env_page

    return settings_from_dict(data)
