# utils/helpers.py
from datetime import datetime
from decimal import Decimal, InvalidOperation
import logging
from typing import Union, Optional

NumberLike = Union[Decimal, float, int, str]

_log = logging.getLogger(__name__)


def timestamp_str(now: Optional[datetime] = None) -> str:
    """Compact timestamp used in default export file names (yyyyMMdd_HHmmss)."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    symbol: str = "",
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    This is for on-screen labels only; machine-readable output (CSV) must use
    the bare decimal string instead.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.

    Args:
        v: Value to format; parsed with Decimal(str(v)).
        places: Number of decimal places (default: 2).
        symbol: Currency symbol prefixed to the number (e.g. "$").
        strict: If True, raise on parse errors; else fall back.
        sentinel: If not None and parsing fails, return this string.
    """
    try:
        x = v if isinstance(v, Decimal) else Decimal(str(v))
        if not x.is_finite():
            raise InvalidOperation(f"non-finite value {v!r}")
    except (InvalidOperation, ValueError, TypeError) as e:
        _log.debug("fmt_money: failed to parse %r as a number: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    sign = "-" if x < 0 else ""
    return f"{sign}{symbol}{abs(x):,.{places}f}"
