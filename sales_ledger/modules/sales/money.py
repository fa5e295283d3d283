"""
modules/sales/money.py

Fixed-precision money helpers. Every monetary value is a Decimal with two
fractional digits, rounded half away from zero.

Only compute numbers here; formatting for labels belongs to utils.helpers.fmt_money.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from ...utils.validators import parse_decimal

__all__ = [
    "CENT",
    "ZERO",
    "round2",
    "to_money",
    "money_sum",
    "money_str",
]

MoneyLike = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value: MoneyLike) -> Decimal:
    """Round to 2 decimal places, half away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    d = value if isinstance(value, Decimal) else parse_decimal(value)
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: MoneyLike | None) -> Decimal:
    """
    Coerce an input (API float, str, int, Decimal) into a rounded money value.

    Floats go through str() first so 0.1 becomes Decimal('0.1') rather than
    its binary expansion. None maps to 0.00.
    """
    if value is None:
        return ZERO
    return round2(value)


def money_sum(values: Iterable[Decimal]) -> Decimal:
    """Exact sum of already-rounded values, rounded once more at the boundary."""
    return round2(sum(values, ZERO))


def money_str(value: MoneyLike) -> str:
    """Bare machine-readable form: '43.45', never '$43.45' or '1,043.45'."""
    return f"{round2(value):f}"
