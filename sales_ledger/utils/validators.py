# utils/validators.py
from decimal import Decimal, InvalidOperation


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to Decimal.

    Returns:
        (ok: bool, value: Decimal|None)

    ok == False means parsing failed (or the value is NaN/Infinity) and value is None.
    """
    if isinstance(x, bool) or x is None:
        return False, None
    try:
        val = x if isinstance(x, Decimal) else Decimal(str(x).strip())
    except (InvalidOperation, ValueError, TypeError):
        return False, None
    if not val.is_finite():
        return False, None
    return True, val


def parse_decimal(x) -> Decimal:
    """
    Strict parse to Decimal; raises ValueError with a clear message on failure.
    """
    ok, val = try_parse_decimal(x)
    if not ok:
        raise ValueError(f"Could not parse '{x}' as a number.")
    return val  # type: ignore[return-value]

