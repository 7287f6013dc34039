"""
Token amount conversions between human-readable decimals and base units.

All arithmetic goes through Decimal so that 18-decimal amounts never pass
through binary floats.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Optional, Union

# Wide enough for a uint256 with 18 decimals; independent of the thread's context
DECIMAL_CONTEXT = Context(prec=80)

# Largest accepted order of magnitude (uint256 max is ~1.2e77 base units)
MAX_EXPONENT = 60

Numeric = Union[str, int, float, Decimal]


def _to_decimal(value: Numeric) -> Decimal:
    try:
        num = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not num.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    if num and num.adjusted() > MAX_EXPONENT:
        raise ValueError(f"Amount out of range: {value!r}")
    return num


def parse_units(amount: Numeric, decimals: int) -> int:
    """
    Convert a human-readable token amount (e.g. "0.01") to base units.

    Digits beyond the token's precision are truncated toward zero.
    """
    amt = _to_decimal(amount)
    if amt < 0:
        raise ValueError("Negative amounts are not allowed.")
    scaled = amt.scaleb(decimals, context=DECIMAL_CONTEXT)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN, context=DECIMAL_CONTEXT))


def format_units(value: Union[int, str], decimals: int) -> str:
    """Convert base units to a decimal string without trailing zeros."""
    raw = int(value)
    negative = raw < 0
    raw = abs(raw)

    whole, fraction = divmod(raw, 10 ** decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""

    result = f"{whole}.{fraction_str}" if fraction_str else str(whole)
    return f"-{result}" if negative else result


def format_balance(value: Optional[Numeric], max_decimals: int = 3) -> str:
    """
    Format a balance for display: thousands separators, at least two and at
    most ``max_decimals`` fraction digits. Empty values render as "0.0".
    """
    if value is None or value == "":
        return "0.0"
    if max_decimals < 2:
        raise ValueError("max_decimals must be at least 2")

    try:
        num = _to_decimal(value)
    except ValueError:
        return "0.0"

    quantum = Decimal(1).scaleb(-max_decimals)
    rounded = num.quantize(quantum, rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT)
    whole, fraction = f"{rounded:,.{max_decimals}f}".split(".")
    fraction = fraction.rstrip("0").ljust(2, "0")
    return f"{whole}.{fraction}"


def percentage_of_balance(balance: Optional[Numeric], percentage: Numeric) -> str:
    """Amount for a "use N% of balance" shortcut, fixed to 6 fraction digits."""
    if balance is None or balance == "":
        balance = "0"
    amount = DECIMAL_CONTEXT.multiply(_to_decimal(balance), _to_decimal(percentage))
    quantum = Decimal("0.000001")
    return f"{amount.quantize(quantum, rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT):f}"
