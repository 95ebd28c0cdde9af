"""
Result formatting.

Results are rounded to a fixed number of decimals (6 by default) and
printed as plain decimals: no exponent, no thousands separators, no
trailing zeros.

Rounding works on the exact binary value of the float with ties going
away from zero, so 1.0000015 (really 1.00000149999...) rounds down. The
rounded decimal is converted back to a float and printed using its
shortest round-trip digits.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

from calculator.models.calculator import ERROR_SENTINEL

DEFAULT_DECIMAL_PLACES = 6

# Enough digits for the integer part of any finite double plus the decimals
_WORKING_PRECISION = 400


def round_result(value: float, places: int = DEFAULT_DECIMAL_PLACES) -> float:
    """Round a finite float to `places` decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = _WORKING_PRECISION
        rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def to_plain_string(value: float) -> str:
    """
    Shortest round-trip digits of a float in positional notation.

    Negative zero prints as "0".
    """
    if value == 0:
        return "0"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_result(
    value: Union[float, str],
    places: int = DEFAULT_DECIMAL_PLACES,
) -> str:
    """
    Format a computed value for display.

    Accepts a float or an already formatted decimal string. The error
    sentinel is returned unchanged.

    Raises:
        ValueError: If a string argument is not a decimal number
    """
    if value == ERROR_SENTINEL:
        return ERROR_SENTINEL
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot format non-finite value: {value!r}")
    return to_plain_string(round_result(number, places))
