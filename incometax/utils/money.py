"""Decimal helpers for money amounts."""

import math
from decimal import Decimal, InvalidOperation


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through ``str`` so that 0.17 becomes Decimal("0.17")
    rather than its binary expansion.

    Raises:
        TypeError: If the value is not numeric or is not finite
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise TypeError(f"Expected a number, got {value!r}")
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise TypeError(f"Expected a number, got {value!r}") from e
    else:
        raise TypeError(f"Expected a number, got {type(value).__name__}")

    if not result.is_finite():
        raise TypeError(f"Expected a finite number, got {value!r}")
    return result


def percent_to_fraction(rate: Decimal | float | int | str) -> Decimal:
    """Convert a rate in percent (19) to a fraction (0.19)."""
    return to_decimal(rate) / Decimal(100)


def floor_to_unit(amount: Decimal) -> int:
    """Round down to a whole currency unit."""
    return math.floor(amount)
