"""Numeric helpers shared by the calculation core."""

import math
import numbers
from decimal import Decimal


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Matches the client's ``Math.round`` so recomputed goals agree with values
    already stored in the profiles table.
    """
    whole = math.floor(value)
    # value - floor(value) is exact for floats, so no spurious carry at 0.5.
    return whole + 1 if value - whole >= 0.5 else whole


def to_float(value: object, default: float = 0.0) -> float:
    """Coerce a loosely-typed value to a finite float, or return the default."""
    if isinstance(value, bool):
        return default
    try:
        if isinstance(value, numbers.Real | Decimal):
            result = float(value)
        elif isinstance(value, str):
            result = float(value.strip())
        else:
            return default
    except ValueError:
        return default
    if not math.isfinite(result):
        return default
    return result
