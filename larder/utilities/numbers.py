"""Numeric helpers shared by the scoring and nutrition code."""
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0):
    """Round like a person would (2.5 -> 3), not banker's rounding.

    Returns an int when ``digits`` is 0, otherwise a float.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)
