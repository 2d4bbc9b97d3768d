"""Decimal helpers for monetary amounts."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """
    Normalize a numeric value to a Decimal rounded to cents.

    Floats go through ``str`` so that binary artifacts do not leak in.
    ``None`` is treated as zero.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def split_evenly(total: Decimal, parts: int) -> Decimal:
    """Per-part amount of ``total`` split in ``parts``, rounded to cents."""
    if parts <= 0:
        raise ValueError("parts must be positive")
    return to_money(Decimal(total) / parts)
