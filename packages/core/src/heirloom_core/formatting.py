"""Readable rendering of statutory shares."""

from fractions import Fraction
from typing import Union


def format_share(
    value: Union[Fraction, float],
    max_denominator: int = 120,
    tolerance: float = 1e-8,
    percent_decimals: int = 2,
) -> str:
    """Render a share as the simplest fraction within tolerance.

    Denominators are tried from 1 upward, so the first match is the smallest
    readable fraction. Values with no close fraction fall back to a
    percentage.

    Examples:
        >>> format_share(Fraction(1, 4))
        '1/4'
        >>> format_share(1 / 3)
        '1/3'
        >>> format_share(2 ** 0.5 - 1)
        '41.42%'
    """
    x = float(value)
    for q in range(1, max_denominator + 1):
        p = round(x * q)
        if abs(p / q - x) < tolerance:
            if q == 1:
                return str(p)
            return f"{p}/{q}"
    return f"{x * 100:.{percent_decimals}f}%"
