"""Power, rounding and division helpers shared by every field test formula.

Rounding scales by a power of ten and rounds half away from zero, which is
what a native float ``round`` does on most platforms (and not what Python's
builtin ``round`` does; that one rounds ties to even).
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

MAX_ROUNDING_PRECISION = 15


class RoundingPrecisionError(ValueError):
    """Raised when a rounding precision is not an int in [0, MAX_ROUNDING_PRECISION].

    The formulas only use fixed precisions, so this is only reachable by
    calling round_n() directly.
    """

    def __init__(self, n: object) -> None:
        self.n = n
        super().__init__(
            f"Rounding precision must be an int between 0 and {MAX_ROUNDING_PRECISION}, got {n!r}"
        )


def power_n(power: int, base: int | None = None) -> int:
    """Raise ``base`` (default 10) to a non-negative integer ``power``.

    Args:
        power: Exponent, must be >= 0.
        base: Base of the power. None means base 10.

    Returns:
        base ** power as an int.

    Raises:
        ValueError: If power is negative.
    """
    if power < 0:
        raise ValueError(f"power must be non-negative, got {power}")
    if base is None:
        base = 10
    return base**power


def power_10(power: int) -> int:
    """Get ``10 ** power``."""
    return power_n(power, 10)


def round_n(number: float, n: int) -> float:
    """Round ``number`` to ``n`` decimal places, ties away from zero.

    Computes ``round(number * 10**n) / 10**n``. The scaled float is converted
    to Decimal exactly, so the tie decision is made on the same binary value a
    native float round would see. NaN and infinities pass through.

    Args:
        number: Value to round.
        n: Number of decimal places.

    Returns:
        The rounded value.

    Raises:
        RoundingPrecisionError: If n is not an int in [0, MAX_ROUNDING_PRECISION].
    """
    if isinstance(n, bool) or not isinstance(n, int) or not 0 <= n <= MAX_ROUNDING_PRECISION:
        raise RoundingPrecisionError(n)

    power = float(power_10(n))
    scaled = number * power

    if not math.isfinite(scaled):
        return scaled / power

    rounded = Decimal(scaled).to_integral_value(rounding=ROUND_HALF_UP)
    return float(rounded) / power


def divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising ZeroDivisionError.

    ``x / 0`` gives an infinity signed by both operands, ``0 / 0`` and
    ``nan / 0`` give NaN. Every other case is plain float division.
    """
    numerator = float(numerator)
    denominator = float(denominator)

    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)

    return numerator / denominator
