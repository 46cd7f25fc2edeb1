"""Numeric building blocks for the field test formulas.

This package provides:
- round_n / power_10 / power_n: power-of-ten rounding, ties away from zero
- divide: IEEE-754 division that never raises on a zero denominator
- constants: default lab calibration values
"""

from billios.calc.constants import (
    SAND_DENSITY,
    SAND_IN_CONE,
    SPECIFIC_GRAVITY,
    WATER_UNIT_WEIGHT,
)
from billios.calc.rounding import (
    MAX_ROUNDING_PRECISION,
    RoundingPrecisionError,
    divide,
    power_10,
    power_n,
    round_n,
)

__all__ = [
    "MAX_ROUNDING_PRECISION",
    "SAND_DENSITY",
    "SAND_IN_CONE",
    "SPECIFIC_GRAVITY",
    "WATER_UNIT_WEIGHT",
    "RoundingPrecisionError",
    "divide",
    "power_10",
    "power_n",
    "round_n",
]
