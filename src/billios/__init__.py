"""billios - soil field test calculations.

Sand-cone density test formulas with lab constant defaults and deterministic
rounding:

    >>> from billios import SandUsed
    >>> SandUsed(14.65, 8.75).calculate()
    2.31
"""

from billios.config import LabConstants, LabConstantsConfigError, get_lab_constants
from billios.field_test import (
    Compaction,
    DryDensity,
    FormulaReference,
    LabMaxCorrection,
    LiteralValue,
    MoistureContent,
    RockCorrection,
    SandUsed,
    WetDensity,
)
from billios.field_test.report import __version__

__all__ = [
    "Compaction",
    "DryDensity",
    "FormulaReference",
    "LabConstants",
    "LabConstantsConfigError",
    "LabMaxCorrection",
    "LiteralValue",
    "MoistureContent",
    "RockCorrection",
    "SandUsed",
    "WetDensity",
    "__version__",
    "get_lab_constants",
]
