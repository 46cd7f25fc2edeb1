"""Sand-cone field test formulas.

This package provides:
- SandUsed, WetDensity, MoistureContent, DryDensity, Compaction,
  RockCorrection, LabMaxCorrection: immutable formula value types
- LiteralValue / FormulaReference: literal-or-formula inputs
- FormulaRegistry / FormulaSpec: versioned formula specs with stable hashes
- run_field_test: whole-sheet runner producing a reproducible report
"""

from billios.field_test.formulas import (
    Compaction,
    DryDensity,
    LabMaxCorrection,
    MoistureContent,
    RockCorrection,
    SandUsed,
    WetDensity,
)
from billios.field_test.inputs import (
    Evaluatable,
    FormulaReference,
    LiteralValue,
    NumericInput,
    as_numeric_input,
)
from billios.field_test.registry import (
    FormulaRegistry,
    FormulaSpec,
    FormulaType,
    register_field_test_formulas,
)
from billios.field_test.report import (
    FieldTestIntegrityError,
    FieldTestMeasurements,
    FieldTestReport,
    run_field_test,
    verify_reproducibility,
)

__all__ = [
    "Compaction",
    "DryDensity",
    "Evaluatable",
    "FieldTestIntegrityError",
    "FieldTestMeasurements",
    "FieldTestReport",
    "FormulaReference",
    "FormulaRegistry",
    "FormulaSpec",
    "FormulaType",
    "LabMaxCorrection",
    "LiteralValue",
    "MoistureContent",
    "NumericInput",
    "RockCorrection",
    "SandUsed",
    "WetDensity",
    "as_numeric_input",
    "register_field_test_formulas",
    "run_field_test",
    "verify_reproducibility",
]
