"""Literal-or-formula inputs for dependent field test formulas.

Formulas such as DryDensity consume the result of another formula. The caller
can hand over either the number itself or the formula that produces it:

    DryDensity(177.1429, 0.1428571)
    DryDensity(WetDensity(4.65, 2.31), MoistureContent(1600, 1575, 1400))

Both shapes are normalized to a NumericInput, a two-case union resolved with
resolve(). A FormulaReference calls the formula's calculate() on every
resolve(); nothing is cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Protocol, TypeAlias, runtime_checkable


@runtime_checkable
class Evaluatable(Protocol):
    """Anything that produces a float through calculate()."""

    def calculate(self) -> float: ...


@dataclass(frozen=True)
class LiteralValue:
    """A number supplied directly by the caller."""

    value: float

    def resolve(self) -> float:
        return self.value


@dataclass(frozen=True)
class FormulaReference:
    """A formula whose result is computed when the input is resolved."""

    formula: Evaluatable

    def resolve(self) -> float:
        return self.formula.calculate()


NumericInput: TypeAlias = LiteralValue | FormulaReference

NumericLike: TypeAlias = NumericInput | Evaluatable | float


def as_float(name: str, value: object) -> float:
    """Coerce a real number to float, rejecting bools and non-numbers.

    Only the type is checked. Zero, negative and non-finite values pass.

    Raises:
        TypeError: If value is not a real number.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    return float(value)


def as_numeric_input(
    name: str,
    value: NumericLike,
    formula_type: type | None = None,
) -> NumericInput:
    """Normalize a number, formula or NumericInput to a NumericInput.

    Args:
        name: Field name, used in error messages.
        value: A real number, a formula instance, or a NumericInput.
        formula_type: When given, a formula (or FormulaReference) must be an
            instance of this type.

    Returns:
        LiteralValue for numbers, FormulaReference for formulas. NumericInput
        values are returned as-is after the type check.

    Raises:
        TypeError: If value is neither a number nor an acceptable formula.
    """
    if isinstance(value, LiteralValue):
        return LiteralValue(as_float(name, value.value))

    if isinstance(value, FormulaReference):
        _check_formula_type(name, value.formula, formula_type)
        return value

    if isinstance(value, Real) and not isinstance(value, bool):
        return LiteralValue(float(value))

    if isinstance(value, Evaluatable):
        _check_formula_type(name, value, formula_type)
        return FormulaReference(value)

    raise TypeError(f"{name} must be a number or a formula, got {type(value).__name__}")


def _check_formula_type(name: str, formula: object, formula_type: type | None) -> None:
    if formula_type is not None and not isinstance(formula, formula_type):
        raise TypeError(
            f"{name} must be a {formula_type.__name__} formula, got {type(formula).__name__}"
        )
