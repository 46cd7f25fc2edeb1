"""Formula registry with versioned specifications and stable hashing.

Every field test formula is described by a FormulaSpec. The spec's
formula_hash identifies the exact formula revision that produced a report.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from billios.field_test.formulas import (
    Compaction,
    DryDensity,
    LabMaxCorrection,
    MoistureContent,
    RockCorrection,
    SandUsed,
    WetDensity,
)


class FormulaType(StrEnum):
    """Supported field test formulas."""

    SAND_USED = "SAND_USED"
    WET_DENSITY = "WET_DENSITY"
    MOISTURE_CONTENT = "MOISTURE_CONTENT"
    DRY_DENSITY = "DRY_DENSITY"
    COMPACTION = "COMPACTION"
    ROCK_CORRECTION = "ROCK_CORRECTION"
    LAB_MAX_CORRECTION = "LAB_MAX_CORRECTION"


@dataclass(frozen=True)
class FormulaSpec:
    """Specification for a field test formula.

    Attributes:
        formula_type: The formula this spec describes.
        version: Semantic version of the formula (e.g., "1.0.0").
        expression_id: Unique identifier for the formula expression.
        formula_class: The formula value type implementing it.
        output_precision: Number of decimal places of the result.
        defaults: Names of the lab constants the formula falls back to.
    """

    formula_type: FormulaType
    version: str
    expression_id: str
    formula_class: type
    output_precision: int
    defaults: tuple[str, ...] = field(default_factory=tuple)

    @property
    def formula_hash(self) -> str:
        """Compute stable SHA256 hash of the formula specification.

        Hash is computed from canonical JSON of {formula_type, formula_version, expression_id}.
        """
        spec_dict = {
            "expression_id": self.expression_id,
            "formula_type": self.formula_type.value,
            "formula_version": self.version,
        }
        canonical_json = json.dumps(spec_dict, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


class FormulaRegistry:
    """Registry of versioned formula specifications.

    Formulas are immutable once registered.
    """

    _instance: FormulaRegistry | None = None
    _formulas: dict[FormulaType, FormulaSpec]

    def __new__(cls) -> FormulaRegistry:
        """Singleton pattern for global registry."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._formulas = {}
        return cls._instance

    def register(self, spec: FormulaSpec) -> None:
        """Register a formula specification.

        Raises:
            ValueError: If a formula for this formula_type is already registered.
        """
        if spec.formula_type in self._formulas:
            raise ValueError(
                f"Formula for {spec.formula_type.value} already registered. "
                "Create a new version instead of overwriting."
            )
        self._formulas[spec.formula_type] = spec

    def get(self, formula_type: FormulaType) -> FormulaSpec | None:
        return self._formulas.get(formula_type)

    def get_or_raise(self, formula_type: FormulaType) -> FormulaSpec:
        """Get formula spec or raise if not found.

        Raises:
            KeyError: If no formula is registered for this formula_type.
        """
        spec = self.get(formula_type)
        if spec is None:
            raise KeyError(f"No formula registered for formula_type: {formula_type.value}")
        return spec

    def list_registered(self) -> list[FormulaType]:
        """List all registered formula types."""
        return list(self._formulas.keys())

    def clear(self) -> None:
        """Clear all registered formulas. For testing only."""
        self._formulas.clear()

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. For testing only."""
        cls._instance = None


SAND_USED_SPEC = FormulaSpec(
    formula_type=FormulaType.SAND_USED,
    version="1.0.0",
    expression_id="sand_used_cone_delta_v1",
    formula_class=SandUsed,
    output_precision=SandUsed.PRECISION,
    defaults=("sand_in_cone",),
)

WET_DENSITY_SPEC = FormulaSpec(
    formula_type=FormulaType.WET_DENSITY,
    version="1.0.0",
    expression_id="wet_density_soil_sand_ratio_v1",
    formula_class=WetDensity,
    output_precision=WetDensity.PRECISION,
    defaults=("sand_density",),
)

MOISTURE_CONTENT_SPEC = FormulaSpec(
    formula_type=FormulaType.MOISTURE_CONTENT,
    version="1.0.0",
    expression_id="moisture_content_water_dry_ratio_v1",
    formula_class=MoistureContent,
    output_precision=MoistureContent.PRECISION,
)

DRY_DENSITY_SPEC = FormulaSpec(
    formula_type=FormulaType.DRY_DENSITY,
    version="1.0.0",
    expression_id="dry_density_wet_over_moisture_v1",
    formula_class=DryDensity,
    output_precision=DryDensity.PRECISION,
)

COMPACTION_SPEC = FormulaSpec(
    formula_type=FormulaType.COMPACTION,
    version="1.0.0",
    expression_id="percent_compaction_v1",
    formula_class=Compaction,
    output_precision=Compaction.PRECISION,
)

ROCK_CORRECTION_SPEC = FormulaSpec(
    formula_type=FormulaType.ROCK_CORRECTION,
    version="1.0.0",
    expression_id="rock_correction_oversize_fraction_v1",
    formula_class=RockCorrection,
    output_precision=RockCorrection.PRECISION,
)

LAB_MAX_CORRECTION_SPEC = FormulaSpec(
    formula_type=FormulaType.LAB_MAX_CORRECTION,
    version="1.0.0",
    expression_id="lab_max_oversize_correction_v1",
    formula_class=LabMaxCorrection,
    output_precision=LabMaxCorrection.PRECISION,
    defaults=("specific_gravity",),
)

FIELD_TEST_SPECS: tuple[FormulaSpec, ...] = (
    SAND_USED_SPEC,
    WET_DENSITY_SPEC,
    MOISTURE_CONTENT_SPEC,
    DRY_DENSITY_SPEC,
    COMPACTION_SPEC,
    ROCK_CORRECTION_SPEC,
    LAB_MAX_CORRECTION_SPEC,
)


def register_field_test_formulas(registry: FormulaRegistry | None = None) -> FormulaRegistry:
    """Register all field test formulas with the registry.

    Args:
        registry: Optional registry to use. If None, uses the singleton.

    Returns:
        The registry with the field test formulas registered.
    """
    if registry is None:
        registry = FormulaRegistry()

    for spec in FIELD_TEST_SPECS:
        if registry.get(spec.formula_type) is None:
            registry.register(spec)

    return registry


def canonical_json_for_hash(obj: Any) -> str:
    """Serialize object to canonical JSON for hashing.

    Rules:
    - All keys sorted alphabetically (recursive)
    - Floats serialized with repr(), so NaN and infinities hash too
    - Enums serialized by value
    - No whitespace

    Args:
        obj: Object to serialize.

    Returns:
        Canonical JSON string.
    """

    def normalize(value: Any) -> Any:
        if isinstance(value, float):
            return repr(value)
        if isinstance(value, dict):
            return {str(k): normalize(v) for k, v in sorted(value.items())}
        if isinstance(value, list | tuple):
            return [normalize(item) for item in value]
        if isinstance(value, StrEnum):
            return value.value
        return value

    normalized = normalize(obj)
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"))


def compute_sha256(data: str) -> str:
    """Compute SHA256 hash of a string.

    Returns:
        Lowercase hexadecimal hash string.
    """
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
