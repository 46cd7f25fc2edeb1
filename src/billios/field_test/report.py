"""Whole-sheet sand-cone field test runner.

run_field_test() wires one measurement sheet through the formula graph:

    SandUsed -> WetDensity -\
                             DryDensity -> Compaction
    MoistureContent --------/
    RockCorrection -> LabMaxCorrection

Every result in the report comes with the hash of the formula that produced
it, and the report as a whole carries a reproducibility hash so a stored
report can be checked against a recomputation.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, model_validator

from billios.config import LabConstants, get_lab_constants
from billios.field_test.formulas import (
    Compaction,
    DryDensity,
    LabMaxCorrection,
    MoistureContent,
    RockCorrection,
    SandUsed,
    WetDensity,
)
from billios.field_test.registry import (
    FormulaRegistry,
    FormulaType,
    canonical_json_for_hash,
    compute_sha256,
    register_field_test_formulas,
)

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

# Report field -> result key used in hashing and in results()
RESULT_KEYS: dict[str, str] = {
    "sand_used": FormulaType.SAND_USED.value,
    "wet_density": FormulaType.WET_DENSITY.value,
    "moisture_content": FormulaType.MOISTURE_CONTENT.value,
    "dry_density": FormulaType.DRY_DENSITY.value,
    "compaction": FormulaType.COMPACTION.value,
    "rock_correction": FormulaType.ROCK_CORRECTION.value,
    "lab_max_correction": FormulaType.LAB_MAX_CORRECTION.value,
    "corrected_compaction": "CORRECTED_COMPACTION",
}


class FieldTestIntegrityError(Exception):
    """Raised when a report's reproducibility hash does not match its contents."""

    def __init__(self, expected_hash: str, computed_hash: str) -> None:
        self.expected_hash = expected_hash
        self.computed_hash = computed_hash
        super().__init__(
            "Integrity check failed for field test report. "
            f"Expected hash: {expected_hash[:16]}..., "
            f"Computed hash: {computed_hash[:16]}..."
        )


class FieldTestMeasurements(BaseModel):
    """One sand-cone field test sheet.

    Rock correction is optional: give both sieve weights or neither.
    The three calibration overrides fall back to the configured lab constants.
    """

    cone_pre_test: float = Field(..., description="Sand cone weight before the test")
    cone_post_test: float = Field(..., description="Sand cone weight after the test")
    soil: float = Field(..., description="Weight of soil removed from the hole")
    wet_weight: float = Field(..., description="Moisture sample wet weight incl. pan")
    dry_weight: float = Field(..., description="Moisture sample dry weight incl. pan")
    tare_pan: float = Field(..., description="Weight of the moisture pan")
    lab_max: float = Field(..., description="Lab maximum dry density")
    left_on_sieve_weight: float | None = Field(None, description="Oversize retained on sieve")
    pre_sieve_rock_correction: float | None = Field(
        None, description="Sample weight before sieving"
    )
    sand_in_cone: float | None = Field(None, description="Override for SAND_IN_CONE")
    sand_density: float | None = Field(None, description="Override for SAND_DENSITY")
    specific_gravity: float | None = Field(None, description="Override for SPECIFIC_GRAVITY")

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def _rock_fields_together(self) -> FieldTestMeasurements:
        if (self.left_on_sieve_weight is None) != (self.pre_sieve_rock_correction is None):
            raise ValueError(
                "left_on_sieve_weight and pre_sieve_rock_correction must be given together"
            )
        return self

    @property
    def has_rock_correction(self) -> bool:
        return self.left_on_sieve_weight is not None


class FieldTestReport(BaseModel):
    """Results of one field test sheet with reproducibility provenance."""

    measurements: FieldTestMeasurements
    lab_constants: LabConstants = Field(..., description="Constants in effect for this run")
    sand_used: float
    wet_density: float
    moisture_content: float
    dry_density: float
    compaction: float
    rock_correction: float | None = None
    lab_max_correction: float | None = None
    corrected_compaction: float | None = Field(
        None, description="Compaction against the rock-corrected lab max"
    )
    formula_hashes: dict[str, str] = Field(
        default_factory=dict, description="formula_hash per formula type used"
    )
    code_version: str
    reproducibility_hash: str

    model_config = {"frozen": True, "extra": "forbid"}

    def results(self) -> dict[str, float | None]:
        """Get the formula results keyed by formula type value."""
        return {key: getattr(self, name) for name, key in RESULT_KEYS.items()}


def _resolve_lab_constants(measurements: FieldTestMeasurements) -> LabConstants:
    """Merge per-sheet overrides over the configured lab constants."""
    configured = get_lab_constants()
    overrides = {
        name: value
        for name, value in (
            ("sand_in_cone", measurements.sand_in_cone),
            ("sand_density", measurements.sand_density),
            ("specific_gravity", measurements.specific_gravity),
        )
        if value is not None
    }
    return configured.model_copy(update=overrides)


def _compute_reproducibility_hash(
    measurements: FieldTestMeasurements,
    lab_constants: LabConstants,
    formula_hashes: dict[str, str],
    code_version: str,
    results: dict[str, float | None],
) -> str:
    hash_input: dict[str, Any] = {
        "code_version": code_version,
        "formula_hashes": formula_hashes,
        "lab_constants": lab_constants.model_dump(),
        "measurements": measurements.model_dump(),
        "results": results,
    }
    return compute_sha256(canonical_json_for_hash(hash_input))


def run_field_test(
    measurements: FieldTestMeasurements,
    registry: FormulaRegistry | None = None,
    code_version: str | None = None,
) -> FieldTestReport:
    """Run every field test formula over one measurement sheet.

    The lab constants are resolved once and passed to each formula explicitly,
    so the whole report uses one consistent set even if the environment
    changes while it runs.

    Args:
        measurements: The field test sheet.
        registry: Formula registry to take formula hashes from. Defaults to
            the singleton with the field test formulas registered.
        code_version: Version string recorded in the report. Defaults to the
            package __version__.

    Returns:
        FieldTestReport with all results and provenance hashes.

    Raises:
        KeyError: If a formula used by the sheet is not registered.
        LabConstantsConfigError: If a BILLIOS_* override is malformed.
    """
    registry = registry or register_field_test_formulas()
    code_version = code_version or __version__
    lab_constants = _resolve_lab_constants(measurements)

    sand_used = SandUsed(
        measurements.cone_pre_test,
        measurements.cone_post_test,
        lab_constants.sand_in_cone,
    )
    wet_density = WetDensity(measurements.soil, sand_used, lab_constants.sand_density)
    moisture_content = MoistureContent(
        measurements.wet_weight,
        measurements.dry_weight,
        measurements.tare_pan,
    )
    dry_density = DryDensity(wet_density, moisture_content)
    compaction = Compaction(dry_density, measurements.lab_max)

    used = [
        FormulaType.SAND_USED,
        FormulaType.WET_DENSITY,
        FormulaType.MOISTURE_CONTENT,
        FormulaType.DRY_DENSITY,
        FormulaType.COMPACTION,
    ]

    rock_correction_value: float | None = None
    lab_max_correction_value: float | None = None
    corrected_compaction_value: float | None = None

    if measurements.has_rock_correction:
        rock_correction = RockCorrection(
            measurements.left_on_sieve_weight,
            measurements.pre_sieve_rock_correction,
        )
        lab_max_correction = LabMaxCorrection(
            rock_correction,
            measurements.lab_max,
            lab_constants.specific_gravity,
        )
        rock_correction_value = rock_correction.calculate()
        lab_max_correction_value = lab_max_correction.calculate()
        corrected_compaction_value = Compaction(dry_density, lab_max_correction_value).calculate()
        used.extend([FormulaType.ROCK_CORRECTION, FormulaType.LAB_MAX_CORRECTION])

    formula_hashes = {ft.value: registry.get_or_raise(ft).formula_hash for ft in used}

    values: dict[str, Any] = {
        "sand_used": sand_used.calculate(),
        "wet_density": wet_density.calculate(),
        "moisture_content": moisture_content.calculate(),
        "dry_density": dry_density.calculate(),
        "compaction": compaction.calculate(),
        "rock_correction": rock_correction_value,
        "lab_max_correction": lab_max_correction_value,
        "corrected_compaction": corrected_compaction_value,
    }

    logger.debug(
        "Field test computed: dry_density=%s compaction=%s rock_correction=%s",
        values["dry_density"],
        values["compaction"],
        rock_correction_value,
    )

    reproducibility_hash = _compute_reproducibility_hash(
        measurements=measurements,
        lab_constants=lab_constants,
        formula_hashes=formula_hashes,
        code_version=code_version,
        results={key: values[name] for name, key in RESULT_KEYS.items()},
    )

    return FieldTestReport(
        measurements=measurements,
        lab_constants=lab_constants,
        formula_hashes=formula_hashes,
        code_version=code_version,
        reproducibility_hash=reproducibility_hash,
        **values,
    )


def verify_reproducibility(report: FieldTestReport) -> None:
    """Verify the reproducibility hash of a report.

    Recomputes the hash from the stored measurements, constants, formula
    hashes and results, and compares it with the stored value.

    Raises:
        FieldTestIntegrityError: If the hash doesn't match (tamper detected).
    """
    computed_hash = _compute_reproducibility_hash(
        measurements=report.measurements,
        lab_constants=report.lab_constants,
        formula_hashes=report.formula_hashes,
        code_version=report.code_version,
        results=report.results(),
    )
    if computed_hash != report.reproducibility_hash:
        raise FieldTestIntegrityError(
            expected_hash=report.reproducibility_hash,
            computed_hash=computed_hash,
        )
