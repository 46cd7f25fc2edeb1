"""Tests for the field test formula registry.

Tests verify:
- All seven formulas are registered with their precision
- formula_hash is stable and distinct per formula
- Duplicate registration and unknown lookups fail
"""

from __future__ import annotations

import pytest

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
    SAND_USED_SPEC,
    FormulaRegistry,
    FormulaSpec,
    FormulaType,
    canonical_json_for_hash,
    compute_sha256,
    register_field_test_formulas,
)


@pytest.fixture
def registry() -> FormulaRegistry:
    """Create a fresh formula registry with the field test formulas."""
    FormulaRegistry.reset_instance()
    reg = FormulaRegistry()
    register_field_test_formulas(reg)
    return reg


class TestRegistration:
    """Tests for register_field_test_formulas."""

    def test_all_formulas_registered(self, registry: FormulaRegistry) -> None:
        assert set(registry.list_registered()) == set(FormulaType)

    @pytest.mark.parametrize(
        ("formula_type", "formula_class", "precision"),
        [
            (FormulaType.SAND_USED, SandUsed, 2),
            (FormulaType.WET_DENSITY, WetDensity, 4),
            (FormulaType.MOISTURE_CONTENT, MoistureContent, 8),
            (FormulaType.DRY_DENSITY, DryDensity, 0),
            (FormulaType.COMPACTION, Compaction, 1),
            (FormulaType.ROCK_CORRECTION, RockCorrection, 1),
            (FormulaType.LAB_MAX_CORRECTION, LabMaxCorrection, 1),
        ],
    )
    def test_spec_matches_formula(
        self,
        registry: FormulaRegistry,
        formula_type: FormulaType,
        formula_class: type,
        precision: int,
    ) -> None:
        spec = registry.get_or_raise(formula_type)

        assert spec.formula_class is formula_class
        assert spec.output_precision == precision

    def test_defaults_listed(self, registry: FormulaRegistry) -> None:
        assert registry.get_or_raise(FormulaType.SAND_USED).defaults == ("sand_in_cone",)
        assert registry.get_or_raise(FormulaType.WET_DENSITY).defaults == ("sand_density",)
        assert registry.get_or_raise(FormulaType.LAB_MAX_CORRECTION).defaults == (
            "specific_gravity",
        )
        assert registry.get_or_raise(FormulaType.COMPACTION).defaults == ()

    def test_registering_twice_is_idempotent(self, registry: FormulaRegistry) -> None:
        register_field_test_formulas(registry)

        assert len(registry.list_registered()) == len(FormulaType)

    def test_default_registry_is_singleton(self) -> None:
        registry = register_field_test_formulas()

        assert registry is FormulaRegistry()

    def test_duplicate_register_rejected(self, registry: FormulaRegistry) -> None:
        with pytest.raises(ValueError, match="already registered"):
            registry.register(SAND_USED_SPEC)

    def test_unknown_formula_raises(self) -> None:
        registry = FormulaRegistry()
        registry.clear()

        assert registry.get(FormulaType.COMPACTION) is None
        with pytest.raises(KeyError, match="COMPACTION"):
            registry.get_or_raise(FormulaType.COMPACTION)


class TestFormulaHash:
    """Tests for FormulaSpec.formula_hash."""

    def test_hash_is_sha256_hex(self) -> None:
        formula_hash = SAND_USED_SPEC.formula_hash

        assert len(formula_hash) == 64
        assert all(c in "0123456789abcdef" for c in formula_hash)

    def test_hash_is_stable(self) -> None:
        assert SAND_USED_SPEC.formula_hash == SAND_USED_SPEC.formula_hash
        assert SAND_USED_SPEC.formula_hash == compute_sha256(
            '{"expression_id":"sand_used_cone_delta_v1",'
            '"formula_type":"SAND_USED","formula_version":"1.0.0"}'
        )

    def test_hashes_distinct_per_formula(self, registry: FormulaRegistry) -> None:
        hashes = {registry.get_or_raise(ft).formula_hash for ft in FormulaType}

        assert len(hashes) == len(FormulaType)

    def test_version_bump_changes_hash(self) -> None:
        bumped = FormulaSpec(
            formula_type=FormulaType.SAND_USED,
            version="1.1.0",
            expression_id=SAND_USED_SPEC.expression_id,
            formula_class=SandUsed,
            output_precision=2,
        )

        assert bumped.formula_hash != SAND_USED_SPEC.formula_hash

    def test_precision_not_part_of_hash(self) -> None:
        other = FormulaSpec(
            formula_type=FormulaType.SAND_USED,
            version=SAND_USED_SPEC.version,
            expression_id=SAND_USED_SPEC.expression_id,
            formula_class=SandUsed,
            output_precision=3,
        )

        assert other.formula_hash == SAND_USED_SPEC.formula_hash


class TestCanonicalJson:
    """Tests for canonical_json_for_hash."""

    def test_keys_sorted_recursively(self) -> None:
        assert canonical_json_for_hash({"b": 1, "a": {"d": 2, "c": 3}}) == (
            '{"a":{"c":3,"d":2},"b":1}'
        )

    def test_floats_as_repr_strings(self) -> None:
        assert canonical_json_for_hash({"x": 0.1, "y": float("inf")}) == '{"x":"0.1","y":"inf"}'

    def test_enums_by_value(self) -> None:
        assert canonical_json_for_hash([FormulaType.COMPACTION]) == '["COMPACTION"]'

    def test_none_kept(self) -> None:
        assert canonical_json_for_hash({"rock_correction": None}) == '{"rock_correction":null}'
