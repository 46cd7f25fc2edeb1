"""Tests for lab constant configuration.

Tests verify:
- Built-in defaults when no BILLIOS_* variable is set
- Environment overrides, blank values ignored
- Malformed overrides fail with LabConstantsConfigError
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from billios.calc.constants import SAND_DENSITY, SAND_IN_CONE, SPECIFIC_GRAVITY
from billios.config import (
    BILLIOS_SAND_DENSITY_ENV,
    BILLIOS_SAND_IN_CONE_ENV,
    BILLIOS_SPECIFIC_GRAVITY_ENV,
    LabConstants,
    LabConstantsConfigError,
    get_lab_constants,
)


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults_match_constants(self) -> None:
        constants = get_lab_constants()

        assert constants.sand_density == SAND_DENSITY == 88.0
        assert constants.sand_in_cone == SAND_IN_CONE == 3.59
        assert constants.specific_gravity == SPECIFIC_GRAVITY == 2.7

    def test_lab_constants_model_defaults(self) -> None:
        assert LabConstants() == get_lab_constants()

    def test_lab_constants_frozen(self) -> None:
        constants = LabConstants()

        with pytest.raises(ValidationError):
            constants.sand_density = 90.0  # type: ignore[misc]

    def test_lab_constants_rejects_unknown_field(self) -> None:
        with pytest.raises(ValidationError):
            LabConstants(water_density=62.4)  # type: ignore[call-arg]


class TestEnvironmentOverrides:
    """Tests for BILLIOS_* overrides."""

    def test_single_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BILLIOS_SAND_DENSITY_ENV, "90.5")

        constants = get_lab_constants()

        assert constants.sand_density == 90.5
        assert constants.sand_in_cone == SAND_IN_CONE
        assert constants.specific_gravity == SPECIFIC_GRAVITY

    def test_all_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BILLIOS_SAND_DENSITY_ENV, "91")
        monkeypatch.setenv(BILLIOS_SAND_IN_CONE_ENV, " 3.4 ")
        monkeypatch.setenv(BILLIOS_SPECIFIC_GRAVITY_ENV, "2.65")

        assert get_lab_constants() == LabConstants(
            sand_density=91.0, sand_in_cone=3.4, specific_gravity=2.65
        )

    def test_blank_override_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BILLIOS_SPECIFIC_GRAVITY_ENV, "   ")

        assert get_lab_constants().specific_gravity == SPECIFIC_GRAVITY

    def test_override_read_on_every_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BILLIOS_SAND_IN_CONE_ENV, "3.0")
        assert get_lab_constants().sand_in_cone == 3.0

        monkeypatch.setenv(BILLIOS_SAND_IN_CONE_ENV, "3.2")
        assert get_lab_constants().sand_in_cone == 3.2

        monkeypatch.delenv(BILLIOS_SAND_IN_CONE_ENV)
        assert get_lab_constants().sand_in_cone == SAND_IN_CONE

    def test_override_logged_at_debug(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv(BILLIOS_SAND_DENSITY_ENV, "90")

        with caplog.at_level(logging.DEBUG, logger="billios.config"):
            get_lab_constants()

        assert BILLIOS_SAND_DENSITY_ENV in caplog.text

    def test_malformed_override_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BILLIOS_SAND_DENSITY_ENV, "eighty-eight")

        with pytest.raises(LabConstantsConfigError) as exc_info:
            get_lab_constants()

        assert exc_info.value.env_var == BILLIOS_SAND_DENSITY_ENV
        assert exc_info.value.value == "eighty-eight"
        assert BILLIOS_SAND_DENSITY_ENV in str(exc_info.value)
