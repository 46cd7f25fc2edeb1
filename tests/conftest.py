"""Pytest configuration and fixtures for billios tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

import pytest

from billios.config import LAB_CONSTANT_ENV_VARS
from billios.field_test.registry import FormulaRegistry
from tests.fixtures.field_test_sheet import FieldTestSetup


@pytest.fixture(autouse=True)
def clear_lab_constant_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove BILLIOS_* overrides so every test starts from the built-in defaults.

    Tests that need an override set it themselves with monkeypatch.setenv.
    """
    for env_var in LAB_CONSTANT_ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture(autouse=True)
def reset_formula_registry() -> None:
    """Start every test with an empty formula registry singleton."""
    FormulaRegistry.reset_instance()


@pytest.fixture
def field_setup() -> FieldTestSetup:
    """Reference field test measurements."""
    return FieldTestSetup()


@pytest.fixture
def sheet_data(field_setup: FieldTestSetup) -> dict[str, float]:
    """Reference field test sheet as JSON-compatible data, rock correction included."""
    return field_setup.as_sheet()
