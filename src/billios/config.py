"""Lab constant configuration.

Default calibration values come from billios.calc.constants. A deployment can
replace any of them without code changes by setting:

- BILLIOS_SAND_DENSITY
- BILLIOS_SAND_IN_CONE
- BILLIOS_SPECIFIC_GRAVITY

Variables are read every time get_lab_constants() is called, so formula
defaults bind late (at accessor-call time, not at construction time).
Unset or blank variables fall back to the built-in default.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field

from billios.calc.constants import SAND_DENSITY, SAND_IN_CONE, SPECIFIC_GRAVITY

logger = logging.getLogger(__name__)

BILLIOS_SAND_DENSITY_ENV = "BILLIOS_SAND_DENSITY"
BILLIOS_SAND_IN_CONE_ENV = "BILLIOS_SAND_IN_CONE"
BILLIOS_SPECIFIC_GRAVITY_ENV = "BILLIOS_SPECIFIC_GRAVITY"

LAB_CONSTANT_ENV_VARS: dict[str, str] = {
    "sand_density": BILLIOS_SAND_DENSITY_ENV,
    "sand_in_cone": BILLIOS_SAND_IN_CONE_ENV,
    "specific_gravity": BILLIOS_SPECIFIC_GRAVITY_ENV,
}


class LabConstantsConfigError(Exception):
    """Raised when a BILLIOS_* override is set but is not a number."""

    def __init__(self, env_var: str, value: str) -> None:
        self.env_var = env_var
        self.value = value
        super().__init__(f"Invalid value for {env_var}: '{value}'. Expected a number.")


class LabConstants(BaseModel):
    """Calibration values used when a formula is built without an override."""

    sand_density: float = Field(SAND_DENSITY, description="Density of the test sand")
    sand_in_cone: float = Field(SAND_IN_CONE, description="Sand needed to fill the cone")
    specific_gravity: float = Field(
        SPECIFIC_GRAVITY, description="Specific gravity of the oversize rock"
    )

    model_config = {"frozen": True, "extra": "forbid"}


def _read_float_env(env_var: str) -> float | None:
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise LabConstantsConfigError(env_var, raw) from e


def get_lab_constants() -> LabConstants:
    """Get the lab constants with environment overrides applied.

    Returns:
        LabConstants holding the effective default for every calibration value.

    Raises:
        LabConstantsConfigError: If an override variable is not a number.
    """
    overrides: dict[str, float] = {}
    for name, env_var in LAB_CONSTANT_ENV_VARS.items():
        value = _read_float_env(env_var)
        if value is not None:
            logger.debug("Using %s=%s from %s", name, value, env_var)
            overrides[name] = value
    return LabConstants(**overrides)
