"""Calibration constants for the sand-cone field test.

The first three are lab calibration values. Each formula that uses one also
takes an optional per-instance override, and deployments can change the
defaults through BILLIOS_* environment variables (see billios.config).
"""

from __future__ import annotations

# Density of the calibrated test sand [pcf]
SAND_DENSITY: float = 88.0

# Weight of sand that fills the cone and base plate [lb]
SAND_IN_CONE: float = 3.59

# Specific gravity of the oversize rock fraction
SPECIFIC_GRAVITY: float = 2.7

# Unit weight of water [pcf]. Physical constant, not overridable.
WATER_UNIT_WEIGHT: float = 62.4
