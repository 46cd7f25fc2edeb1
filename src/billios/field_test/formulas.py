"""Sand-cone field test formulas.

Each formula is a frozen dataclass built once from its measurements and
queried with calculate(), which recomputes and rounds the result every time
it is called. Results are plain floats:

| Formula          | Result                                                   | Places |
|------------------|----------------------------------------------------------|--------|
| SandUsed         | cone_pre_test - (cone_post_test + sand_in_cone)          | 2      |
| WetDensity       | soil / sand_used * sand_density                          | 4      |
| MoistureContent  | (wet_weight - dry_weight) / (dry_weight - tare_pan)      | 8      |
| DryDensity       | wet_density / (1 + moisture_content)                     | 0      |
| Compaction       | dry_density / lab_max * 100                              | 1      |
| RockCorrection   | left_on_sieve_weight / pre_sieve_rock_correction         | 1      |
| LabMaxCorrection | (1 - 0.05 Pc) / (Pc / (62.4 Gs) + (1 - Pc) / lab_max)    | 1      |

Inputs are not range checked: a zero denominator yields inf or NaN the way
IEEE-754 division does, it does not raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from billios.calc.constants import WATER_UNIT_WEIGHT
from billios.calc.rounding import divide, round_n
from billios.config import get_lab_constants
from billios.field_test.inputs import NumericLike, as_float, as_numeric_input


def _freeze_floats(instance: object, *names: str) -> None:
    for name in names:
        object.__setattr__(instance, name, as_float(name, getattr(instance, name)))


def _freeze_optional_float(instance: object, name: str) -> None:
    value = getattr(instance, name)
    if value is not None:
        object.__setattr__(instance, name, as_float(name, value))


def _freeze_input(instance: object, name: str, formula_type: type | None) -> None:
    value = as_numeric_input(name, getattr(instance, name), formula_type)
    object.__setattr__(instance, name, value)


@dataclass(frozen=True)
class SandUsed:
    """Sand Used: weight of sand that filled the test hole.

    Example:
        >>> SandUsed(14.65, 8.75).calculate()
        2.31

    Attributes:
        cone_pre_test: Weight of the sand cone before the test.
        cone_post_test: Weight of the sand cone after the test.
        sand_in_cone: Sand needed to fill the cone. None uses the configured
            SAND_IN_CONE default.
    """

    PRECISION: ClassVar[int] = 2

    cone_pre_test: float
    cone_post_test: float
    sand_in_cone: float | None = None

    def __post_init__(self) -> None:
        _freeze_floats(self, "cone_pre_test", "cone_post_test")
        _freeze_optional_float(self, "sand_in_cone")

    def calculate(self) -> float:
        result = self.cone_pre_test - (self.cone_post_test + self.get_sand_in_cone())
        return round_n(result, self.PRECISION)

    def get_cone_pre_test(self) -> float:
        return self.cone_pre_test

    def get_cone_post_test(self) -> float:
        return self.cone_post_test

    def get_sand_in_cone(self) -> float:
        """Get the override, or the SAND_IN_CONE default when none was given."""
        if self.sand_in_cone is not None:
            return self.sand_in_cone
        return get_lab_constants().sand_in_cone


@dataclass(frozen=True)
class WetDensity:
    """Wet Density of the soil removed from the test hole.

    ``sand_used`` is either a number or a SandUsed formula.

    Example:
        >>> WetDensity(4.65, 2.31).calculate()
        177.1429
        >>> WetDensity(4.65, SandUsed(14.65, 8.75)).calculate()
        177.1429
    """

    PRECISION: ClassVar[int] = 4

    soil: float
    sand_used: NumericLike
    sand_density: float | None = None

    def __post_init__(self) -> None:
        _freeze_floats(self, "soil")
        _freeze_input(self, "sand_used", SandUsed)
        _freeze_optional_float(self, "sand_density")

    def calculate(self) -> float:
        result = divide(self.soil, self.get_sand_used()) * self.get_sand_density()
        return round_n(result, self.PRECISION)

    def get_soil(self) -> float:
        return self.soil

    def get_sand_used(self) -> float:
        return self.sand_used.resolve()

    def get_sand_density(self) -> float:
        """Get the override, or the SAND_DENSITY default when none was given."""
        if self.sand_density is not None:
            return self.sand_density
        return get_lab_constants().sand_density


@dataclass(frozen=True)
class MoistureContent:
    """Moisture Content as a ratio of water weight to dry soil weight.

    Example:
        >>> MoistureContent(1600, 1575, 1400).calculate()
        0.14285714
    """

    PRECISION: ClassVar[int] = 8

    wet_weight: float
    dry_weight: float
    tare_pan: float

    def __post_init__(self) -> None:
        _freeze_floats(self, "wet_weight", "dry_weight", "tare_pan")

    def calculate(self) -> float:
        result = divide(self.wet_weight - self.dry_weight, self.dry_weight - self.tare_pan)
        return round_n(result, self.PRECISION)

    def get_wet_weight(self) -> float:
        return self.wet_weight

    def get_dry_weight(self) -> float:
        return self.dry_weight

    def get_tare_pan(self) -> float:
        return self.tare_pan


@dataclass(frozen=True)
class DryDensity:
    """Dry Density, rounded to a whole number.

    Both inputs take a number or the matching formula (WetDensity,
    MoistureContent). Formula inputs are recomputed on every access.

    Example:
        >>> DryDensity(177.1429, 0.1428571).calculate()
        155.0
    """

    PRECISION: ClassVar[int] = 0

    wet_density: NumericLike
    moisture_content: NumericLike

    def __post_init__(self) -> None:
        _freeze_input(self, "wet_density", WetDensity)
        _freeze_input(self, "moisture_content", MoistureContent)

    def calculate(self) -> float:
        result = divide(self.get_wet_density(), 1.0 + self.get_moisture_content())
        return round_n(result, self.PRECISION)

    def get_wet_density(self) -> float:
        return self.wet_density.resolve()

    def get_moisture_content(self) -> float:
        return self.moisture_content.resolve()


@dataclass(frozen=True)
class Compaction:
    """Percent Compaction of the field dry density against the lab maximum.

    Example:
        >>> Compaction(155, 135.6).calculate()
        114.3
    """

    PRECISION: ClassVar[int] = 1

    dry_density: NumericLike
    lab_max: float

    def __post_init__(self) -> None:
        _freeze_input(self, "dry_density", DryDensity)
        _freeze_floats(self, "lab_max")

    def calculate(self) -> float:
        result = divide(self.get_dry_density(), self.lab_max) * 100.0
        return round_n(result, self.PRECISION)

    def get_dry_density(self) -> float:
        return self.dry_density.resolve()

    def get_lab_max(self) -> float:
        return self.lab_max


@dataclass(frozen=True)
class RockCorrection:
    """Rock Correction: fraction of oversize material retained on the sieve.

    Example:
        >>> RockCorrection(100, 500).calculate()
        0.2
    """

    PRECISION: ClassVar[int] = 1

    left_on_sieve_weight: float
    pre_sieve_rock_correction: float

    def __post_init__(self) -> None:
        _freeze_floats(self, "left_on_sieve_weight", "pre_sieve_rock_correction")

    def calculate(self) -> float:
        result = divide(self.left_on_sieve_weight, self.pre_sieve_rock_correction)
        return round_n(result, self.PRECISION)

    def get_left_on_sieve_weight(self) -> float:
        return self.left_on_sieve_weight

    def get_pre_sieve_rock_correction(self) -> float:
        return self.pre_sieve_rock_correction


@dataclass(frozen=True)
class LabMaxCorrection:
    """Lab maximum dry density corrected for oversize rock.

    ``rock_correction`` takes a number or a RockCorrection formula.

    Example:
        >>> LabMaxCorrection(0.2, 135.6).calculate()
        139.7
        >>> LabMaxCorrection(RockCorrection(100, 500), 135.6).calculate()
        139.7

    Attributes:
        rock_correction: Oversize fraction (Pc).
        lab_max: Lab maximum dry density of the fine fraction.
        specific_gravity: Specific gravity of the rock (Gs). None uses the
            configured SPECIFIC_GRAVITY default.
    """

    PRECISION: ClassVar[int] = 1

    rock_correction: NumericLike
    lab_max: float
    specific_gravity: float | None = None

    def __post_init__(self) -> None:
        _freeze_input(self, "rock_correction", RockCorrection)
        _freeze_floats(self, "lab_max")
        _freeze_optional_float(self, "specific_gravity")

    def calculate(self) -> float:
        rock_correction = self.get_rock_correction()
        specific_gravity = self.get_specific_gravity()

        numerator = 1.0 - 0.05 * rock_correction
        denominator = divide(rock_correction, WATER_UNIT_WEIGHT * specific_gravity) + divide(
            1.0 - rock_correction, self.lab_max
        )
        return round_n(divide(numerator, denominator), self.PRECISION)

    def get_rock_correction(self) -> float:
        return self.rock_correction.resolve()

    def get_lab_max(self) -> float:
        return self.lab_max

    def get_specific_gravity(self) -> float:
        """Get the override, or the SPECIFIC_GRAVITY default when none was given."""
        if self.specific_gravity is not None:
            return self.specific_gravity
        return get_lab_constants().specific_gravity
