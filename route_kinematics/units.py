"""Numeric unit conversions for presenting SI route values.

Only the conversion factors and unit selection live here; building display
strings is left to the presentation layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

METERS_PER_MILE = 1609.344
METERS_PER_FOOT = 0.3048
METERS_PER_KILOMETER = 1000.0
MPS_TO_MPH = 2.23693629
MPS_TO_KPH = 3.6


class UnitSystem(str, Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"

    @classmethod
    def parse(cls, value: "str | UnitSystem") -> "UnitSystem":
        """Accept an enum member or its (case-insensitive) name."""

        if isinstance(value, UnitSystem):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(
                f"Unknown unit system {value!r}; expected 'imperial' or 'metric'"
            ) from exc


def convert_distance(distance_m: float, units: UnitSystem) -> Tuple[float, str]:
    """Return (value, unit): miles/feet or kilometres/metres.

    The larger unit is used once the distance reaches one of it.
    """

    if units is UnitSystem.IMPERIAL:
        miles = distance_m / METERS_PER_MILE
        if miles >= 1:
            return miles, "mi"
        return distance_m / METERS_PER_FOOT, "ft"
    km = distance_m / METERS_PER_KILOMETER
    if km >= 1:
        return km, "km"
    return distance_m, "m"


def convert_speed(speed_mps: float, units: UnitSystem) -> Tuple[float, str]:
    """Return (value, unit) in mph or km/h."""

    if units is UnitSystem.IMPERIAL:
        return speed_mps * MPS_TO_MPH, "mph"
    return speed_mps * MPS_TO_KPH, "km/h"
