"""Atmospheric conditions feeding the refraction model."""

from __future__ import annotations

from dataclasses import dataclass

from islamic_prayer_times.geo.coordinates import ValueRange

PRESSURE_RANGE = ValueRange("pressure", 100.0, 1050.0)
TEMPERATURE_RANGE = ValueRange("temperature", -90.0, 57.0)

DEFAULT_PRESSURE_MBAR = 1010.0
DEFAULT_TEMPERATURE_C = 14.0


@dataclass(frozen=True, slots=True)
class Weather:
    """Surface pressure (mbar) and temperature (Celsius); defaults to a standard atmosphere."""

    pressure: float = DEFAULT_PRESSURE_MBAR
    temperature: float = DEFAULT_TEMPERATURE_C

    def __post_init__(self) -> None:
        object.__setattr__(self, "pressure", PRESSURE_RANGE.check(self.pressure))
        object.__setattr__(self, "temperature", TEMPERATURE_RANGE.check(self.temperature))
