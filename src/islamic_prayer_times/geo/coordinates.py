"""Validated observer coordinates and location contracts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import floor

from islamic_prayer_times.contracts import OutOfRangeError

NEAREST_LATITUDE = 48.5


@dataclass(frozen=True, slots=True)
class ValueRange:
    """Closed numeric interval used to validate a named quantity."""

    name: str
    minimum: float
    maximum: float

    def check(self, value: float) -> float:
        """Return ``value`` as float or raise `OutOfRangeError` when outside the range."""
        number = float(value)
        if not self.minimum <= number <= self.maximum:
            raise OutOfRangeError(self.name, number, self.minimum, self.maximum)
        return number


LATITUDE_RANGE = ValueRange("latitude", -90.0, 90.0)
LONGITUDE_RANGE = ValueRange("longitude", -180.0, 180.0)
ELEVATION_RANGE = ValueRange("elevation", -420.0, 8848.0)
GMT_RANGE = ValueRange("gmt", -12.0, 12.0)


def _round_half_away(value: float) -> int:
    return int(floor(abs(value) + 0.5))


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Observer position: degrees north/east and meters above sea level."""

    latitude: float
    longitude: float
    elevation: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", LATITUDE_RANGE.check(self.latitude))
        object.__setattr__(self, "longitude", LONGITUDE_RANGE.check(self.longitude))
        object.__setattr__(self, "elevation", ELEVATION_RANGE.check(self.elevation))

    def with_latitude(self, latitude: float) -> Coordinates:
        """Return a copy at another latitude, keeping longitude and elevation."""
        return replace(self, latitude=latitude)

    @property
    def latitude_label(self) -> str:
        hemisphere = "N" if self.latitude >= 0.0 else "S"
        return f"{_round_half_away(self.latitude)} {hemisphere}"

    @property
    def longitude_label(self) -> str:
        hemisphere = "E" if self.longitude >= 0.0 else "W"
        return f"{_round_half_away(self.longitude)} {hemisphere}"

    @property
    def elevation_label(self) -> str:
        sign = "-" if self.elevation < 0.0 else ""
        return f"{sign}{_round_half_away(self.elevation)} meters"

    def __str__(self) -> str:
        return f"{self.latitude_label}, {self.longitude_label}, {self.elevation_label}"


@dataclass(frozen=True, slots=True)
class Location:
    """Coordinates plus a fixed UTC offset in hours."""

    coordinates: Coordinates
    gmt: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "gmt", GMT_RANGE.check(self.gmt))
