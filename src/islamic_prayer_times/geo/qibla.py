"""Qibla bearing from an observer toward the Kaaba."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from math import atan2, degrees

from islamic_prayer_times.geo.angle import Angle
from islamic_prayer_times.geo.coordinates import Coordinates

KAABA_LATITUDE = 21.423333
KAABA_LONGITUDE = 39.823333


class Rotation(StrEnum):
    """Turn direction from true north."""

    CW = "CW"
    CCW = "CCW"


@dataclass(frozen=True, slots=True)
class Qibla:
    """Signed great-circle bearing toward the Kaaba, negative meaning clockwise."""

    degrees: float

    @classmethod
    def from_coordinates(cls, coords: Coordinates) -> Qibla:
        lat = Angle.from_degrees(coords.latitude)
        kaaba_lat = Angle.from_degrees(KAABA_LATITUDE)
        delta = Angle.from_degrees(coords.longitude) - KAABA_LONGITUDE
        y = lat.cos * kaaba_lat.tan - lat.sin * delta.cos
        return cls(degrees=degrees(atan2(delta.sin, y)))

    @property
    def rotation(self) -> Rotation:
        return Rotation.CW if self.degrees < 0.0 else Rotation.CCW

    def __str__(self) -> str:
        return f"{abs(self.degrees):.1f}° {self.rotation}"
