"""Angle value type and wrap-around helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from math import cos, degrees, floor, radians, sin, tan


def cap_angle(value: float, cap: float) -> float:
    """Wrap ``value`` into ``[0, cap)``."""
    fraction = value / cap
    return cap * (fraction - floor(fraction))


def cap_360(value: float) -> float:
    """Wrap an angle in degrees into ``[0, 360)``."""
    return cap_angle(value, 360.0)


def cap_180(value: float) -> float:
    """Wrap a half-circle quantity in degrees into ``[0, 180)``."""
    return cap_angle(value, 180.0)


def cap_unit(value: float) -> float:
    """Keep the fractional part of ``value`` in ``[0, 1)``; negatives wrap forward."""
    return value - floor(value)


def cap_signed_180(value: float) -> float:
    """Wrap an angle difference in degrees into ``(-180, 180]``."""
    wrapped = cap_360(value)
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


@dataclass(frozen=True)
class Angle:
    """Angle held in both degrees and radians with memoized trigonometry.

    Build instances through `from_degrees` or `from_radians`. Arithmetic
    operators act on the degree measure and always return a new Angle.
    """

    degrees: float
    radians: float

    @classmethod
    def from_degrees(cls, value: float) -> Angle:
        return cls(degrees=value, radians=radians(value))

    @classmethod
    def from_radians(cls, value: float) -> Angle:
        return cls(degrees=degrees(value), radians=value)

    @cached_property
    def sin(self) -> float:
        return sin(self.radians)

    @cached_property
    def cos(self) -> float:
        return cos(self.radians)

    @cached_property
    def tan(self) -> float:
        return tan(self.radians)

    def __add__(self, other: Angle | float) -> Angle:
        return Angle.from_degrees(self.degrees + _degrees_of(other))

    def __sub__(self, other: Angle | float) -> Angle:
        return Angle.from_degrees(self.degrees - _degrees_of(other))

    def __mul__(self, other: Angle | float) -> Angle:
        return Angle.from_degrees(self.degrees * _degrees_of(other))

    def __truediv__(self, other: Angle | float) -> Angle:
        return Angle.from_degrees(self.degrees / _degrees_of(other))

    def __neg__(self) -> Angle:
        return Angle.from_degrees(-self.degrees)


def _degrees_of(value: Angle | float) -> float:
    if isinstance(value, Angle):
        return value.degrees
    return float(value)
