"""Gregorian date to Julian Day conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from math import floor

from islamic_prayer_times.geo.coordinates import GMT_RANGE


def julian_day_number(year: int, month: int, day: int, gmt: float = 0.0) -> float:
    """Return the continuous Julian Day for a proleptic Gregorian date.

    Args:
        year: Calendar year; values <= 0 denote years before the common era.
        month: Month number, 1-12.
        day: Day of month.
        gmt: UTC offset in hours of the local midnight being converted.

    Returns:
        Julian Day number of local midnight expressed in UT.
    """
    y = year
    m = month
    if m <= 2:
        y -= 1
        m += 12
    if year < 1:
        y += 1

    b = 0
    if (year, month, day) > (1582, 10, 15):
        a = floor(y / 100)
        b = 2 - a + floor(a / 4)

    c = floor(365.25 * (y + 4716))
    d = floor(30.6001 * (m + 1))
    return b + c + d + (day - gmt / 24.0) - 1524.5


@dataclass(frozen=True, slots=True)
class JulianDay:
    """Julian Day of a local calendar date at a fixed UTC offset."""

    date: date
    gmt: float
    value: float

    @classmethod
    def from_date(cls, day: date, gmt: float) -> JulianDay:
        """Convert a calendar date and UTC offset into a Julian Day."""
        offset = GMT_RANGE.check(gmt)
        return cls(date=day, gmt=offset, value=julian_day_number(day.year, day.month, day.day, offset))

    def shift(self, days: int) -> JulianDay:
        """Move both the calendar date and the day number by ``days``."""
        return JulianDay(date=self.date + timedelta(days=days), gmt=self.gmt, value=self.value + days)

    def prev(self) -> JulianDay:
        return self.shift(-1)

    def next(self) -> JulianDay:
        return self.shift(1)

    def __float__(self) -> float:
        return self.value
