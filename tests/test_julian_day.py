"""Tests for Julian Day conversion."""

from __future__ import annotations

from datetime import date

import pytest

from islamic_prayer_times.contracts import OutOfRangeError
from islamic_prayer_times.geo.julian_day import JulianDay, julian_day_number

EPSILON = 1e-8


def test_julian_day_from_date() -> None:
    """Local midnight at UTC-4 converts to the reference day number."""
    julian_day = JulianDay.from_date(date(2022, 12, 4), -4.0)

    assert julian_day.value == pytest.approx(2459917.66666667, abs=EPSILON)
    assert julian_day.date == date(2022, 12, 4)
    assert float(julian_day) == julian_day.value


def test_julian_day_prev_and_next_shift_date_and_value() -> None:
    """Neighbouring days move the value by exactly one."""
    julian_day = JulianDay.from_date(date(2022, 12, 4), -4.0)

    prev_day = julian_day.prev()
    next_day = julian_day.next()

    assert prev_day.value == pytest.approx(2459916.66666667, abs=EPSILON)
    assert prev_day.date == date(2022, 12, 3)
    assert next_day.value == pytest.approx(2459918.66666667, abs=EPSILON)
    assert next_day.date == date(2022, 12, 5)


def test_julian_day_shift_round_trip() -> None:
    """Shifting forward then back reproduces the original value."""
    julian_day = JulianDay.from_date(date(2023, 2, 6), -5.0)
    assert julian_day.shift(1).shift(-1).value == pytest.approx(julian_day.value, abs=EPSILON)
    assert julian_day.shift(30).date == date(2023, 3, 8)


def test_julian_day_number_known_epochs() -> None:
    """J2000.0 and the Gregorian switch follow the standard algorithm."""
    assert julian_day_number(2000, 1, 1) + 0.5 == pytest.approx(2451545.0)
    assert julian_day_number(1582, 10, 16) == pytest.approx(2299161.5)


def test_julian_day_number_before_common_era() -> None:
    """Years <= 0 are accepted and precede year 1."""
    assert julian_day_number(-100, 6, 1) < julian_day_number(1, 6, 1)


def test_julian_day_rejects_invalid_gmt() -> None:
    """UTC offsets beyond 12 hours are rejected."""
    with pytest.raises(OutOfRangeError, match="gmt"):
        JulianDay.from_date(date(2023, 1, 1), -12.5)
