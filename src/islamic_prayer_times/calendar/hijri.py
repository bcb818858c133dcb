"""Arithmetical (tabular) Hijri calendar conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from math import floor

HIJRI_EPOCH = 227015


class HijriDay(IntEnum):
    """Days of the week, Sunday first."""

    AHAD = 1
    ITHNAIN = 2
    THULATHA = 3
    ARBIAA = 4
    KHAMEES = 5
    JUMAA = 6
    SABT = 7

    @property
    def label(self) -> str:
        return self.name.capitalize()


class HijriMonth(IntEnum):
    """Hijri months."""

    MUHARRAM = 1
    SAFAR = 2
    RABIA_AWAL = 3
    RABIA_THANI = 4
    JUMADA_AWAL = 5
    JUMADA_THANI = 6
    RAJAB = 7
    SHAABAN = 8
    RAMADAN = 9
    SHAWWAL = 10
    DHUL_QIDDAH = 11
    DHUL_HIJJAH = 12

    @property
    def label(self) -> str:
        return " ".join(part.capitalize() for part in self.name.split("_"))


def _gregorian_absolute(day: date) -> int:
    """Days since the Gregorian epoch, day 1 being 0001-01-01."""
    prior_years = day.year - 1
    return (
        day.timetuple().tm_yday
        + 365 * prior_years
        + prior_years // 4
        - prior_years // 100
        + prior_years // 400
    )


def _hijri_absolute(day: int, month: int, year: int) -> int:
    return (
        day
        + 29 * (month - 1)
        + month // 2
        + 354 * (year - 1)
        + floor((3 + 11 * year) / 30)
        + HIJRI_EPOCH
        - 1
    )


def is_leap_year(year: int) -> bool:
    """Whether a Hijri year has 355 days."""
    return (abs(11 * year) + 14) % 30 < 11


def days_in_month(month: int, year: int) -> int:
    if month % 2 == 1 or (month == 12 and is_leap_year(year)):
        return 30
    return 29


def _hijri_year(absolute: int) -> int:
    if absolute < HIJRI_EPOCH:
        year = 0
        while absolute <= _hijri_absolute(1, 1, year):
            year -= 1
        return year

    year = (absolute - HIJRI_EPOCH - 1) // 355
    while absolute >= _hijri_absolute(1, 1, year + 1):
        year += 1
    return year


@dataclass(frozen=True, slots=True)
class HijriDate:
    """Hijri date of a Gregorian date.

    Years before the Hijra are counted backwards from 1 with ``pre_epoch`` set.
    """

    gregorian: date
    day: int
    month: HijriMonth
    year: int
    pre_epoch: bool
    weekday: HijriDay

    @classmethod
    def from_gregorian(cls, gregorian: date) -> HijriDate:
        absolute = _gregorian_absolute(gregorian)
        year = _hijri_year(absolute)
        month = 1
        while absolute > _hijri_absolute(days_in_month(month, year), month, year):
            month += 1
        day = absolute - _hijri_absolute(1, month, year) + 1

        pre_epoch = year <= 0
        if pre_epoch:
            year = 1 - year

        return cls(
            gregorian=gregorian,
            day=day,
            month=HijriMonth(month),
            year=year,
            pre_epoch=pre_epoch,
            weekday=HijriDay(absolute % 7 + 1),
        )

    def __str__(self) -> str:
        era = "B.H." if self.pre_epoch else "A.H."
        return f"{self.weekday.label} {self.month.label} {self.day}, {self.year} {era}"
