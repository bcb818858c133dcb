"""Core data contracts for prayer time calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from enum import StrEnum
from typing import Any


class Prayer(StrEnum):
    """Daily prayer events in their natural order."""

    IMSAAK = "imsaak"
    FAJR = "fajr"
    SHUROOQ = "shurooq"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"

    @property
    def order(self) -> int:
        """Position of the prayer within the day, Imsaak first."""
        return _PRAYER_ORDER.index(self)


_PRAYER_ORDER: tuple[Prayer, ...] = tuple(Prayer)

PRIMARY_PRAYERS: frozenset[Prayer] = frozenset(
    {Prayer.FAJR, Prayer.DHUHR, Prayer.ASR, Prayer.MAGHRIB, Prayer.ISHA}
)


@dataclass(frozen=True, slots=True)
class PrayerHour:
    """Fractional hour from local midnight produced by the solver or adjuster."""

    value: float
    extreme: bool = False


@dataclass(frozen=True, slots=True)
class PrayerTime:
    """Wall-clock prayer time."""

    time: time
    extreme: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {"time": self.time.isoformat(timespec="seconds"), "extreme": self.extreme}


HourMap = dict[Prayer, PrayerHour | None]
"""Per-prayer solver output; ``None`` marks an event with no real solution."""

TimeMap = dict[Prayer, PrayerTime | None]


class OutOfRangeError(ValueError):
    """Raised when a geographic or weather value violates its declared bounds."""

    def __init__(self, name: str, value: float, minimum: float, maximum: float) -> None:
        self.name = name
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"{name} {value} is outside range [{minimum}, {maximum}]")
