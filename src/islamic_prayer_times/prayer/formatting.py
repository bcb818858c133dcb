"""Fractional hour to wall-clock time conversion."""

from __future__ import annotations

from datetime import time

from islamic_prayer_times.contracts import HourMap, Prayer, PrayerTime, TimeMap
from islamic_prayer_times.prayer.params import Params, RoundSeconds

NORMAL_ROUNDING_SECONDS = 30.0
AGGRESSIVE_ROUNDING_SECONDS = 1.0
MINUTES_PER_DAY = 24 * 60

# Imsaak is the Fajr of a derived pass and rounds as Fajr.
TRUNCATED_PRAYERS = frozenset({Prayer.SHUROOQ})


def _wrap_hour(hour: float) -> float:
    wrapped = hour % 24.0
    return 0.0 if wrapped >= 24.0 else wrapped


def _rounding_threshold(prayer: Prayer, policy: RoundSeconds) -> float | None:
    """Seconds at which to round up, 60 to truncate, or None to keep seconds."""
    if policy is RoundSeconds.NONE:
        return None
    if policy is RoundSeconds.NORMAL:
        return NORMAL_ROUNDING_SECONDS
    if prayer in TRUNCATED_PRAYERS:
        return 60.0
    if policy is RoundSeconds.AGGRESSIVE:
        return AGGRESSIVE_ROUNDING_SECONDS
    return NORMAL_ROUNDING_SECONDS


def to_time(prayer: Prayer, hour: float, params: Params) -> time:
    """Convert an hour from local midnight to a time of day.

    The prayer's minute nudge is added first and the result wraps into one day.
    Seconds are then rounded according to ``params.round_seconds``; Shurooq is
    truncated to the minute under the special and aggressive policies.
    """
    seconds_of_day = round(_wrap_hour(hour + params.minute(prayer) / 60.0) * 3600.0, 6)
    minutes, seconds = divmod(seconds_of_day, 60.0)

    threshold = _rounding_threshold(prayer, params.round_seconds)
    if threshold is not None:
        if seconds >= threshold:
            minutes += 1
        seconds = 0.0

    minute_of_day = int(minutes) % MINUTES_PER_DAY
    return time(minute_of_day // 60, minute_of_day % 60, int(seconds))


def format_hours(hours: HourMap, params: Params) -> TimeMap:
    """Format every solved hour, keeping unsolved prayers as ``None``."""
    times: TimeMap = {}
    for prayer in sorted(hours, key=lambda item: item.order):
        hour = hours[prayer]
        if hour is None:
            times[prayer] = None
        else:
            times[prayer] = PrayerTime(to_time(prayer, hour.value, params), hour.extreme)
    return times
