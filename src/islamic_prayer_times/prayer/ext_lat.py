"""Extreme-latitude adjustment strategies.

Each strategy is a pure function ``(hours, context) -> hours``. `adjust`
selects one from the configured `ExtremeLatitudeMethod`, then applies the
fixed Fajr/Isha intervals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from islamic_prayer_times.astro.solar import TopAstroDay
from islamic_prayer_times.contracts import HourMap, Prayer, PrayerHour
from islamic_prayer_times.geo.coordinates import Coordinates
from islamic_prayer_times.geo.julian_day import JulianDay
from islamic_prayer_times.geo.weather import Weather
from islamic_prayer_times.prayer.hours import solve_hours
from islamic_prayer_times.prayer.params import ExtremeLatitudeMethod, Params

logger = logging.getLogger(__name__)

_TRIGGER_PRAYERS = (Prayer.FAJR, Prayer.SHUROOQ, Prayer.MAGHRIB, Prayer.ISHA)
_TWILIGHT_PRAYERS = (Prayer.FAJR, Prayer.ISHA)
_DAYLIGHT_PRAYERS = (Prayer.SHUROOQ, Prayer.DHUHR, Prayer.ASR, Prayer.MAGHRIB)


@dataclass(frozen=True, slots=True)
class AdjustContext:
    """Everything a strategy may need to re-solve the day."""

    params: Params
    top_astro_day: TopAstroDay
    weather: Weather

    @property
    def julian_day(self) -> JulianDay:
        return self.top_astro_day.julian_day

    @property
    def coords(self) -> Coordinates:
        return self.top_astro_day.coords

    def solve(self, top_astro_day: TopAstroDay | None = None) -> HourMap:
        """Solve with this context's params and weather for another window, or the own one."""
        return solve_hours(self.params, top_astro_day or self.top_astro_day, self.weather)


Strategy = Callable[[HourMap, AdjustContext], HourMap]


def _extreme(hour: PrayerHour) -> PrayerHour:
    return PrayerHour(hour.value, extreme=True)


def _night_length(shurooq: PrayerHour, maghrib: PrayerHour) -> float:
    return 24.0 - (maghrib.value - shurooq.value)


def _nearest_latitude(
    hours: HourMap, context: AdjustContext, *, all_prayers: bool, only_invalid: bool
) -> HourMap:
    """Copy events solved at the substitute latitude, same longitude and elevation."""
    coords = context.coords.with_latitude(context.params.extreme_latitude.nearest_latitude)
    substitute = context.solve(context.top_astro_day.with_coordinates(coords))

    result = dict(hours)
    for prayer in _TWILIGHT_PRAYERS:
        candidate = substitute[prayer]
        if candidate is not None and (not only_invalid or hours[prayer] is None):
            result[prayer] = _extreme(candidate)
    if all_prayers:
        # Events the substitute cannot solve are dropped, not kept unflagged.
        for prayer in _DAYLIGHT_PRAYERS:
            candidate = substitute[prayer]
            result[prayer] = None if candidate is None else _extreme(candidate)
    return result


def _find_good_day(context: AdjustContext) -> HourMap | None:
    """Search outward from the date for the nearest day with both Fajr and Isha."""
    julian_day = context.julian_day
    day_of_year = julian_day.date.timetuple().tm_yday
    for distance in range(day_of_year + 1):
        shifts = (0,) if distance == 0 else (-distance, distance)
        for shift in shifts:
            top = TopAstroDay.from_julian_day(julian_day.shift(shift), context.coords)
            candidate = context.solve(top)
            if candidate[Prayer.FAJR] is not None and candidate[Prayer.ISHA] is not None:
                logger.debug("nearest good day for %s is %+d days", julian_day.date, shift)
                return candidate
    return None


def _nearest_good_day(hours: HourMap, context: AdjustContext, *, all_prayers: bool) -> HourMap:
    good_day = _find_good_day(context)
    if good_day is None:
        logger.warning("no day with valid fajr and isha found near %s", context.julian_day.date)
        return hours

    result = dict(hours)
    if all_prayers:
        for prayer in (*_TWILIGHT_PRAYERS, *_DAYLIGHT_PRAYERS):
            candidate = good_day[prayer]
            if candidate is not None:
                result[prayer] = _extreme(candidate)
        return result

    for prayer in _TWILIGHT_PRAYERS:
        candidate = good_day[prayer]
        if hours[prayer] is None and candidate is not None:
            result[prayer] = _extreme(candidate)
    return result


def _night_portion(
    hours: HourMap,
    context: AdjustContext,
    *,
    portion: Callable[[float], float],
    only_invalid: bool,
) -> HourMap:
    """Place Fajr before Shurooq and Isha after Maghrib by a share of the day or night."""
    shurooq = hours[Prayer.SHUROOQ]
    maghrib = hours[Prayer.MAGHRIB]
    if shurooq is None or maghrib is None:
        return hours

    amount = portion(maghrib.value - shurooq.value)
    result = dict(hours)
    if not only_invalid or hours[Prayer.FAJR] is None:
        result[Prayer.FAJR] = PrayerHour(shurooq.value - amount, extreme=True)
    if not only_invalid or hours[Prayer.ISHA] is None:
        result[Prayer.ISHA] = PrayerHour(maghrib.value + amount, extreme=True)
    return result


def _half_of_night(hours: HourMap, context: AdjustContext, *, only_invalid: bool) -> HourMap:
    """Anchor Fajr and Isha on the middle of the night, offset by their intervals."""
    shurooq = hours[Prayer.SHUROOQ]
    maghrib = hours[Prayer.MAGHRIB]
    if shurooq is None or maghrib is None:
        return hours

    midnight = maghrib.value + _night_length(shurooq, maghrib) / 2.0
    params = context.params
    result = dict(hours)
    if not only_invalid or hours[Prayer.FAJR] is None:
        result[Prayer.FAJR] = PrayerHour(midnight - params.interval(Prayer.FAJR) / 60.0, extreme=True)
    if not only_invalid or hours[Prayer.ISHA] is None:
        result[Prayer.ISHA] = PrayerHour(midnight + params.interval(Prayer.ISHA) / 60.0, extreme=True)
    return result


def _minutes_from_maghrib_always(hours: HourMap, context: AdjustContext) -> HourMap:
    """Collapse Fajr onto Shurooq and Isha onto Maghrib; intervals are added afterwards."""
    result = dict(hours)
    if hours[Prayer.SHUROOQ] is not None:
        result[Prayer.FAJR] = _extreme(hours[Prayer.SHUROOQ])
    if hours[Prayer.MAGHRIB] is not None:
        result[Prayer.ISHA] = _extreme(hours[Prayer.MAGHRIB])
    return result


def _minutes_from_maghrib_invalid(hours: HourMap, context: AdjustContext) -> HourMap:
    params = context.params
    shurooq = hours[Prayer.SHUROOQ]
    maghrib = hours[Prayer.MAGHRIB]
    result = dict(hours)
    if hours[Prayer.FAJR] is None and shurooq is not None:
        result[Prayer.FAJR] = PrayerHour(shurooq.value - params.interval(Prayer.FAJR) / 60.0, extreme=True)
    if hours[Prayer.ISHA] is None and maghrib is not None:
        result[Prayer.ISHA] = PrayerHour(maghrib.value + params.interval(Prayer.ISHA) / 60.0, extreme=True)
    return result


def _angle_based(hours: HourMap, context: AdjustContext) -> HourMap:
    """Replace unsolved twilight events with ``angle / 60`` of the night."""
    shurooq = hours[Prayer.SHUROOQ]
    maghrib = hours[Prayer.MAGHRIB]
    if shurooq is None or maghrib is None:
        return hours

    night = _night_length(shurooq, maghrib)
    params = context.params
    result = dict(hours)
    if hours[Prayer.FAJR] is None:
        result[Prayer.FAJR] = PrayerHour(
            shurooq.value - night * params.angle(Prayer.FAJR) / 60.0, extreme=True
        )
    if hours[Prayer.ISHA] is None:
        result[Prayer.ISHA] = PrayerHour(
            maghrib.value + night * params.angle(Prayer.ISHA) / 60.0, extreme=True
        )
    return result


def _seventh_of_night(day_length: float) -> float:
    return (24.0 - day_length) / 7.0


def _seventh_of_day(day_length: float) -> float:
    return day_length / 7.0


_M = ExtremeLatitudeMethod

STRATEGIES: dict[ExtremeLatitudeMethod, Strategy] = {
    _M.ANGLE_BASED: _angle_based,
    _M.NEAREST_LATITUDE_ALL_PRAYERS_ALWAYS: partial(_nearest_latitude, all_prayers=True, only_invalid=False),
    _M.NEAREST_LATITUDE_FAJR_ISHA_ALWAYS: partial(_nearest_latitude, all_prayers=False, only_invalid=False),
    _M.NEAREST_LATITUDE_FAJR_ISHA_INVALID: partial(_nearest_latitude, all_prayers=False, only_invalid=True),
    _M.NEAREST_GOOD_DAY_ALL_PRAYERS_ALWAYS: partial(_nearest_good_day, all_prayers=True),
    _M.NEAREST_GOOD_DAY_FAJR_ISHA_INVALID: partial(_nearest_good_day, all_prayers=False),
    _M.SEVENTH_OF_NIGHT_FAJR_ISHA_ALWAYS: partial(_night_portion, portion=_seventh_of_night, only_invalid=False),
    _M.SEVENTH_OF_NIGHT_FAJR_ISHA_INVALID: partial(_night_portion, portion=_seventh_of_night, only_invalid=True),
    _M.SEVENTH_OF_DAY_FAJR_ISHA_ALWAYS: partial(_night_portion, portion=_seventh_of_day, only_invalid=False),
    _M.SEVENTH_OF_DAY_FAJR_ISHA_INVALID: partial(_night_portion, portion=_seventh_of_day, only_invalid=True),
    _M.HALF_OF_NIGHT_FAJR_ISHA_ALWAYS: partial(_half_of_night, only_invalid=False),
    _M.HALF_OF_NIGHT_FAJR_ISHA_INVALID: partial(_half_of_night, only_invalid=True),
    _M.MINUTES_FROM_MAGHRIB_FAJR_ISHA_ALWAYS: _minutes_from_maghrib_always,
    _M.MINUTES_FROM_MAGHRIB_FAJR_ISHA_INVALID: _minutes_from_maghrib_invalid,
}

# These strategies place Fajr and Isha from the intervals themselves.
_INTERVALS_BUILT_IN = frozenset(
    {
        _M.MINUTES_FROM_MAGHRIB_FAJR_ISHA_INVALID,
        _M.HALF_OF_NIGHT_FAJR_ISHA_ALWAYS,
        _M.HALF_OF_NIGHT_FAJR_ISHA_INVALID,
    }
)


def needs_adjustment(method: ExtremeLatitudeMethod, hours: HourMap) -> bool:
    """Whether ``method`` should run for the solved ``hours``."""
    if method is ExtremeLatitudeMethod.NONE:
        return False
    return method.always or any(hours[prayer] is None for prayer in _TRIGGER_PRAYERS)


def apply_intervals(hours: HourMap, params: Params) -> HourMap:
    """Set Fajr a fixed interval before Shurooq and Isha after Maghrib when configured."""
    result = dict(hours)
    fajr_interval = params.interval(Prayer.FAJR)
    shurooq = hours[Prayer.SHUROOQ]
    if fajr_interval != 0.0 and shurooq is not None:
        prior = hours[Prayer.FAJR]
        result[Prayer.FAJR] = PrayerHour(
            shurooq.value - fajr_interval / 60.0,
            extreme=shurooq.extreme or (prior is not None and prior.extreme),
        )

    isha_interval = params.interval(Prayer.ISHA)
    maghrib = hours[Prayer.MAGHRIB]
    if isha_interval != 0.0 and maghrib is not None:
        prior = hours[Prayer.ISHA]
        result[Prayer.ISHA] = PrayerHour(
            maghrib.value + isha_interval / 60.0,
            extreme=maghrib.extreme or (prior is not None and prior.extreme),
        )
    return result


def adjust(context: AdjustContext, hours: HourMap) -> HourMap:
    """Apply the configured extreme-latitude strategy, then the fixed intervals.

    Args:
        context: Parameters, solar window and weather of the day being solved.
        hours: Unadjusted solver output for that day.

    Returns:
        A new hour map; the input map is left untouched.
    """
    method = context.params.extreme_latitude.method
    adjusted = dict(hours)
    if needs_adjustment(method, hours):
        logger.debug("applying %s for %s", method.value, context.julian_day.date)
        adjusted = STRATEGIES[method](adjusted, context)
    if method not in _INTERVALS_BUILT_IN:
        adjusted = apply_intervals(adjusted, context.params)
    return adjusted
