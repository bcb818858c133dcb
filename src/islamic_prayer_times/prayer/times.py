"""Single-date prayer time pipeline."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from islamic_prayer_times.astro.solar import TopAstroDay
from islamic_prayer_times.contracts import HourMap, Prayer, PrayerHour, TimeMap
from islamic_prayer_times.geo.coordinates import Location
from islamic_prayer_times.geo.julian_day import JulianDay
from islamic_prayer_times.geo.weather import Weather
from islamic_prayer_times.prayer.ext_lat import AdjustContext, adjust
from islamic_prayer_times.prayer.formatting import format_hours
from islamic_prayer_times.prayer.hours import solve_hours
from islamic_prayer_times.prayer.params import Params

logger = logging.getLogger(__name__)


def _imsaak_hour(context: AdjustContext, hours: HourMap) -> PrayerHour | None:
    """Derive Imsaak from Fajr, by interval when set, otherwise by a deeper angle."""
    fajr = hours[Prayer.FAJR]
    if fajr is None:
        return None

    params = context.params
    interval = params.interval(Prayer.IMSAAK)
    if interval != 0.0:
        return PrayerHour(fajr.value - interval / 60.0, fajr.extreme)

    imsaak_context = replace(context, params=params.imsaak_params())
    derived = adjust(imsaak_context, imsaak_context.solve())[Prayer.FAJR]
    if derived is None or derived.extreme:
        # Offset by the angle as minutes rather than stacking another substitution.
        return PrayerHour(fajr.value - params.angle(Prayer.IMSAAK) / 60.0, extreme=True)
    return derived


def compute_prayer_hours(
    params: Params, location: Location, day: date, weather: Weather | None = None
) -> HourMap:
    """Solve and adjust all seven prayers for one date, as hours from local midnight."""
    weather = weather or Weather()
    julian_day = JulianDay.from_date(day, location.gmt)
    top_astro_day = TopAstroDay.from_julian_day(julian_day, location.coordinates)
    context = AdjustContext(params=params, top_astro_day=top_astro_day, weather=weather)

    hours = adjust(context, solve_hours(params, top_astro_day, weather))
    result: HourMap = {Prayer.IMSAAK: _imsaak_hour(context, hours)}
    result.update(hours)

    unsolved = [prayer.value for prayer, hour in result.items() if hour is None]
    if unsolved:
        logger.warning("%s: no solution for %s", day.isoformat(), ", ".join(unsolved))
    return result


def compute_prayer_times(
    params: Params, location: Location, day: date, weather: Weather | None = None
) -> TimeMap:
    """Compute formatted prayer times for one date.

    Args:
        params: Calculation parameters.
        location: Observer coordinates and UTC offset.
        day: Local calendar date.
        weather: Surface conditions for refraction; standard atmosphere if omitted.

    Returns:
        Times keyed by prayer in natural order. Prayers with no solution
        after adjustment map to ``None``.
    """
    return format_hours(compute_prayer_hours(params, location, day, weather), params)
