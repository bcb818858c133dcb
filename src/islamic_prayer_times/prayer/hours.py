"""Prayer-hour solver over a topocentric three-day solar window."""

from __future__ import annotations

from dataclasses import dataclass
from math import acos, asin, atan, degrees, radians, sin, tan

from islamic_prayer_times.astro.solar import TopAstroDay
from islamic_prayer_times.contracts import HourMap, Prayer, PrayerHour
from islamic_prayer_times.geo.angle import Angle, cap_180, cap_360, cap_signed_180, cap_unit
from islamic_prayer_times.geo.weather import DEFAULT_PRESSURE_MBAR, Weather
from islamic_prayer_times.prayer.params import Params

HOURS_PER_DEGREE = 1.0 / 15.0
CENTER_OF_SUN_ANGLE = -0.83337
STANDARD_WEATHER = Weather()
SIDEREAL_DEGREES_PER_DAY = 360.985647


@dataclass(frozen=True, slots=True)
class _Window:
    """Quadratic interpolation terms for the current day of a TopAstroDay."""

    longitude: float
    ra: float
    sid: float
    dra: float
    ra_delta1: float
    ra_delta2: float
    dec_delta1: float
    dec_delta2: float

    @classmethod
    def from_top_astro_day(cls, top: TopAstroDay) -> _Window:
        prev_ra = top.prev.ra
        next_ra = top.next.ra
        if top.current.ra > 350.0 and top.next.ra < 10.0:
            next_ra += 360.0
        if top.prev.ra > 350.0 and top.current.ra < 10.0:
            prev_ra = 0.0

        return cls(
            longitude=top.coords.longitude,
            ra=top.current.ra,
            sid=top.current.sid,
            dra=top.current.dra,
            ra_delta1=next_ra - prev_ra,
            ra_delta2=next_ra + prev_ra - 2.0 * top.current.ra,
            dec_delta1=top.next.dec - top.prev.dec,
            dec_delta2=top.next.dec - 2.0 * top.current.dec + top.prev.dec,
        )

    def local_hour_angle(self, fraction: float) -> float:
        """Hour angle in degrees at ``fraction`` of a day, with interpolated right ascension."""
        sidereal = cap_360(self.sid + SIDEREAL_DEGREES_PER_DAY * fraction)
        ra = self.ra + fraction * (self.ra_delta1 + self.ra_delta2 * fraction) / 2.0
        return cap_signed_180(sidereal + self.longitude - ra)

    def declination(self, dec: float, fraction: float) -> float:
        """Declination in degrees interpolated at ``fraction`` of a day."""
        return dec + fraction * (self.dec_delta1 + self.dec_delta2 * fraction) / 2.0


def refraction(weather: Weather, altitude: float) -> float:
    """Atmospheric refraction in degrees for an apparent altitude in degrees."""
    scale = weather.pressure / DEFAULT_PRESSURE_MBAR * (283.0 / (273.0 + weather.temperature))
    cotangent = 1.0 / tan(radians(altitude + 7.31 / (altitude + 4.4)))
    return scale * (cotangent + 0.0013515) / 60.0


def _hour_angle_ratio(altitude: float, lat: Angle, dec: Angle) -> float | None:
    """Return ``cos(H)`` for the given altitude, or None when no real hour angle exists."""
    ratio = (sin(radians(altitude)) - lat.sin * dec.sin) / (lat.cos * dec.cos)
    if ratio < -1.0 or ratio > 1.0:
        return None
    return ratio


def solve_fajr_isha(
    lat: Angle, dec: Angle, fajr_angle: float, isha_angle: float, dhuhr: float
) -> tuple[PrayerHour | None, PrayerHour | None]:
    """Solve the twilight events for depression angles below the horizon."""
    fajr_ratio = _hour_angle_ratio(-fajr_angle, lat, dec)
    isha_ratio = _hour_angle_ratio(-isha_angle, lat, dec)
    fajr = None if fajr_ratio is None else PrayerHour(dhuhr - HOURS_PER_DEGREE * degrees(acos(fajr_ratio)))
    isha = None if isha_ratio is None else PrayerHour(dhuhr + HOURS_PER_DEGREE * degrees(acos(isha_ratio)))
    return fajr, isha


def solve_asr(lat: Angle, dec: Angle, shadow_ratio: int, dhuhr: float) -> PrayerHour | None:
    """Solve Asr for the shadow length ``shadow_ratio`` times the object height."""
    cotangent = shadow_ratio + tan(abs(lat.radians - dec.radians))
    altitude = degrees(atan(1.0 / cotangent))
    ratio = _hour_angle_ratio(altitude, lat, dec)
    if ratio is None:
        return None
    return PrayerHour(dhuhr + HOURS_PER_DEGREE * degrees(acos(ratio)))


def _horizon_offset(lat: Angle, dec: Angle) -> float | None:
    """Day fraction between transit and the horizon crossing, or None for polar day/night."""
    ratio = (sin(radians(CENTER_OF_SUN_ANGLE)) - lat.sin * dec.sin) / (lat.cos * dec.cos)
    if ratio <= -1.0 or ratio >= 1.0:
        return None
    return cap_180(degrees(acos(ratio))) / 360.0


def _horizon_hour(window: _Window, lat: Angle, dec: float, fraction: float, weather: Weather) -> float:
    """Refine a sunrise or sunset day fraction into an hour.

    ``CENTER_OF_SUN_ANGLE`` already holds standard refraction, so only the
    departure of ``weather`` from the standard atmosphere moves the target.
    Elevation reaches this step through the topocentric window.
    """
    dec_at = Angle.from_degrees(window.declination(dec, fraction))
    hour_angle = Angle.from_degrees(window.local_hour_angle(fraction) - degrees(window.dra))

    altitude = degrees(asin(lat.sin * dec_at.sin + lat.cos * dec_at.cos * hour_angle.cos))
    altitude += refraction(weather, altitude) - refraction(STANDARD_WEATHER, altitude)

    correction = (altitude - CENTER_OF_SUN_ANGLE) / (360.0 * dec_at.cos * lat.cos * hour_angle.sin)
    return 24.0 * (fraction + correction)


def solve_hours(params: Params, top_astro_day: TopAstroDay, weather: Weather | None = None) -> HourMap:
    """Solve Fajr, Shurooq, Dhuhr, Asr, Maghrib and Isha for the window's observer.

    Args:
        params: Calculation parameters (angles and Asr shadow ratio are used here).
        top_astro_day: Three-day topocentric solar window for the observer.
        weather: Surface conditions for the refraction model; standard atmosphere if omitted.

    Returns:
        Hours from local midnight keyed by prayer. Events without a real solution
        map to ``None``. Dhuhr is always present.
    """
    weather = weather or Weather()
    coords = top_astro_day.coords
    astro = top_astro_day.current
    window = _Window.from_top_astro_day(top_astro_day)
    lat = Angle.from_degrees(coords.latitude)
    dec = Angle.from_degrees(astro.dec)

    transit = (astro.ra - coords.longitude - astro.sid) / 360.0
    transit_fraction = cap_unit(transit)
    dhuhr = 24.0 * (transit_fraction - window.local_hour_angle(transit_fraction) / 360.0)

    shurooq: PrayerHour | None = None
    maghrib: PrayerHour | None = None
    offset = _horizon_offset(lat, dec)
    if offset is not None:
        shurooq = PrayerHour(
            _horizon_hour(window, lat, astro.dec, cap_unit(transit - offset), weather)
        )
        maghrib = PrayerHour(
            _horizon_hour(window, lat, astro.dec, cap_unit(transit + offset), weather)
        )

    fajr, isha = solve_fajr_isha(
        lat, dec, params.angle(Prayer.FAJR), params.angle(Prayer.ISHA), dhuhr
    )
    asr = solve_asr(lat, dec, int(params.asr_ratio), dhuhr)

    return {
        Prayer.FAJR: fajr,
        Prayer.SHUROOQ: shurooq,
        Prayer.DHUHR: PrayerHour(dhuhr),
        Prayer.ASR: asr,
        Prayer.MAGHRIB: maghrib,
        Prayer.ISHA: isha,
    }
