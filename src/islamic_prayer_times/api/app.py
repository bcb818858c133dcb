"""FastAPI app exposing prayer time, qibla and Hijri endpoints."""

from __future__ import annotations

import logging
import os
from datetime import date

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from islamic_prayer_times.calendar.hijri import HijriDate
from islamic_prayer_times.contracts import Prayer
from islamic_prayer_times.geo.coordinates import Coordinates
from islamic_prayer_times.geo.qibla import Qibla
from islamic_prayer_times.io.payloads import (
    DateRangePayload,
    DayPayload,
    LocationPayload,
    ParamsPayload,
    WeatherPayload,
)
from islamic_prayer_times.orchestrate.batch import compute_range
from islamic_prayer_times.prayer.params import Method, Params

logger = logging.getLogger(__name__)

_DEFAULT_MAX_RANGE_DAYS = 366


class PrayerTimesRequest(BaseModel):
    """Request schema for prayer times over a date range."""

    location: LocationPayload
    date_range: DateRangePayload
    params: ParamsPayload | None = None
    weather: WeatherPayload | None = None


class PrayerTimesResponse(BaseModel):
    """Response schema with one entry per requested date."""

    method: Method
    days: list[DayPayload]


class MethodResponse(BaseModel):
    """Preset angles and intervals of one calculation method."""

    method: Method
    angles: dict[Prayer, float]
    intervals: dict[Prayer, float]
    asr_ratio: int


class QiblaRequest(BaseModel):
    """Observer position for a qibla bearing."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class QiblaResponse(BaseModel):
    """Signed bearing from north toward the Kaaba."""

    degrees: float
    rotation: str
    display: str


class HijriResponse(BaseModel):
    """Hijri calendar date of a Gregorian date."""

    gregorian: date
    day: int
    month: int
    month_name: str
    year: int
    weekday: str
    pre_epoch: bool
    display: str


def _resolve_method(method: str | None) -> Method:
    """Resolve default calculation method from argument or environment."""
    raw = method or os.getenv("PRAYER_TIMES_METHOD", "isna")
    return Method.parse(raw.strip())


def _resolve_positive_int(value: int | None, env_name: str, default: int | None) -> int | None:
    """Resolve a positive integer setting from argument or environment."""
    if value is None:
        raw = os.getenv(env_name)
        if not raw:
            return default
        value = int(raw)
    if value <= 0:
        raise ValueError(f"{env_name} must be positive")
    return value


def create_app(
    default_method: str | None = None,
    workers: int | None = None,
    max_range_days: int | None = None,
) -> FastAPI:
    """Create and configure the FastAPI app."""
    app = FastAPI(title="Islamic Prayer Times API", version="0.1.0")

    method = _resolve_method(default_method)
    worker_count = _resolve_positive_int(workers, "PRAYER_TIMES_WORKERS", None)
    range_cap = _resolve_positive_int(max_range_days, "PRAYER_TIMES_MAX_RANGE_DAYS", _DEFAULT_MAX_RANGE_DAYS)

    app.state.default_method = method
    app.state.workers = worker_count
    app.state.max_range_days = range_cap

    @app.post("/prayer-times", response_model=PrayerTimesResponse)
    def post_prayer_times(payload: PrayerTimesRequest) -> PrayerTimesResponse:
        """Compute prayer times for each date of the requested range."""
        params_payload = payload.params or ParamsPayload(method=method)
        date_range = payload.date_range.to_range()
        if range_cap is not None and date_range.num_days > range_cap:
            raise HTTPException(
                status_code=422,
                detail=f"date range spans {date_range.num_days} days; limit is {range_cap}",
            )

        params = params_payload.to_params()
        weather = payload.weather.to_weather() if payload.weather else None
        results = compute_range(
            params,
            payload.location.to_location(),
            date_range,
            weather=weather,
            workers=worker_count,
        )
        logger.info("served %d days with method %s", len(results), params.method.value)
        return PrayerTimesResponse(
            method=params.method,
            days=[DayPayload.from_times(day, times) for day, times in results.items()],
        )

    @app.get("/methods", response_model=list[MethodResponse])
    def get_methods() -> list[MethodResponse]:
        """List calculation presets."""
        presets = [Params.from_method(item) for item in Method]
        return [
            MethodResponse(
                method=preset.method,
                angles=dict(preset.angles),
                intervals=dict(preset.intervals),
                asr_ratio=int(preset.asr_ratio),
            )
            for preset in presets
        ]

    @app.post("/qibla", response_model=QiblaResponse)
    def post_qibla(payload: QiblaRequest) -> QiblaResponse:
        """Return the qibla bearing for an observer."""
        qibla = Qibla.from_coordinates(Coordinates(latitude=payload.latitude, longitude=payload.longitude))
        return QiblaResponse(degrees=qibla.degrees, rotation=str(qibla.rotation), display=str(qibla))

    @app.get("/hijri/{day}", response_model=HijriResponse)
    def get_hijri(day: date) -> HijriResponse:
        """Convert a Gregorian date to the tabular Hijri calendar."""
        hijri = HijriDate.from_gregorian(day)
        return HijriResponse(
            gregorian=day,
            day=hijri.day,
            month=int(hijri.month),
            month_name=hijri.month.label,
            year=hijri.year,
            weekday=hijri.weekday.label,
            pre_epoch=hijri.pre_epoch,
            display=str(hijri),
        )

    return app
