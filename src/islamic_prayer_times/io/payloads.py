"""JSON payload schemas shared by the CLI and the HTTP API."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from islamic_prayer_times.calendar.hijri import HijriDate
from islamic_prayer_times.contracts import Prayer, TimeMap
from islamic_prayer_times.geo.coordinates import NEAREST_LATITUDE, Coordinates, Location
from islamic_prayer_times.geo.weather import DEFAULT_PRESSURE_MBAR, DEFAULT_TEMPERATURE_C, Weather
from islamic_prayer_times.orchestrate.batch import DateRange
from islamic_prayer_times.prayer.params import (
    AsrRatio,
    ExtremeLatitude,
    ExtremeLatitudeMethod,
    Method,
    Params,
    RoundSeconds,
)


class ParamsPayload(BaseModel):
    """Method preset plus optional per-field overrides."""

    method: Method = Method.ISNA
    angles: dict[Prayer, float] = Field(default_factory=dict)
    intervals: dict[Prayer, float] = Field(default_factory=dict)
    minutes: dict[Prayer, float] = Field(default_factory=dict)
    asr_ratio: AsrRatio | None = None
    extreme_latitude: ExtremeLatitudeMethod = ExtremeLatitudeMethod.NEAREST_GOOD_DAY_FAJR_ISHA_INVALID
    nearest_latitude: float = Field(default=NEAREST_LATITUDE, ge=-90.0, le=90.0)
    round_seconds: RoundSeconds = RoundSeconds.SPECIAL

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, value: Any) -> Any:
        return Method.parse(value) if isinstance(value, str) else value

    @field_validator("extreme_latitude", mode="before")
    @classmethod
    def parse_extreme_latitude(cls, value: Any) -> Any:
        return ExtremeLatitudeMethod.parse(value) if isinstance(value, str) else value

    @field_validator("round_seconds", mode="before")
    @classmethod
    def parse_round_seconds(cls, value: Any) -> Any:
        return RoundSeconds.parse(value) if isinstance(value, str) else value

    @field_validator("asr_ratio", mode="before")
    @classmethod
    def parse_asr_ratio(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return AsrRatio[value.strip().upper()]
            except KeyError as exc:
                raise ValueError("asr_ratio must be one of: shafi, hanafi, 1, 2") from exc
        return value

    def to_params(self) -> Params:
        """Convert payload into Params contract, overrides on top of the preset."""
        base = Params.from_method(self.method)
        return base.replace(
            angles={**base.angles, **self.angles},
            intervals={**base.intervals, **self.intervals},
            minutes={**base.minutes, **self.minutes},
            asr_ratio=self.asr_ratio if self.asr_ratio is not None else base.asr_ratio,
            extreme_latitude=ExtremeLatitude(
                method=self.extreme_latitude, nearest_latitude=self.nearest_latitude
            ),
            round_seconds=self.round_seconds,
        )


class LocationPayload(BaseModel):
    """Observer coordinates and UTC offset."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    elevation: float = Field(default=0.0, ge=-420.0, le=8848.0)
    gmt: float = Field(ge=-12.0, le=12.0)

    def to_location(self) -> Location:
        """Convert payload into Location contract."""
        coords = Coordinates(latitude=self.latitude, longitude=self.longitude, elevation=self.elevation)
        return Location(coordinates=coords, gmt=self.gmt)


class WeatherPayload(BaseModel):
    """Surface pressure (mbar) and temperature (Celsius)."""

    pressure: float = Field(default=DEFAULT_PRESSURE_MBAR, ge=100.0, le=1050.0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE_C, ge=-90.0, le=57.0)

    def to_weather(self) -> Weather:
        return Weather(pressure=self.pressure, temperature=self.temperature)


class DateRangePayload(BaseModel):
    """Inclusive date range; a missing end date means a single day."""

    start_date: date
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_order(self) -> "DateRangePayload":
        """Validate that the range is not reversed."""
        if self.end_date is not None and self.start_date > self.end_date:
            raise ValueError("start_date must be <= end_date")
        return self

    def to_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date or self.start_date)


class RunConfig(BaseModel):
    """Complete calculation request as stored in an input file."""

    params: ParamsPayload = Field(default_factory=ParamsPayload)
    location: LocationPayload
    date_range: DateRangePayload
    weather: WeatherPayload | None = None

    @classmethod
    def load_json(cls, path: str | Path) -> RunConfig:
        """Load and validate a run configuration JSON file."""
        return cls.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))


class PrayerTimePayload(BaseModel):
    """One formatted prayer time."""

    time: str
    extreme: bool


class DayPayload(BaseModel):
    """Prayer times of one date; unsolved prayers are null."""

    day: date
    hijri: str
    times: dict[Prayer, PrayerTimePayload | None]

    @classmethod
    def from_times(cls, day: date, times: TimeMap) -> DayPayload:
        return cls(
            day=day,
            hijri=str(HijriDate.from_gregorian(day)),
            times={
                prayer: None if value is None else PrayerTimePayload(**value.to_dict())
                for prayer, value in times.items()
            },
        )


def dump_days(results: dict[date, TimeMap]) -> list[dict[str, Any]]:
    """Serialize per-date results to JSON-compatible dictionaries."""
    return [DayPayload.from_times(day, times).model_dump(mode="json") for day, times in results.items()]
