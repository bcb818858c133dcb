"""Tests for the shared JSON payload schemas."""

from __future__ import annotations

import json
from datetime import date, time
from pathlib import Path

import pytest
from pydantic import ValidationError

from islamic_prayer_times.contracts import Prayer, PrayerTime
from islamic_prayer_times.io.payloads import (
    DateRangePayload,
    DayPayload,
    LocationPayload,
    ParamsPayload,
    RunConfig,
    dump_days,
)
from islamic_prayer_times.prayer.params import (
    AsrRatio,
    ExtremeLatitudeMethod,
    Method,
    RoundSeconds,
)


def test_params_payload_applies_overrides_on_preset() -> None:
    """Overrides replace preset values and leave the rest untouched."""
    payload = ParamsPayload.model_validate(
        {
            "method": "umm-al-qurra",
            "angles": {"fajr": 18.5},
            "minutes": {"dhuhr": 2},
            "asr_ratio": "hanafi",
            "extreme_latitude": "SeventhOfNightFajrIshaAlways",
            "round_seconds": "aggressive",
        }
    )

    params = payload.to_params()

    assert params.method is Method.UMM_AL_QURRA
    assert params.angle(Prayer.FAJR) == 18.5
    assert params.interval(Prayer.ISHA) == 90.0
    assert params.minute(Prayer.DHUHR) == 2.0
    assert params.asr_ratio is AsrRatio.HANAFI
    assert params.extreme_latitude.method is ExtremeLatitudeMethod.SEVENTH_OF_NIGHT_FAJR_ISHA_ALWAYS
    assert params.round_seconds is RoundSeconds.AGGRESSIVE


def test_params_payload_keeps_preset_asr_ratio() -> None:
    """Without an override the preset shadow ratio is used."""
    assert ParamsPayload(method=Method.HANAFI).to_params().asr_ratio is AsrRatio.HANAFI


def test_unknown_method_is_rejected() -> None:
    """Method names outside the preset list fail validation."""
    with pytest.raises(ValidationError, match="unknown Method"):
        ParamsPayload.model_validate({"method": "karachi"})


def test_location_bounds() -> None:
    """Latitude outside [-90, 90] fails validation."""
    with pytest.raises(ValidationError):
        LocationPayload(latitude=91.0, longitude=0.0, gmt=0.0)

    location = LocationPayload(latitude=39.0, longitude=-77.0, elevation=10.0, gmt=-5.0).to_location()
    assert location.coordinates.elevation == 10.0
    assert location.gmt == -5.0


def test_date_range_payload() -> None:
    """A missing end date yields a single-day range; reversed ranges fail."""
    assert DateRangePayload(start_date=date(2023, 2, 6)).to_range().num_days == 1

    with pytest.raises(ValidationError, match="start_date must be <= end_date"):
        DateRangePayload(start_date=date(2023, 2, 6), end_date=date(2023, 2, 5))


def test_run_config_load_json(tmp_path: Path) -> None:
    """Input files carry the complete calculation request."""
    path = tmp_path / "run.json"
    path.write_text(
        json.dumps(
            {
                "params": {"method": "mwl"},
                "location": {"latitude": 30.0444, "longitude": 31.2357, "gmt": 2},
                "date_range": {"start_date": "2023-02-18", "end_date": "2023-02-20"},
                "weather": {"pressure": 1000, "temperature": 20},
            }
        ),
        encoding="utf-8",
    )

    config = RunConfig.load_json(path)

    assert config.params.method is Method.MWL
    assert config.date_range.to_range().num_days == 3
    assert config.weather is not None
    assert config.weather.to_weather().temperature == 20.0


def test_day_payload_serializes_unsolved_as_null() -> None:
    """Unsolved prayers become null and solved ones carry time and flag."""
    times = {
        Prayer.FAJR: PrayerTime(time(5, 56)),
        Prayer.ISHA: None,
    }

    dumped = dump_days({date(2020, 8, 1): times})

    assert dumped == [
        {
            "day": "2020-08-01",
            "hijri": "Sabt Dhul Hijjah 11, 1441 A.H.",
            "times": {"fajr": {"time": "05:56:00", "extreme": False}, "isha": None},
        }
    ]
    assert DayPayload.from_times(date(2020, 8, 1), times).times[Prayer.ISHA] is None
