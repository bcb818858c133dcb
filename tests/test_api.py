"""API tests for prayer time, qibla and Hijri endpoints."""

from __future__ import annotations

import pytest


def _client(**kwargs: object) -> object:
    """Create FastAPI TestClient with optional dependency guards."""
    pytest.importorskip("fastapi")
    testclient_module = pytest.importorskip("fastapi.testclient")
    from islamic_prayer_times.api.app import create_app

    return testclient_module.TestClient(create_app(**kwargs))


_POTOMAC = {"latitude": 39.0181651, "longitude": -77.2085914, "elevation": 0.0, "gmt": -5.0}


def test_prayer_times_endpoint_returns_days() -> None:
    """`POST /prayer-times` should return one entry per date in order."""
    client = _client()

    response = client.post(
        "/prayer-times",
        json={
            "location": _POTOMAC,
            "date_range": {"start_date": "2023-02-06", "end_date": "2023-02-08"},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["method"] == "isna"
    assert [day["day"] for day in body["days"]] == ["2023-02-06", "2023-02-07", "2023-02-08"]
    first = body["days"][0]["times"]
    assert first["fajr"] == {"time": "05:56:00", "extreme": False}
    assert first["isha"] == {"time": "18:50:00", "extreme": False}
    assert list(first) == ["imsaak", "fajr", "shurooq", "dhuhr", "asr", "maghrib", "isha"]


def test_prayer_times_endpoint_honours_params() -> None:
    """Request parameters override the default method."""
    client = _client()

    response = client.post(
        "/prayer-times",
        json={
            "location": _POTOMAC,
            "date_range": {"start_date": "2023-02-06"},
            "params": {"method": "isna", "asr_ratio": "hanafi"},
        },
    )

    assert response.status_code == 200
    assert response.json()["days"][0]["times"]["asr"]["time"] == "15:54:00"


def test_default_method_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """The default method is read from the environment when not passed explicitly."""
    monkeypatch.setenv("PRAYER_TIMES_METHOD", "mwl")
    client = _client()

    response = client.post(
        "/prayer-times",
        json={"location": _POTOMAC, "date_range": {"start_date": "2023-02-06"}},
    )

    assert response.status_code == 200
    assert response.json()["method"] == "mwl"


def test_range_cap_is_enforced() -> None:
    """Ranges longer than the configured cap are rejected with 422."""
    client = _client(max_range_days=5)

    response = client.post(
        "/prayer-times",
        json={
            "location": _POTOMAC,
            "date_range": {"start_date": "2023-02-01", "end_date": "2023-02-10"},
        },
    )

    assert response.status_code == 422
    assert "limit is 5" in response.json()["detail"]


def test_invalid_inputs_are_rejected() -> None:
    """Out-of-range latitude and reversed ranges fail validation."""
    client = _client()

    bad_latitude = client.post(
        "/prayer-times",
        json={
            "location": {**_POTOMAC, "latitude": 95.0},
            "date_range": {"start_date": "2023-02-06"},
        },
    )
    reversed_range = client.post(
        "/prayer-times",
        json={
            "location": _POTOMAC,
            "date_range": {"start_date": "2023-02-06", "end_date": "2023-02-01"},
        },
    )

    assert bad_latitude.status_code == 422
    assert reversed_range.status_code == 422


def test_methods_endpoint_lists_presets() -> None:
    """`GET /methods` should list every preset with its angles."""
    client = _client()

    response = client.get("/methods")

    assert response.status_code == 200
    presets = {item["method"]: item for item in response.json()}
    assert presets["egyptian"]["angles"]["fajr"] == 20.0
    assert presets["egyptian"]["angles"]["isha"] == 18.0
    assert presets["umm_al_qurra"]["intervals"]["isha"] == 90.0
    assert presets["hanafi"]["asr_ratio"] == 2


def test_qibla_endpoint() -> None:
    """`POST /qibla` should return the signed bearing and its display form."""
    client = _client()

    response = client.post("/qibla", json={"latitude": 39.0181651, "longitude": -77.2085914})

    assert response.status_code == 200
    body = response.json()
    assert body["degrees"] == pytest.approx(-56.43742554, abs=1e-6)
    assert body["rotation"] == "CW"
    assert body["display"] == "56.4° CW"


def test_hijri_endpoint() -> None:
    """`GET /hijri/{day}` should convert a Gregorian date."""
    client = _client()

    response = client.get("/hijri/2020-08-01")

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == 11
    assert body["month"] == 12
    assert body["month_name"] == "Dhul Hijjah"
    assert body["year"] == 1441
    assert body["weekday"] == "Sabt"
    assert body["display"] == "Sabt Dhul Hijjah 11, 1441 A.H."


def test_create_app_rejects_bad_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-positive settings and unknown methods fail at startup."""
    pytest.importorskip("fastapi")
    from islamic_prayer_times.api.app import create_app

    with pytest.raises(ValueError, match="PRAYER_TIMES_WORKERS must be positive"):
        create_app(workers=0)

    monkeypatch.setenv("PRAYER_TIMES_METHOD", "nope")
    with pytest.raises(ValueError, match="unknown Method"):
        create_app()
