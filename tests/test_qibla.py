"""Tests for the qibla bearing."""

from __future__ import annotations

import pytest

from islamic_prayer_times.geo.coordinates import Coordinates
from islamic_prayer_times.geo.qibla import KAABA_LATITUDE, KAABA_LONGITUDE, Qibla, Rotation


def test_potomac_bearing() -> None:
    """North America faces the Kaaba clockwise from north."""
    qibla = Qibla.from_coordinates(Coordinates(latitude=39.0181651, longitude=-77.2085914))

    assert qibla.degrees == pytest.approx(-56.43742554, abs=1e-6)
    assert qibla.rotation is Rotation.CW
    assert str(qibla) == "56.4° CW"


def test_east_of_mecca_turns_counter_clockwise() -> None:
    """Observers east of Mecca turn toward the west, counter-clockwise."""
    qibla = Qibla.from_coordinates(Coordinates(latitude=3.139, longitude=101.6869))

    assert qibla.rotation is Rotation.CCW
    assert qibla.degrees > 0.0
    assert str(qibla).endswith("CCW")


def test_due_south_of_kaaba_faces_north() -> None:
    """On the Kaaba meridian south of it, the bearing is north."""
    qibla = Qibla.from_coordinates(Coordinates(latitude=KAABA_LATITUDE - 10.0, longitude=KAABA_LONGITUDE))

    assert qibla.degrees == pytest.approx(0.0, abs=1e-9)
