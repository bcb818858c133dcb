"""Tests for angle wrap helpers and the Angle value type."""

from __future__ import annotations

from math import pi

import pytest

from islamic_prayer_times.geo.angle import Angle, cap_180, cap_360, cap_signed_180, cap_unit

EPSILON = 1e-8


@pytest.mark.parametrize(
    ("value", "expected"),
    [(723.2, 3.2), (-723.2, 356.8), (720.0, 0.0), (359.5, 359.5)],
)
def test_cap_360_wraps_into_circle(value: float, expected: float) -> None:
    """Angles wrap into [0, 360) in both directions."""
    assert cap_360(value) == pytest.approx(expected, abs=EPSILON)


@pytest.mark.parametrize(("value", "expected"), [(183.2, 3.2), (-183.2, 176.8), (360.0, 0.0)])
def test_cap_180_wraps_into_half_circle(value: float, expected: float) -> None:
    """Half-circle quantities wrap into [0, 180)."""
    assert cap_180(value) == pytest.approx(expected, abs=EPSILON)


@pytest.mark.parametrize(("value", "expected"), [(0.1, 0.1), (-0.9, 0.1), (2.25, 0.25)])
def test_cap_unit_keeps_fraction(value: float, expected: float) -> None:
    """Only the fractional part survives and negatives wrap forward."""
    assert cap_unit(value) == pytest.approx(expected, abs=EPSILON)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(189.3, -170.7), (165.0, 165.0), (-189.3, 170.7), (180.0, 180.0), (-180.0, 180.0)],
)
def test_cap_signed_180_wraps_into_signed_range(value: float, expected: float) -> None:
    """Differences wrap into (-180, 180]."""
    assert cap_signed_180(value) == pytest.approx(expected, abs=EPSILON)


@pytest.mark.parametrize("value", [-1234.5, -360.0, -0.25, 0.0, 42.0, 359.999, 1e6])
def test_cap_360_is_idempotent_and_bounded(value: float) -> None:
    """Wrapping twice changes nothing and always lands in [0, 360)."""
    once = cap_360(value)
    assert 0.0 <= once < 360.0
    assert cap_360(once) == pytest.approx(once, abs=EPSILON)
    assert -180.0 < cap_signed_180(value) <= 180.0


def test_angle_keeps_degrees_and_radians_consistent() -> None:
    """Both constructors yield the same measure and trigonometry."""
    from_deg = Angle.from_degrees(30.0)
    from_rad = Angle.from_radians(pi / 6.0)

    assert from_deg.radians == pytest.approx(pi / 6.0)
    assert from_rad.degrees == pytest.approx(30.0)
    assert from_deg.sin == pytest.approx(0.5)
    assert from_rad.cos == pytest.approx(3.0**0.5 / 2.0)
    assert Angle.from_degrees(45.0).tan == pytest.approx(1.0)


def test_angle_arithmetic_returns_new_angles() -> None:
    """Operators act on degrees against angles or plain numbers."""
    angle = Angle.from_degrees(90.0)

    assert (angle + Angle.from_degrees(45.0)).degrees == pytest.approx(135.0)
    assert (angle - 30.0).degrees == pytest.approx(60.0)
    assert (angle * 2.0).radians == pytest.approx(pi)
    assert (angle / 3.0).degrees == pytest.approx(30.0)
    assert (-angle).degrees == pytest.approx(-90.0)
    assert angle.degrees == 90.0
