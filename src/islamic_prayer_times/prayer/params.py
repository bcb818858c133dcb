"""Calculation parameters and named method presets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import IntEnum, StrEnum
from types import MappingProxyType
from typing import Any

from islamic_prayer_times.contracts import Prayer
from islamic_prayer_times.geo.coordinates import LATITUDE_RANGE, NEAREST_LATITUDE

DEFAULT_IMSAAK_ANGLE = 1.5


def _normalize_name(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class _ParsableEnum(StrEnum):
    """StrEnum accepting ``snake_case``, ``kebab-case`` or ``CamelCase`` spellings."""

    @classmethod
    def parse(cls, value: str) -> Any:
        wanted = _normalize_name(value)
        for member in cls:
            if _normalize_name(member.value) == wanted:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"unknown {cls.__name__} {value!r}; expected one of: {choices}")


class Method(_ParsableEnum):
    """Named calculation presets for twilight angles and intervals."""

    NONE = "none"
    EGYPTIAN = "egyptian"
    EGYPT = "egypt"
    SHAFI = "shafi"
    HANAFI = "hanafi"
    ISNA = "isna"
    MWL = "mwl"
    UMM_AL_QURRA = "umm_al_qurra"
    FIXED_ISHA = "fixed_isha"


class AsrRatio(IntEnum):
    """Shadow length, in object heights, that marks the start of Asr."""

    SHAFI = 1
    HANAFI = 2


class RoundSeconds(_ParsableEnum):
    """Seconds rounding policy applied when formatting hours."""

    NONE = "none"
    NORMAL = "normal"
    SPECIAL = "special"
    AGGRESSIVE = "aggressive"


class ExtremeLatitudeMethod(_ParsableEnum):
    """Fallback strategies for days where twilight or horizon events have no solution."""

    NONE = "none"
    ANGLE_BASED = "angle_based"
    NEAREST_LATITUDE_ALL_PRAYERS_ALWAYS = "nearest_latitude_all_prayers_always"
    NEAREST_LATITUDE_FAJR_ISHA_ALWAYS = "nearest_latitude_fajr_isha_always"
    NEAREST_LATITUDE_FAJR_ISHA_INVALID = "nearest_latitude_fajr_isha_invalid"
    NEAREST_GOOD_DAY_ALL_PRAYERS_ALWAYS = "nearest_good_day_all_prayers_always"
    NEAREST_GOOD_DAY_FAJR_ISHA_INVALID = "nearest_good_day_fajr_isha_invalid"
    SEVENTH_OF_NIGHT_FAJR_ISHA_ALWAYS = "seventh_of_night_fajr_isha_always"
    SEVENTH_OF_NIGHT_FAJR_ISHA_INVALID = "seventh_of_night_fajr_isha_invalid"
    SEVENTH_OF_DAY_FAJR_ISHA_ALWAYS = "seventh_of_day_fajr_isha_always"
    SEVENTH_OF_DAY_FAJR_ISHA_INVALID = "seventh_of_day_fajr_isha_invalid"
    HALF_OF_NIGHT_FAJR_ISHA_ALWAYS = "half_of_night_fajr_isha_always"
    HALF_OF_NIGHT_FAJR_ISHA_INVALID = "half_of_night_fajr_isha_invalid"
    MINUTES_FROM_MAGHRIB_FAJR_ISHA_ALWAYS = "minutes_from_maghrib_fajr_isha_always"
    MINUTES_FROM_MAGHRIB_FAJR_ISHA_INVALID = "minutes_from_maghrib_fajr_isha_invalid"

    @property
    def always(self) -> bool:
        """Whether the strategy overrides results that already solved."""
        return self.value.endswith("_always")


@dataclass(frozen=True, slots=True)
class ExtremeLatitude:
    """Extreme-latitude strategy with its substitute latitude payload."""

    method: ExtremeLatitudeMethod = ExtremeLatitudeMethod.NEAREST_GOOD_DAY_FAJR_ISHA_INVALID
    nearest_latitude: float = NEAREST_LATITUDE

    def __post_init__(self) -> None:
        object.__setattr__(self, "nearest_latitude", LATITUDE_RANGE.check(self.nearest_latitude))


def _prayer_map(values: Mapping[Prayer, float] | None) -> Mapping[Prayer, float]:
    """Freeze a per-prayer map, filling prayers that are not given with zero."""
    source = dict(values or {})
    return MappingProxyType({prayer: float(source.get(prayer, 0.0)) for prayer in Prayer})


@dataclass(frozen=True)
class Params:
    """Immutable configuration for one calculation run.

    `angles` holds depression angles in degrees (the Imsaak entry is the extra
    depth below Fajr). `intervals` holds fixed minutes before Shurooq (Fajr),
    after Maghrib (Isha) or before Fajr (Imsaak); zero means unused.
    `minutes` holds per-prayer nudges added when formatting.
    """

    method: Method = Method.NONE
    angles: Mapping[Prayer, float] = field(default_factory=dict)
    intervals: Mapping[Prayer, float] = field(default_factory=dict)
    minutes: Mapping[Prayer, float] = field(default_factory=dict)
    asr_ratio: AsrRatio = AsrRatio.SHAFI
    extreme_latitude: ExtremeLatitude = field(default_factory=ExtremeLatitude)
    round_seconds: RoundSeconds = RoundSeconds.SPECIAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "angles", _prayer_map(self.angles))
        object.__setattr__(self, "intervals", _prayer_map(self.intervals))
        object.__setattr__(self, "minutes", _prayer_map(self.minutes))
        object.__setattr__(self, "asr_ratio", AsrRatio(self.asr_ratio))

    @classmethod
    def from_method(cls, method: Method | str, **overrides: Any) -> Params:
        """Build parameters from a named preset, then apply field overrides."""
        preset = method if isinstance(method, Method) else Method.parse(method)
        fajr_angle, isha_angle = _PRESET_ANGLES[preset]
        angles = {Prayer.IMSAAK: DEFAULT_IMSAAK_ANGLE, Prayer.FAJR: fajr_angle, Prayer.ISHA: isha_angle}
        intervals = {Prayer.ISHA: 90.0} if preset in _FIXED_ISHA_PRESETS else {}
        asr_ratio = AsrRatio.HANAFI if preset is Method.HANAFI else AsrRatio.SHAFI
        params = cls(method=preset, angles=angles, intervals=intervals, asr_ratio=asr_ratio)
        return params.replace(**overrides) if overrides else params

    def replace(self, **changes: Any) -> Params:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def angle(self, prayer: Prayer) -> float:
        return self.angles[prayer]

    def interval(self, prayer: Prayer) -> float:
        return self.intervals[prayer]

    def minute(self, prayer: Prayer) -> float:
        return self.minutes[prayer]

    def imsaak_params(self) -> Params:
        """Derive the parameters whose Fajr marks Imsaak.

        The Fajr angle is deepened by the Imsaak angle and a non-zero Fajr
        interval is widened by the same number of minutes.
        """
        extra = self.angle(Prayer.IMSAAK)
        angles = dict(self.angles)
        angles[Prayer.FAJR] += extra
        intervals = dict(self.intervals)
        if intervals[Prayer.FAJR] != 0.0:
            intervals[Prayer.FAJR] += extra
        return self.replace(angles=angles, intervals=intervals)


_PRESET_ANGLES: dict[Method, tuple[float, float]] = {
    Method.NONE: (0.0, 0.0),
    Method.EGYPTIAN: (20.0, 18.0),
    Method.EGYPT: (19.5, 17.5),
    Method.SHAFI: (18.0, 18.0),
    Method.HANAFI: (18.0, 18.0),
    Method.ISNA: (15.0, 15.0),
    Method.MWL: (18.0, 17.0),
    Method.UMM_AL_QURRA: (18.0, 0.0),
    Method.FIXED_ISHA: (19.5, 0.0),
}

_FIXED_ISHA_PRESETS = frozenset({Method.UMM_AL_QURRA, Method.FIXED_ISHA})
