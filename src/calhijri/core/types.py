from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Literal, Optional, Tuple

Confidence = Literal["certain", "probable", "possible", "unlikely"]
CriterionType = Literal["deterministic", "probabilistic", "arithmetic"]
AsrMethod = Literal["shafii", "hanafi"]
HijriSource = Literal["astronomical", "tabular"]

def validate_location(lat: float, lon: float) -> None:
    if not (-90.0 <= lat <= 90.0):
        raise ValueError(f"latitude must be in [-90, 90], got {lat}")
    if not (-180.0 <= lon <= 180.0):
        raise ValueError(f"longitude must be in [-180, 180], got {lon}")

@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        validate_location(self.lat, self.lon)

@dataclass(frozen=True)
class SolarState:
    """Sun at one instant and place (degrees; azimuth from south, westward positive)."""
    altitude: float
    azimuth: float
    declination: float
    right_ascension: float

@dataclass(frozen=True)
class LunarState:
    """Moon at one instant and place; altitude includes refraction."""
    altitude: float
    azimuth: float
    declination: float
    right_ascension: float
    distance_km: float

@dataclass(frozen=True)
class PrayerConvention:
    id: str
    name: str
    fajr_angle: float
    isha_angle: Optional[float]
    isha_offset_minutes: Optional[float]
    region: str = ""

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_offset_minutes is None):
            raise ValueError(
                f"Convention '{self.id}' must set exactly one of isha_angle / isha_offset_minutes"
            )

@dataclass(frozen=True)
class PrayerTimes:
    fajr: Optional[str]
    sunrise: Optional[str]
    dhuhr: Optional[str]
    asr: Optional[str]
    maghrib: Optional[str]
    isha: Optional[str]
    midnight: Optional[str]

@dataclass(frozen=True)
class PrayerInstants:
    """Same events as PrayerTimes, as timezone-aware datetimes in the caller's zone."""
    fajr: Optional[datetime]
    sunrise: Optional[datetime]
    dhuhr: Optional[datetime]
    asr: Optional[datetime]
    maghrib: Optional[datetime]
    isha: Optional[datetime]
    midnight: Optional[datetime]

@dataclass(frozen=True)
class QiblaInfo:
    direction: float
    distance_km: int

@dataclass(frozen=True)
class HijriMonthInfo:
    number: int
    name: str
    arabic: str
    short: str

@dataclass(frozen=True)
class HijriDate:
    year: int
    month: int
    day: int
    month_info: HijriMonthInfo
    source: HijriSource = "tabular"

@dataclass(frozen=True)
class HijriMonthStart:
    hijri_year: int
    hijri_month: int
    gregorian_start: date
    conjunction_jd_tt: float = 0.0

@dataclass(frozen=True)
class CrescentParams:
    """Raw quantities gathered at sunset. JDs are UT unless suffixed _tt."""
    sunset_jd: float
    moon_alt: float
    sun_alt: float
    moon_az: float
    sun_az: float
    moon_distance_km: float
    moonset_jd: Optional[float]
    conjunction_jd_tt: float
    sunrise_jd: Optional[float] = None

@dataclass(frozen=True)
class CrescentVisibility:
    ARCL: float
    ARCV: float
    DAZ: float
    W: float
    SD: float
    moon_age_hours: float
    lag_minutes: float
    q_yallop: float
    best_time_jd: float
    illumination_pct: float

@dataclass(frozen=True)
class Crescent:
    params: CrescentParams
    visibility: CrescentVisibility

@dataclass(frozen=True)
class CriterionResult:
    criterion: str
    new_month_starts: bool
    reason: str
    confidence: Confidence
    zone: Optional[str] = None
    visibility: Optional[CrescentVisibility] = None
    params: Optional[CrescentParams] = None

@dataclass(frozen=True)
class FixedLocation:
    lat: float
    lon: float
    name: str

@dataclass(frozen=True)
class CriterionMeta:
    id: str
    name: str
    description: str
    type: CriterionType
    region: str
    fixed_location: Optional[FixedLocation] = None

@dataclass(frozen=True)
class DayInfo:
    civil_date: date
    hijri: HijriDate
    criterion: str
    festivals: Tuple[str, ...] = ()
    attributes: Optional[Dict[str, Any]] = None
