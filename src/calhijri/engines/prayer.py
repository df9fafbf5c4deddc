"""
calhijri.engines.prayer
-----------------------
Daily prayer times from solar altitude events.

Fajr and Isha are twilight events at the convention's depression angles,
Sunrise and Maghrib are the refracted-horizon events, Dhuhr follows the
transit by one minute, and Asr is the afternoon instant at which an object's
shadow reaches its noon shadow plus one (Shafi'i) or two (Hanafi) lengths.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..core.time import DateLike, add_days, parse_date
from ..core.types import AsrMethod, PrayerInstants, PrayerTimes, validate_location
from ..reference import solar
from ..reference import time_scales as ts
from . import events
from .specs import get_convention

ASR_SHADOW_FACTORS: Dict[str, int] = {"shafii": 1, "hanafi": 2}

PRAYER_ORDER: Tuple[str, ...] = ("fajr", "dhuhr", "asr", "maghrib", "isha")

_MINUTE = 1.0 / 1440.0


def asr_shadow_factor(asr_method: str) -> int:
    if asr_method not in ASR_SHADOW_FACTORS:
        raise ValueError(f"asr_method must be one of: {', '.join(ASR_SHADOW_FACTORS)}")
    return ASR_SHADOW_FACTORS[asr_method]


def asr_altitude_deg(lat: float, declination_deg: float, factor: int) -> float:
    """
    Solar altitude at Asr: atan(1 / (factor + cot(noon altitude))).
    A Sun that never clears the horizon at noon gets a shadow ratio of 100.
    """
    phi = math.radians(lat)
    dec = math.radians(declination_deg)
    noon_alt = math.asin(
        max(-1.0, min(1.0, math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec)))
    )
    ratio = 1.0 / math.tan(noon_alt) if noon_alt > 0.0 else 100.0
    return math.degrees(math.atan(1.0 / (factor + ratio)))


def _prayer_jds(d, lat: float, lon: float, convention: str, asr_method: AsrMethod) -> Dict[str, Optional[float]]:
    conv = get_convention(convention)
    factor = asr_shadow_factor(asr_method)
    validate_location(lat, lon)

    noon = events.solar_transit(d, lon)
    fajr = events.sun_event(d, lat, lon, -conv.fajr_angle, True)
    sunrise = events.sunrise(d, lat, lon)
    maghrib = events.sunset(d, lat, lon)

    dec = solar.approx_declination_deg(ts.days_since_j2000(noon))
    asr = events.sun_event(d, lat, lon, asr_altitude_deg(lat, dec, factor), False)

    if conv.isha_angle is not None:
        isha = events.sun_event(d, lat, lon, -conv.isha_angle, False)
    else:
        isha = maghrib + conv.isha_offset_minutes * _MINUTE if maghrib is not None else None

    midnight = None
    if maghrib is not None and fajr is not None:
        next_fajr = events.sun_event(add_days(d, 1), lat, lon, -conv.fajr_angle, True)
        if next_fajr is not None:
            midnight = 0.5 * (maghrib + next_fajr)

    return {
        "fajr": fajr,
        "sunrise": sunrise,
        "dhuhr": noon + _MINUTE,
        "asr": asr,
        "maghrib": maghrib,
        "isha": isha,
        "midnight": midnight,
    }


def compute_prayer_instants(
    d: DateLike,
    lat: float,
    lon: float,
    tz: str,
    convention: str = "mwl",
    asr_method: AsrMethod = "shafii",
) -> PrayerInstants:
    """Prayer events for civil date d as timezone-aware datetimes in tz."""
    d = parse_date(d)
    zone = ts.resolve_timezone(tz)
    jds = _prayer_jds(d, lat, lon, convention, asr_method)

    def local(jd: Optional[float]) -> Optional[datetime]:
        if jd is None:
            return None
        return ts.jd_to_datetime_utc(jd).astimezone(zone)

    return PrayerInstants(**{k: local(v) for k, v in jds.items()})


def compute_prayer_times(
    d: DateLike,
    lat: float,
    lon: float,
    tz: str,
    convention: str = "mwl",
    asr_method: AsrMethod = "shafii",
) -> PrayerTimes:
    """
    Prayer times for civil date d rendered as 'HH:MM' in the IANA zone tz.
    Events the Sun does not reach at this latitude and date are None.
    """
    inst = compute_prayer_instants(d, lat, lon, tz, convention, asr_method)

    def fmt(dt: Optional[datetime]) -> Optional[str]:
        return ts.format_hhmm(dt) if dt is not None else None

    return PrayerTimes(
        fajr=fmt(inst.fajr),
        sunrise=fmt(inst.sunrise),
        dhuhr=fmt(inst.dhuhr),
        asr=fmt(inst.asr),
        maghrib=fmt(inst.maghrib),
        isha=fmt(inst.isha),
        midnight=fmt(inst.midnight),
    )


def time_to_minutes(hhmm: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    try:
        h, m = hhmm.split(":")
        return int(h) * 60 + int(m)
    except ValueError as e:
        raise ValueError(f"Expected 'HH:MM', got {hhmm!r}") from e


def next_prayer(times: PrayerTimes, minutes_now: int) -> Optional[Tuple[str, str]]:
    """
    (name, 'HH:MM') of the first of the five prayers strictly after
    minutes_now; after Isha this wraps to Fajr. None if no prayer time exists.
    """
    available = [(name, getattr(times, name)) for name in PRAYER_ORDER if getattr(times, name) is not None]
    if not available:
        return None
    for name, hhmm in available:
        if time_to_minutes(hhmm) > minutes_now:
            return name, hhmm
    return available[0]
