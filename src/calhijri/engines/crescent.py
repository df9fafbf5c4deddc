"""
calhijri.engines.crescent
-------------------------
Crescent visibility quantities at local sunset.

Raw parameters (positions at sunset, moonset) are gathered once by
compute_crescent_params; everything in CrescentVisibility is a pure function
of them. Angles in degrees, widths and semi-diameters in arcminutes.
"""

from __future__ import annotations

import math
from typing import Optional

from ..core.time import DateLike, add_days, parse_date
from ..core.types import Crescent, CrescentParams, CrescentVisibility
from ..reference import time_scales as ts
from ..reference.astro_args import acos_deg, asin_deg
from ..reference.lunar import moon_position
from ..reference.solar import sun_position
from . import events

MOON_RADIUS_KM = 1737.4

# lower q bounds of zones A..E; anything at or below the last is F
YALLOP_ZONE_BOUNDS = (
    ("A", 0.216),
    ("B", -0.014),
    ("C", -0.160),
    ("D", -0.232),
    ("E", -0.293),
)


def elongation(moon_alt: float, sun_alt: float, moon_az: float, sun_az: float) -> float:
    """Arc of light ARCL: angular Sun-Moon separation from horizon coordinates."""
    m = math.radians(moon_alt)
    s = math.radians(sun_alt)
    daz = math.radians(moon_az - sun_az)
    return acos_deg(math.sin(m) * math.sin(s) + math.cos(m) * math.cos(s) * math.cos(daz))


def moon_semi_diameter(distance_km: float) -> float:
    """Geocentric semi-diameter in arcminutes."""
    return asin_deg(MOON_RADIUS_KM / distance_km) * 60.0


def crescent_width(sd_arcmin: float, arcl_deg: float) -> float:
    return sd_arcmin * (1.0 - math.cos(math.radians(arcl_deg)))


def yallop_q(arcv: float, w: float) -> float:
    limit = 11.8371 - 6.3226 * w + 0.7319 * w * w - 0.1018 * w * w * w
    return (arcv - limit) / 10.0


def yallop_zone(q: float) -> str:
    for zone, bound in YALLOP_ZONE_BOUNDS:
        if q > bound:
            return zone
    return "F"


def moon_age_hours(jd_ut: float, conjunction_jd_tt: float) -> float:
    """Hours since conjunction; negative before it."""
    return (jd_ut - ts.tt_to_ut(conjunction_jd_tt)) * 24.0


def best_observation_time(sunset_jd: float, moonset_jd: Optional[float]) -> float:
    """Yallop's best time: sunset + 4/9 of the lag, or sunset if the Moon sets first."""
    if moonset_jd is None or moonset_jd <= sunset_jd:
        return sunset_jd
    return sunset_jd + (4.0 / 9.0) * (moonset_jd - sunset_jd)


def illuminated_fraction(arcl_deg: float) -> float:
    """Illuminated fraction in [0, 1]."""
    return (1.0 - math.cos(math.radians(arcl_deg))) / 2.0


def _moonset_after(d, lat: float, lon: float, sunset_jd: float) -> Optional[float]:
    for day in (d, add_days(d, 1)):
        ms = events.moonset(day, lat, lon)
        if ms is None:
            # no moonset on the sunset day is not retried on the next one
            return None
        if ms > sunset_jd:
            return ms
    return None


def compute_crescent_params(
    d: DateLike,
    lat: float,
    lon: float,
    conjunction_jd_tt: float,
) -> Optional[CrescentParams]:
    """
    Sun and Moon at sunset of civil date d. None when the Sun does not set.
    """
    d = parse_date(d)
    sunset = events.sunset(d, lat, lon)
    if sunset is None:
        return None

    moon = moon_position(sunset, lat, lon)
    sun = sun_position(sunset, lat, lon)

    return CrescentParams(
        sunset_jd=sunset,
        moon_alt=moon.altitude,
        sun_alt=sun.altitude,
        moon_az=moon.azimuth,
        sun_az=sun.azimuth,
        moon_distance_km=moon.distance_km,
        moonset_jd=_moonset_after(d, lat, lon, sunset),
        conjunction_jd_tt=conjunction_jd_tt,
        sunrise_jd=events.sunrise(d, lat, lon),
    )


def compute_visibility(params: CrescentParams) -> CrescentVisibility:
    arcl = elongation(params.moon_alt, params.sun_alt, params.moon_az, params.sun_az)
    arcv = params.moon_alt - params.sun_alt
    sd = moon_semi_diameter(params.moon_distance_km)
    w = crescent_width(sd, arcl)

    lag = 0.0
    if params.moonset_jd is not None and params.moonset_jd > params.sunset_jd:
        lag = (params.moonset_jd - params.sunset_jd) * 1440.0

    return CrescentVisibility(
        ARCL=arcl,
        ARCV=arcv,
        DAZ=abs(params.moon_az - params.sun_az),
        W=w,
        SD=sd,
        moon_age_hours=moon_age_hours(params.sunset_jd, params.conjunction_jd_tt),
        lag_minutes=lag,
        q_yallop=yallop_q(arcv, w),
        best_time_jd=best_observation_time(params.sunset_jd, params.moonset_jd),
        illumination_pct=illuminated_fraction(arcl) * 100.0,
    )


def compute_crescent(
    d: DateLike,
    lat: float,
    lon: float,
    conjunction_jd_tt: float,
) -> Optional[Crescent]:
    params = compute_crescent_params(d, lat, lon, conjunction_jd_tt)
    if params is None:
        return None
    return Crescent(params=params, visibility=compute_visibility(params))
