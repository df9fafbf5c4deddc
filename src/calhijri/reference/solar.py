# reference/solar.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..core.types import SolarState
from . import astro_args as aa
from . import time_scales as ts


@dataclass(frozen=True)
class SolarCoordinates:
    """True and apparent solar longitude (degrees)."""
    L_true_deg: float
    L_app_deg: float


def _equation_of_center(T: float, M_deg: float) -> float:
    M_rad = math.radians(M_deg)
    return (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M_rad)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M_rad)
        + 0.000289 * math.sin(3.0 * M_rad)
    )


def solar_longitude(jd: float) -> SolarCoordinates:
    """
    True and apparent solar longitude using the Meeus truncated series
    (accurate to ~0.01 deg).
    """
    T = ts.T_centuries(jd)
    sm = aa.solar_mean_elements(T)
    L_true = aa.wrap_deg(sm.L0_deg + _equation_of_center(T, sm.M_deg))

    # aberration and leading nutation term
    omega = math.radians(125.04 - 1934.136 * T)
    L_app = aa.wrap_deg(L_true - 0.00569 - 0.00478 * math.sin(omega))
    return SolarCoordinates(L_true_deg=L_true, L_app_deg=L_app)


def sun_equatorial(jd_ut: float) -> Tuple[float, float]:
    """
    (right ascension, declination) of the Sun in degrees at JD(UT).

    Uses the true (geometric) longitude and the linear mean obliquity, which is
    the pairing the rise/set and crescent code is calibrated against.
    """
    T = ts.T_centuries(jd_ut)
    L_true = solar_longitude(jd_ut).L_true_deg
    eps = aa.mean_obliquity_deg(T)
    return aa.ecliptic_to_equatorial(L_true, 0.0, eps)


def sun_position(jd_ut: float, lat: float, lon: float) -> SolarState:
    """
    Topocentric-horizon position of the Sun (geometric altitude, no refraction).
    """
    ra, dec = sun_equatorial(jd_ut)
    H = aa.local_hour_angle_deg(ts.days_since_j2000(jd_ut), lon, ra)
    alt, az = aa.horizontal(H, lat, dec)
    return SolarState(altitude=alt, azimuth=az, declination=dec, right_ascension=aa.wrap_deg(ra))


def solar_declination_deg(L_app_deg: float, eps_deg: float) -> float:
    """Solar declination from apparent longitude and obliquity."""
    return aa.asin_deg(math.sin(math.radians(eps_deg)) * math.sin(math.radians(L_app_deg)))


def equation_of_time_minutes(jd: float) -> float:
    """
    Equation of time (minutes) from the Meeus series: 4 * (L0 - alpha).
    """
    T = ts.T_centuries(jd)
    sm = aa.solar_mean_elements(T)
    eps_rad = math.radians(aa.mean_obliquity_deg(T))
    L_app_rad = math.radians(solar_longitude(jd).L_app_deg)

    alpha = aa.wrap_deg(math.degrees(math.atan2(math.cos(eps_rad) * math.sin(L_app_rad), math.cos(L_app_rad))))
    return 4.0 * aa.wrap180(sm.L0_deg - alpha)


# ------------------------------------------------------------
# Low-precision daily elements (prayer-time noon and hour angles)
# ------------------------------------------------------------

OBLIQUITY_J2000_DEG = 23.4397
PERIHELION_DEG = 102.9372


def approx_mean_anomaly_deg(d: float) -> float:
    """Solar mean anomaly for d = days since J2000."""
    return 357.5291 + 0.98560028 * d


def approx_ecliptic_longitude_deg(M_deg: float) -> float:
    """Ecliptic longitude from mean anomaly with a 3-term equation of centre."""
    M = math.radians(M_deg)
    C = 1.9148 * math.sin(M) + 0.02 * math.sin(2 * M) + 0.0003 * math.sin(3 * M)
    return M_deg + C + PERIHELION_DEG + 180.0


def approx_declination_deg(d: float) -> float:
    L = math.radians(approx_ecliptic_longitude_deg(approx_mean_anomaly_deg(d)))
    return aa.asin_deg(math.sin(math.radians(OBLIQUITY_J2000_DEG)) * math.sin(L))


def approx_equation_of_time_minutes(d: float) -> float:
    """
    Apparent minus mean solar time (minutes), normalized to [-720, 720).
    """
    M_deg = approx_mean_anomaly_deg(d)
    L = math.radians(approx_ecliptic_longitude_deg(M_deg))
    eps = math.radians(OBLIQUITY_J2000_DEG)
    ra_deg = math.degrees(math.atan2(math.sin(L) * math.cos(eps), math.cos(L)))
    return 4.0 * aa.wrap180(M_deg + PERIHELION_DEG + 180.0 - ra_deg)
