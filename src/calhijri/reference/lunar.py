# reference/lunar.py

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.types import LunarState
from . import astro_args as aa
from . import time_scales as ts


EARTH_RADIUS_KM = 6378.14
MEAN_DISTANCE_KM = 385000.56


@dataclass(frozen=True)
class LunarCoordinates:
    """Geocentric ecliptic coordinates of the Moon (degrees, km)."""
    L_deg: float
    B_deg: float
    distance_km: float


# ELP2000-82 (Meeus ch. 47), truncated.
# Longitude and distance: (D, M, M', F, sigma_l [1e-6 deg], sigma_r [1e-3 km])
LUNAR_LR_TERMS = (
    (0, 0, 1, 0, 6288774, -20905355),
    (2, 0, -1, 0, 1274027, -3699111),
    (2, 0, 0, 0, 658314, -2955968),
    (0, 0, 2, 0, 213618, -569925),
    (0, 1, 0, 0, -185116, 48888),
    (0, 0, 0, 2, -114332, -3149),
    (2, 0, -2, 0, 58793, 246158),
    (2, -1, -1, 0, 57066, -152138),
    (2, 0, 1, 0, 53322, -170733),
    (2, -1, 0, 0, 45758, -204586),
    (0, 1, -1, 0, -40923, -129620),
    (1, 0, 0, 0, -34720, 108743),
    (0, 1, 1, 0, -30383, 104755),
    (2, 0, 0, -2, 15327, 10321),
    (0, 0, 1, 2, -12528, 0),
    (0, 0, 1, -2, 10980, 79661),
    (4, 0, -1, 0, 10675, -34782),
    (0, 0, 3, 0, 10034, -23210),
    (4, 0, -2, 0, 8548, -21636),
    (2, 1, -1, 0, -7888, 24208),
    (2, 1, 0, 0, -6766, 30824),
    (1, 0, -1, 0, -5163, -8379),
    (1, 1, 0, 0, 4987, -16675),
    (2, -1, 1, 0, 4036, -12831),
    (2, 0, 2, 0, 3994, -10445),
    (4, 0, 0, 0, 3861, -11650),
    (2, 0, -3, 0, 3665, 14403),
    (0, 1, -2, 0, -2689, -7003),
    (2, 0, -1, 2, -2602, 0),
    (2, -1, -2, 0, 2390, 10056),
    (1, 0, 1, 0, -2348, 6322),
    (2, -2, 0, 0, 2236, -9884),
    (0, 1, 2, 0, -2120, 5751),
    (0, 2, 0, 0, -2069, 0),
    (2, -2, -1, 0, 2048, -4950),
    (2, 0, 1, -2, -1773, 4130),
    (2, 0, 0, 2, -1595, 0),
    (4, -1, -1, 0, 1215, -3958),
    (0, 0, 2, 2, -1110, 0),
    (3, 0, -1, 0, -892, 3258),
    (2, 1, 1, 0, -810, 2616),
    (4, -1, -2, 0, 759, -1897),
    (0, 2, -1, 0, -713, -2117),
    (2, 2, -1, 0, -700, 2354),
    (2, 1, -2, 0, 691, 0),
    (2, -1, 0, -2, 596, 0),
    (4, 0, 1, 0, 549, -1423),
    (0, 0, 4, 0, 537, -1117),
    (4, -1, 0, 0, 520, -1571),
    (1, 0, -2, 0, -487, -1739),
    (2, 1, 0, -2, -399, 0),
    (0, 0, 2, -2, -381, -4421),
    (1, 1, 1, 0, 351, 0),
    (3, 0, -2, 0, -340, 0),
    (4, 0, -3, 0, 330, 0),
    (2, -1, 2, 0, 327, 0),
    (0, 2, 1, 0, -323, 1165),
    (1, 1, -1, 0, 299, 0),
    (2, 0, 3, 0, 294, 0),
    (2, 0, -1, -2, 0, 8752),
)

# Latitude: (D, M, M', F, sigma_b [1e-6 deg])
LUNAR_B_TERMS = (
    (0, 0, 0, 1, 5128122),
    (0, 0, 1, 1, 280602),
    (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237),
    (2, 0, -1, 1, 55413),
    (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),
    (0, 0, 2, 1, 17198),
    (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),
    (2, -1, 0, -1, 8216),
    (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),
    (2, 1, 0, -1, -3359),
    (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),
    (2, -1, -1, -1, 2065),
    (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),
    (0, 1, 0, 1, -1794),
    (0, 0, 0, 3, -1749),
    (0, 1, -1, 1, -1565),
    (1, 0, 0, 1, -1491),
    (0, 1, 1, 1, -1475),
    (0, 1, 1, -1, -1410),
    (0, 1, 0, -1, -1344),
    (1, 0, 0, -1, -1335),
    (0, 0, 3, 1, 1107),
    (4, 0, 0, -1, 1021),
    (4, 0, -1, 1, 833),
    (0, 0, 1, -3, 777),
    (4, 0, -2, 1, 671),
    (2, 0, 0, -3, 607),
    (2, 0, 2, -1, 596),
    (2, -1, 1, -1, 491),
    (2, 0, -2, 1, -451),
    (0, 0, 3, -1, 439),
    (2, 0, 2, 1, 422),
    (2, 0, -3, -1, 421),
    (2, 1, -1, 1, -366),
    (2, 1, 0, 1, -351),
    (4, 0, 0, 1, 331),
    (2, -1, 1, 1, 315),
    (2, -2, 0, -1, 302),
    (0, 0, 1, 3, -283),
    (2, 1, 1, -1, -229),
    (1, 1, 0, -1, 223),
    (1, 1, 0, 1, 223),
    (0, 1, -2, -1, -220),
    (2, 1, -1, -1, -220),
    (1, 0, 1, 1, -185),
    (2, -1, -2, -1, 181),
    (0, 1, 2, 1, -177),
    (4, 0, -2, -1, 176),
    (4, -1, -1, -1, 166),
    (1, 0, 1, -1, -164),
    (4, 0, 1, -1, 132),
    (1, 0, -1, -1, -119),
    (4, -1, 0, -1, 115),
    (2, -2, 0, 1, 107),
)


def _e_scale(m: int, E: float) -> float:
    if abs(m) == 1:
        return E
    if abs(m) == 2:
        return E * E
    return 1.0


def lunar_position(jd: float) -> LunarCoordinates:
    """
    Geocentric ecliptic longitude, latitude and distance of the Moon.

    jd is used directly for T; the package evaluates the series at JD(UT),
    which costs well under a minute of timing at rise/set.
    """
    T = ts.T_centuries(jd)
    fa = aa.fundamental_args(T)
    E = aa.eccentricity_factor(T)

    D = math.radians(fa.D_deg)
    M = math.radians(fa.M_deg)
    Mp = math.radians(fa.Mp_deg)
    F = math.radians(fa.F_deg)
    Lp = math.radians(fa.Lp_deg)

    sum_l = 0.0
    sum_r = 0.0
    for d, m, mp, f, sl, sr in LUNAR_LR_TERMS:
        arg = d * D + m * M + mp * Mp + f * F
        k = _e_scale(m, E)
        sum_l += sl * k * math.sin(arg)
        sum_r += sr * k * math.cos(arg)

    sum_b = 0.0
    for d, m, mp, f, sb in LUNAR_B_TERMS:
        arg = d * D + m * M + mp * Mp + f * F
        sum_b += sb * _e_scale(m, E) * math.sin(arg)

    # Venus, Jupiter and flattening terms
    A1 = math.radians(119.75 + 131.849 * T)
    A2 = math.radians(53.09 + 479264.290 * T)
    A3 = math.radians(313.45 + 481266.484 * T)
    sum_l += 3958 * math.sin(A1) + 1962 * math.sin(Lp - F) + 318 * math.sin(A2)
    sum_b += (
        -2235 * math.sin(Lp)
        + 382 * math.sin(A3)
        + 175 * math.sin(A1 - F)
        + 175 * math.sin(A1 + F)
        + 127 * math.sin(Lp - Mp)
        - 115 * math.sin(Lp + Mp)
    )

    return LunarCoordinates(
        L_deg=aa.wrap_deg(fa.Lp_deg + sum_l * 1e-6),
        B_deg=sum_b * 1e-6,
        distance_km=MEAN_DISTANCE_KM + sum_r / 1000.0,
    )


def horizontal_parallax_deg(distance_km: float) -> float:
    return aa.asin_deg(EARTH_RADIUS_KM / distance_km)


def _moon_hour_angle(jd_ut: float, lon: float):
    c = lunar_position(jd_ut)
    eps = aa.mean_obliquity_deg(ts.T_centuries(jd_ut))
    ra, dec = aa.ecliptic_to_equatorial(c.L_deg, c.B_deg, eps)
    H = aa.local_hour_angle_deg(ts.days_since_j2000(jd_ut), lon, ra)
    return c, ra, dec, H


def refraction_deg(h_deg: float) -> float:
    """
    Atmospheric refraction (degrees) for altitude h (degrees).

    Zero below -1 deg: the formula diverges near -5.1 deg and a body that
    low is not observable anyway.
    """
    if h_deg < -1.0:
        return 0.0
    h = math.radians(h_deg)
    return math.degrees(math.radians(0.017) / math.tan(h + math.radians(10.26) / (h + math.radians(5.10))))


def moon_position(jd_ut: float, lat: float, lon: float) -> LunarState:
    """
    Horizon position of the Moon; altitude is geocentric plus refraction.
    """
    c, ra, dec, H = _moon_hour_angle(jd_ut, lon)
    alt, az = aa.horizontal(H, lat, dec)
    return LunarState(
        altitude=alt + refraction_deg(alt),
        azimuth=az,
        declination=dec,
        right_ascension=aa.wrap_deg(ra),
        distance_km=c.distance_km,
    )


def moon_altitude_above_horizon(jd_ut: float, lat: float, lon: float) -> float:
    """
    Geometric altitude minus the rise/set threshold h0 = 0.7275 hp - 34'.
    Positive while the upper limb is above the refracted horizon.
    """
    c, _, dec, H = _moon_hour_angle(jd_ut, lon)
    alt, _ = aa.horizontal(H, lat, dec)
    h0 = 0.7275 * horizontal_parallax_deg(c.distance_km) - 34.0 / 60.0
    return alt - h0
