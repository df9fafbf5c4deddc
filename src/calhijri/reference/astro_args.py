from __future__ import annotations

from dataclasses import dataclass
from math import fmod
from typing import Literal, Tuple

import math


# ------------------------------------------------------------
# Units & helpers
# ------------------------------------------------------------

def wrap_deg(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(x_deg, 360.0)
    if y < 0:
        y += 360.0
    return y

def wrap180(deg: float) -> float:
    """Wraps an angle in degrees to the range [-180.0, 180.0)."""
    return (deg + 180.0) % 360.0 - 180.0

def clamp_unit(x: float) -> float:
    """Clamp an acos/asin argument to [-1, 1] against floating-point drift."""
    return max(-1.0, min(1.0, x))

def asin_deg(x: float) -> float:
    return math.degrees(math.asin(clamp_unit(x)))

def acos_deg(x: float) -> float:
    return math.degrees(math.acos(clamp_unit(x)))


# ------------------------------------------------------------
# Fundamental arguments (degrees)
# ------------------------------------------------------------

@dataclass(frozen=True)
class FundamentalArgs:
    """Lunar/solar mean elements in degrees, wrapped to [0,360)."""
    Lp_deg: float
    D_deg: float
    M_deg: float
    Mp_deg: float
    F_deg: float


def fundamental_args(T: float) -> FundamentalArgs:
    """
    Fundamental arguments for the ELP2000-82 series (Meeus ch. 47):
      L' = 218.3164477 + 481267.88123421 T - 0.0015786 T^2 + T^3/538841 - T^4/65194000
      D  = 297.8501921 + 445267.1114034  T - 0.0018819 T^2 + T^3/545868  - T^4/113065000
      M  = 357.5291092 + 35999.0502909  T - 0.0001536 T^2 + T^3/24490000
      M' = 134.9633964 + 477198.8675055 T + 0.0087414 T^2 + T^3/69699   - T^4/14712000
      F  = 93.2720950  + 483202.0175233 T - 0.0036539 T^2 - T^3/3526000 + T^4/863310000
    """
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2

    Lp = 218.3164477 + 481267.88123421 * T - 0.0015786 * T2 + T3 / 538841.0 - T4 / 65194000.0
    D = 297.8501921 + 445267.1114034 * T - 0.0018819 * T2 + T3 / 545868.0 - T4 / 113065000.0
    M = 357.5291092 + 35999.0502909 * T - 0.0001536 * T2 + T3 / 24490000.0
    Mp = 134.9633964 + 477198.8675055 * T + 0.0087414 * T2 + T3 / 69699.0 - T4 / 14712000.0
    F = 93.2720950 + 483202.0175233 * T - 0.0036539 * T2 - T3 / 3526000.0 + T4 / 863310000.0

    return FundamentalArgs(
        Lp_deg=wrap_deg(Lp),
        D_deg=wrap_deg(D),
        M_deg=wrap_deg(M),
        Mp_deg=wrap_deg(Mp),
        F_deg=wrap_deg(F),
    )


# ------------------------------------------------------------
# Mean obliquity epsilon (degrees)
# ------------------------------------------------------------

def mean_obliquity_deg(T: float, model: Literal["linear", "iau2000"] = "linear") -> float:
    """
    Mean obliquity of the ecliptic (degrees).

    - 'linear': eps = 23.439291 - 0.0130042 T, the truncation the sun and moon
      series here are paired with.
    - 'iau2000': eps = 84381.406" - 46.836769"T - 0.0001831"T^2 + 0.00200340"T^3
    """
    if model == "linear":
        return 23.439291 - 0.0130042 * T
    if model == "iau2000":
        eps_arcsec = 84381.406 - 46.836769 * T - 0.0001831 * T * T + 0.00200340 * T * T * T
        return eps_arcsec / 3600.0
    raise ValueError("model must be one of: linear, iau2000")


# ------------------------------------------------------------
# Sun mean elements (Meeus-style)
# ------------------------------------------------------------

@dataclass(frozen=True)
class SolarMean:
    L0_deg: float  # geometric mean longitude of Sun
    M_deg: float   # mean anomaly of Sun


def solar_mean_elements(T: float) -> SolarMean:
    """
    Meeus geometric mean longitude L0 and mean anomaly M (degrees).
    """
    T2 = T * T
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T2
    M = 357.52911 + 35999.05029 * T - 0.0001537 * T2
    return SolarMean(L0_deg=wrap_deg(L0), M_deg=wrap_deg(M))


def eccentricity_factor(T: float) -> float:
    """
    Eccentricity factor E for the Earth's orbit.
    Used to scale analytical lunar perturbations that depend on
    the Sun's mean anomaly.
    """
    return 1.0 - 0.002516 * T - 0.0000074 * (T * T)


# ------------------------------------------------------------
# Coordinate transforms
# ------------------------------------------------------------

def greenwich_sidereal_deg(d: float) -> float:
    """Greenwich mean sidereal time (degrees) for d = JD(UT) - 2451545 (Meeus 12.4)."""
    T = d / 36525.0
    return 280.46061837 + 360.98564736629 * d + 0.000387933 * T * T


def ecliptic_to_equatorial(lon_deg: float, lat_deg: float, eps_deg: float) -> Tuple[float, float]:
    """Ecliptic (lambda, beta) -> (right ascension, declination), degrees."""
    l = math.radians(lon_deg)
    b = math.radians(lat_deg)
    e = math.radians(eps_deg)
    ra = math.atan2(math.sin(l) * math.cos(e) - math.tan(b) * math.sin(e), math.cos(l))
    dec = math.asin(clamp_unit(math.sin(b) * math.cos(e) + math.cos(b) * math.sin(e) * math.sin(l)))
    return math.degrees(ra), math.degrees(dec)


def horizontal(H_deg: float, lat_deg: float, dec_deg: float) -> Tuple[float, float]:
    """
    Local hour angle, latitude and declination -> (altitude, azimuth), degrees.

    Azimuth is measured from south, increasing westward.
    """
    H = math.radians(H_deg)
    phi = math.radians(lat_deg)
    dec = math.radians(dec_deg)
    alt = math.asin(clamp_unit(math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(H)))
    az = math.atan2(math.sin(H), math.cos(H) * math.sin(phi) - math.tan(dec) * math.cos(phi))
    return math.degrees(alt), math.degrees(az)


def local_hour_angle_deg(d: float, lon_deg: float, ra_deg: float) -> float:
    """Local hour angle of an object: GMST + east longitude - RA."""
    return greenwich_sidereal_deg(d) + lon_deg - ra_deg
