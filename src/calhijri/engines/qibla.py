from __future__ import annotations

import math

from ..core.types import QiblaInfo
from ..reference.astro_args import clamp_unit
from .specs import KAABA_LAT, KAABA_LON

EARTH_MEAN_RADIUS_KM = 6371.0


def qibla_bearing(lat: float, lon: float) -> float:
    """
    Initial great-circle bearing from (lat, lon) to the Kaaba, degrees
    clockwise from true north in [0, 360).
    """
    phi1 = math.radians(lat)
    phi2 = math.radians(KAABA_LAT)
    dlon = math.radians(KAABA_LON - lon)
    y = math.sin(dlon) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlon)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def qibla_distance(lat: float, lon: float) -> float:
    """Haversine distance to the Kaaba in km."""
    phi1 = math.radians(lat)
    phi2 = math.radians(KAABA_LAT)
    dphi = phi2 - phi1
    dlon = math.radians(KAABA_LON - lon)
    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2.0) ** 2
    return 2.0 * EARTH_MEAN_RADIUS_KM * math.asin(math.sqrt(clamp_unit(a)))


def compute_qibla(lat: float, lon: float) -> QiblaInfo:
    # bearing is undefined at the Kaaba itself; callers check distance_km
    return QiblaInfo(
        direction=round(qibla_bearing(lat, lon), 2) % 360.0,
        distance_km=int(round(qibla_distance(lat, lon))),
    )
