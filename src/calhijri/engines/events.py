"""
calhijri.engines.events
-----------------------
Rise/set finder. An analytic first estimate (hour-angle formula for the Sun,
hourly scan with quadratic interpolation for the Moon) is refined by
bisection on the true altitude function. All instants are JD(UT).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..reference import solar
from ..reference import time_scales as ts
from ..reference.lunar import moon_altitude_above_horizon

SUNRISE_ALTITUDE_DEG = -0.833
MAX_BISECTION_STEPS = 20

_J0 = 0.0009
_SUN_WINDOW_DAYS = 20.0 / 1440.0
_MOON_WINDOW_DAYS = 30.0 / 1440.0
_HOUR = 1.0 / 24.0


def refine_crossing(
    f: Callable[[float], float],
    estimate: float,
    window_days: float,
    rising: bool,
    max_steps: int = MAX_BISECTION_STEPS,
) -> float:
    """
    Bisection for the zero of f in [estimate - window, estimate + window].

    f must be increasing through zero for a rising event and decreasing for a
    setting one. When the window does not bracket such a crossing the estimate
    is returned unchanged.
    """
    lo = estimate - window_days
    hi = estimate + window_days
    f_lo = f(lo)
    f_hi = f(hi)
    if rising:
        if f_lo >= 0.0 or f_hi <= 0.0:
            return estimate
    else:
        if f_lo <= 0.0 or f_hi >= 0.0:
            return estimate

    for _ in range(max_steps):
        mid = 0.5 * (lo + hi)
        f_mid = f(mid)
        if rising:
            if f_mid < 0.0:
                lo = mid
            else:
                hi = mid
        else:
            if f_mid > 0.0:
                lo = mid
            else:
                hi = mid
    return 0.5 * (lo + hi)


# ============================================================
# Sun
# ============================================================

@dataclass(frozen=True)
class _SunDay:
    n: int
    lw: float        # west longitude, radians
    M: float         # mean anomaly at transit, radians
    L: float         # ecliptic longitude at transit, radians
    dec: float       # declination at transit, radians
    j_noon: float    # approximate transit, JD(UT)


def _sun_day(d: date, lon: float) -> _SunDay:
    lw = math.radians(-lon)
    days = ts.date_to_jd(d) + 0.5 - ts.J2000
    n = int(round(days - _J0))
    ds = _J0 + lw / (2.0 * math.pi) + n
    M = math.radians(solar.approx_mean_anomaly_deg(ds))
    L = math.radians(solar.approx_ecliptic_longitude_deg(math.degrees(M)))
    dec = math.asin(math.sin(math.radians(solar.OBLIQUITY_J2000_DEG)) * math.sin(L))
    j_noon = ts.J2000 + ds + 0.0053 * math.sin(M) - 0.0069 * math.sin(2.0 * L)
    return _SunDay(n=n, lw=lw, M=M, L=L, dec=dec, j_noon=j_noon)


def approx_sun_event(d: date, lat: float, lon: float, target_altitude_deg: float, rising: bool) -> Optional[float]:
    """Hour-angle estimate of the crossing; None if |cos H| > 1."""
    s = _sun_day(d, lon)
    phi = math.radians(lat)
    h = math.radians(target_altitude_deg)
    cos_h = (math.sin(h) - math.sin(phi) * math.sin(s.dec)) / (math.cos(phi) * math.cos(s.dec))
    if cos_h > 1.0 or cos_h < -1.0:
        return None
    w = math.acos(cos_h)
    a = _J0 + (w + s.lw) / (2.0 * math.pi) + s.n
    j_set = ts.J2000 + a + 0.0053 * math.sin(s.M) - 0.0069 * math.sin(2.0 * s.L)
    if rising:
        return s.j_noon - (j_set - s.j_noon)
    return j_set


def sun_event(d: date, lat: float, lon: float, target_altitude_deg: float, rising: bool) -> Optional[float]:
    """
    JD(UT) at which the Sun's geometric altitude crosses target_altitude_deg on
    civil date d (rising in the morning, setting in the evening), or None when
    it never reaches that altitude.
    """
    est = approx_sun_event(d, lat, lon, target_altitude_deg, rising)
    if est is None:
        return None

    def f(jd: float) -> float:
        return solar.sun_position(jd, lat, lon).altitude - target_altitude_deg

    return refine_crossing(f, est, _SUN_WINDOW_DAYS, rising)


def sunrise(d: date, lat: float, lon: float) -> Optional[float]:
    return sun_event(d, lat, lon, SUNRISE_ALTITUDE_DEG, True)


def sunset(d: date, lat: float, lon: float) -> Optional[float]:
    return sun_event(d, lat, lon, SUNRISE_ALTITUDE_DEG, False)


def solar_transit(d: date, lon: float) -> float:
    """
    Transit of the mean Sun corrected by the equation of time:
    00:00 UT + (12h - EoT - lon/15h). Defined for every longitude.
    """
    midnight = ts.date_to_jd(d)
    eot = solar.approx_equation_of_time_minutes(midnight + 0.5 - ts.J2000)
    hours = 12.0 - eot / 60.0 - lon / 15.0
    return midnight + hours / 24.0


# ============================================================
# Moon
# ============================================================

@dataclass(frozen=True)
class MoonTimes:
    rise: Optional[float]
    set: Optional[float]
    always_up: bool
    always_down: bool


def moon_times(d: date, lat: float, lon: float) -> MoonTimes:
    """
    Moonrise and moonset during the local civil day of d.

    The local day is approximated as [00:00 UT - round(lon/15) h - 1 h, +26 h];
    the scan starts 3 h earlier so a crossing near midnight is not missed.
    """
    offset_h = round(lon / 15.0)
    local_start = ts.date_to_jd(d) - offset_h * _HOUR - _HOUR
    local_end = local_start + 26.0 * _HOUR
    scan_start = local_start - 3.0 * _HOUR

    def f(jd: float) -> float:
        return moon_altitude_above_horizon(jd, lat, lon)

    def in_day(jd: float) -> bool:
        return local_start <= jd < local_end

    h0 = f(scan_start)
    rise: Optional[float] = None
    set_: Optional[float] = None

    for i in range(1, 31, 2):
        t1 = scan_start + i * _HOUR
        h1 = f(t1)
        h2 = f(scan_start + (i + 1) * _HOUR)

        # parabola through (-1, h0), (0, h1), (1, h2)
        a = (h0 + h2) / 2.0 - h1
        b = (h2 - h0) / 2.0
        roots = 0
        x1 = x2 = 0.0
        ye = h1
        if a != 0.0:
            xe = -b / (2.0 * a)
            ye = (a * xe + b) * xe + h1
            disc = b * b - 4.0 * a * h1
            if disc >= 0.0:
                dx = math.sqrt(disc) / (abs(a) * 2.0)
                x1 = xe - dx
                x2 = xe + dx
                if abs(x1) <= 1.0:
                    roots += 1
                if abs(x2) <= 1.0:
                    roots += 1
                if x1 < -1.0:
                    x1 = x2
        elif b != 0.0:
            x1 = -h1 / b
            if abs(x1) <= 1.0:
                roots = 1

        if roots == 1:
            cand = t1 + x1 * _HOUR
            if in_day(cand):
                if h0 < 0.0 and rise is None:
                    rise = cand
                elif h0 >= 0.0 and set_ is None:
                    set_ = cand
        elif roots == 2:
            rise_c = t1 + (x2 if ye < 0.0 else x1) * _HOUR
            set_c = t1 + (x1 if ye < 0.0 else x2) * _HOUR
            if rise is None and in_day(rise_c):
                rise = rise_c
            if set_ is None and in_day(set_c):
                set_ = set_c

        if rise is not None and set_ is not None:
            break
        h0 = h2

    if rise is not None:
        rise = refine_crossing(f, rise, _MOON_WINDOW_DAYS, True)
    if set_ is not None:
        set_ = refine_crossing(f, set_, _MOON_WINDOW_DAYS, False)

    return MoonTimes(
        rise=rise,
        set=set_,
        always_up=rise is None and set_ is None and h0 > 0.0,
        always_down=rise is None and set_ is None and h0 <= 0.0,
    )


def moon_event(d: date, lat: float, lon: float, rising: bool) -> Optional[float]:
    """JD(UT) of moonrise (rising=True) or moonset on the local day of d, or None."""
    mt = moon_times(d, lat, lon)
    return mt.rise if rising else mt.set


def moonrise(d: date, lat: float, lon: float) -> Optional[float]:
    return moon_event(d, lat, lon, True)


def moonset(d: date, lat: float, lon: float) -> Optional[float]:
    return moon_event(d, lat, lon, False)

