#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

from calhijri.engines import events
from calhijri.reference import solar
from calhijri.reference.lunar import moon_altitude_above_horizon


def _need_scipy():
    try:
        import scipy.optimize as opt
        return opt
    except ImportError as e:
        raise RuntimeError('Need scipy. Install: pip install "calhijri[diagnostics]"') from e


_BRACKET_DAYS = 1.0 / 24.0


def root_near(opt, f: Callable[[float], float], jd: float) -> Optional[float]:
    """brentq root of f in jd +/- 1 h; None when f does not change sign there."""
    lo, hi = jd - _BRACKET_DAYS, jd + _BRACKET_DAYS
    if f(lo) * f(hi) > 0.0:
        return None
    return opt.brentq(f, lo, hi, xtol=1e-9)


def compare_day(opt, d: date, lat: float, lon: float) -> List[Tuple[str, Optional[float]]]:
    """(event, |bisection - brentq| in seconds) for the Sun and Moon on date d."""
    def sun_f(jd: float) -> float:
        return solar.sun_position(jd, lat, lon).altitude - events.SUNRISE_ALTITUDE_DEG

    def moon_f(jd: float) -> float:
        return moon_altitude_above_horizon(jd, lat, lon)

    mt = events.moon_times(d, lat, lon)
    pairs = (
        ("sunrise", events.sunrise(d, lat, lon), sun_f),
        ("sunset", events.sunset(d, lat, lon), sun_f),
        ("moonrise", mt.rise, moon_f),
        ("moonset", mt.set, moon_f),
    )

    out: List[Tuple[str, Optional[float]]] = []
    for name, jd, f in pairs:
        if jd is None:
            out.append((name, None))
            continue
        ref = root_near(opt, f, jd)
        out.append((name, None if ref is None else abs(jd - ref) * 86400.0))
    return out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Cross-check bisection rise/set times against scipy brentq.")
    p.add_argument("--start", default="2025-01-01", help="YYYY-MM-DD")
    p.add_argument("--days", type=int, default=30)
    p.add_argument("--lat", type=float, default=21.4225)
    p.add_argument("--lon", type=float, default=39.8262)
    p.add_argument("--tol", type=float, default=5.0, help="flag differences above this many seconds")
    args = p.parse_args(argv)

    opt = _need_scipy()

    d0 = date.fromisoformat(args.start)
    worst = {}
    flagged = 0
    for k in range(args.days):
        d = d0 + timedelta(days=k)
        for name, diff in compare_day(opt, d, args.lat, args.lon):
            if diff is None:
                continue
            worst[name] = max(worst.get(name, 0.0), diff)
            if diff > args.tol:
                flagged += 1
                print(f"{d.isoformat()}  {name:<8s} diff={diff:8.2f} s")

    print()
    for name in ("sunrise", "sunset", "moonrise", "moonset"):
        if name in worst:
            print(f"max |diff| {name:<8s}: {worst[name]:.3f} s")
    print(f"flagged: {flagged}")
    return 0 if flagged == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
