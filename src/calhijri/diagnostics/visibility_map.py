#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, datetime, timezone
from typing import List, Optional

from calhijri.engines.crescent import compute_crescent, yallop_zone
from calhijri.reference import time_scales as ts


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "calhijri[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "calhijri[diagnostics]"') from e


ZONE_LEVELS = ("A", "B", "C", "D", "E", "F")


def q_grid(np, d: date, conj_jd_tt: float, lats, lons):
    """Yallop q at local sunset over a lat/lon grid; NaN where the Sun does not set."""
    q = np.full((len(lats), len(lons)), np.nan)
    for i, lat in enumerate(lats):
        for j, lon in enumerate(lons):
            c = compute_crescent(d, float(lat), float(lon), conj_jd_tt)
            if c is not None:
                q[i, j] = c.visibility.q_yallop
    return q


def zone_index(np, q):
    out = np.full(q.shape, np.nan)
    for k, val in np.ndenumerate(q):
        if not np.isnan(val):
            out[k] = ZONE_LEVELS.index(yallop_zone(float(val)))
    return out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Map of Yallop crescent zones at local sunset.")
    p.add_argument("date", help="YYYY-MM-DD (evening of observation)")
    p.add_argument("--conj-utc", required=True, help="conjunction instant, 'YYYY-MM-DDTHH:MM' UTC")
    p.add_argument("--step", type=float, default=5.0, help="grid step in degrees")
    p.add_argument("--lat-range", nargs=2, type=float, default=(-60.0, 60.0))
    p.add_argument("--outbase", default="visibility_map", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    d = date.fromisoformat(args.date)
    conj_dt = datetime.fromisoformat(args.conj_utc).replace(tzinfo=timezone.utc)
    conj_tt = ts.ut_to_tt(ts.datetime_utc_to_jd(conj_dt))

    lats = np.arange(args.lat_range[0], args.lat_range[1] + 1e-9, args.step)
    lons = np.arange(-180.0, 180.0 + 1e-9, args.step)
    zones = zone_index(np, q_grid(np, d, conj_tt, lats, lons))

    fig, ax = plt.subplots(figsize=(10.0, 5.0), constrained_layout=True)
    mesh = ax.pcolormesh(lons, lats, zones, cmap="RdYlGn_r", vmin=0, vmax=len(ZONE_LEVELS) - 1, shading="nearest")
    cbar = fig.colorbar(mesh, ax=ax, ticks=range(len(ZONE_LEVELS)))
    cbar.ax.set_yticklabels(ZONE_LEVELS)
    cbar.set_label("Yallop zone")
    ax.set_xlabel("Longitude (deg E)")
    ax.set_ylabel("Latitude (deg)")
    ax.set_title(f"Crescent visibility at sunset, {d.isoformat()}")
    ax.grid(True, color="0.85", linewidth=0.5)

    fig.savefig(args.outbase + ".png", dpi=200)
    print(f"Saved: {args.outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
