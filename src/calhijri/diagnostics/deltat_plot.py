#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional

from calhijri.reference.deltat import PREDICTION_START_YEAR, delta_t_seconds


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


def build_series(np, y0: float, y1: float, step: float):
    years = np.arange(y0, y1 + 1e-9, step)
    table = np.array([delta_t_seconds(float(y)) for y in years])
    em = np.array([delta_t_seconds(float(y), method="em2006") for y in years])
    return years, table, em


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Plot the ΔT table against the Espenak-Meeus polynomial.")
    p.add_argument("--start", type=float, default=1900.0)
    p.add_argument("--end", type=float, default=2100.0)
    p.add_argument("--step", type=float, default=0.25)
    p.add_argument("--outbase", default="deltat", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    years, table, em = build_series(np, args.start, args.end, args.step)

    fig, (ax, ax_d) = plt.subplots(2, 1, figsize=(9.2, 6.4), sharex=True, constrained_layout=True)
    ax.plot(years, table, label="table (used)", linewidth=1.6)
    ax.plot(years, em, label="Espenak-Meeus 2006", linewidth=1.0, linestyle="--")
    ax.axvline(PREDICTION_START_YEAR, color="0.6", linewidth=0.8)
    ax.set_ylabel("ΔT (s)")
    ax.legend(frameon=False)
    ax.grid(True, color="0.88", linewidth=0.7)

    ax_d.plot(years, table - em, color="tab:red", linewidth=1.0)
    ax_d.axvline(PREDICTION_START_YEAR, color="0.6", linewidth=0.8)
    ax_d.set_ylabel("table - EM (s)")
    ax_d.set_xlabel("Year")
    ax_d.grid(True, color="0.88", linewidth=0.7)

    fig.savefig(args.outbase + ".png", dpi=200)
    print(f"Saved: {args.outbase}.png")
    print(f"max |table - EM| = {float(np.max(np.abs(table - em))):.2f} s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
