from __future__ import annotations

"""
calhijri.reference.deltat

ΔT (= TT − UT) in seconds, as used by every time-scale conversion in the package.

Model
-----
A fixed table over 1900–2100: observed yearly means up to 2024, predictions
afterwards (5-year steps to 2000, yearly to 2030, then 5/10-year steps).
Values between knots are linearly interpolated; outside the table the first
or last value is returned unchanged (clamping). Accuracy is roughly 0.1 s for
historical years and within 2 s for the predicted part, so callers must not
assume sub-second accuracy after 2025.

The Espenak–Meeus (NASA) polynomials are kept alongside for diagnostics that
compare the table against the long-range model. Nothing in the calendar or
prayer code uses them.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple


# ---------------------------------------------------------------------------
# Table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTTable:
    """
    Piecewise-linear ΔT table over decimal-year coordinate, clamped at both ends.
    """
    x: Tuple[float, ...]   # decimal years (strictly increasing)
    y: Tuple[float, ...]   # ΔT in seconds

    def __post_init__(self) -> None:
        if len(self.x) != len(self.y) or len(self.x) < 2:
            raise ValueError("ΔT table needs at least two (year, seconds) pairs")
        for i in range(1, len(self.x)):
            if not (self.x[i] > self.x[i - 1]):
                raise ValueError("ΔT table x is not strictly increasing")

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return iter(zip(self.x, self.y))

    def eval(self, xq: float) -> float:
        if xq <= self.x[0]:
            return self.y[0]
        if xq >= self.x[-1]:
            return self.y[-1]
        lo, hi = 0, len(self.x) - 1
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self.x[mid] <= xq:
                lo = mid
            else:
                hi = mid
        x0, x1 = self.x[lo], self.x[hi]
        y0, y1 = self.y[lo], self.y[hi]
        t = (xq - x0) / (x1 - x0)
        return y0 + t * (y1 - y0)

    @property
    def range(self) -> Tuple[float, float]:
        return (self.x[0], self.x[-1])


_TABLE_ROWS: Tuple[Tuple[float, float], ...] = (
    (1900, -2.72), (1905, 3.86), (1910, 10.38), (1915, 17.20), (1920, 21.16),
    (1925, 23.62), (1930, 24.02), (1935, 23.93), (1940, 24.33), (1945, 26.77),
    (1950, 29.15), (1955, 31.07), (1960, 33.15), (1965, 35.73), (1970, 40.18),
    (1975, 45.48), (1980, 50.54), (1985, 54.34), (1990, 56.86), (1995, 60.79),
    (2000, 63.83), (2001, 64.09), (2002, 64.30), (2003, 64.47), (2004, 64.57),
    (2005, 64.69), (2006, 64.85), (2007, 65.15), (2008, 65.46), (2009, 65.78),
    (2010, 66.07), (2011, 66.32), (2012, 66.60), (2013, 66.91), (2014, 67.28),
    (2015, 67.64), (2016, 68.12), (2017, 68.59), (2018, 68.97), (2019, 69.22),
    (2020, 69.36), (2021, 69.29), (2022, 69.18), (2023, 69.10), (2024, 69.20),
    # predicted
    (2025, 69.5), (2026, 69.7), (2027, 69.9), (2028, 70.1), (2029, 70.3),
    (2030, 70.5), (2035, 71.5), (2040, 73.0), (2045, 75.0), (2050, 77.0),
    (2060, 82.0), (2070, 88.0), (2080, 95.0), (2090, 103.0), (2100, 112.0),
)

DELTA_T_TABLE = DeltaTTable(
    tuple(float(r[0]) for r in _TABLE_ROWS),
    tuple(float(r[1]) for r in _TABLE_ROWS),
)

PREDICTION_START_YEAR = 2025.0


# ---------------------------------------------------------------------------
# Espenak–Meeus (NASA) piecewise polynomial, 1860..2150 and the long-term parabola
# ---------------------------------------------------------------------------

def _poly(u: float, coeffs: Tuple[float, ...]) -> float:
    """Horner evaluation for Σ coeffs[k] u^k."""
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * u + c
    return acc


def delta_t_em2006(y: float) -> float:
    """
    Espenak–Meeus ΔT(y) in seconds for decimal year y.

    Only the branches that overlap the table era are carried; outside
    1860..2150 the long-term parabola -20 + 32 u², u = (y-1820)/100, is used.
    """
    if y < 1860.0 or y >= 2150.0:
        u = (y - 1820.0) / 100.0
        return -20.0 + 32.0 * u * u
    if y < 1900.0:
        t = y - 1860.0
        return _poly(t, (7.62, 0.5737, -0.251754, 0.01680668, -0.0004473624, 1.0 / 233174.0))
    if y < 1920.0:
        t = y - 1900.0
        return _poly(t, (-2.79, 1.494119, -0.0598939, 0.0061966, -0.000197))
    if y < 1941.0:
        t = y - 1920.0
        return _poly(t, (21.20, 0.84493, -0.076100, 0.0020936))
    if y < 1961.0:
        t = y - 1950.0
        return _poly(t, (29.07, 0.407, -1.0 / 233.0, 1.0 / 2547.0))
    if y < 1986.0:
        t = y - 1975.0
        return _poly(t, (45.45, 1.067, -1.0 / 260.0, -1.0 / 718.0))
    if y < 2005.0:
        t = y - 2000.0
        return _poly(t, (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599))
    if y < 2050.0:
        t = y - 2000.0
        return _poly(t, (62.92, 0.32217, 0.005589))
    u = (y - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u - 0.5628 * (2150.0 - y)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def delta_t_seconds(y: float, *, method: str = "table") -> float:
    """
    ΔT(y) in seconds, where y is a decimal year.

    method:
      - "table":  the clamped 1900–2100 table (used everywhere in calhijri).
      - "em2006": Espenak–Meeus polynomial (diagnostics only).
    """
    method = method.lower().strip()
    if method == "table":
        return DELTA_T_TABLE.eval(y)
    if method == "em2006":
        return delta_t_em2006(y)
    raise ValueError("method must be one of: table, em2006")


def is_predicted(y: float) -> bool:
    """True when y falls in the predicted (not yet observed) part of the table."""
    return y >= PREDICTION_START_YEAR
