from __future__ import annotations
from datetime import date, timedelta
from typing import Union

DateLike = Union[date, str]


def to_jdn(d: date) -> int:
    """Convert Gregorian date to Julian Day Number (JDN)."""
    y, m, day = d.year, d.month, d.day
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045

def from_jdn(jdn: int) -> date:
    """Fliegel-Van Flandern inverse of to_jdn (Gregorian)."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return date(year, month, day)

def parse_date(d: DateLike) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(d, date):
        return d
    try:
        y, m, day = map(int, d.strip().split("-"))
        return date(y, m, day)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Expected a date or 'YYYY-MM-DD', got {d!r}") from e

def days_between(a: date, b: date) -> int:
    """Signed day difference a - b."""
    return to_jdn(a) - to_jdn(b)

def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)
