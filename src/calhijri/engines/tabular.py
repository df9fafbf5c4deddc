"""
calhijri.engines.tabular
------------------------
Arithmetic (tabular) Hijri calendar: 30-year cycle of 10631 days with 11 leap
years; months alternate 30/29 days and Dhul Hijjah gets a 30th day in leap
years. Day 0 of the count is 1 Muharram 1 AH (JDN 1948440).
"""

from __future__ import annotations

from datetime import date
from typing import List, Tuple

from ..core.time import DateLike, from_jdn, parse_date, to_jdn
from ..core.types import HijriDate, HijriMonthInfo, HijriMonthStart

HIJRI_EPOCH_JD = 1948439.5
HIJRI_EPOCH_JDN = 1948440
TABULAR_CYCLE_DAYS = 10631
TABULAR_CYCLE_YEARS = 30
MAX_MONTH_DAYS = 30
TABULAR_LEAP_YEARS = frozenset({2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29})

COMMON_MONTH_LENGTHS: Tuple[int, ...] = (30, 29, 30, 29, 30, 29, 30, 29, 30, 29, 30, 29)
LEAP_MONTH_LENGTHS: Tuple[int, ...] = (30, 29, 30, 29, 30, 29, 30, 29, 30, 29, 30, 30)

HIJRI_MONTH_NAMES: Tuple[HijriMonthInfo, ...] = (
    HijriMonthInfo(1, "Muharram", "محرم", "Muh"),
    HijriMonthInfo(2, "Safar", "صفر", "Saf"),
    HijriMonthInfo(3, "Rabi al-Awwal", "ربيع الأول", "Rb1"),
    HijriMonthInfo(4, "Rabi al-Thani", "ربيع الثاني", "Rb2"),
    HijriMonthInfo(5, "Jumada al-Ula", "جمادى الأولى", "Jm1"),
    HijriMonthInfo(6, "Jumada al-Thani", "جمادى الثانية", "Jm2"),
    HijriMonthInfo(7, "Rajab", "رجب", "Raj"),
    HijriMonthInfo(8, "Sha'ban", "شعبان", "Sha"),
    HijriMonthInfo(9, "Ramadan", "رمضان", "Ram"),
    HijriMonthInfo(10, "Shawwal", "شوال", "Shw"),
    HijriMonthInfo(11, "Dhul Qi'dah", "ذو القعدة", "DhQ"),
    HijriMonthInfo(12, "Dhul Hijjah", "ذو الحجة", "DhH"),
)


def month_info(month: int) -> HijriMonthInfo:
    _check_month(month)
    return HIJRI_MONTH_NAMES[month - 1]


def _check_month(month: int) -> None:
    if not (1 <= month <= 12):
        raise ValueError(f"Hijri month must be in 1..12, got {month}")


def is_tabular_leap_year(year: int) -> bool:
    return ((year - 1) % TABULAR_CYCLE_YEARS) + 1 in TABULAR_LEAP_YEARS


def tabular_month_days(year: int, month: int) -> int:
    _check_month(month)
    lengths = LEAP_MONTH_LENGTHS if is_tabular_leap_year(year) else COMMON_MONTH_LENGTHS
    return lengths[month - 1]


def tabular_year_days(year: int) -> int:
    return 355 if is_tabular_leap_year(year) else 354


def next_month(year: int, month: int) -> Tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def prev_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def gregorian_to_hijri_tabular(d: DateLike) -> HijriDate:
    """Gregorian date -> tabular Hijri date."""
    d = parse_date(d)
    days = to_jdn(d) - HIJRI_EPOCH_JDN

    cycles = days // TABULAR_CYCLE_DAYS
    remaining = days - cycles * TABULAR_CYCLE_DAYS

    year = cycles * TABULAR_CYCLE_YEARS + 1
    while remaining >= tabular_year_days(year):
        remaining -= tabular_year_days(year)
        year += 1

    month = 1
    while month < 12 and remaining >= tabular_month_days(year, month):
        remaining -= tabular_month_days(year, month)
        month += 1

    return HijriDate(year=year, month=month, day=remaining + 1, month_info=HIJRI_MONTH_NAMES[month - 1])


def hijri_to_gregorian_tabular(year: int, month: int, day: int) -> date:
    """Tabular Hijri date -> Gregorian date. ValueError on an invalid month or day."""
    _check_month(month)
    n = tabular_month_days(year, month)
    if not (1 <= day <= n):
        raise ValueError(f"Hijri day must be in 1..{n} for {year}-{month:02d}, got {day}")

    cycles = (year - 1) // TABULAR_CYCLE_YEARS
    days = cycles * TABULAR_CYCLE_DAYS
    for y in range(cycles * TABULAR_CYCLE_YEARS + 1, year):
        days += tabular_year_days(y)
    for m in range(1, month):
        days += tabular_month_days(year, m)
    days += day - 1
    return from_jdn(HIJRI_EPOCH_JDN + days)


def tabular_month_starts(year: int) -> List[HijriMonthStart]:
    """
    Sixteen consecutive tabular month starts for Gregorian year `year`,
    beginning two months before the Hijri month containing 1 January.
    """
    jan1 = gregorian_to_hijri_tabular(date(year, 1, 1))
    hy, hm = prev_month(*prev_month(jan1.year, jan1.month))

    starts: List[HijriMonthStart] = []
    for _ in range(16):
        starts.append(
            HijriMonthStart(
                hijri_year=hy,
                hijri_month=hm,
                gregorian_start=hijri_to_gregorian_tabular(hy, hm, 1),
                conjunction_jd_tt=0.0,
            )
        )
        hy, hm = next_month(hy, hm)
    return starts


def format_hijri_date(h: HijriDate) -> str:
    """'D Month YYYY AH'."""
    return f"{h.day} {h.month_info.name} {h.year} AH"
