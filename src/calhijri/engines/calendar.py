"""
calhijri.engines.calendar
-------------------------
Date conversion and festival queries on top of the month-start assembler.

The pure functions (gregorian_to_hijri, hijri_month_to_gregorian_range) work
on any list of month starts; HijriCalendar binds them to an assembler so
callers only pass a criterion and an observer location.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..core.time import DateLike, add_days, days_between, parse_date
from ..core.types import HijriDate, HijriMonthInfo, HijriMonthStart, HijriSource
from . import tabular
from .assembler import MonthStartAssembler
from .festivals import FESTIVAL_RULES, FestivalRule, festivals_for_hijri_month, festivals_on
from .specs import KAABA_LAT, KAABA_LON, WEEKDAY_NAMES_EN, weekday_index

UPCOMING_SEARCH_DAYS = 400
DEFAULT_CRITERION = "umm_al_qura"


@dataclass(frozen=True)
class GregorianRange:
    start: date
    end: date       # inclusive
    days: int
    source: HijriSource = "astronomical"


@dataclass(frozen=True)
class FestivalOccurrence:
    rule: FestivalRule
    gregorian_date: date
    hijri_year: int
    day_of_event: int = 1
    days_until: Optional[int] = None


@dataclass(frozen=True)
class HijriMonthDay:
    hijri_day: int
    gregorian_date: date
    weekday: str
    festivals: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HijriMonthView:
    hijri_year: int
    hijri_month: int
    month_info: HijriMonthInfo
    criterion: str
    source: HijriSource
    days: Tuple[HijriMonthDay, ...]


# ============================================================
# Pure conversions over a list of month starts
# ============================================================

def gregorian_to_hijri(d: DateLike, month_starts: Sequence[HijriMonthStart]) -> HijriDate:
    """
    Hijri date of d from the latest month start on or before d. Starts without
    a conjunction (the tabular fallback) are reported with source "tabular".

    Falls back to the tabular calendar when no start precedes d, or when d lies
    more than 30 days past the last known start.
    """
    d = parse_date(d)
    latest: Optional[HijriMonthStart] = None
    for ms in month_starts:
        if ms.gregorian_start <= d and (latest is None or ms.gregorian_start > latest.gregorian_start):
            latest = ms

    if latest is not None:
        day = days_between(d, latest.gregorian_start) + 1
        if day <= tabular.MAX_MONTH_DAYS:
            return HijriDate(
                year=latest.hijri_year,
                month=latest.hijri_month,
                day=day,
                month_info=tabular.month_info(latest.hijri_month),
                source="tabular" if latest.conjunction_jd_tt == 0.0 else "astronomical",
            )

    return tabular.gregorian_to_hijri_tabular(d)


def _find_start(month_starts: Sequence[HijriMonthStart], year: int, month: int) -> Optional[HijriMonthStart]:
    for ms in month_starts:
        if ms.hijri_year == year and ms.hijri_month == month:
            return ms
    return None


def hijri_month_to_gregorian_range(
    hijri_year: int,
    hijri_month: int,
    month_starts: Sequence[HijriMonthStart],
) -> Optional[GregorianRange]:
    """
    Gregorian span of a Hijri month. The length comes from the next month's
    start when known, otherwise from the tabular month length. None if the
    month itself is not among month_starts.
    """
    this = _find_start(month_starts, hijri_year, hijri_month)
    if this is None:
        return None

    ny, nm = tabular.next_month(hijri_year, hijri_month)
    nxt = _find_start(month_starts, ny, nm)
    if nxt is not None:
        n = days_between(nxt.gregorian_start, this.gregorian_start)
    else:
        n = tabular.tabular_month_days(hijri_year, hijri_month)

    return GregorianRange(start=this.gregorian_start, end=add_days(this.gregorian_start, n - 1), days=n)


def tabular_month_range(hijri_year: int, hijri_month: int) -> GregorianRange:
    start = tabular.hijri_to_gregorian_tabular(hijri_year, hijri_month, 1)
    n = tabular.tabular_month_days(hijri_year, hijri_month)
    return GregorianRange(start=start, end=add_days(start, n - 1), days=n, source="tabular")


# ============================================================
# Assembler-backed calendar
# ============================================================

class HijriCalendar:
    """
    Hijri dates, month spans and festival dates for one assembler.
    All queries take (criterion, lat, lon); lat/lon are ignored by
    fixed-location criteria.
    """

    def __init__(self, assembler: Optional[MonthStartAssembler] = None):
        self.assembler = assembler if assembler is not None else MonthStartAssembler()

    def month_starts(self, year: int, criterion: str = DEFAULT_CRITERION,
                     lat: float = KAABA_LAT, lon: float = KAABA_LON) -> List[HijriMonthStart]:
        return self.assembler.month_starts(year, criterion, lat, lon)

    # ---------------------------------------------------------
    # Dates
    # ---------------------------------------------------------

    def hijri_date(self, d: DateLike, criterion: str = DEFAULT_CRITERION,
                   lat: float = KAABA_LAT, lon: float = KAABA_LON) -> HijriDate:
        d = parse_date(d)
        return gregorian_to_hijri(d, self.month_starts(d.year, criterion, lat, lon))

    def month_range(self, hijri_year: int, hijri_month: int, criterion: str = DEFAULT_CRITERION,
                    lat: float = KAABA_LAT, lon: float = KAABA_LON) -> GregorianRange:
        """
        Gregorian span of a Hijri month. Starts are assembled for the Gregorian
        year of the tabular 1st of the month; when that month is missing the
        tabular span is returned.
        """
        year = tabular.hijri_to_gregorian_tabular(hijri_year, hijri_month, 1).year
        starts = self.month_starts(year, criterion, lat, lon)
        rng = hijri_month_to_gregorian_range(hijri_year, hijri_month, starts)
        if rng is None:
            return tabular_month_range(hijri_year, hijri_month)
        if all(ms.conjunction_jd_tt == 0.0 for ms in starts):
            rng = replace(rng, source="tabular")
        return rng

    def month_view(self, hijri_year: int, hijri_month: int, criterion: str = DEFAULT_CRITERION,
                   lat: float = KAABA_LAT, lon: float = KAABA_LON) -> HijriMonthView:
        rng = self.month_range(hijri_year, hijri_month, criterion, lat, lon)
        days = []
        for k in range(rng.days):
            g = add_days(rng.start, k)
            hday = k + 1
            days.append(
                HijriMonthDay(
                    hijri_day=hday,
                    gregorian_date=g,
                    weekday=WEEKDAY_NAMES_EN[weekday_index(g)],
                    festivals=tuple(m.rule.id for m in festivals_on(hijri_month, hday, hijri_year)),
                )
            )
        return HijriMonthView(
            hijri_year=hijri_year,
            hijri_month=hijri_month,
            month_info=tabular.month_info(hijri_month),
            criterion=criterion,
            source=rng.source,
            days=tuple(days),
        )

    # ---------------------------------------------------------
    # Festivals
    # ---------------------------------------------------------

    def upcoming_festivals(self, start: DateLike, count: int = 10, criterion: str = DEFAULT_CRITERION,
                           lat: float = KAABA_LAT, lon: float = KAABA_LON) -> List[FestivalOccurrence]:
        """
        The next `count` festival first-days on or after `start`, scanning at
        most 400 days. Later days of multi-day events are skipped.
        """
        start = parse_date(start)
        out: List[FestivalOccurrence] = []
        for offset in range(UPCOMING_SEARCH_DAYS):
            if len(out) >= count:
                break
            g = add_days(start, offset)
            h = self.hijri_date(g, criterion, lat, lon)
            for m in festivals_on(h.month, h.day, h.year):
                if m.day_of_event > 1:
                    continue
                out.append(FestivalOccurrence(m.rule, g, h.year, m.day_of_event, days_until=offset))
                if len(out) >= count:
                    break
        return out

    def year_festivals(self, year: int, criterion: str = DEFAULT_CRITERION,
                       lat: float = KAABA_LAT, lon: float = KAABA_LON) -> List[FestivalOccurrence]:
        """First days of every festival falling in Gregorian `year`, by date."""
        starts = self.month_starts(year, criterion, lat, lon)
        out: List[FestivalOccurrence] = []
        for rule in FESTIVAL_RULES:
            for ms in starts:
                if ms.hijri_month != rule.hijri_month:
                    continue
                g = add_days(ms.gregorian_start, rule.hijri_day - 1)
                if g.year == year:
                    out.append(FestivalOccurrence(rule, g, ms.hijri_year))
        out.sort(key=lambda o: o.gregorian_date)
        return out

    def month_festivals(self, hijri_year: int, hijri_month: int, criterion: str = DEFAULT_CRITERION,
                        lat: float = KAABA_LAT, lon: float = KAABA_LON) -> List[FestivalOccurrence]:
        rng = self.month_range(hijri_year, hijri_month, criterion, lat, lon)
        return [
            FestivalOccurrence(rule, add_days(rng.start, rule.hijri_day - 1), hijri_year)
            for rule in festivals_for_hijri_month(hijri_month)
        ]
