from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import List, Optional, Sequence

from .attributes.registry import compute_attributes
from .core.engine import CriterionEvaluator, CriterionRegistry
from .core.time import DateLike, add_days, parse_date
from .core.types import (
    AsrMethod,
    CriterionMeta,
    CriterionResult,
    DayInfo,
    HijriDate,
    HijriMonthStart,
    PrayerTimes,
    QiblaInfo,
)
from .engines.assembler import MonthStartAssembler
from .engines.calendar import FestivalOccurrence, GregorianRange, HijriCalendar, HijriMonthView
from .engines.festivals import festivals_on
from .engines.prayer import compute_prayer_times
from .engines.qibla import compute_qibla
from .engines.specs import KAABA_LAT, KAABA_LON
from .reference.new_moons import ConjunctionTable

DEFAULT_CRITERION = "umm_al_qura"

_registry: Optional[CriterionRegistry] = None
_conjunctions: ConjunctionTable = ConjunctionTable()
_calendar: Optional[HijriCalendar] = None

def set_registry(reg: CriterionRegistry) -> None:
    global _registry, _calendar
    _registry = reg
    _calendar = None

def set_conjunction_table(table: ConjunctionTable) -> None:
    """Replace the conjunction data; drops every cached month start."""
    global _conjunctions, _calendar
    _conjunctions = table
    _calendar = None

def _reg() -> CriterionRegistry:
    if _registry is None:
        raise RuntimeError("Criterion registry not initialized")
    return _registry

def _cal() -> HijriCalendar:
    global _calendar
    if _calendar is None:
        _calendar = HijriCalendar(MonthStartAssembler(_conjunctions, _reg()))
    return _calendar

def conjunction_table() -> ConjunctionTable:
    return _conjunctions

# ============================================================
# Criteria
# ============================================================

def list_criteria() -> List[str]:
    return _reg().list()

def criterion_info(criterion: str) -> CriterionMeta:
    return _reg().meta(criterion)

def get_criterion(criterion: str) -> CriterionEvaluator:
    return _reg().get(criterion)

def register_criterion(
    name: str,
    evaluator: CriterionEvaluator,
    meta: CriterionMeta,
    *,
    overwrite: bool = False,
) -> None:
    _reg().register(name, evaluator, meta, overwrite=overwrite)
    if _calendar is not None:
        _calendar.assembler.clear_cache()

def evaluate_criterion(
    criterion: str,
    d: DateLike,
    conjunction_jd_tt: float,
    *,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> CriterionResult:
    fn = get_criterion(criterion)
    return fn(parse_date(d), lat, lon, conjunction_jd_tt)

# ============================================================
# Calendar
# ============================================================

def month_starts(
    year: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> List[HijriMonthStart]:
    return _cal().month_starts(year, criterion, lat, lon)

def hijri_date(
    d: DateLike,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> HijriDate:
    return _cal().hijri_date(d, criterion, lat, lon)

def hijri_month(
    hijri_year: int,
    hijri_month: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> HijriMonthView:
    return _cal().month_view(hijri_year, hijri_month, criterion, lat, lon)

def month_range(
    hijri_year: int,
    hijri_month: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> GregorianRange:
    return _cal().month_range(hijri_year, hijri_month, criterion, lat, lon)

def to_gregorian(
    hijri_year: int,
    hijri_month: int,
    hijri_day: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> date:
    rng = month_range(hijri_year, hijri_month, criterion=criterion, lat=lat, lon=lon)
    if not (1 <= hijri_day <= rng.days):
        raise ValueError(f"Hijri day must be in 1..{rng.days} for {hijri_year}-{hijri_month:02d}, got {hijri_day}")
    return add_days(rng.start, hijri_day - 1)

def day_info(
    d: DateLike,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
    attributes: Sequence[str] = (),
) -> DayInfo:
    d = parse_date(d)
    h = hijri_date(d, criterion=criterion, lat=lat, lon=lon)
    info = DayInfo(
        civil_date=d,
        hijri=h,
        criterion=criterion,
        festivals=tuple(m.rule.id for m in festivals_on(h.month, h.day, h.year)),
    )
    if attributes:
        attrs = compute_attributes(info, attributes)
        info = replace(info, attributes=attrs)
    return info

# ============================================================
# Festivals
# ============================================================

def upcoming_festivals(
    start: Optional[DateLike] = None,
    count: int = 10,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> List[FestivalOccurrence]:
    start = parse_date(start) if start is not None else date.today()
    return _cal().upcoming_festivals(start, count, criterion, lat, lon)

def year_festivals(
    year: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> List[FestivalOccurrence]:
    return _cal().year_festivals(year, criterion, lat, lon)

def month_festivals(
    hijri_year: int,
    hijri_month: int,
    *,
    criterion: str = DEFAULT_CRITERION,
    lat: float = KAABA_LAT,
    lon: float = KAABA_LON,
) -> List[FestivalOccurrence]:
    return _cal().month_festivals(hijri_year, hijri_month, criterion, lat, lon)

# ============================================================
# Prayer & Qibla
# ============================================================

def prayer_times(
    d: DateLike,
    lat: float,
    lon: float,
    tz: str,
    *,
    convention: str = "mwl",
    asr_method: AsrMethod = "shafii",
) -> PrayerTimes:
    return compute_prayer_times(d, lat, lon, tz, convention, asr_method)

def qibla(lat: float, lon: float) -> QiblaInfo:
    return compute_qibla(lat, lon)
