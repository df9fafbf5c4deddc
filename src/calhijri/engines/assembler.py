"""
calhijri.engines.assembler
--------------------------
Builds the ordered, gap-free list of Hijri month starts covering a Gregorian
year by running a crescent criterion on the evenings after each conjunction,
then numbering the result against the tabular calendar.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from ..bootstrap import build_registry
from ..core.engine import CriterionRegistry
from ..core.time import add_days, days_between
from ..core.types import HijriMonthStart, validate_location
from ..reference.new_moons import ConjunctionTable
from .criteria import find_first_sighting
from .tabular import MAX_MONTH_DAYS, next_month, tabular_month_starts

logger = logging.getLogger(__name__)

MIN_CONJUNCTION_SEPARATION_DAYS = 15.0
EVENINGS_PER_CONJUNCTION = 4
MIN_MONTH_DAYS = 29

CacheKey = Tuple


class MonthStartAssembler:
    """
    Month starts per (year, criterion, location), memoized.

    The cache is a plain dict; concurrent misses recompute the same value.
    """

    def __init__(
        self,
        conjunctions: Optional[ConjunctionTable] = None,
        registry: Optional[CriterionRegistry] = None,
    ) -> None:
        self.conjunctions = conjunctions if conjunctions is not None else ConjunctionTable()
        self.registry = registry if registry is not None else build_registry()
        self._cache: Dict[CacheKey, Tuple[HijriMonthStart, ...]] = {}

    # ---------------------------------------------------------------
    # cache
    # ---------------------------------------------------------------

    def _is_location_free(self, criterion: str) -> bool:
        meta = self.registry.meta(criterion)
        return meta.fixed_location is not None or meta.type == "arithmetic"

    def _is_arithmetic(self, criterion: str) -> bool:
        return self.registry.meta(criterion).type == "arithmetic"

    def cache_key(self, year: int, criterion: str, lat: float, lon: float) -> CacheKey:
        if self._is_location_free(criterion):
            return (year, criterion)
        return (year, criterion, round(lat, 1), round(lon, 1))

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_size(self) -> int:
        return len(self._cache)

    # ---------------------------------------------------------------
    # assembly
    # ---------------------------------------------------------------

    def conjunctions_around(self, year: int) -> List[float]:
        """Conjunctions of year-1..year+1, ascending, dropping near-duplicates."""
        raw = sorted(
            self.conjunctions.for_year(year - 1)
            + self.conjunctions.for_year(year)
            + self.conjunctions.for_year(year + 1)
        )
        kept: List[float] = []
        for jd in raw:
            if not kept or jd - kept[-1] > MIN_CONJUNCTION_SEPARATION_DAYS:
                kept.append(jd)
        return kept

    def month_starts(self, year: int, criterion: str, lat: float, lon: float) -> List[HijriMonthStart]:
        """
        Month starts around Gregorian `year` under `criterion` for an observer
        at (lat, lon). Unknown criteria raise UnknownCriterionError.
        """
        self.registry.get(criterion)
        validate_location(lat, lon)

        key = self.cache_key(year, criterion, lat, lon)
        hit = self._cache.get(key)
        if hit is not None:
            return list(hit)

        logger.debug("month_starts cache miss: %s", key)
        starts = tuple(self._build(year, criterion, lat, lon))
        self._cache[key] = starts
        return list(starts)

    def _build(self, year: int, criterion: str, lat: float, lon: float) -> List[HijriMonthStart]:
        if self._is_arithmetic(criterion):
            return tabular_month_starts(year)

        conjs = self.conjunctions_around(year)
        if not conjs:
            logger.info("No conjunction data around %d; using tabular month starts", year)
            return tabular_month_starts(year)

        evaluator = self.registry.get(criterion)
        found: List[Tuple[date, float]] = []
        for conj in conjs:
            sighted = find_first_sighting(criterion, conj, lat, lon, EVENINGS_PER_CONJUNCTION, evaluator)
            start = add_days(sighted[0], 1) if sighted is not None else None

            if not found:
                if start is None:
                    logger.debug("%s: no sighting within %d evenings of JD(TT) %.4f", criterion, EVENINGS_PER_CONJUNCTION, conj)
                else:
                    found.append((start, conj))
                continue

            prev = found[-1][0]
            if start is None:
                # unsighted: the running month completes 30 days
                logger.debug("%s: no sighting after JD(TT) %.4f; completing month at %d days", criterion, conj, MAX_MONTH_DAYS)
                start = add_days(prev, MAX_MONTH_DAYS)
            elif start <= prev:
                continue
            else:
                start = _clamp_month_length(prev, start)
            found.append((start, conj))

        if not found:
            logger.info("%s produced no month starts around %d; using tabular month starts", criterion, year)
            return tabular_month_starts(year)

        hy, hm = self._anchor(year, found[0][0])
        out: List[HijriMonthStart] = []
        for start, conj in found:
            out.append(HijriMonthStart(hijri_year=hy, hijri_month=hm, gregorian_start=start, conjunction_jd_tt=conj))
            hy, hm = next_month(hy, hm)
        return out

    @staticmethod
    def _anchor(year: int, first_start: date) -> Tuple[int, int]:
        """Hijri (year, month) of the tabular start nearest to first_start."""
        candidates = tabular_month_starts(year - 1) + tabular_month_starts(year) + tabular_month_starts(year + 1)
        best = candidates[0]
        best_diff = abs(days_between(first_start, best.gregorian_start))
        for tab in candidates[1:]:
            diff = abs(days_between(first_start, tab.gregorian_start))
            if diff < best_diff:
                best, best_diff = tab, diff
        return best.hijri_year, best.hijri_month


def _clamp_month_length(prev: date, start: date) -> date:
    """Keep start within MIN_MONTH_DAYS..MAX_MONTH_DAYS of the previous start."""
    length = days_between(start, prev)
    if length < MIN_MONTH_DAYS:
        return add_days(prev, MIN_MONTH_DAYS)
    if length > MAX_MONTH_DAYS:
        return add_days(prev, MAX_MONTH_DAYS)
    return start
