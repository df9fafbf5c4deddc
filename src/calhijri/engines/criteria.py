"""
calhijri.engines.criteria
-------------------------
The eight new-month decision rules.

Each evaluator has the signature (d, lat, lon, conjunction_jd_tt) and judges
the evening of civil date d: new_month_starts=True means the month begins on
the following day. Fixed-location rules ignore lat/lon.
"""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from ..core.engine import CriterionEvaluator
from ..core.errors import UnknownCriterionError
from ..core.time import DateLike, add_days, parse_date
from ..core.types import Confidence, CriterionResult, FixedLocation
from ..reference import time_scales as ts
from .crescent import compute_crescent, yallop_zone
from .specs import CRITERION_IDS, LOC_ANKARA, LOC_MECCA

NO_SUNSET_REASON = "No sunset at observer location."

YALLOP_DESCRIPTIONS = MappingProxyType({
    "A": "Easily visible to the naked eye",
    "B": "Visible under perfect conditions",
    "C": "May need optical aid to find crescent",
    "D": "Visible only with optical aid",
    "E": "Not visible even with telescope",
    "F": "Not visible (below Danjon limit)",
})

# zone -> (new_month_starts, confidence)
YALLOP_DECISIONS = MappingProxyType({
    "A": (True, "certain"),
    "B": (True, "probable"),
    "C": (False, "possible"),
    "D": (False, "unlikely"),
    "E": (False, "unlikely"),
    "F": (False, "unlikely"),
})

ODEH_DESCRIPTIONS = MappingProxyType({
    "A": "Crescent visible by naked eye",
    "B": "Crescent visible under perfect conditions",
    "C": "Crescent needs optical aid",
    "D": "Not visible",
})


def _no_sunset(criterion: str, reason: str = NO_SUNSET_REASON) -> CriterionResult:
    return CriterionResult(criterion=criterion, new_month_starts=False, reason=reason, confidence="certain")


# ------------------------------------------------------------
# Fixed-location rules
# ------------------------------------------------------------

def _fixed_location_rule(criterion: str, loc: FixedLocation, d: date, conjunction_jd_tt: float) -> CriterionResult:
    """Conjunction before sunset and moonset after sunset at loc."""
    c = compute_crescent(d, loc.lat, loc.lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset(criterion, f"No sunset at {loc.name}.")

    p, v = c.params, c.visibility
    conj_before_sunset = ts.tt_to_ut(conjunction_jd_tt) < p.sunset_jd
    moonset_after_sunset = p.moonset_jd is not None and p.moonset_jd > p.sunset_jd
    starts = conj_before_sunset and moonset_after_sunset

    if starts:
        reason = f"Conjunction before sunset and moonset after sunset at {loc.name}. Lag: {v.lag_minutes:.1f} min."
    elif not conj_before_sunset:
        reason = f"Conjunction occurs after sunset at {loc.name}."
    else:
        reason = f"Moon sets before sunset at {loc.name}."

    return CriterionResult(
        criterion=criterion,
        new_month_starts=starts,
        reason=reason,
        confidence="certain",
        visibility=v,
        params=p,
    )


def evaluate_umm_al_qura(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    return _fixed_location_rule("umm_al_qura", LOC_MECCA, d, conjunction_jd_tt)


def evaluate_turkey(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    return _fixed_location_rule("turkey", LOC_ANKARA, d, conjunction_jd_tt)


# ------------------------------------------------------------
# Threshold rules at the observer
# ------------------------------------------------------------

def evaluate_isna(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    c = compute_crescent(d, lat, lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset("isna")
    p, v = c.params, c.visibility

    elong_ok = v.ARCL >= 8.0
    alt_ok = p.moon_alt >= 5.0
    starts = elong_ok and alt_ok

    if starts:
        reason = f"Elongation {v.ARCL:.1f} deg >= 8 deg, moon alt {p.moon_alt:.1f} deg >= 5 deg."
    else:
        parts = []
        if not elong_ok:
            parts.append(f"elongation {v.ARCL:.1f} deg < 8 deg")
        if not alt_ok:
            parts.append(f"moon alt {p.moon_alt:.1f} deg < 5 deg")
        reason = f"Crescent not visible: {', '.join(parts)}."

    return CriterionResult("isna", starts, reason, "certain", visibility=v, params=p)


def evaluate_mabims(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    c = compute_crescent(d, lat, lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset("mabims")
    p, v = c.params, c.visibility

    alt_ok = p.moon_alt > 3.0
    elong_ok = v.ARCL > 6.4
    age_ok = v.moon_age_hours > 8.0
    starts = alt_ok and elong_ok and age_ok

    if starts:
        reason = (
            f"Alt {p.moon_alt:.1f} > 3 deg, elong {v.ARCL:.1f} > 6.4 deg, "
            f"age {v.moon_age_hours:.1f}h > 8h."
        )
    else:
        parts = []
        if not alt_ok:
            parts.append(f"alt {p.moon_alt:.1f} <= 3 deg")
        if not elong_ok:
            parts.append(f"elong {v.ARCL:.1f} <= 6.4 deg")
        if not age_ok:
            parts.append(f"age {v.moon_age_hours:.1f}h <= 8h")
        reason = f"MABIMS criteria not met: {', '.join(parts)}."

    return CriterionResult("mabims", starts, reason, "certain", visibility=v, params=p)


def evaluate_pakistan(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    c = compute_crescent(d, lat, lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset("pakistan")
    p, v = c.params, c.visibility

    c1 = p.moon_alt >= 6.5 and v.W >= 0.17 and v.illumination_pct >= 0.8
    c2 = v.ARCL >= 9.0 and v.lag_minutes >= 38.0

    if c1 and c2:
        reason = "Both Pakistan criteria met."
    elif c1:
        reason = f"Alt {p.moon_alt:.1f} >= 6.5, W {v.W:.2f}' >= 0.17, illum {v.illumination_pct:.1f}% >= 0.8%."
    elif c2:
        reason = f"Elong {v.ARCL:.1f} >= 9 deg, lag {v.lag_minutes:.1f} >= 38 min."
    else:
        reason = (
            f"Pakistan criteria not met: alt={p.moon_alt:.1f}, W={v.W:.2f}', "
            f"illum={v.illumination_pct:.1f}%, elong={v.ARCL:.1f}, lag={v.lag_minutes:.1f} min."
        )

    return CriterionResult("pakistan", c1 or c2, reason, "certain", visibility=v, params=p)


# ------------------------------------------------------------
# Probabilistic rules
# ------------------------------------------------------------

def evaluate_yallop(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    c = compute_crescent(d, lat, lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset("yallop")
    v = c.visibility

    zone = yallop_zone(v.q_yallop)
    starts, confidence = YALLOP_DECISIONS[zone]
    return CriterionResult(
        criterion="yallop",
        new_month_starts=starts,
        reason=f"Yallop zone {zone} (q={v.q_yallop:.3f}): {YALLOP_DESCRIPTIONS[zone]}.",
        confidence=confidence,
        zone=zone,
        visibility=v,
        params=c.params,
    )


def odeh_arcv_limit(w: float) -> float:
    """ARCV boundary for crescent width w (arcmin); infinite below 0.05'."""
    if w < 0.05:
        return float("inf")
    return 5.493 + 12.7107 * w - 2.6242 * w * w


def odeh_zone(arcv: float, w: float) -> Tuple[str, bool, Confidence]:
    diff = arcv - odeh_arcv_limit(w)
    if diff >= 2.0:
        return "A", True, "certain"
    if diff >= 0.0:
        return "B", True, "probable"
    if diff >= -2.0:
        return "C", False, "possible"
    return "D", False, "unlikely"


def evaluate_odeh(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    c = compute_crescent(d, lat, lon, conjunction_jd_tt)
    if c is None:
        return _no_sunset("odeh")
    v = c.visibility

    limit = odeh_arcv_limit(v.W)
    zone, starts, confidence = odeh_zone(v.ARCV, v.W)
    limit_s = "inf" if limit == float("inf") else f"{limit:.1f}"
    return CriterionResult(
        criterion="odeh",
        new_month_starts=starts,
        reason=f"Odeh zone {zone}: ARCV={v.ARCV:.1f}, limit={limit_s}, W={v.W:.2f}'. {ODEH_DESCRIPTIONS[zone]}.",
        confidence=confidence,
        zone=zone,
        visibility=v,
        params=c.params,
    )


# ------------------------------------------------------------
# Arithmetic
# ------------------------------------------------------------

def evaluate_tabular(d: date, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    # month starts come from the arithmetic calendar, never from an evening
    return CriterionResult(
        criterion="tabular",
        new_month_starts=False,
        reason="Tabular criterion uses arithmetic conversion (30-year cycle).",
        confidence="certain",
    )


EVALUATORS: Mapping[str, CriterionEvaluator] = MappingProxyType({
    "umm_al_qura": evaluate_umm_al_qura,
    "isna": evaluate_isna,
    "mabims": evaluate_mabims,
    "yallop": evaluate_yallop,
    "odeh": evaluate_odeh,
    "pakistan": evaluate_pakistan,
    "turkey": evaluate_turkey,
    "tabular": evaluate_tabular,
})


def get_evaluator(criterion_id: str) -> CriterionEvaluator:
    if criterion_id not in EVALUATORS:
        raise UnknownCriterionError(f"Unknown criterion '{criterion_id}'. Available: {sorted(EVALUATORS)}")
    return EVALUATORS[criterion_id]


def evaluate(criterion_id: str, d: DateLike, lat: float, lon: float, conjunction_jd_tt: float) -> CriterionResult:
    fn = get_evaluator(criterion_id)
    return fn(parse_date(d), lat, lon, conjunction_jd_tt)


def evaluate_all(d: DateLike, lat: float, lon: float, conjunction_jd_tt: float) -> List[CriterionResult]:
    d = parse_date(d)
    return [EVALUATORS[cid](d, lat, lon, conjunction_jd_tt) for cid in CRITERION_IDS]


def conjunction_ut_date(conjunction_jd_tt: float) -> date:
    """UT civil date of a conjunction given in JD(TT)."""
    return ts.jd_to_date(ts.tt_to_ut(conjunction_jd_tt))


def find_first_sighting(
    criterion_id: str,
    conjunction_jd_tt: float,
    lat: float,
    lon: float,
    max_days: int = 4,
    evaluator: Optional[CriterionEvaluator] = None,
) -> Optional[Tuple[date, CriterionResult]]:
    """
    First evening (starting with the UT date of conjunction) on which the
    criterion starts a new month, searching max_days evenings.
    """
    fn = evaluator if evaluator is not None else get_evaluator(criterion_id)
    start = conjunction_ut_date(conjunction_jd_tt)
    for k in range(max_days):
        d = add_days(start, k)
        result = fn(d, lat, lon, conjunction_jd_tt)
        if result.new_month_starts:
            return d, result
    return None
