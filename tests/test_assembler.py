# tests/test_assembler.py

import logging
from dataclasses import replace
from datetime import date

import pytest

from calhijri.core.errors import UnknownCriterionError
from calhijri.core.types import CriterionResult
from calhijri.engines.assembler import MonthStartAssembler
from calhijri.engines.tabular import next_month, tabular_month_starts
from calhijri.reference.new_moons import ConjunctionTable

from conftest import ALWAYS_META, new_moon_tt

MECCA = (21.4225, 39.8262)


def _by_month(starts):
    return {(s.hijri_year, s.hijri_month): s.gregorian_start for s in starts}


def test_conjunction_window(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    assert len(asm.conjunctions_around(2025)) == 37
    assert len(asm.conjunctions_around(2024)) == 25


def test_near_duplicate_conjunctions_dropped(registry):
    table = ConjunctionTable.from_mapping({2025: [2460705.0, 2460705.5, 2460734.5]})
    assert MonthStartAssembler(table, registry).conjunctions_around(2025) == [2460705.0, 2460734.5]


def test_first_evening_starts(conjunctions, registry):
    starts = MonthStartAssembler(conjunctions, registry).month_starts(2025, "always", *MECCA)
    assert len(starts) == 37
    first = starts[0]
    assert (first.hijri_year, first.hijri_month, first.gregorian_start) == (1445, 7, date(2024, 1, 12))

    months = _by_month(starts)
    assert months[(1446, 7)] == date(2024, 12, 31)
    assert months[(1446, 9)] == date(2025, 3, 1)
    assert months[(1446, 10)] == date(2025, 3, 30)

    for a, b in zip(starts, starts[1:]):
        assert (b.hijri_year, b.hijri_month) == next_month(a.hijri_year, a.hijri_month)
        assert b.gregorian_start > a.gregorian_start
        assert b.conjunction_jd_tt > a.conjunction_jd_tt


def test_cache_key_rounds_location(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    a = asm.month_starts(2025, "always", 10.0, 20.0)
    b = asm.month_starts(2025, "always", 10.04, 20.0)
    assert a == b
    assert asm.cache_size() == 1
    asm.month_starts(2025, "always", 10.2, 20.0)
    assert asm.cache_size() == 2
    asm.clear_cache()
    assert asm.cache_size() == 0


def test_fixed_location_and_tabular_share_cache_entry(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    assert asm.cache_key(2025, "umm_al_qura", 1.0, 2.0) == (2025, "umm_al_qura")
    assert asm.cache_key(2025, "tabular", 1.0, 2.0) == (2025, "tabular")
    assert asm.cache_key(2025, "isna", 40.04, -74.0) == (2025, "isna", 40.0, -74.0)


def test_returned_list_is_a_copy(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    starts = asm.month_starts(2025, "always", *MECCA)
    starts.clear()
    assert len(asm.month_starts(2025, "always", *MECCA)) == 37


def test_tabular_criterion(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    assert asm.month_starts(2025, "tabular", *MECCA) == tabular_month_starts(2025)


def test_no_sightings_fall_back_to_tabular(conjunctions, registry, caplog):
    asm = MonthStartAssembler(conjunctions, registry)
    with caplog.at_level(logging.INFO, logger="calhijri.engines.assembler"):
        starts = asm.month_starts(2025, "never", *MECCA)
    assert starts == tabular_month_starts(2025)
    assert "using tabular month starts" in caplog.text


def test_empty_table_falls_back_to_tabular(registry, caplog):
    asm = MonthStartAssembler(ConjunctionTable(), registry)
    with caplog.at_level(logging.INFO, logger="calhijri.engines.assembler"):
        starts = asm.month_starts(2025, "always", *MECCA)
    assert starts == tabular_month_starts(2025)
    assert "No conjunction data around 2025" in caplog.text


def test_unknown_criterion(conjunctions, registry):
    with pytest.raises(UnknownCriterionError):
        MonthStartAssembler(conjunctions, registry).month_starts(2025, "saudi", *MECCA)


def test_invalid_location(conjunctions, registry):
    with pytest.raises(ValueError):
        MonthStartAssembler(conjunctions, registry).month_starts(2025, "always", 95.0, 0.0)


def test_umm_al_qura_structure(conjunctions, registry):
    starts = MonthStartAssembler(conjunctions, registry).month_starts(2025, "umm_al_qura", *MECCA)
    assert len(starts) >= 36
    for a, b in zip(starts, starts[1:]):
        assert (b.hijri_year, b.hijri_month) == next_month(a.hijri_year, a.hijri_month)
        assert 28 <= (b.gregorian_start - a.gregorian_start).days <= 31
    assert _by_month(starts)[(1446, 9)] == date(2025, 3, 1)


def _refusing(*refused):
    """'always' except on the listed conjunctions."""
    def evaluate(d, lat, lon, conj):
        if any(abs(conj - r) < 1e-6 for r in refused):
            return CriterionResult("refusing", False, "refused", "certain")
        return CriterionResult("refusing", True, "first evening", "certain")
    return evaluate


def _with_refusing(registry, *refused):
    meta = replace(ALWAYS_META, id="refusing", name="Refusing")
    registry.register("refusing", _refusing(*refused), meta)
    return registry


def _assert_month_sequence(starts):
    for a, b in zip(starts, starts[1:]):
        assert (b.hijri_year, b.hijri_month) == next_month(a.hijri_year, a.hijri_month)
        assert (b.gregorian_start - a.gregorian_start).days in (29, 30)


def _hijri_month_of(starts, d):
    for a, b in zip(starts, starts[1:]):
        if a.gregorian_start <= d < b.gregorian_start:
            return a.hijri_year, a.hijri_month
    raise AssertionError(f"{d} not covered")


def test_unsighted_lunation_completes_thirty_days(conjunctions, registry):
    # no evening qualifies after the conjunction closing Ramadan 1446
    reg = _with_refusing(registry, new_moon_tt(2025, 3, 29, 10, 58))
    starts = MonthStartAssembler(conjunctions, reg).month_starts(2025, "refusing", *MECCA)

    assert len(starts) == 37
    _assert_month_sequence(starts)
    months = _by_month(starts)
    assert months[(1446, 9)] == date(2025, 3, 1)
    assert months[(1446, 10)] == date(2025, 3, 31)
    # the next sighting would leave Shawwal 28 days long
    assert months[(1446, 11)] == date(2025, 4, 29)
    assert months[(1446, 12)] == date(2025, 5, 28)
    assert _hijri_month_of(starts, date(2025, 3, 30)) == (1446, 9)


def test_unsighted_lunation_keeps_later_numbering(conjunctions, registry):
    asm = MonthStartAssembler(conjunctions, registry)
    always = _by_month(asm.month_starts(2025, "always", *MECCA))

    # Ramadan would have run 30 days anyway, so nothing moves
    reg = _with_refusing(registry, new_moon_tt(2025, 2, 28, 0, 45))
    starts = MonthStartAssembler(conjunctions, reg).month_starts(2025, "refusing", *MECCA)
    assert _by_month(starts) == always


def test_leading_unsighted_lunation_is_skipped(conjunctions, registry):
    reg = _with_refusing(registry, new_moon_tt(2024, 1, 11, 11, 57))
    starts = MonthStartAssembler(conjunctions, reg).month_starts(2025, "refusing", *MECCA)
    assert len(starts) == 36
    assert (starts[0].hijri_year, starts[0].hijri_month) == (1445, 8)
    assert _by_month(starts)[(1446, 9)] == date(2025, 3, 1)


@pytest.mark.parametrize("criterion, lat, lon", [
    ("odeh", 30.0, 31.0),
    ("isna", 51.5, -0.1),
    ("umm_al_qura", *MECCA),
    ("yallop", 30.0, 31.0),
])
def test_real_criteria_keep_mid_march_in_ramadan(conjunctions, criterion, lat, lon):
    starts = MonthStartAssembler(conjunctions).month_starts(2025, criterion, lat, lon)
    _assert_month_sequence(starts)
    assert _hijri_month_of(starts, date(2025, 3, 15)) == (1446, 9)
