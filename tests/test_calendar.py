# tests/test_calendar.py

from datetime import date

import pytest

from calhijri.core.types import HijriMonthStart
from calhijri.engines.assembler import MonthStartAssembler
from calhijri.engines.calendar import (
    HijriCalendar,
    gregorian_to_hijri,
    hijri_month_to_gregorian_range,
    tabular_month_range,
)
from calhijri.engines.tabular import gregorian_to_hijri_tabular, month_info
from calhijri.reference.new_moons import ConjunctionTable

MECCA = (21.4225, 39.8262)


@pytest.fixture
def cal(conjunctions, registry):
    return HijriCalendar(MonthStartAssembler(conjunctions, registry))


def _ms(hy, hm, g, conj=2460000.0):
    return HijriMonthStart(hijri_year=hy, hijri_month=hm, gregorian_start=g, conjunction_jd_tt=conj)


def test_gregorian_to_hijri_from_starts():
    starts = [_ms(1446, 9, date(2025, 3, 1)), _ms(1446, 10, date(2025, 3, 30))]
    h = gregorian_to_hijri(date(2025, 3, 29), starts)
    assert (h.year, h.month, h.day, h.source) == (1446, 9, 29, "astronomical")
    assert gregorian_to_hijri(date(2025, 3, 30), starts).month == 10


def test_gregorian_to_hijri_falls_back_to_tabular():
    starts = [_ms(1446, 9, date(2025, 3, 1))]
    # before the first start, and more than 30 days past the last one
    for d in (date(2025, 2, 10), date(2025, 4, 15)):
        h = gregorian_to_hijri(d, starts)
        assert h == gregorian_to_hijri_tabular(d)
        assert h.source == "tabular"


def test_month_range_from_starts():
    starts = [_ms(1446, 9, date(2025, 3, 1)), _ms(1446, 10, date(2025, 3, 30))]
    rng = hijri_month_to_gregorian_range(1446, 9, starts)
    assert (rng.start, rng.end, rng.days) == (date(2025, 3, 1), date(2025, 3, 29), 29)
    # last known month takes the tabular length
    assert hijri_month_to_gregorian_range(1446, 10, starts).days == 29
    assert hijri_month_to_gregorian_range(1446, 11, starts) is None


def test_tabular_month_range():
    rng = tabular_month_range(1446, 9)
    assert (rng.start, rng.days, rng.source) == (date(2025, 3, 1), 30, "tabular")


def test_hijri_date(cal):
    h = cal.hijri_date(date(2025, 3, 1), "always", *MECCA)
    assert (h.year, h.month, h.day) == (1446, 9, 1)
    assert h.month_info == month_info(9)
    assert h.source == "astronomical"


def test_month_range_and_view(cal):
    rng = cal.month_range(1446, 9, "always", *MECCA)
    assert (rng.start, rng.end, rng.days, rng.source) == (date(2025, 3, 1), date(2025, 3, 29), 29, "astronomical")

    view = cal.month_view(1446, 9, "always", *MECCA)
    assert view.month_info.name == "Ramadan"
    assert len(view.days) == 29
    first = view.days[0]
    assert (first.hijri_day, first.gregorian_date, first.weekday) == (1, date(2025, 3, 1), "Saturday")
    assert "ramadan_start" in first.festivals
    assert view.days[28].festivals == ("ramadan_end", "laylat_al_qadr_29")


def test_month_festivals(cal):
    occ = cal.month_festivals(1446, 10, "always", *MECCA)
    assert [(o.rule.id, o.gregorian_date) for o in occ] == [
        ("eid_al_fitr", date(2025, 3, 30)),
        ("shawwal_fasting_start", date(2025, 4, 2)),
    ]


def test_upcoming_festivals(cal):
    occ = cal.upcoming_festivals(date(2025, 3, 25), 3, "always", *MECCA)
    assert [o.rule.id for o in occ] == ["laylat_al_qadr_25", "laylat_al_qadr_27", "ramadan_end"]
    assert [o.days_until for o in occ] == [0, 2, 4]

    # Eid days 2 and 3 are not first days
    nxt = cal.upcoming_festivals(date(2025, 3, 31), 1, "always", *MECCA)
    assert [(o.rule.id, o.days_until) for o in nxt] == [("shawwal_fasting_start", 2)]


def test_year_festivals(cal):
    occ = cal.year_festivals(2025, "always", *MECCA)
    dates = [o.gregorian_date for o in occ]
    assert dates == sorted(dates)
    assert all(d.year == 2025 for d in dates)
    by_id = {o.rule.id: o for o in occ}
    assert by_id["eid_al_fitr"].gregorian_date == date(2025, 3, 30)
    assert by_id["eid_al_fitr"].hijri_year == 1446


def test_tabular_fallback_source(registry):
    cal = HijriCalendar(MonthStartAssembler(ConjunctionTable(), registry))
    h = cal.hijri_date(date(2025, 3, 1), "always", *MECCA)
    assert (h.year, h.month, h.day, h.source) == (1446, 9, 1, "tabular")
    assert cal.month_range(1446, 9, "always", *MECCA).source == "tabular"
