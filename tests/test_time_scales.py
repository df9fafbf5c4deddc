# tests/test_time_scales.py

import pytest
from datetime import date, datetime, timezone
from unittest.mock import patch

from calhijri.core.time import add_days, days_between, from_jdn, parse_date, to_jdn
from calhijri.reference import time_scales as ts


def test_known_epochs():
    # J2000.0 civil date is January 1, 2000
    assert to_jdn(date(2000, 1, 1)) == 2451545
    assert ts.date_to_jd(date(2000, 1, 1)) == 2451544.5
    assert ts.jd_to_date(ts.J2000) == date(2000, 1, 1)

    # Unix epoch is 1970-01-01 00:00:00 UTC
    unix_dt = datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert ts.datetime_utc_to_jd(unix_dt) == pytest.approx(2440587.5, abs=1e-9)


def test_jdn_inverse_across_eras():
    for d in (date(622, 7, 19), date(1582, 10, 15), date(1900, 3, 1), date(2024, 2, 29), date(2100, 12, 31)):
        assert from_jdn(to_jdn(d)) == d


def test_jd_to_date_takes_ut_civil_day():
    jd0 = ts.date_to_jd(date(2025, 3, 1))
    assert ts.jd_to_date(jd0) == date(2025, 3, 1)
    assert ts.jd_to_date(jd0 + 0.999) == date(2025, 3, 1)
    assert ts.jd_to_date(jd0 - 0.001) == date(2025, 2, 28)


def test_naive_datetime_rejected():
    with pytest.raises(ValueError):
        ts.datetime_utc_to_jd(datetime(2025, 1, 1, 12, 0))


def test_jd_datetime_utc_instant():
    dt = ts.jd_to_datetime_utc(ts.J2000)
    assert (dt.year, dt.month, dt.day, dt.hour, dt.minute) == (2000, 1, 1, 12, 0)
    assert dt.utcoffset().total_seconds() == 0


def test_tt_ut_offset_is_table_delta_t():
    # jd_year(J2000 + 24 Julian years) == 2024.0, where the table holds 69.20 s
    jd = ts.J2000 + 24 * 365.25
    assert ts.jd_year(jd) == pytest.approx(2024.0)
    assert (ts.ut_to_tt(jd) - jd) * 86400.0 == pytest.approx(69.20, abs=1e-3)
    assert (jd - ts.tt_to_ut(jd)) * 86400.0 == pytest.approx(69.20, abs=1e-3)


def test_tt_ut_inverse_within_a_millisecond():
    jd = 2460736.5
    assert ts.tt_to_ut(ts.ut_to_tt(jd)) == pytest.approx(jd, abs=1e-8)


def test_local_rendering():
    jd = ts.datetime_utc_to_jd(datetime(2025, 3, 21, 9, 28, 30, tzinfo=timezone.utc))
    local = ts.jd_to_local(jd, "Asia/Riyadh")
    assert ts.format_hhmm(local) == "12:28"


def test_unknown_timezone():
    with pytest.raises(ValueError):
        ts.resolve_timezone("Nowhere/Atlantis")


def test_parse_date_and_day_arithmetic():
    assert parse_date("2025-03-01") == date(2025, 3, 1)
    assert parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
    with pytest.raises(ValueError):
        parse_date("1 March 2025")
    assert days_between(date(2025, 3, 1), date(2025, 2, 1)) == 28
    assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)


@pytest.fixture
def mock_delta_t():
    """Pin ΔT to 67.0 s regardless of the table."""
    with patch("calhijri.reference.time_scales.delta_t_seconds") as mock:
        mock.return_value = 67.0
        yield mock


def test_conversions_follow_pinned_delta_t(mock_delta_t):
    jd = 2452930.312847
    assert ts.ut_to_tt(jd) == pytest.approx(jd + 67.0 / 86400.0, abs=1e-9)
    assert ts.tt_to_ut(jd) == pytest.approx(jd - 67.0 / 86400.0, abs=1e-9)
    mock_delta_t.assert_called_with(ts.jd_year(jd))
