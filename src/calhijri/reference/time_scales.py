from __future__ import annotations

from datetime import date, datetime, timezone
import math

from pytz import timezone as pytz_timezone, utc
from pytz.exceptions import UnknownTimeZoneError

from ..core.time import to_jdn, from_jdn
from .deltat import delta_t_seconds


# ============================================================
# Basic JD / JDN helpers
# ============================================================

J2000 = 2451545.0  # J2000.0 epoch (JD)


def jd_to_jdn(jd: float) -> int:
    """
    Convert Julian Date (JD, days from noon) to Julian Day Number (JDN, integer day starting at midnight).

    Standard relation:
      JDN = floor(JD + 0.5)
    """
    return int(math.floor(jd + 0.5))


def jdn_to_jd(jdn: int) -> float:
    """JD at 00:00 UT of the civil day with number jdn."""
    return float(jdn) - 0.5


def date_to_jd(d: date) -> float:
    """JD at 00:00 UT of a Gregorian date."""
    return jdn_to_jd(to_jdn(d))


def jd_to_date(jd: float) -> date:
    """UT civil date containing the instant jd."""
    return from_jdn(jd_to_jdn(jd))


def days_since_j2000(jd: float) -> float:
    return jd - J2000


def T_centuries(jd: float) -> float:
    """Julian centuries since J2000.0 (in whichever scale jd is given)."""
    return (jd - J2000) / 36525.0


# ============================================================
# datetime(UTC) <-> JD(UT)
# ============================================================

_JD_UNIX_EPOCH = 2440587.5  # JD at 1970-01-01 00:00:00 UTC


def datetime_utc_to_jd(dt: datetime) -> float:
    """
    datetime -> JD (UT). Requires a timezone-aware datetime.
    """
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    t = dt.astimezone(timezone.utc).timestamp()
    return _JD_UNIX_EPOCH + t / 86400.0


def jd_to_datetime_utc(jd: float) -> datetime:
    """
    JD (UT) -> timezone-aware datetime in UTC.
    """
    t = (jd - _JD_UNIX_EPOCH) * 86400.0
    return datetime.fromtimestamp(t, tz=utc)


# ============================================================
# TT <-> UT via the ΔT table
# ============================================================

def jd_year(jd: float) -> float:
    """Decimal year used for the ΔT lookup: 2000 + (JD - J2000)/365.25."""
    return 2000.0 + (jd - J2000) / 365.25


def delta_t_days(jd: float) -> float:
    return delta_t_seconds(jd_year(jd)) / 86400.0


def tt_to_ut(jd_tt: float) -> float:
    """JD(TT) -> JD(UT): subtract ΔT looked up at the TT instant."""
    return jd_tt - delta_t_days(jd_tt)


def ut_to_tt(jd_ut: float) -> float:
    """JD(UT) -> JD(TT): add ΔT looked up at the UT instant."""
    return jd_ut + delta_t_days(jd_ut)


# ============================================================
# Civil timezone rendering
# ============================================================

def resolve_timezone(tz_name: str):
    """IANA zone name -> pytz tzinfo; ValueError on unknown names."""
    try:
        return pytz_timezone(tz_name)
    except UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone '{tz_name}'") from e


def jd_to_local(jd: float, tz_name: str) -> datetime:
    """JD (UT) -> aware datetime in the named zone."""
    return jd_to_datetime_utc(jd).astimezone(resolve_timezone(tz_name))


def format_hhmm(dt: datetime) -> str:
    """Render a datetime as 24-hour 'HH:MM', truncating seconds."""
    return f"{dt.hour:02d}:{dt.minute:02d}"
