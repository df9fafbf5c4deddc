"""calhijri public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    day_info,
    hijri_date,
    hijri_month,
    month_range,
    month_starts,
    to_gregorian,
    list_criteria,
    criterion_info,
    register_criterion,
    evaluate_criterion,
    upcoming_festivals,
    year_festivals,
    month_festivals,
    prayer_times,
    qibla,
    set_conjunction_table,
)
from .core.types import HijriDate, HijriMonthStart, PrayerTimes, QiblaInfo
from .reference.new_moons import ConjunctionTable, load_conjunction_table

__all__ = [
    "day_info",
    "hijri_date",
    "hijri_month",
    "month_range",
    "month_starts",
    "to_gregorian",
    "list_criteria",
    "criterion_info",
    "register_criterion",
    "evaluate_criterion",
    "upcoming_festivals",
    "year_festivals",
    "month_festivals",
    "prayer_times",
    "qibla",
    "set_conjunction_table",
    "ConjunctionTable",
    "load_conjunction_table",
    "HijriDate",
    "HijriMonthStart",
    "PrayerTimes",
    "QiblaInfo",
]
