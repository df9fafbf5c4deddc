from __future__ import annotations
from typing import Any, Dict

from ..engines.specs import WEEKDAY_NAMES, WEEKDAY_NAMES_EN
from .registry import register_attribute, weekday_of

RAMADAN = 9

def is_ramadan(hijri_month: int) -> bool:
    return hijri_month == RAMADAN

def is_last_10(hijri_day: int) -> bool:
    return 21 <= hijri_day <= 30

def is_odd_night(hijri_day: int) -> bool:
    # odd nights of the last ten: 21, 23, 25, 27, 29
    return is_last_10(hijri_day) and hijri_day % 2 == 1

def weekday(info) -> Dict[str, Any]:
    w = weekday_of(info)
    return {
        "weekday": w,
        "weekday_name": WEEKDAY_NAMES[w],
        "weekday_name_en": WEEKDAY_NAMES_EN[w],
        "is_jumuah": w == 5,
    }

def ramadan(info) -> Dict[str, Any]:
    h = info.hijri
    active = is_ramadan(h.month)
    return {
        "is_ramadan": active,
        "ramadan_day": h.day if active else 0,
        "is_last_10": active and is_last_10(h.day),
        "is_odd_night": active and is_odd_night(h.day),
    }

register_attribute("weekday", weekday)
register_attribute("ramadan", ramadan)
