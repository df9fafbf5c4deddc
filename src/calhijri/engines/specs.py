from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from ..core.errors import UnknownConventionError
from ..core.types import CriterionMeta, FixedLocation, PrayerConvention


# ============================================================
# FIXED LOCATIONS
# ============================================================

KAABA_LAT = 21.4225
KAABA_LON = 39.8262

LOC_MECCA = FixedLocation(lat=KAABA_LAT, lon=KAABA_LON, name="Mecca")
LOC_ANKARA = FixedLocation(lat=39.9334, lon=32.8597, name="Ankara")


# ============================================================
# PRAYER CONVENTIONS
# ============================================================

MWL = PrayerConvention(
    id="mwl",
    name="Muslim World League",
    fajr_angle=18.0,
    isha_angle=17.0,
    isha_offset_minutes=None,
    region="Europe, Far East, parts of USA",
)

ISNA = PrayerConvention(
    id="isna",
    name="Islamic Society of North America",
    fajr_angle=15.0,
    isha_angle=15.0,
    isha_offset_minutes=None,
    region="North America",
)

EGYPT = PrayerConvention(
    id="egypt",
    name="Egyptian General Authority of Survey",
    fajr_angle=19.5,
    isha_angle=17.5,
    isha_offset_minutes=None,
    region="Africa, Syria, Lebanon, Malaysia",
)

MAKKAH = PrayerConvention(
    id="makkah",
    name="Umm al-Qura University, Makkah",
    fajr_angle=18.5,
    isha_angle=None,
    isha_offset_minutes=90.0,
    region="Arabian Peninsula",
)

KARACHI = PrayerConvention(
    id="karachi",
    name="University of Islamic Sciences, Karachi",
    fajr_angle=18.0,
    isha_angle=18.0,
    isha_offset_minutes=None,
    region="Pakistan, Bangladesh, India, Afghanistan",
)

TEHRAN = PrayerConvention(
    id="tehran",
    name="Institute of Geophysics, University of Tehran",
    fajr_angle=17.7,
    isha_angle=14.0,
    isha_offset_minutes=None,
    region="Iran, parts of Afghanistan",
)

JAFARI = PrayerConvention(
    id="jafari",
    name="Shia Ithna-Ashari (Jafari)",
    fajr_angle=16.0,
    isha_angle=14.0,
    isha_offset_minutes=None,
    region="Shia communities worldwide",
)

PRAYER_CONVENTIONS: Mapping[str, PrayerConvention] = MappingProxyType({
    c.id: c for c in (MWL, ISNA, EGYPT, MAKKAH, KARACHI, TEHRAN, JAFARI)
})


def get_convention(convention_id: str) -> PrayerConvention:
    if convention_id not in PRAYER_CONVENTIONS:
        raise UnknownConventionError(
            f"Unknown convention '{convention_id}'. Available: {sorted(PRAYER_CONVENTIONS)}"
        )
    return PRAYER_CONVENTIONS[convention_id]


# ============================================================
# CRESCENT CRITERIA METADATA
# ============================================================

CRITERION_IDS: Tuple[str, ...] = (
    "umm_al_qura",
    "isna",
    "mabims",
    "yallop",
    "odeh",
    "pakistan",
    "turkey",
    "tabular",
)


_CRITERIA_META = (
    CriterionMeta(
        id="umm_al_qura",
        name="Umm al-Qura",
        description=(
            "Saudi Arabia official calendar. New month if conjunction before sunset "
            "AND moonset after sunset at Mecca."
        ),
        type="deterministic",
        region="Saudi Arabia, Gulf states",
        fixed_location=LOC_MECCA,
    ),
    CriterionMeta(
        id="isna",
        name="ISNA / FCNA",
        description="Islamic Society of North America. Elongation >= 8 deg AND moon altitude >= 5 deg at sunset.",
        type="deterministic",
        region="North America",
    ),
    CriterionMeta(
        id="mabims",
        name="MABIMS",
        description=(
            "SE Asian standard (Malaysia, Indonesia, Brunei, Singapore). "
            "Moon alt > 3 deg, elongation > 6.4 deg, age > 8 hours."
        ),
        type="deterministic",
        region="Southeast Asia",
    ),
    CriterionMeta(
        id="yallop",
        name="Yallop 1997",
        description="Probabilistic model using q-value. Zones A (easy) through F (impossible).",
        type="probabilistic",
        region="Academic / international",
    ),
    CriterionMeta(
        id="odeh",
        name="Odeh 2004",
        description="Improved probabilistic model. Topocentric ARCV vs W boundary curve.",
        type="probabilistic",
        region="Academic / international",
    ),
    CriterionMeta(
        id="pakistan",
        name="Pakistan",
        description=(
            "Pakistan Ruet-e-Hilal Committee criteria. Alt >= 6.5 deg, W >= 0.17', "
            "illum >= 0.8% OR elong >= 9 deg, lag >= 38 min."
        ),
        type="deterministic",
        region="Pakistan",
    ),
    CriterionMeta(
        id="turkey",
        name="Turkey / Diyanet",
        description=(
            "Turkish Presidency of Religious Affairs. Conjunction before sunset "
            "AND moonset after sunset at Ankara."
        ),
        type="deterministic",
        region="Turkey",
        fixed_location=LOC_ANKARA,
    ),
    CriterionMeta(
        id="tabular",
        name="Tabular (Arithmetic)",
        description="30-year cycle with alternating 30/29 day months. No astronomy needed. Used as fallback.",
        type="arithmetic",
        region="Universal (computational)",
    ),
)

CRITERIA: Mapping[str, CriterionMeta] = MappingProxyType({m.id: m for m in _CRITERIA_META})


# ============================================================
# WEEKDAYS (Sunday first)
# ============================================================

WEEKDAY_NAMES: Tuple[str, ...] = (
    "al-Ahad",
    "al-Ithnayn",
    "ath-Thulatha",
    "al-Arbi'a",
    "al-Khamis",
    "al-Jumu'ah",
    "as-Sabt",
)

WEEKDAY_NAMES_EN: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def weekday_index(d) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % 7
