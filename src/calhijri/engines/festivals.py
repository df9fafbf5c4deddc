"""
calhijri.engines.festivals
--------------------------
Fixed-date Islamic festival rules and a (month, day) index over them.

Multi-day events are indexed on each day they span, so one lookup returns
every rule active on that Hijri day. Spans that run past day 30 continue in
the next month.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Literal, Mapping, Optional, Protocol, Tuple

FestivalImportance = Literal["major", "significant", "observance"]
FestivalCategory = Literal["eid", "fasting", "hajj", "remembrance", "night_worship", "sacred_month"]
ObservanceType = Literal["day", "night", "both"]

MAX_HIJRI_MONTH_DAYS = 30


@dataclass(frozen=True)
class FestivalRule:
    id: str
    name: str
    hijri_month: int
    hijri_day: int
    duration_days: int
    importance: FestivalImportance
    categories: Tuple[FestivalCategory, ...]
    observance_type: ObservanceType   # "night" observances begin the previous evening
    description: str
    traditions: Optional[str] = None


@dataclass(frozen=True)
class FestivalMatch:
    rule: FestivalRule
    day_of_event: int   # 1-based within multi-day events
    hijri_year: int


class FestivalTranslations(Protocol):
    """Localized festival names, keyed by rule id."""

    def name(self, festival_id: str, locale: str, default: str) -> str: ...


_LAYLAT_AL_QADR_CANDIDATE = "Night of Power candidate (odd night of last 10 days of Ramadan)."

FESTIVAL_RULES: Tuple[FestivalRule, ...] = (
    # eid
    FestivalRule(
        id="eid_al_fitr", name="Eid al-Fitr", hijri_month=10, hijri_day=1, duration_days=3,
        importance="major", categories=("eid",), observance_type="day",
        description="Festival of Breaking the Fast. Marks the end of Ramadan.",
        traditions="Eid prayer, Zakat al-Fitr, family gatherings, new clothes, feasting.",
    ),
    FestivalRule(
        id="eid_al_adha", name="Eid al-Adha", hijri_month=12, hijri_day=10, duration_days=3,
        importance="major", categories=("eid", "hajj"), observance_type="day",
        description="Festival of Sacrifice. Commemorates Ibrahim's willingness to sacrifice his son.",
        traditions="Eid prayer, Qurbani (animal sacrifice), distributing meat to the poor.",
    ),
    # fasting
    FestivalRule(
        id="ramadan_start", name="Start of Ramadan", hijri_month=9, hijri_day=1, duration_days=1,
        importance="major", categories=("fasting",), observance_type="both",
        description="First day of the month of fasting.",
        traditions="Pre-dawn meal (Suhoor), fasting from dawn to sunset, Taraweeh prayers.",
    ),
    FestivalRule(
        id="ramadan_end", name="Last Day of Ramadan", hijri_month=9, hijri_day=29, duration_days=1,
        importance="significant", categories=("fasting",), observance_type="day",
        description="Last possible day of Ramadan (29th or 30th depending on moon sighting).",
    ),
    FestivalRule(
        id="ashura_eve", name="9th Muharram (Tasu'a)", hijri_month=1, hijri_day=9, duration_days=1,
        importance="significant", categories=("fasting", "remembrance"), observance_type="day",
        description="Day before Ashura. Recommended fasting day.",
        traditions="Voluntary fasting, paired with 10th Muharram.",
    ),
    FestivalRule(
        id="ashura", name="Day of Ashura", hijri_month=1, hijri_day=10, duration_days=1,
        importance="major", categories=("fasting", "remembrance"), observance_type="day",
        description="10th Muharram. Day of fasting and remembrance.",
        traditions="Voluntary fasting (Sunni), mourning of Hussain (Shia), charity.",
    ),
    FestivalRule(
        id="day_of_arafah", name="Day of Arafah", hijri_month=12, hijri_day=9, duration_days=1,
        importance="major", categories=("fasting", "hajj"), observance_type="day",
        description="Day of standing at Arafah. Fasting recommended for non-pilgrims.",
        traditions="Fasting (non-pilgrims), du'a, Hajj pilgrims stand at Arafah.",
    ),
    FestivalRule(
        id="shawwal_fasting_start", name="Six Days of Shawwal (Start)", hijri_month=10, hijri_day=4,
        duration_days=1, importance="observance", categories=("fasting",), observance_type="day",
        description="Start of the recommended six days of voluntary fasting in Shawwal.",
        traditions="Fasting six days after Eid al-Fitr for reward of fasting the whole year.",
    ),
    # night worship
    FestivalRule(
        id="laylat_al_qadr_21", name="Laylat al-Qadr (21st)", hijri_month=9, hijri_day=21, duration_days=1,
        importance="observance", categories=("night_worship",), observance_type="night",
        description=_LAYLAT_AL_QADR_CANDIDATE,
    ),
    FestivalRule(
        id="laylat_al_qadr_23", name="Laylat al-Qadr (23rd)", hijri_month=9, hijri_day=23, duration_days=1,
        importance="observance", categories=("night_worship",), observance_type="night",
        description=_LAYLAT_AL_QADR_CANDIDATE,
    ),
    FestivalRule(
        id="laylat_al_qadr_25", name="Laylat al-Qadr (25th)", hijri_month=9, hijri_day=25, duration_days=1,
        importance="observance", categories=("night_worship",), observance_type="night",
        description=_LAYLAT_AL_QADR_CANDIDATE,
    ),
    FestivalRule(
        id="laylat_al_qadr_27", name="Laylat al-Qadr (27th)", hijri_month=9, hijri_day=27, duration_days=1,
        importance="major", categories=("night_worship",), observance_type="night",
        description="Night of Power (most widely observed). Better than a thousand months.",
        traditions="Night prayer, Quran recitation, I'tikaf, du'a.",
    ),
    FestivalRule(
        id="laylat_al_qadr_29", name="Laylat al-Qadr (29th)", hijri_month=9, hijri_day=29, duration_days=1,
        importance="observance", categories=("night_worship",), observance_type="night",
        description=_LAYLAT_AL_QADR_CANDIDATE,
    ),
    FestivalRule(
        id="shab_e_barat", name="Shab-e-Barat", hijri_month=8, hijri_day=15, duration_days=1,
        importance="significant", categories=("night_worship",), observance_type="night",
        description="Night of Fortune / Mid-Sha'ban. Night of forgiveness and prayer.",
        traditions="Night prayer, visiting graves, asking forgiveness.",
    ),
    FestivalRule(
        id="laylat_al_raghaib", name="Laylat al-Raghaib", hijri_month=7, hijri_day=1, duration_days=1,
        importance="observance", categories=("night_worship",), observance_type="night",
        description="Night of Wishes. First Friday night of Rajab (approximated as 1 Rajab).",
    ),
    # remembrance
    FestivalRule(
        id="hijri_new_year", name="Islamic New Year", hijri_month=1, hijri_day=1, duration_days=1,
        importance="major", categories=("remembrance",), observance_type="day",
        description="First day of Muharram. Start of the Islamic calendar year.",
        traditions="Reflection, recounting the Hijrah of the Prophet.",
    ),
    FestivalRule(
        id="mawlid", name="Mawlid al-Nabi", hijri_month=3, hijri_day=12, duration_days=1,
        importance="major", categories=("remembrance",), observance_type="both",
        description="Birthday of Prophet Muhammad (PBUH). 12th Rabi al-Awwal.",
        traditions="Recitation of the Seerah, nasheed, community gatherings, charity.",
    ),
    FestivalRule(
        id="isra_miraj", name="Isra and Mi'raj", hijri_month=7, hijri_day=27, duration_days=1,
        importance="major", categories=("remembrance", "night_worship"), observance_type="night",
        description="Night Journey and Ascension of the Prophet. 27th Rajab.",
        traditions="Night prayer, recounting the journey, reflection on the five daily prayers.",
    ),
    FestivalRule(
        id="wafat_al_nabi", name="Wafat al-Nabi", hijri_month=3, hijri_day=17, duration_days=1,
        importance="significant", categories=("remembrance",), observance_type="day",
        description="Passing of Prophet Muhammad (PBUH). 17th Rabi al-Awwal (Shia date: 28th Safar).",
    ),
    # hajj
    FestivalRule(
        id="hajj_begins", name="Hajj Begins", hijri_month=12, hijri_day=8, duration_days=1,
        importance="significant", categories=("hajj",), observance_type="day",
        description="Day of Tarwiyah. Pilgrims proceed to Mina. 8th Dhul Hijjah.",
    ),
    FestivalRule(
        id="days_of_tashreeq_1", name="Days of Tashreeq (Day 1)", hijri_month=12, hijri_day=11, duration_days=1,
        importance="significant", categories=("hajj",), observance_type="day",
        description="11th Dhul Hijjah. Pilgrims stone the Jamarat. Fasting prohibited.",
        traditions="Stoning of Jamarat, Takbeer after prayers.",
    ),
    FestivalRule(
        id="days_of_tashreeq_2", name="Days of Tashreeq (Day 2)", hijri_month=12, hijri_day=12, duration_days=1,
        importance="significant", categories=("hajj",), observance_type="day",
        description="12th Dhul Hijjah. Second day of Tashreeq. Fasting prohibited.",
        traditions="Stoning of Jamarat, some pilgrims depart Mina.",
    ),
    FestivalRule(
        id="days_of_tashreeq_3", name="Days of Tashreeq (Day 3)", hijri_month=12, hijri_day=13, duration_days=1,
        importance="significant", categories=("hajj",), observance_type="day",
        description="13th Dhul Hijjah. Last day of Tashreeq. Fasting prohibited.",
        traditions="Final stoning of Jamarat, pilgrims depart Mina.",
    ),
    # sacred months
    FestivalRule(
        id="rajab_start", name="Start of Rajab", hijri_month=7, hijri_day=1, duration_days=1,
        importance="observance", categories=("sacred_month",), observance_type="day",
        description="Beginning of the sacred month of Rajab.",
        traditions="Increased worship, voluntary fasting.",
    ),
    FestivalRule(
        id="shaban_start", name="Start of Sha'ban", hijri_month=8, hijri_day=1, duration_days=1,
        importance="observance", categories=("sacred_month",), observance_type="day",
        description="Beginning of Sha'ban, month before Ramadan.",
        traditions="Increased fasting, preparation for Ramadan.",
    ),
    FestivalRule(
        id="dhul_qidah_start", name="Start of Dhul Qi'dah", hijri_month=11, hijri_day=1, duration_days=1,
        importance="observance", categories=("sacred_month",), observance_type="day",
        description="Beginning of the sacred month of Dhul Qi'dah.",
    ),
    FestivalRule(
        id="dhul_hijjah_start", name="Start of Dhul Hijjah", hijri_month=12, hijri_day=1, duration_days=1,
        importance="observance", categories=("sacred_month",), observance_type="day",
        description="Beginning of the month of Hajj pilgrimage.",
        traditions="First 10 days are most virtuous; recommended fasting on days 1-9.",
    ),
    FestivalRule(
        id="muharram_start", name="Start of Muharram", hijri_month=1, hijri_day=1, duration_days=1,
        importance="observance", categories=("sacred_month",), observance_type="day",
        description="Beginning of the sacred month of Muharram (overlaps Islamic New Year).",
    ),
)

FESTIVAL_RULE_COUNT = len(FESTIVAL_RULES)

FESTIVALS_BY_ID: Mapping[str, FestivalRule] = MappingProxyType({r.id: r for r in FESTIVAL_RULES})


def _build_index(rules: Tuple[FestivalRule, ...]) -> Mapping[Tuple[int, int], Tuple[FestivalRule, ...]]:
    index: Dict[Tuple[int, int], List[FestivalRule]] = {}
    for rule in rules:
        for k in range(rule.duration_days):
            month = rule.hijri_month
            day = rule.hijri_day + k
            if day > MAX_HIJRI_MONTH_DAYS:
                day -= MAX_HIJRI_MONTH_DAYS
                month = 1 if month == 12 else month + 1
            index.setdefault((month, day), []).append(rule)
    return MappingProxyType({key: tuple(v) for key, v in index.items()})


FESTIVAL_INDEX = _build_index(FESTIVAL_RULES)


def day_of_event(rule: FestivalRule, hijri_day: int) -> int:
    if rule.duration_days <= 1:
        return 1
    diff = hijri_day - rule.hijri_day
    if diff < 0:
        diff += MAX_HIJRI_MONTH_DAYS
    return diff + 1


def festivals_on(hijri_month: int, hijri_day: int, hijri_year: int) -> List[FestivalMatch]:
    """All festival rules active on the given Hijri day, in rule order."""
    rules = FESTIVAL_INDEX.get((hijri_month, hijri_day), ())
    return [FestivalMatch(rule=r, day_of_event=day_of_event(r, hijri_day), hijri_year=hijri_year) for r in rules]


def all_festival_rules(
    category: Optional[FestivalCategory] = None,
    importance: Optional[FestivalImportance] = None,
) -> List[FestivalRule]:
    rules = list(FESTIVAL_RULES)
    if category is not None:
        rules = [r for r in rules if category in r.categories]
    if importance is not None:
        rules = [r for r in rules if r.importance == importance]
    return rules


def festivals_for_hijri_month(hijri_month: int) -> List[FestivalRule]:
    return [r for r in FESTIVAL_RULES if r.hijri_month == hijri_month]


def festival_name(rule: FestivalRule, locale: str = "en", translations: Optional[FestivalTranslations] = None) -> str:
    if translations is None:
        return rule.name
    return translations.name(rule.id, locale, rule.name)
