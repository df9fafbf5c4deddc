# tests/conftest.py

from datetime import date, datetime, timezone

import pytest

from calhijri import api
from calhijri.bootstrap import build_registry
from calhijri.core.types import CriterionMeta, CriterionResult
from calhijri.reference import time_scales as ts
from calhijri.reference.new_moons import ConjunctionTable

# Published new-moon instants (UTC, to the minute).
NEW_MOONS_UTC = {
    2024: [
        (1, 11, 11, 57), (2, 9, 22, 59), (3, 10, 9, 0), (4, 8, 18, 21), (5, 8, 3, 22),
        (6, 6, 12, 38), (7, 5, 22, 57), (8, 4, 11, 13), (9, 3, 1, 55), (10, 2, 18, 49),
        (11, 1, 12, 47), (12, 1, 6, 21), (12, 30, 22, 27),
    ],
    2025: [
        (1, 29, 12, 36), (2, 28, 0, 45), (3, 29, 10, 58), (4, 27, 19, 31), (5, 27, 3, 2),
        (6, 25, 10, 31), (7, 24, 19, 11), (8, 23, 6, 6), (9, 21, 19, 54), (10, 21, 12, 25),
        (11, 20, 6, 47), (12, 20, 1, 43),
    ],
    2026: [
        (1, 18, 19, 52), (2, 17, 12, 1), (3, 19, 1, 23), (4, 17, 11, 52), (5, 16, 20, 1),
        (6, 15, 2, 54), (7, 14, 9, 43), (8, 12, 17, 37), (9, 11, 3, 27), (10, 10, 15, 50),
        (11, 9, 7, 2), (12, 9, 0, 52),
    ],
}


def new_moon_tt(year, month, day, hour, minute):
    dt = datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    return ts.ut_to_tt(ts.datetime_utc_to_jd(dt))


@pytest.fixture
def conjunctions():
    return ConjunctionTable.from_mapping({
        year: [new_moon_tt(year, *row) for row in rows] for year, rows in NEW_MOONS_UTC.items()
    })


@pytest.fixture
def ramadan_1446_conj():
    """Conjunction preceding Ramadan 1446 (2025-02-28 00:45 UTC), JD(TT)."""
    return new_moon_tt(2025, 2, 28, 0, 45)


def _always(d: date, lat: float, lon: float, conj: float) -> CriterionResult:
    return CriterionResult("always", True, "first evening", "certain")


def _never(d: date, lat: float, lon: float, conj: float) -> CriterionResult:
    return CriterionResult("never", False, "never", "certain")


ALWAYS_META = CriterionMeta(
    id="always", name="Always", description="Month starts the evening of conjunction.",
    type="deterministic", region="test",
)
NEVER_META = CriterionMeta(
    id="never", name="Never", description="No evening qualifies.",
    type="deterministic", region="test",
)


@pytest.fixture
def registry():
    """Builtin criteria plus two cheap synthetic ones."""
    reg = build_registry()
    reg.register("always", _always, ALWAYS_META)
    reg.register("never", _never, NEVER_META)
    return reg


@pytest.fixture
def api_state():
    """Restore the module-level registry and conjunction table after a test."""
    old_table = api.conjunction_table()
    api.set_conjunction_table(ConjunctionTable())
    yield
    api.set_registry(build_registry())
    api.set_conjunction_table(old_table)
