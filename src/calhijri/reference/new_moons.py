from __future__ import annotations

"""
calhijri.reference.new_moons

Lunar conjunction (new moon) instants, JD(TT), grouped by Gregorian year.

The table is external data: this module only holds and loads it. An empty
table is valid; the month-start assembler then falls back to the arithmetic
calendar.

CSV format (header required):
    year,jd_tt
    2025,2460705.0297
    ...
"""

import csv
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..core.errors import ConjunctionDataError

logger = logging.getLogger(__name__)

ENV_VAR = "CALHIJRI_NEW_MOONS"
CACHE_FILENAME = "new_moons.csv"


@dataclass(frozen=True)
class ConjunctionTable:
    """Immutable year -> ascending tuple of JD(TT)."""
    _by_year: Mapping[int, Tuple[float, ...]] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, data: Mapping[int, Iterable[float]]) -> "ConjunctionTable":
        by_year: Dict[int, Tuple[float, ...]] = {}
        for year, jds in data.items():
            values = tuple(float(x) for x in jds)
            for i in range(1, len(values)):
                if not (values[i] > values[i - 1]):
                    raise ConjunctionDataError(f"Conjunctions for {year} are not strictly ascending")
            by_year[int(year)] = values
        return cls(MappingProxyType(by_year))

    def for_year(self, year: int) -> Tuple[float, ...]:
        return self._by_year.get(year, ())

    def years(self) -> List[int]:
        return sorted(self._by_year)

    def __contains__(self, year: object) -> bool:
        return year in self._by_year

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_year.values())

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        for year in self.years():
            for jd in self._by_year[year]:
                yield year, jd


def _read_rows(rows: Iterable[dict], *, source: str) -> ConjunctionTable:
    grouped: Dict[int, List[float]] = {}
    for lineno, r in enumerate(rows, start=2):
        try:
            year = int(r["year"])
            jd = float(r["jd_tt"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConjunctionDataError(f"{source}:{lineno}: expected numeric 'year,jd_tt', got {r!r}") from e
        grouped.setdefault(year, []).append(jd)
    return ConjunctionTable.from_mapping(grouped)


def read_conjunction_csv(path: Union[str, Path]) -> ConjunctionTable:
    path = Path(path).expanduser()
    with path.open("r", encoding="utf-8", newline="") as f:
        table = _read_rows(csv.DictReader(f), source=str(path))
    logger.info("Loaded %d conjunctions (%s) from %s", len(table), _span(table), path)
    return table


def _span(table: ConjunctionTable) -> str:
    ys = table.years()
    return f"{ys[0]}-{ys[-1]}" if ys else "empty"


def default_cache_path() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME", "").strip()
    cache_dir = (Path(xdg).expanduser() / "calhijri") if xdg else (Path.home() / ".cache" / "calhijri")
    return cache_dir / CACHE_FILENAME


def load_conjunction_table(path: Optional[Union[str, Path]] = None) -> ConjunctionTable:
    """
    Load the conjunction table.

    Search order:
      1) explicit `path` argument (must exist)
      2) CALHIJRI_NEW_MOONS environment variable (path to CSV)
      3) user cache ($XDG_CACHE_HOME/calhijri/new_moons.csv or ~/.cache/calhijri/...)

    Returns an empty table when nothing is configured. Malformed files raise
    ConjunctionDataError.
    """
    if path is not None:
        return read_conjunction_csv(path)

    p = os.environ.get(ENV_VAR, "").strip()
    if p:
        env_path = Path(p).expanduser()
        if env_path.is_file():
            return read_conjunction_csv(env_path)
        logger.warning("%s points to %s, which is not a file; ignoring", ENV_VAR, env_path)

    cache_path = default_cache_path()
    if cache_path.is_file():
        return read_conjunction_csv(cache_path)

    logger.debug("No conjunction table configured; month starts will use the tabular calendar")
    return ConjunctionTable()
