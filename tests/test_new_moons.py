# tests/test_new_moons.py

import pytest

from calhijri.core.errors import ConjunctionDataError
from calhijri.reference import new_moons as nm


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_read_csv_groups_by_year(tmp_path):
    p = _write(tmp_path / "nm.csv", "year,jd_tt\n2025,2460705.03\n2025,2460734.53\n2026,2461059.33\n")
    table = nm.read_conjunction_csv(p)
    assert table.years() == [2025, 2026]
    assert table.for_year(2025) == (2460705.03, 2460734.53)
    assert table.for_year(2030) == ()
    assert 2026 in table and 2027 not in table
    assert len(table) == 3
    assert list(table)[0] == (2025, 2460705.03)


def test_bad_row_reports_line(tmp_path):
    p = _write(tmp_path / "nm.csv", "year,jd_tt\n2025,2460705.03\n2025,soon\n")
    with pytest.raises(ConjunctionDataError) as ei:
        nm.read_conjunction_csv(p)
    assert f"{p}:3:" in str(ei.value)


def test_unordered_rows_rejected():
    with pytest.raises(ConjunctionDataError):
        nm.ConjunctionTable.from_mapping({2025: [2460734.53, 2460705.03]})


def test_explicit_missing_path():
    with pytest.raises(FileNotFoundError):
        nm.load_conjunction_table("/nonexistent/new_moons.csv")


def test_environment_variable(tmp_path, monkeypatch):
    p = _write(tmp_path / "env.csv", "year,jd_tt\n2025,2460705.03\n")
    monkeypatch.setenv(nm.ENV_VAR, str(p))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "nocache"))
    assert nm.load_conjunction_table().years() == [2025]


def test_user_cache(tmp_path, monkeypatch):
    monkeypatch.delenv(nm.ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert nm.default_cache_path() == tmp_path / "calhijri" / "new_moons.csv"
    (tmp_path / "calhijri").mkdir()
    _write(nm.default_cache_path(), "year,jd_tt\n2026,2461059.33\n")
    assert nm.load_conjunction_table().years() == [2026]


def test_empty_when_unconfigured(tmp_path, monkeypatch):
    monkeypatch.setenv(nm.ENV_VAR, str(tmp_path / "missing.csv"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    table = nm.load_conjunction_table()
    assert len(table) == 0
    assert table.years() == []
