from __future__ import annotations

import argparse
from datetime import date, datetime, timezone
import importlib
import inspect
import logging
import re
import sys
from typing import List, Optional


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

logger = logging.getLogger(__name__)


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def _run_module_main(modpath: str, argv: List[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _add_location(p: argparse.ArgumentParser, *, required: bool = False) -> None:
    from calhijri.engines.specs import KAABA_LAT, KAABA_LON

    if required:
        p.add_argument("--lat", type=float, required=True, help="Observer latitude in degrees")
        p.add_argument("--lon", type=float, required=True, help="Observer longitude in degrees (positive East)")
    else:
        p.add_argument("--lat", type=float, default=KAABA_LAT, help="Observer latitude (default: Mecca)")
        p.add_argument("--lon", type=float, default=KAABA_LON, help="Observer longitude (default: Mecca)")


def _fmt_jd(jd: Optional[float]) -> str:
    from calhijri.reference import time_scales as ts

    if jd is None:
        return "-"
    # nearest minute
    return ts.jd_to_datetime_utc(jd + 30.0 / 86400.0).strftime("%Y-%m-%d %H:%M UTC")


# ============================================================
# Calendar commands
# ============================================================

def cmd_day(argv: List[str]) -> int:
    import calhijri
    from calhijri.engines.tabular import format_hijri_date

    p = argparse.ArgumentParser(prog="calhijri day", description="Gregorian -> Hijri day")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("--criterion", default="umm_al_qura")
    _add_location(p)
    p.add_argument("--attr", action="append", default=[], help="attribute name (repeatable)")
    args = p.parse_args(argv)

    info = calhijri.day_info(
        _parse_ymd(args.date),
        criterion=args.criterion,
        lat=args.lat,
        lon=args.lon,
        attributes=tuple(args.attr),
    )
    print(f"{info.civil_date.isoformat()}  {format_hijri_date(info.hijri)}  ({info.hijri.source}, {info.criterion})")
    for fid in info.festivals:
        print(f"  festival: {fid}")
    if info.attributes:
        for k, v in info.attributes.items():
            print(f"  {k} = {v}")
    return 0


def cmd_month_starts(argv: List[str]) -> int:
    import calhijri
    from calhijri.engines.tabular import month_info

    p = argparse.ArgumentParser(prog="calhijri month-starts", description="Hijri month starts covering a Gregorian year")
    p.add_argument("year", type=int)
    p.add_argument("--criterion", default="umm_al_qura")
    _add_location(p)
    args = p.parse_args(argv)

    for ms in calhijri.month_starts(args.year, criterion=args.criterion, lat=args.lat, lon=args.lon):
        conj = "-" if ms.conjunction_jd_tt == 0.0 else f"JD(TT) {ms.conjunction_jd_tt:.4f}"
        print(
            f"{ms.hijri_year:5d}-{ms.hijri_month:02d} {month_info(ms.hijri_month).name:<16s} "
            f"{ms.gregorian_start.isoformat()}  conj: {conj}"
        )
    return 0


def _print_occurrences(occ) -> None:
    from calhijri.engines.festivals import festival_name

    for o in occ:
        until = f"  (in {o.days_until} d)" if o.days_until is not None else ""
        span = f" [{o.rule.duration_days} d]" if o.rule.duration_days > 1 else ""
        print(
            f"{o.gregorian_date.isoformat()}  {o.hijri_year}-{o.rule.hijri_month:02d}-{o.rule.hijri_day:02d}  "
            f"{festival_name(o.rule)}{span}{until}"
        )


def cmd_festivals(argv: List[str]) -> int:
    import calhijri

    p = argparse.ArgumentParser(prog="calhijri festivals", description="Festival dates for a Gregorian year or a Hijri month")
    p.add_argument("year", type=int, help="Gregorian year, or Hijri year with --month")
    p.add_argument("--month", type=int, default=None, help="Hijri month (1..12); treats YEAR as a Hijri year")
    p.add_argument("--criterion", default="umm_al_qura")
    _add_location(p)
    args = p.parse_args(argv)

    if args.month is None:
        occ = calhijri.year_festivals(args.year, criterion=args.criterion, lat=args.lat, lon=args.lon)
    else:
        occ = calhijri.month_festivals(args.year, args.month, criterion=args.criterion, lat=args.lat, lon=args.lon)
    _print_occurrences(occ)
    return 0


def cmd_upcoming(argv: List[str]) -> int:
    import calhijri

    p = argparse.ArgumentParser(prog="calhijri upcoming", description="Next festivals from a date")
    p.add_argument("--from", dest="start", default=None, help="YYYY-MM-DD (default: today)")
    p.add_argument("--count", type=int, default=10)
    p.add_argument("--criterion", default="umm_al_qura")
    _add_location(p)
    args = p.parse_args(argv)

    start = _parse_ymd(args.start) if args.start else None
    _print_occurrences(
        calhijri.upcoming_festivals(start, args.count, criterion=args.criterion, lat=args.lat, lon=args.lon)
    )
    return 0


# ============================================================
# Prayer / Qibla
# ============================================================

def cmd_prayers(argv: List[str]) -> int:
    import calhijri
    from calhijri.engines.prayer import PRAYER_ORDER
    from calhijri.engines.specs import PRAYER_CONVENTIONS

    p = argparse.ArgumentParser(prog="calhijri prayers", description="Daily prayer times")
    p.add_argument("date", help="YYYY-MM-DD")
    _add_location(p, required=True)
    p.add_argument("--tz", required=True, help="IANA timezone, e.g. Europe/Istanbul")
    p.add_argument("--convention", default="mwl", choices=sorted(PRAYER_CONVENTIONS))
    p.add_argument("--asr", dest="asr_method", default="shafii", choices=["shafii", "hanafi"])
    args = p.parse_args(argv)

    times = calhijri.prayer_times(
        _parse_ymd(args.date), args.lat, args.lon, args.tz,
        convention=args.convention, asr_method=args.asr_method,
    )
    for name in ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "midnight"):
        marker = "*" if name in PRAYER_ORDER else " "
        print(f"{marker} {name:<8s} {getattr(times, name) or '--:--'}")
    return 0


def cmd_qibla(argv: List[str]) -> int:
    import calhijri

    p = argparse.ArgumentParser(prog="calhijri qibla", description="Qibla bearing and distance to the Kaaba")
    _add_location(p, required=True)
    args = p.parse_args(argv)

    q = calhijri.qibla(args.lat, args.lon)
    print(f"direction: {q.direction:.2f} deg from true north")
    print(f"distance : {q.distance_km} km")
    return 0


# ============================================================
# Crescent / criteria
# ============================================================

def _latest_conjunction_before(d: date, jd_limit_ut: float) -> Optional[float]:
    from calhijri.api import conjunction_table
    from calhijri.reference import time_scales as ts

    table = conjunction_table()
    best: Optional[float] = None
    for year in (d.year - 1, d.year):
        for jd_tt in table.for_year(year):
            if ts.tt_to_ut(jd_tt) <= jd_limit_ut:
                best = jd_tt
    return best


def cmd_crescent(argv: List[str]) -> int:
    from calhijri.engines.crescent import compute_crescent
    from calhijri.engines.criteria import evaluate_all
    from calhijri.reference import time_scales as ts

    p = argparse.ArgumentParser(prog="calhijri crescent", description="Crescent visibility at sunset and every criterion's verdict")
    p.add_argument("date", help="YYYY-MM-DD (evening of observation)")
    _add_location(p)
    p.add_argument("--conj-jd-tt", type=float, default=None,
                   help="Conjunction JD(TT); default: latest tabulated conjunction before sunset")
    args = p.parse_args(argv)

    d = _parse_ymd(args.date)
    conj = args.conj_jd_tt
    if conj is None:
        # search up to the end of the civil day
        conj = _latest_conjunction_before(d, ts.date_to_jd(d) + 1.0)
        if conj is None:
            print("No conjunction known for this date; load a table with --new-moons or pass --conj-jd-tt.", file=sys.stderr)
            return 2

    print(f"conjunction: {_fmt_jd(ts.tt_to_ut(conj))}")
    c = compute_crescent(d, args.lat, args.lon, conj)
    if c is None:
        print("The Sun does not set at this location on this date.")
    else:
        v = c.visibility
        print(f"sunset     : {_fmt_jd(c.params.sunset_jd)}")
        print(f"moonset    : {_fmt_jd(c.params.moonset_jd)}")
        print(f"moon alt   : {c.params.moon_alt:.2f} deg")
        print(f"ARCL={v.ARCL:.2f} ARCV={v.ARCV:.2f} DAZ={v.DAZ:.2f} W={v.W:.3f}' q={v.q_yallop:.3f}")
        print(f"age={v.moon_age_hours:.1f} h  lag={v.lag_minutes:.0f} min  illum={v.illumination_pct:.2f}%")
        print(f"best time  : {_fmt_jd(v.best_time_jd)}")
    print()
    for r in evaluate_all(d, args.lat, args.lon, conj):
        verdict = "YES" if r.new_month_starts else "no "
        zone = f" [{r.zone}]" if r.zone else ""
        print(f"{r.criterion:<12s} {verdict} {r.confidence:<9s}{zone} {r.reason}")
    return 0


def cmd_criteria(argv: List[str]) -> int:
    import calhijri

    p = argparse.ArgumentParser(prog="calhijri criteria", description="List registered crescent criteria")
    p.parse_args(argv)

    for cid in calhijri.list_criteria():
        meta = calhijri.criterion_info(cid)
        where = f" @ {meta.fixed_location.name}" if meta.fixed_location else ""
        print(f"{cid:<12s} {meta.name} ({meta.type}, {meta.region}){where}")
        print(f"{'':12s} {meta.description}")
    return 0


# ============================================================
# Astronomy tools
# ============================================================

def cmd_delta_t(argv: List[str]) -> int:
    from calhijri.reference.deltat import delta_t_seconds, is_predicted

    p = argparse.ArgumentParser(prog="calhijri delta-t", description="Print ΔT (TT - UT) for decimal years.")
    p.add_argument("years", type=float, nargs="+")
    args = p.parse_args(argv)

    for y in args.years:
        tab = delta_t_seconds(y)
        em = delta_t_seconds(y, method="em2006")
        flag = " (predicted)" if is_predicted(y) else ""
        print(f"{y:9.2f}  table={tab:8.2f} s  em2006={em:8.2f} s{flag}")
    return 0


def cmd_solar(argv: List[str]) -> int:
    from calhijri.engines import events
    from calhijri.reference import solar
    from calhijri.reference import time_scales as ts

    p = argparse.ArgumentParser(prog="calhijri solar", description="Solar longitude, position, EOT, sunrise and sunset.")
    p.add_argument("--date", default=None, help="YYYY-MM-DD (default: today, UTC)")
    p.add_argument("--jd-ut", type=float, default=None, help="Julian Date in UT (default: 0h UT of --date)")
    _add_location(p)
    args = p.parse_args(argv)

    d = _parse_ymd(args.date) if args.date else datetime.now(timezone.utc).date()
    jd_ut = args.jd_ut if args.jd_ut is not None else ts.date_to_jd(d)
    jd_tt = ts.ut_to_tt(jd_ut)

    coords = solar.solar_longitude(jd_tt)
    pos = solar.sun_position(jd_ut, args.lat, args.lon)

    print("Time Input:")
    print(f"  JD_UT = {jd_ut:.6f}")
    print(f"  JD_TT = {jd_tt:.6f}")
    print()
    print("Solar Position (degrees):")
    print(f"  True Longitude     (L_true) = {coords.L_true_deg:.6f}")
    print(f"  Apparent Longitude (L_app)  = {coords.L_app_deg:.6f}")
    print(f"  Declination                 = {pos.declination:.6f}")
    print(f"  Altitude                    = {pos.altitude:.6f}")
    print(f"  Azimuth (from south)        = {pos.azimuth:.6f}")
    print()
    print(f"Equation of Time: {solar.equation_of_time_minutes(jd_tt):.4f} min")
    print()
    print(f"Sunrise & Sunset on {d.isoformat()} (-0.833 deg altitude):")
    print(f"  Rise    : {_fmt_jd(events.sunrise(d, args.lat, args.lon))}")
    print(f"  Transit : {_fmt_jd(events.solar_transit(d, args.lon))}")
    print(f"  Set     : {_fmt_jd(events.sunset(d, args.lat, args.lon))}")
    return 0


def cmd_lunar(argv: List[str]) -> int:
    from calhijri.engines import events
    from calhijri.reference import astro_args as aa
    from calhijri.reference import lunar
    from calhijri.reference import solar
    from calhijri.reference import time_scales as ts

    p = argparse.ArgumentParser(prog="calhijri lunar", description="Lunar position, elongation, moonrise and moonset.")
    p.add_argument("--date", default=None, help="YYYY-MM-DD (default: today, UTC)")
    p.add_argument("--jd-ut", type=float, default=None, help="Julian Date in UT (default: 0h UT of --date)")
    _add_location(p)
    args = p.parse_args(argv)

    d = _parse_ymd(args.date) if args.date else datetime.now(timezone.utc).date()
    jd_ut = args.jd_ut if args.jd_ut is not None else ts.date_to_jd(d)
    jd_tt = ts.ut_to_tt(jd_ut)

    moon = lunar.lunar_position(jd_tt)
    sun = solar.solar_longitude(jd_tt)
    topo = lunar.moon_position(jd_ut, args.lat, args.lon)

    print("Time Input:")
    print(f"  JD_UT = {jd_ut:.6f}")
    print(f"  JD_TT = {jd_tt:.6f}")
    print()
    print("Geocentric Moon:")
    print(f"  Longitude = {moon.L_deg:.6f} deg")
    print(f"  Latitude  = {moon.B_deg:.6f} deg")
    print(f"  Distance  = {moon.distance_km:.1f} km")
    print(f"  Elongation (Moon - Sun) = {aa.wrap_deg(moon.L_deg - sun.L_app_deg):.6f} deg")
    print()
    print("Topocentric Moon:")
    print(f"  Altitude = {topo.altitude:.4f} deg (refracted)")
    print(f"  Azimuth  = {topo.azimuth:.4f} deg (from south)")
    print()
    mt = events.moon_times(d, args.lat, args.lon)
    print(f"Moonrise & Moonset on {d.isoformat()}:")
    if mt.always_up:
        print("  Moon is up all day.")
    elif mt.always_down:
        print("  Moon is down all day.")
    else:
        print(f"  Rise : {_fmt_jd(mt.rise)}")
        print(f"  Set  : {_fmt_jd(mt.set)}")
    return 0


# ============================================================
# main
# ============================================================

DIAG_TOOLS = {
    "pretty-month": "calhijri.diagnostics.pretty_month",
    "criteria-table": "calhijri.diagnostics.criteria_table",
    "visibility-map": "calhijri.diagnostics.visibility_map",
    "validate-events": "calhijri.diagnostics.validate_events",
    "deltat-plot": "calhijri.diagnostics.deltat_plot",
}

COMMANDS = {
    "day": cmd_day,
    "prayers": cmd_prayers,
    "qibla": cmd_qibla,
    "crescent": cmd_crescent,
    "criteria": cmd_criteria,
    "month-starts": cmd_month_starts,
    "festivals": cmd_festivals,
    "upcoming": cmd_upcoming,
    "delta-t": cmd_delta_t,
    "solar": cmd_solar,
    "lunar": cmd_lunar,
}


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # Shorthand: `calhijri YYYY-MM-DD ...`
    if argv and _DATE_RE.match(argv[0]):
        argv = ["day"] + list(argv)

    p = argparse.ArgumentParser(prog="calhijri", description="Hijri calendar, crescent visibility and prayer times CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--new-moons", default=None, metavar="PATH",
                   help="conjunction CSV (overrides $CALHIJRI_NEW_MOONS and the user cache)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("day", help="Gregorian -> Hijri day")
    sub.add_parser("prayers", help="Daily prayer times for a location")
    sub.add_parser("qibla", help="Qibla direction and distance")
    sub.add_parser("crescent", help="Crescent visibility and all criteria for one evening")
    sub.add_parser("criteria", help="List registered crescent criteria")
    sub.add_parser("month-starts", help="Hijri month starts for a Gregorian year")
    sub.add_parser("festivals", help="Festival dates in a Gregorian year or a Hijri month")
    sub.add_parser("upcoming", help="Next festivals from a date")
    sub.add_parser("delta-t", help="ΔT table vs Espenak-Meeus")
    sub.add_parser("solar", help="Solar position, EOT, sunrise and sunset")
    sub.add_parser("lunar", help="Lunar position, moonrise and moonset")
    sub.add_parser("pretty-month", help="Print a Hijri month grid (diagnostics)")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument("tool", choices=sorted(DIAG_TOOLS), help="Which diagnostic to run")

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.new_moons:
        import calhijri

        calhijri.set_conjunction_table(calhijri.load_conjunction_table(args.new_moons))

    logger.debug("command %s %s", args.cmd, rest)

    if args.cmd in COMMANDS:
        return COMMANDS[args.cmd](rest)

    if args.cmd == "pretty-month":
        return _run_module_main(DIAG_TOOLS["pretty-month"], rest)

    if args.cmd == "diag":
        return _run_module_main(DIAG_TOOLS[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
