from __future__ import annotations

from datetime import date, timedelta
import calendar as pycal
import argparse
from typing import List, Optional, Tuple

import calhijri
from calhijri.engines.specs import weekday_index


def dow_header() -> str:
    return "Su     Mo     Tu     We     Th     Fr     Sa"


def cell(top: str, bot: str, w: int = 6) -> Tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def print_grid(title: str, weeks: List[List[Tuple[str, str]]]) -> None:
    print(title)
    print(dow_header())
    print("-" * len(dow_header()))
    for wk in weeks:
        print(" ".join(c[0] for c in wk))
        print(" ".join(c[1] for c in wk))
    print()


def to_weeks(first: date, cells: List[Tuple[str, str]]) -> List[List[Tuple[str, str]]]:
    weeks: List[List[Tuple[str, str]]] = []
    wk: List[Tuple[str, str]] = [cell("", "") for _ in range(weekday_index(first))]  # Sunday=0
    for top, bot in cells:
        wk.append(cell(top, bot))
        if len(wk) == 7:
            weeks.append(wk)
            wk = []
    if wk:
        while len(wk) < 7:
            wk.append(cell("", ""))
        weeks.append(wk)
    return weeks


def hijri_month_calendar(criterion: str, hy: int, hm: int, lat: float, lon: float) -> None:
    view = calhijri.hijri_month(hy, hm, criterion=criterion, lat=lat, lon=lon)
    cells = []
    for day in view.days:
        top = f"{day.hijri_day:2d}" + ("*" if day.festivals else "")
        bot = f"{day.gregorian_date.month:02d}-{day.gregorian_date.day:02d}"
        cells.append((top, bot))

    d0 = view.days[0].gregorian_date
    d1 = view.days[-1].gregorian_date
    title = f"{criterion} Hijri month  {view.month_info.name} {hy} AH  [{view.source}]   ({d0} .. {d1})"
    print_grid(title, to_weeks(d0, cells))

    for day in view.days:
        for fid in day.festivals:
            print(f"  {day.hijri_day:2d}  {fid}")
    if any(day.festivals for day in view.days):
        print()


def gregorian_month_calendar(criterion: str, gy: int, gm: int, lat: float, lon: float) -> None:
    first = date(gy, gm, 1)
    last = date(gy, gm, pycal.monthrange(gy, gm)[1])

    cells = []
    d = first
    while d <= last:
        h = calhijri.hijri_date(d, criterion=criterion, lat=lat, lon=lon)
        cells.append((f"{d.day:2d}", f"{h.month:02d}-{h.day:02d}"))
        d += timedelta(days=1)

    title = f"{criterion} Gregorian month  {gy}-{gm:02d}"
    print_grid(title, to_weeks(first, cells))


def main(argv: Optional[List[str]] = None) -> int:
    from calhijri.engines.specs import KAABA_LAT, KAABA_LON

    p = argparse.ArgumentParser(
        description="Print a Hijri-month calendar and/or a Gregorian-month calendar with paired labels."
    )
    p.add_argument("--criterion", default="umm_al_qura", help="crescent criterion id (default: umm_al_qura)")
    p.add_argument("--lat", type=float, default=KAABA_LAT)
    p.add_argument("--lon", type=float, default=KAABA_LON)

    p.add_argument("--hijri", nargs=2, type=int, metavar=("HY", "HM"),
                   help="Hijri month to print: HY HM (e.g. 1447 9)")
    p.add_argument("--greg", nargs=2, type=int, metavar=("GY", "GM"),
                   help="Gregorian month to print: GY GM (e.g. 2026 2)")

    args = p.parse_args(argv)

    if not args.hijri and not args.greg:
        today = date.today()
        h = calhijri.hijri_date(today, criterion=args.criterion, lat=args.lat, lon=args.lon)
        hijri_month_calendar(args.criterion, h.year, h.month, args.lat, args.lon)
        gregorian_month_calendar(args.criterion, today.year, today.month, args.lat, args.lon)
        return 0

    if args.hijri:
        hy, hm = args.hijri
        hijri_month_calendar(args.criterion, hy, hm, args.lat, args.lon)

    if args.greg:
        gy, gm = args.greg
        gregorian_month_calendar(args.criterion, gy, gm, args.lat, args.lon)

    return 0

if __name__ == "__main__":
    raise SystemExit(main())
