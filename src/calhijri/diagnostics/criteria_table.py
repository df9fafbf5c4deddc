from __future__ import annotations

"""
Compare every registered crescent criterion over the conjunctions of one year.

For each conjunction, prints the first evening each criterion accepts as
the start of a new month, as a day offset from the conjunction's UT date
('.' when no evening within the search window qualifies).
"""

import argparse
from typing import List, Optional

import calhijri
from calhijri.api import conjunction_table, get_criterion
from calhijri.engines.criteria import conjunction_ut_date, find_first_sighting
from calhijri.engines.specs import KAABA_LAT, KAABA_LON
from calhijri.core.time import days_between


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="First-sighting evening per criterion for each conjunction of a year.")
    p.add_argument("year", type=int)
    p.add_argument("--lat", type=float, default=KAABA_LAT)
    p.add_argument("--lon", type=float, default=KAABA_LON)
    p.add_argument("--max-days", type=int, default=4)
    p.add_argument("--criteria", nargs="*", default=None, help="subset of criterion ids (default: all)")
    args = p.parse_args(argv)

    conjs = conjunction_table().for_year(args.year)
    if not conjs:
        print(f"No conjunctions tabulated for {args.year}. Load a table with --new-moons or $CALHIJRI_NEW_MOONS.")
        return 1

    ids = args.criteria or calhijri.list_criteria()

    header = f"{'conjunction (UT date)':<22s}" + "".join(f"{cid[:10]:>11s}" for cid in ids)
    print(f"lat={args.lat:.4f} lon={args.lon:.4f}  (offset in days from conjunction date)")
    print(header)
    print("-" * len(header))

    for conj in conjs:
        d0 = conjunction_ut_date(conj)
        row = f"{d0.isoformat():<22s}"
        for cid in ids:
            hit = find_first_sighting(cid, conj, args.lat, args.lon, args.max_days, evaluator=get_criterion(cid))
            row += f"{'.' if hit is None else '+' + str(days_between(hit[0], d0)):>11s}"
        print(row)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
