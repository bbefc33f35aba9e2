# src/stackstudy/scripts/reconcile_ratings.py
"""Report (and optionally repair) ratings that drifted from the vote rows.

Usage:
    python -m stackstudy.scripts.reconcile_ratings          # report only
    python -m stackstudy.scripts.reconcile_ratings --fix    # rewrite drifted rows
"""
from __future__ import annotations

import argparse
import sys

from stackstudy.core.logging import configure_logging
from stackstudy.db.session import SessionLocal
from stackstudy.services.ratings import find_rating_drift, repair_rating_drift


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--fix", action="store_true", help="rewrite drifted ratings")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    with SessionLocal() as session, session.begin():
        drifts = repair_rating_drift(session) if args.fix else find_rating_drift(session)

    if not drifts:
        print("All ratings match their votes.")
        return 0

    for drift in drifts:
        print(f"{drift.kind:<8} {drift.id:>8}  stored={drift.stored:<6} expected={drift.expected}")
    if args.fix:
        print(f"Repaired {len(drifts)} rating(s).")
        return 0
    print(f"{len(drifts)} rating(s) drifted; rerun with --fix to repair.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
