# backend/rentcycle/cli/__main__.py
from __future__ import annotations

import argparse
import json
from datetime import date

from rentcycle.cli.seed_demo import seed_demo
from rentcycle.db import SessionLocal, init_db
from rentcycle.logging_config import configure_logging
from rentcycle.services.dashboard_rollups import compute_portfolio_summary, today_utc_date


def main() -> None:
    p = argparse.ArgumentParser(prog="rentcycle")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables")

    seed = sub.add_parser("seed-demo", help="create demo properties, leases and payments")
    seed.add_argument("--as-of", type=date.fromisoformat, default=None)

    summ = sub.add_parser("summary", help="print the portfolio rent summary as JSON")
    summ.add_argument("--as-of", type=date.fromisoformat, default=None)

    args = p.parse_args()
    configure_logging()

    if args.command == "init-db":
        init_db()
        print({"ok": True})
        return

    as_of = args.as_of or today_utc_date()

    if args.command == "seed-demo":
        out = seed_demo(as_of=as_of)
        print(
            {
                "ok": True,
                "property_ids": out.property_ids,
                "lease_ids": out.lease_ids,
                "payment_ids": out.payment_ids,
            }
        )
        return

    db = SessionLocal()
    try:
        s = compute_portfolio_summary(db, as_of=as_of)
        print(json.dumps({"as_of": as_of, **s.to_dict()}, indent=2, default=str))
    finally:
        db.close()


if __name__ == "__main__":
    main()
