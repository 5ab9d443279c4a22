#!/usr/bin/env python3
"""
Seed reference data: create the schema if needed, then replace the chart
of accounts and the cash-flow category map with a reference set.

Usage:
  python3 scripts/seed_reference.py --db-url sqlite:///geoacct.db
  python3 scripts/seed_reference.py --db-url postgresql://... --reference-dir ./company
"""

import argparse
import logging
import os
import sys
from pathlib import Path

DEFAULT_DB_URL = os.environ.get("GEOACCT_DATABASE_URL", "sqlite:///geoacct.db")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Seed chart of accounts and cash-flow categories")
    p.add_argument(
        "--db-url",
        default=DEFAULT_DB_URL,
        help=f"Database URL (default: {DEFAULT_DB_URL!r}, or GEOACCT_DATABASE_URL)",
    )
    p.add_argument(
        "--reference-dir",
        type=Path,
        default=None,
        help="Directory holding the reference YAML files (default: bundled set)",
    )
    p.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from geoacct_config import load_reference_set
    from geoacct_kernel.db.engine import create_tables, init_engine_from_url, session_scope
    from geoacct_kernel.exceptions import GeoAcctError
    from geoacct_kernel.logging_config import configure_logging
    from geoacct_kernel.services import ReferenceService, SqlLedgerStore

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        reference = load_reference_set(args.reference_dir)
        init_engine_from_url(args.db_url)
        create_tables()
        with session_scope() as session:
            ReferenceService(SqlLedgerStore(session)).reseed(
                reference.accounts, reference.cashflow_categories,
            )
    except (GeoAcctError, OSError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    print(
        f"  Seeded {len(reference.accounts)} accounts and "
        f"{len(reference.cashflow_categories)} cash-flow categories "
        f"(checksum {reference.checksum[:12]})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
