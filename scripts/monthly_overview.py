#!/usr/bin/env python3
"""
Print the monthly budget overview for one month as JSON.

Reads accounts, budgets, allocations and transactions from the configured
database and prints the wire-format overview (major units, camelCase keys).

Usage:
    python3 scripts/monthly_overview.py --period 2026-02 \\
        [--config envelope_config/sets/default.yaml] \\
        [--database-url sqlite:///budget.db]

Without --period the current month (in the configured timezone) is used.
Without --database-url the ``database.url`` of the config set is used.
"""

from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _json_default(value: object) -> object:
    if isinstance(value, Decimal):
        return float(value)
    return str(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the monthly budget overview.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--period",
        type=str,
        default=None,
        help="Month YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an engine config YAML (default: the bundled default set)",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy database URL (overrides the config set)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    from envelope_config import get_active_config
    from envelope_kernel.db.engine import get_session_factory, init_engine_from_url
    from envelope_kernel.domain.clock import SystemClock
    from envelope_kernel.domain.period import Period
    from envelope_kernel.exceptions import EnvelopeKernelError
    from envelope_kernel.logging_config import configure_logging
    from envelope_services import MonthlyOverviewCalculator, overview_to_wire, sql_sources

    try:
        config = get_active_config(args.config)
        configure_logging(level=config.log_level, stream=sys.stderr)
        if args.period:
            period = Period.parse(args.period)
        else:
            period = Period.current(SystemClock(), config.tzinfo)
    except EnvelopeKernelError as exc:
        print(f"ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError as exc:
        print(f"ERROR: Config file not found: {exc.filename}", file=sys.stderr)
        return 2

    database_url = args.database_url or config.database_url
    if not database_url:
        print("ERROR: No database URL (use --database-url or database.url)", file=sys.stderr)
        return 2

    try:
        init_engine_from_url(database_url, echo=False)
    except Exception as exc:
        print(f"ERROR: Could not connect: {exc}", file=sys.stderr)
        return 1

    calculator = MonthlyOverviewCalculator(sql_sources(get_session_factory(), config), config)
    overview = calculator.compute_monthly_overview(period)
    wire = overview_to_wire(overview, scale=config.minor_units_per_major)
    print(json.dumps(wire, indent=2, default=_json_default))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
