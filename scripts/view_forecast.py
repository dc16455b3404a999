#!/usr/bin/env python3
"""
Print the month-by-month cash forecast from persisted ledger data.

Connects to the database (assumes tables and data already exist --
run seed_data.py first), runs one forecast and prints the forecast vs.
actual table.  Rows whose variance meets the threshold are marked with
``*``; the arrow shows surplus (▲) or shortfall (▼).

Usage:
    python3 scripts/view_forecast.py [--months N] [--threshold MAJOR]
                                     [--include-budget] [--json]
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

# ---------------------------------------------------------------------------
# Constants (must match seed_data.py)
# ---------------------------------------------------------------------------
DEFAULT_DB_URL = os.environ.get("CASHFLOW_DATABASE_URL", "sqlite:///cashflow_demo.db")
W = 163

COLUMNS = (
    ("Month", 9),
    ("Opening", 13),
    ("Exp In", 12),
    ("Exp Out", 12),
    ("Plan In", 12),
    ("Plan Out", 12),
    ("Fcst Net", 12),
    ("Fcst Close", 13),
    ("Act In", 12),
    ("Act Out", 12),
    ("Act Net", 12),
    ("Act Close", 13),
    ("Variance", 14),
)


def _fmt(minor_units: int, currency: str) -> str:
    from cashflow_kernel.domain.values import Money

    return Money.of(minor_units, currency).format(with_code=False)


def print_report(report) -> None:
    from cashflow_kernel.domain.values import Money

    print()
    print("=" * W)
    title = (
        f"CASH FORECAST  ({report.reporting_currency}, from {report.base_period.label}, "
        f"{report.request.horizon_months} months"
        f"{', with budget' if report.request.include_budget else ''})"
    )
    print(title.center(W))
    print("=" * W)
    print(" ".join(f"{name:>{width}}" for name, width in COLUMNS))
    print("-" * W)
    for line in report.lines:
        row = line.row
        ccy = report.reporting_currency
        cells = (
            row.label,
            _fmt(row.opening_forecast, ccy),
            _fmt(row.expected_inflow, ccy),
            _fmt(row.expected_outflow, ccy),
            _fmt(row.planned_inflow, ccy),
            _fmt(row.planned_outflow, ccy),
            _fmt(row.forecast_net, ccy),
            _fmt(row.closing_forecast, ccy),
            _fmt(row.actual_inflow, ccy),
            _fmt(row.actual_outflow, ccy),
            _fmt(row.actual_net, ccy),
            _fmt(row.closing_actual, ccy),
            f"{line.indicator} {_fmt(row.variance, ccy)}{' *' if line.is_highlighted else '  '}",
        )
        print(" ".join(f"{cell:>{width}}" for cell, (_, width) in zip(cells, COLUMNS)))
    print("-" * W)
    threshold = Money.of(report.request.variance_threshold_minor_units, report.reporting_currency)
    print(f"  * |variance| >= {threshold.format()}  ({len(report.highlighted)} highlighted)")
    print()


def main() -> int:
    parser = argparse.ArgumentParser(description="Cash forecast vs. actual report")
    parser.add_argument("--db-url", default=DEFAULT_DB_URL, help="SQLAlchemy database URL")
    parser.add_argument("--config", default=None, help="Override YAML config file")
    parser.add_argument("--months", default=None, help="Horizon in months (1-36)")
    parser.add_argument("--threshold", default=None,
                        help="Variance highlight threshold in major units")
    parser.add_argument("--include-budget", action="store_true",
                        help="Add planned budget flows to the forecast track")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Structured logs to stderr")
    args = parser.parse_args()

    if args.verbose:
        from cashflow_kernel.logging_config import configure_logging
        configure_logging(level=logging.DEBUG, stream=sys.stderr)
    else:
        logging.disable(logging.CRITICAL)

    from sqlalchemy.exc import SQLAlchemyError

    from cashflow_config import get_active_config
    from cashflow_kernel.db.engine import init_engine_from_url, session_scope
    from cashflow_kernel.exceptions import CashflowError
    from cashflow_services import ForecastService

    try:
        config = get_active_config(args.config)
        init_engine_from_url(args.db_url, echo=False)
    except (CashflowError, SQLAlchemyError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    params = {
        "months": args.months,
        "variance_threshold": args.threshold,
        "include_budget": args.include_budget,
    }
    try:
        with session_scope() as session:
            report = ForecastService(session, config=config).run_forecast(params)
    except CashflowError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
