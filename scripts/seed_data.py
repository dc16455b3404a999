#!/usr/bin/env python3
"""
Seed the database with a small demo cash ledger.

Drops all tables, recreates them, and inserts one balance snapshot (EUR
accounts plus a GBP account), a handful of receivables and payables
around the snapshot month, and a two-category monthly budget.

Usage:
    python3 scripts/seed_data.py [--db-url URL] [--month YYYY-MM]
"""

import argparse
import logging
import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

# ---------------------------------------------------------------------------
# Constants (must match view_forecast.py)
# ---------------------------------------------------------------------------
DEFAULT_DB_URL = os.environ.get("CASHFLOW_DATABASE_URL", "sqlite:///cashflow_demo.db")


def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from exc


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo cash ledger")
    parser.add_argument("--db-url", default=DEFAULT_DB_URL, help="SQLAlchemy database URL")
    parser.add_argument(
        "--month", type=_parse_month, default=None,
        help="Balance snapshot month (YYYY-MM, default: current month)",
    )
    args = parser.parse_args()

    logging.disable(logging.CRITICAL)

    from sqlalchemy.exc import SQLAlchemyError

    from cashflow_config import get_active_config
    from cashflow_engines.normalizer import CurrencyNormalizer
    from cashflow_engines.periods import add_months
    from cashflow_kernel.db.engine import (
        create_tables,
        drop_tables,
        init_engine_from_url,
        session_scope,
    )
    from cashflow_kernel.domain.clock import SystemClock
    from cashflow_kernel.domain.records import BalanceSnapshot, SubBalance
    from cashflow_kernel.domain.values import Money
    from cashflow_kernel.models import (
        BalanceSnapshotModel,
        BudgetLineModel,
        PayableModel,
        ReceivableModel,
        SubBalanceModel,
    )

    month = args.month or SystemClock().now().date().replace(day=1)
    normalizer = CurrencyNormalizer.from_config(get_active_config())

    print()
    print(f"  [1/3] Connecting to {args.db_url} ...")
    try:
        init_engine_from_url(args.db_url, echo=False)
        drop_tables()
        create_tables()
    except SQLAlchemyError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    # -----------------------------------------------------------------
    # Balance snapshot: total derived from the sub-balances
    # -----------------------------------------------------------------
    snapshot = BalanceSnapshot.from_sub_balances(
        month,
        [
            SubBalance("Bank of Ireland", 2_450_000, "EUR"),
            SubBalance("AIB", 830_000, "EUR"),
            SubBalance("Revolut EUR", 120_000, "EUR"),
            SubBalance("Revolut GBP", 400_000, "GBP"),
        ],
        normalizer,
        notes="Opening position",
    )

    def due(offset: int, day: int) -> datetime:
        return datetime.combine(
            add_months(month, offset).replace(day=day),
            datetime.min.time(),
            tzinfo=timezone.utc,
        )

    print("  [2/3] Inserting balances, receivables, payables, budget ...")
    with session_scope() as session:
        session.add(BalanceSnapshotModel(
            month=snapshot.month,
            total_minor_units=snapshot.total_minor_units,
            notes=snapshot.notes,
            sub_balances=[
                SubBalanceModel(
                    account=sb.account,
                    amount_minor_units=sb.amount_minor_units,
                    currency=sb.currency,
                )
                for sb in snapshot.sub_balances
            ],
        ))
        session.add_all([
            ReceivableModel(customer="Northwind", amount_minor_units=1_200_000,
                            currency="EUR", settlement_date=due(0, 10), is_settled=True,
                            description="Invoice 1041"),
            ReceivableModel(customer="Contoso", amount_minor_units=850_000,
                            currency="EUR", settlement_date=due(1, 15),
                            description="Invoice 1042"),
            ReceivableModel(customer="Fabrikam UK", amount_minor_units=500_000,
                            currency="GBP", settlement_date=due(2, 5),
                            description="Invoice 1043"),
            PayableModel(payee="Landlord", amount_minor_units=300_000,
                         currency="EUR", settlement_date=due(0, 1), is_settled=True,
                         description="Rent"),
            PayableModel(payee="Landlord", amount_minor_units=300_000,
                         currency="EUR", settlement_date=due(1, 1), description="Rent"),
            PayableModel(payee="Cloud host", amount_minor_units=45_000,
                         currency="GBP", settlement_date=due(1, 20),
                         description="Hosting"),
        ])
        for offset in range(3):
            budget_month = add_months(month, offset)
            session.add_all([
                BudgetLineModel(month=budget_month, category="Consulting",
                                planned_inflow_minor_units=600_000,
                                planned_outflow_minor_units=0, currency="EUR"),
                BudgetLineModel(month=budget_month, category="Payroll",
                                planned_inflow_minor_units=0,
                                planned_outflow_minor_units=900_000, currency="EUR"),
            ])

    opening = Money.of(snapshot.total_minor_units, normalizer.reporting_currency)
    print(f"  [3/3] Done. Opening balance {opening.format()} for {snapshot.month:%b %Y}.")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
