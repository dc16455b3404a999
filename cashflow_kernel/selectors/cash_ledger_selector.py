"""
Module: cashflow_kernel.selectors.cash_ledger_selector
Responsibility: The forecaster's read boundary onto the ledger store.
    Exposes the three unfiltered queries a forecast needs -- balance
    snapshots (month ascending), receivables/payables, budget lines -- and
    ``load_snapshot()``, which runs all of them once and freezes the result.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - No date-range push-down: every query is unfiltered; grouping by period
      happens in memory in the engines.
    - One read per request: ``load_snapshot()`` is the only call a forecast
      makes, so every row of a forecast sees the same ledger state.

Failure modes:
    - DataUnavailableError wrapping any SQLAlchemyError raised while reading.
      No partial snapshot is returned.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from cashflow_kernel.domain.clock import Clock, SystemClock
from cashflow_kernel.domain.records import (
    BalanceSnapshot,
    BudgetLine,
    FlowDirection,
    LedgerSnapshot,
    ScheduledFlow,
    SubBalance,
)
from cashflow_kernel.exceptions import DataUnavailableError
from cashflow_kernel.logging_config import get_logger
from cashflow_kernel.models.balance import BalanceSnapshotModel
from cashflow_kernel.models.budget import BudgetLineModel
from cashflow_kernel.models.scheduled import PayableModel, ReceivableModel
from cashflow_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.cash_ledger")


class CashLedgerSelector(BaseSelector[BalanceSnapshotModel]):
    """
    Read-only access to balances, scheduled flows and budget lines.

    Guarantees:
        - balance_snapshots() is ordered by month ascending.
        - All methods return frozen DTOs from ``cashflow_kernel.domain.records``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def balance_snapshots(self) -> list[BalanceSnapshot]:
        """All balance snapshots, oldest month first."""
        stmt = (
            select(BalanceSnapshotModel)
            .options(selectinload(BalanceSnapshotModel.sub_balances))
            .order_by(BalanceSnapshotModel.month.asc(), BalanceSnapshotModel.created_at.asc())
        )
        return [
            BalanceSnapshot(
                month=row.month,
                total_minor_units=row.total_minor_units,
                sub_balances=tuple(
                    SubBalance(
                        account=sb.account,
                        amount_minor_units=sb.amount_minor_units,
                        currency=sb.currency,
                    )
                    for sb in row.sub_balances
                ),
                notes=row.notes,
                id=str(row.id),
            )
            for row in self.session.scalars(stmt)
        ]

    def receivables(self) -> list[ScheduledFlow]:
        """All receivables, settled and unsettled."""
        return [
            ScheduledFlow(
                direction=FlowDirection.INFLOW,
                amount_minor_units=row.amount_minor_units,
                currency=row.currency,
                settlement_date=row.settlement_date,
                is_settled=row.is_settled,
                counterparty=row.customer,
                description=row.description,
                id=str(row.id),
            )
            for row in self.session.scalars(select(ReceivableModel))
        ]

    def payables(self) -> list[ScheduledFlow]:
        """All payables, settled and unsettled."""
        return [
            ScheduledFlow(
                direction=FlowDirection.OUTFLOW,
                amount_minor_units=row.amount_minor_units,
                currency=row.currency,
                settlement_date=row.settlement_date,
                is_settled=row.is_settled,
                counterparty=row.payee,
                description=row.description,
                id=str(row.id),
            )
            for row in self.session.scalars(select(PayableModel))
        ]

    def budget_lines(self) -> list[BudgetLine]:
        """All budget lines across all months and categories."""
        return [
            BudgetLine(
                month=row.month,
                category=row.category,
                planned_inflow_minor_units=row.planned_inflow_minor_units,
                planned_outflow_minor_units=row.planned_outflow_minor_units,
                currency=row.currency,
                id=str(row.id),
            )
            for row in self.session.scalars(select(BudgetLineModel))
        ]

    def load_snapshot(self) -> LedgerSnapshot:
        """
        Read everything a forecast needs, once.

        Raises:
            DataUnavailableError: If any query fails.
        """
        try:
            snapshot = LedgerSnapshot(
                balances=tuple(self.balance_snapshots()),
                receivables=tuple(self.receivables()),
                payables=tuple(self.payables()),
                budget_lines=tuple(self.budget_lines()),
                fetched_at=self._clock.now_utc(),
            )
        except SQLAlchemyError as exc:
            logger.error("ledger_snapshot_read_failed", extra={
                "error_type": type(exc).__name__,
            }, exc_info=True)
            raise DataUnavailableError("sql", str(exc)) from exc

        logger.info("ledger_snapshot_loaded", extra=snapshot.record_counts)
        return snapshot
