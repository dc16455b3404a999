"""
cashflow_engines.aggregator -- Per-period inflow/outflow totals.

Responsibility:
    Given the raw records of one ``LedgerSnapshot`` and a target month,
    compute the expected (unsettled), actual (settled) and planned (budget)
    inflow and outflow totals for that month in the reporting currency.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Works only on the frozen
    snapshot handed in by the caller; never re-reads the store.

Invariants enforced:
    - Every record is converted to the reporting currency BEFORE it is
      summed; raw mixed-currency amounts are never added together.
    - Budget lines are totalled across all categories of the month.
    - Results are integer reporting-currency minor units.

Failure modes:
    - UnsupportedCurrencyError (from the normalizer) if a record carries a
      currency with no configured rate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any

from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_engines.periods import PeriodKey, period_key, resolve_timezone
from cashflow_kernel.domain.records import BudgetLine, LedgerSnapshot, ScheduledFlow


def is_unsettled(record: ScheduledFlow) -> bool:
    return not record.is_settled


def is_settled(record: ScheduledFlow) -> bool:
    return record.is_settled


def _record_date(record: Any) -> date | datetime:
    if isinstance(record, BudgetLine):
        return record.month
    return record.settlement_date


def _record_amount(record: Any) -> int:
    return record.amount_minor_units


@dataclass(frozen=True)
class PeriodAggregates:
    """The six monthly totals a forecast row is built from."""

    period: PeriodKey
    expected_inflow: int = 0
    expected_outflow: int = 0
    actual_inflow: int = 0
    actual_outflow: int = 0
    planned_inflow: int = 0
    planned_outflow: int = 0

    @property
    def forecast_net(self) -> int:
        return (
            self.expected_inflow - self.expected_outflow
            + self.planned_inflow - self.planned_outflow
        )

    @property
    def actual_net(self) -> int:
        return self.actual_inflow - self.actual_outflow


class LedgerAggregator:
    """Sums snapshot records for one month at a time."""

    def __init__(self, normalizer: CurrencyNormalizer, timezone: str | tzinfo | None = None):
        self._normalizer = normalizer
        self._tz = resolve_timezone(timezone)

    @property
    def normalizer(self) -> CurrencyNormalizer:
        return self._normalizer

    def aggregate(
        self,
        records: Iterable[Any],
        period: PeriodKey,
        predicate: Callable[[Any], bool] | None = None,
        *,
        amount_of: Callable[[Any], int] = _record_amount,
    ) -> int:
        """
        Reporting-currency total of ``records`` dated in ``period``.

        Args:
            records: Scheduled flows or budget lines.
            period: Target month.
            predicate: Optional filter (e.g. ``is_unsettled``).
            amount_of: Picks the minor-unit amount from a record; budget
                lines use it to select the planned inflow or outflow.
        """
        total = 0
        for record in records:
            if period_key(_record_date(record), self._tz) != period:
                continue
            if predicate is not None and not predicate(record):
                continue
            total += self._normalizer.to_reporting_currency(
                amount_of(record), record.currency
            )
        return total

    def aggregate_period(
        self,
        snapshot: LedgerSnapshot,
        period: PeriodKey,
        include_budget: bool = False,
    ) -> PeriodAggregates:
        """All totals for ``period``; planned totals stay zero unless ``include_budget``."""
        planned_inflow = planned_outflow = 0
        if include_budget:
            planned_inflow = self.aggregate(
                snapshot.budget_lines, period,
                amount_of=lambda line: line.planned_inflow_minor_units,
            )
            planned_outflow = self.aggregate(
                snapshot.budget_lines, period,
                amount_of=lambda line: line.planned_outflow_minor_units,
            )

        return PeriodAggregates(
            period=period,
            expected_inflow=self.aggregate(snapshot.receivables, period, is_unsettled),
            expected_outflow=self.aggregate(snapshot.payables, period, is_unsettled),
            actual_inflow=self.aggregate(snapshot.receivables, period, is_settled),
            actual_outflow=self.aggregate(snapshot.payables, period, is_settled),
            planned_inflow=planned_inflow,
            planned_outflow=planned_outflow,
        )
