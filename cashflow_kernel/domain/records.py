"""
Records -- frozen DTOs for the raw ledger inputs of a forecast.

Responsibility:
    Typed, immutable views of balance snapshots, scheduled receivables and
    payables, and monthly budget lines, plus the ``LedgerSnapshot`` that
    bundles one point-in-time read of all of them.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Selectors build these from ORM rows;
    engines consume them.  Nothing here imports SQLAlchemy.

Invariants enforced:
    - Scheduled flow and budget amounts are non-negative integers.
    - Currency codes are valid ISO 4217 codes known to ``CurrencyRegistry``.
    - Budget line months are normalized to the first day of the month.
    - ``BalanceSnapshot.from_sub_balances`` computes ``total_minor_units``
      from its sub-balances, so the total invariant holds by construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Protocol

from cashflow_kernel.domain.currency import CurrencyRegistry
from cashflow_kernel.exceptions import (
    BalanceTotalMismatchError,
    InvalidCurrencyError,
    NegativeAmountError,
)


class ReportingConverter(Protocol):
    """Anything that converts a minor-unit amount into the reporting currency."""

    @property
    def reporting_currency(self) -> str: ...

    def to_reporting_currency(self, amount_minor_units: int, source_currency: str) -> int: ...


def _validate_currency(code: str) -> str:
    try:
        return CurrencyRegistry.validate(code)
    except ValueError as exc:
        raise InvalidCurrencyError(str(code)) from exc


def _require_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int minor units, got {type(value).__name__}")


class FlowDirection(str, Enum):
    """Which way a scheduled flow moves cash."""

    INFLOW = "inflow"  # receivable
    OUTFLOW = "outflow"  # payable


@dataclass(frozen=True)
class SubBalance:
    """One account balance inside a snapshot, in its native currency."""

    account: str
    amount_minor_units: int
    currency: str

    def __post_init__(self) -> None:
        _require_int("amount_minor_units", self.amount_minor_units)
        object.__setattr__(self, "currency", _validate_currency(self.currency))


@dataclass(frozen=True)
class BalanceSnapshot:
    """
    Point-in-time cash position.

    ``total_minor_units`` is in the reporting currency; sub-balances stay in
    their native currencies.  Only the latest snapshot seeds a forecast.
    """

    month: date
    total_minor_units: int
    sub_balances: tuple[SubBalance, ...] = ()
    notes: str = ""
    id: str | None = None

    def __post_init__(self) -> None:
        _require_int("total_minor_units", self.total_minor_units)
        if isinstance(self.month, datetime):
            object.__setattr__(self, "month", self.month.date())
        object.__setattr__(self, "sub_balances", tuple(self.sub_balances))

    @classmethod
    def from_sub_balances(
        cls,
        month: date,
        sub_balances: tuple[SubBalance, ...] | list[SubBalance],
        converter: ReportingConverter,
        notes: str = "",
    ) -> BalanceSnapshot:
        """Build a snapshot whose total is the converted sum of ``sub_balances``."""
        total = sum(
            converter.to_reporting_currency(sb.amount_minor_units, sb.currency)
            for sb in sub_balances
        )
        return cls(
            month=month,
            total_minor_units=total,
            sub_balances=tuple(sub_balances),
            notes=notes,
        )

    def verify_total(self, converter: ReportingConverter) -> None:
        """
        Re-check the total invariant against ``converter``.

        Raises:
            BalanceTotalMismatchError: If the stored total disagrees.
        """
        computed = sum(
            converter.to_reporting_currency(sb.amount_minor_units, sb.currency)
            for sb in self.sub_balances
        )
        if computed != self.total_minor_units:
            raise BalanceTotalMismatchError(self.month, self.total_minor_units, computed)


@dataclass(frozen=True)
class ScheduledFlow:
    """
    A receivable (``INFLOW``) or payable (``OUTFLOW``) due on a settlement date.

    ``is_settled`` separates the forecast track (unsettled) from the actual
    track (settled).  ``settlement_date`` may be a ``date`` or a ``datetime``;
    aware datetimes are moved to the canonical zone before bucketing.
    """

    direction: FlowDirection
    amount_minor_units: int
    currency: str
    settlement_date: date | datetime
    is_settled: bool = False
    counterparty: str = ""
    description: str = ""
    id: str | None = None

    def __post_init__(self) -> None:
        _require_int("amount_minor_units", self.amount_minor_units)
        if self.amount_minor_units < 0:
            raise NegativeAmountError("amount_minor_units", self.amount_minor_units)
        object.__setattr__(self, "currency", _validate_currency(self.currency))
        object.__setattr__(self, "direction", FlowDirection(self.direction))

    def with_settled(self, is_settled: bool = True) -> ScheduledFlow:
        """Return a copy marked settled (or unsettled)."""
        return replace(self, is_settled=is_settled)


@dataclass(frozen=True)
class BudgetLine:
    """Planned inflow and outflow for one (month, category)."""

    month: date
    category: str
    planned_inflow_minor_units: int = 0
    planned_outflow_minor_units: int = 0
    currency: str = "EUR"
    id: str | None = None

    def __post_init__(self) -> None:
        for name in ("planned_inflow_minor_units", "planned_outflow_minor_units"):
            value = getattr(self, name)
            _require_int(name, value)
            if value < 0:
                raise NegativeAmountError(name, value)
        month = self.month.date() if isinstance(self.month, datetime) else self.month
        object.__setattr__(self, "month", month.replace(day=1))
        object.__setattr__(self, "currency", _validate_currency(self.currency))

    @property
    def key(self) -> tuple[date, str]:
        return (self.month, self.category)


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    One consistent read of everything a forecast needs.

    Fetched once per forecast request and never re-read inside the period
    loop, so every row of a forecast reflects the same ledger state.
    """

    balances: tuple[BalanceSnapshot, ...] = ()
    receivables: tuple[ScheduledFlow, ...] = ()
    payables: tuple[ScheduledFlow, ...] = ()
    budget_lines: tuple[BudgetLine, ...] = ()
    fetched_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for name in ("balances", "receivables", "payables", "budget_lines"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def latest_balance(self) -> BalanceSnapshot | None:
        """Chronologically last snapshot; the last one wins on equal months."""
        if not self.balances:
            return None
        return sorted(self.balances, key=lambda b: b.month)[-1]

    @property
    def record_counts(self) -> dict[str, int]:
        return {
            "balances": len(self.balances),
            "receivables": len(self.receivables),
            "payables": len(self.payables),
            "budget_lines": len(self.budget_lines),
        }
