"""
Pure domain layer.

Value objects, record DTOs and budget helpers with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (except the injectable Clock itself)
- I/O

All domain objects are immutable and deterministic.
"""

from cashflow_kernel.domain.budget import (
    copy_budget_forward,
    upsert_budget_line,
    validate_budget_lines,
)
from cashflow_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from cashflow_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from cashflow_kernel.domain.records import (
    BalanceSnapshot,
    BudgetLine,
    FlowDirection,
    LedgerSnapshot,
    ReportingConverter,
    ScheduledFlow,
    SubBalance,
)
from cashflow_kernel.domain.values import MONEY_ROUNDING, Currency, Money

__all__ = [
    # Values
    "Currency",
    "Money",
    "MONEY_ROUNDING",
    # Currency
    "CurrencyRegistry",
    "CurrencyInfo",
    # Records
    "BalanceSnapshot",
    "BudgetLine",
    "FlowDirection",
    "LedgerSnapshot",
    "ReportingConverter",
    "ScheduledFlow",
    "SubBalance",
    # Budget helpers
    "copy_budget_forward",
    "upsert_budget_line",
    "validate_budget_lines",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
