"""
Pytest fixtures for the cash-flow forecaster test suite.

Provides:
- Structured logging setup and per-test LogContext cleanup
- ``captured_logs`` for asserting on emitted JSON log records
- In-memory SQLite sessions for selector and service tests
- Deterministic clock, config and normalizer fixtures
- Small record factories
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from cashflow_config.schema import ForecastConfig
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from cashflow_kernel.domain.clock import DeterministicClock
from cashflow_kernel.domain.records import (
    BalanceSnapshot,
    BudgetLine,
    FlowDirection,
    ScheduledFlow,
)
from cashflow_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture cashflow_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            engine.compute_forecast(snapshot, horizon_months=3)
            logs = captured_logs()
            assert any(r["message"] == "forecast_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("cashflow_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Fresh in-memory SQLite database per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    sess = get_session()
    yield sess
    sess.close()
    reset_engine()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2025, 9, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def config() -> ForecastConfig:
    return ForecastConfig(
        reporting_currency="EUR",
        exchange_rates={"GBP": Decimal("1.17")},
        fallback_rates={"GBP": Decimal("1.17")},
    )


@pytest.fixture
def normalizer(config) -> CurrencyNormalizer:
    return CurrencyNormalizer.from_config(config)


def make_receivable(amount, due, currency="EUR", settled=False, **kwargs) -> ScheduledFlow:
    return ScheduledFlow(
        direction=FlowDirection.INFLOW,
        amount_minor_units=amount,
        currency=currency,
        settlement_date=due,
        is_settled=settled,
        **kwargs,
    )


def make_payable(amount, due, currency="EUR", settled=False, **kwargs) -> ScheduledFlow:
    return ScheduledFlow(
        direction=FlowDirection.OUTFLOW,
        amount_minor_units=amount,
        currency=currency,
        settlement_date=due,
        is_settled=settled,
        **kwargs,
    )


def make_balance(month: date, total: int) -> BalanceSnapshot:
    return BalanceSnapshot(month=month, total_minor_units=total)


def make_budget(month: date, category: str, inflow: int = 0, outflow: int = 0) -> BudgetLine:
    return BudgetLine(
        month=month,
        category=category,
        planned_inflow_minor_units=inflow,
        planned_outflow_minor_units=outflow,
    )
