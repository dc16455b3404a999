"""
Property-based tests for the rolling forecast.

Generates random ledgers (mixed EUR/GBP flows, settled and unsettled,
budget lines) and checks that the carry, net, variance and prefix-sum
properties hold for every generated table.
"""

from datetime import date

import pytest

try:
    from hypothesis import HealthCheck, given, settings
    from hypothesis import strategies as st

    HYPOTHESIS_AVAILABLE = True
except ImportError:
    HYPOTHESIS_AVAILABLE = False

    def given(*args, **kwargs):
        def decorator(f):
            return pytest.mark.skip(reason="hypothesis not installed")(f)
        return decorator

    def settings(*args, **kwargs):
        def decorator(f):
            return f
        return decorator

    class HealthCheck:
        too_slow = None
        function_scoped_fixture = None

    class st:
        @staticmethod
        def integers(*args, **kwargs):
            return None

        @staticmethod
        def booleans(*args, **kwargs):
            return None

        @staticmethod
        def sampled_from(*args, **kwargs):
            return None

        @staticmethod
        def tuples(*args, **kwargs):
            return None

        @staticmethod
        def lists(*args, **kwargs):
            return None


from cashflow_engines.forecast import RollingForecastEngine, prefix_sum_forecast
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_engines.periods import add_months
from cashflow_kernel.domain.clock import DeterministicClock
from cashflow_kernel.domain.records import LedgerSnapshot
from conftest import make_balance, make_budget, make_payable, make_receivable

BASE = date(2025, 9, 1)

flows = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=10_000_000),  # amount
        st.integers(min_value=-3, max_value=15),  # month offset from base
        st.integers(min_value=1, max_value=28),  # day
        st.booleans(),  # settled
        st.sampled_from(["EUR", "GBP"]),
    ),
    max_size=30,
)

budgets = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=12),
        st.sampled_from(["Payroll", "Consulting", "Tooling"]),
        st.integers(min_value=0, max_value=5_000_000),
        st.integers(min_value=0, max_value=5_000_000),
    ),
    max_size=15,
)


def _snapshot(opening, receivables, payables, budget_rows) -> LedgerSnapshot:
    def due(offset, day):
        return add_months(BASE, offset).replace(day=day)

    seen = set()
    lines = []
    for offset, category, inflow, outflow in budget_rows:
        key = (offset, category)
        if key in seen:
            continue
        seen.add(key)
        lines.append(make_budget(add_months(BASE, offset), category, inflow, outflow))

    return LedgerSnapshot(
        balances=[make_balance(BASE, opening)],
        receivables=[
            make_receivable(a, due(o, d), currency=c, settled=s)
            for a, o, d, s, c in receivables
        ],
        payables=[
            make_payable(a, due(o, d), currency=c, settled=s)
            for a, o, d, s, c in payables
        ],
        budget_lines=lines,
    )


def _engine() -> RollingForecastEngine:
    return RollingForecastEngine(
        CurrencyNormalizer("EUR", rates={"GBP": "1.17"}),
        clock=DeterministicClock(),
    )


@pytest.mark.skipif(not HYPOTHESIS_AVAILABLE, reason="hypothesis not installed")
class TestForecastProperties:
    @given(
        opening=st.integers(min_value=-10_000_000, max_value=10_000_000),
        receivables=flows,
        payables=flows,
        budget_rows=budgets,
        horizon=st.integers(min_value=1, max_value=36),
        include_budget=st.booleans(),
    )
    @settings(
        max_examples=75,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    )
    def test_table_properties(
        self, opening, receivables, payables, budget_rows, horizon, include_budget
    ):
        engine = _engine()
        snapshot = _snapshot(opening, receivables, payables, budget_rows)
        rows = engine.compute_forecast(
            snapshot, horizon_months=horizon, include_budget=include_budget
        )

        assert len(rows) == horizon
        assert rows[0].opening_forecast == rows[0].opening_actual == opening
        for row in rows:
            assert row.closing_forecast - row.opening_forecast == row.forecast_net
            assert row.closing_actual - row.opening_actual == row.actual_net
            assert row.variance == row.closing_actual - row.closing_forecast
        for prev, nxt in zip(rows, rows[1:]):
            assert nxt.opening_forecast == prev.closing_forecast
            assert nxt.opening_actual == prev.closing_actual

        aggregates = engine.period_aggregates(
            snapshot, [r.period for r in rows], include_budget
        )
        assert prefix_sum_forecast(aggregates, opening) == rows

    @given(amount=st.integers(min_value=-10**12, max_value=10**12))
    @settings(max_examples=200, deadline=None)
    def test_reporting_currency_is_identity(self, amount):
        assert CurrencyNormalizer("EUR").to_reporting_currency(amount, "EUR") == amount
