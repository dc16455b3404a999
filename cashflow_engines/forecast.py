"""
cashflow_engines.forecast -- Rolling month-by-month cash forecast.

Responsibility:
    Turn one ``LedgerSnapshot`` into an ordered table of ``ForecastRow``
    objects, carrying a forecast track and an actual track forward from the
    latest balance snapshot.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The only notion of "now"
    comes from the injected ``Clock`` (or an explicit ``today``), and is
    used only when the snapshot holds no balance.

Invariants enforced:
    - Rolling carry: a row's closing forecast / closing actual is the next
      row's opening forecast / opening actual, for both tracks
      independently.
    - Net consistency: closing = opening + net on both tracks.
    - variance = closing_actual - closing_forecast on every row.
    - One code path for with/without budget (``include_budget`` only
      switches the planned aggregates on).
    - ``prefix_sum_forecast`` yields rows identical to the sequential loop.

Failure modes:
    - UnsupportedCurrencyError propagates from the aggregator.
    - Out-of-range horizons are clamped, never rejected.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime, tzinfo
from itertools import accumulate

from cashflow_config.schema import HorizonBounds
from cashflow_engines.aggregator import LedgerAggregator, PeriodAggregates
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_engines.periods import (
    PeriodKey,
    enumerate_periods,
    period_key,
    resolve_timezone,
)
from cashflow_engines.tracer import traced_engine
from cashflow_kernel.domain.clock import Clock, SystemClock
from cashflow_kernel.domain.records import LedgerSnapshot
from cashflow_kernel.logging_config import get_logger

logger = get_logger("engines.forecast")


@dataclass(frozen=True)
class ForecastRow:
    """One projected month.  All amounts are reporting-currency minor units."""

    period: PeriodKey
    opening_forecast: int
    opening_actual: int
    expected_inflow: int
    expected_outflow: int
    planned_inflow: int
    planned_outflow: int
    forecast_net: int
    closing_forecast: int
    actual_inflow: int
    actual_outflow: int
    actual_net: int
    closing_actual: int
    variance: int

    @property
    def label(self) -> str:
        return self.period.label

    @classmethod
    def from_aggregates(
        cls,
        aggregates: PeriodAggregates,
        opening_forecast: int,
        opening_actual: int,
    ) -> ForecastRow:
        forecast_net = aggregates.forecast_net
        actual_net = aggregates.actual_net
        closing_forecast = opening_forecast + forecast_net
        closing_actual = opening_actual + actual_net
        return cls(
            period=aggregates.period,
            opening_forecast=opening_forecast,
            opening_actual=opening_actual,
            expected_inflow=aggregates.expected_inflow,
            expected_outflow=aggregates.expected_outflow,
            planned_inflow=aggregates.planned_inflow,
            planned_outflow=aggregates.planned_outflow,
            forecast_net=forecast_net,
            closing_forecast=closing_forecast,
            actual_inflow=aggregates.actual_inflow,
            actual_outflow=aggregates.actual_outflow,
            actual_net=actual_net,
            closing_actual=closing_actual,
            variance=closing_actual - closing_forecast,
        )

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["period"] = self.period.code
        data["label"] = self.label
        return data


def rolling_forecast(
    aggregates: Sequence[PeriodAggregates],
    opening_balance: int,
) -> list[ForecastRow]:
    """Sequential loop: each row opens where the previous one closed."""
    rows: list[ForecastRow] = []
    opening_forecast = opening_actual = opening_balance
    for agg in aggregates:
        row = ForecastRow.from_aggregates(agg, opening_forecast, opening_actual)
        rows.append(row)
        opening_forecast = row.closing_forecast
        opening_actual = row.closing_actual
    return rows


def prefix_sum_forecast(
    aggregates: Sequence[PeriodAggregates],
    opening_balance: int,
) -> list[ForecastRow]:
    """
    Same rows as ``rolling_forecast``, built from two running sums.

    Closing balances are ``opening_balance`` plus the prefix sum of the
    per-period nets, so no row depends on the previous row object.
    """
    forecast_closings = list(
        accumulate((a.forecast_net for a in aggregates), initial=opening_balance)
    )
    actual_closings = list(
        accumulate((a.actual_net for a in aggregates), initial=opening_balance)
    )
    return [
        ForecastRow.from_aggregates(agg, forecast_closings[i], actual_closings[i])
        for i, agg in enumerate(aggregates)
    ]


class RollingForecastEngine:
    """
    Builds the forecast table for a snapshot.

    Usage:
        engine = RollingForecastEngine(normalizer, clock=clock)
        rows = engine.compute_forecast(snapshot, horizon_months=6)
    """

    def __init__(
        self,
        normalizer: CurrencyNormalizer,
        horizon: HorizonBounds | None = None,
        timezone: str | tzinfo | None = None,
        clock: Clock | None = None,
    ):
        self._tz = resolve_timezone(timezone)
        self._aggregator = LedgerAggregator(normalizer, self._tz)
        self._horizon = horizon or HorizonBounds()
        self._clock = clock or SystemClock()

    @property
    def horizon(self) -> HorizonBounds:
        return self._horizon

    def clamp_horizon(self, horizon_months: int | None) -> int:
        if horizon_months is None:
            return self._horizon.default
        return self._horizon.clamp(horizon_months)

    def base_period(
        self,
        snapshot: LedgerSnapshot,
        today: date | datetime | None = None,
    ) -> tuple[PeriodKey, int]:
        """
        Month and opening balance the forecast starts from.

        The latest balance snapshot wins; without one the forecast opens at
        zero in the current month.
        """
        latest = snapshot.latest_balance
        if latest is not None:
            return period_key(latest.month, self._tz), latest.total_minor_units
        if today is None:
            today = self._clock.now()
        return period_key(today, self._tz), 0

    def period_aggregates(
        self,
        snapshot: LedgerSnapshot,
        periods: Sequence[PeriodKey],
        include_budget: bool = False,
    ) -> list[PeriodAggregates]:
        return [
            self._aggregator.aggregate_period(snapshot, period, include_budget)
            for period in periods
        ]

    @traced_engine(
        "rolling_forecast", "1.0",
        fingerprint_fields=("horizon_months", "include_budget", "today"),
    )
    def compute_forecast(
        self,
        snapshot: LedgerSnapshot,
        *,
        horizon_months: int | None = None,
        include_budget: bool = False,
        today: date | datetime | None = None,
    ) -> list[ForecastRow]:
        """
        Forecast ``horizon_months`` months from the base period.

        Args:
            snapshot: The single ledger read this forecast is built from.
            horizon_months: Requested length; clamped to the configured
                bounds, default when None.
            include_budget: Add planned budget inflow/outflow to the
                forecast track.
            today: Overrides the clock when choosing a base month.
        """
        months = self.clamp_horizon(horizon_months)
        if horizon_months is not None and months != horizon_months:
            logger.debug("horizon_clamped", extra={
                "requested": horizon_months,
                "effective": months,
            })

        base, opening = self.base_period(snapshot, today)
        logger.info("forecast_started", extra={
            "base_period": base.code,
            "opening_balance": opening,
            "horizon_months": months,
            "include_budget": include_budget,
            "reporting_currency": self._aggregator.normalizer.reporting_currency,
        })

        aggregates = self.period_aggregates(
            snapshot, enumerate_periods(base, months), include_budget
        )
        rows = rolling_forecast(aggregates, opening)

        logger.info("forecast_completed", extra={
            "base_period": base.code,
            "rows": len(rows),
            "closing_forecast": rows[-1].closing_forecast,
            "closing_actual": rows[-1].closing_actual,
        })
        return rows
