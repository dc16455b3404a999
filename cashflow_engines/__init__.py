"""
cashflow_engines -- Pure calculation layer of the cash-flow forecaster.

Engines take frozen inputs (``LedgerSnapshot``, ``ForecastConfig`` values)
and return frozen outputs.  They perform no I/O and never read the clock
except through an injected ``Clock``.
"""

from cashflow_engines.aggregator import (
    LedgerAggregator,
    PeriodAggregates,
    is_settled,
    is_unsettled,
)
from cashflow_engines.forecast import (
    ForecastRow,
    RollingForecastEngine,
    prefix_sum_forecast,
    rolling_forecast,
)
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_engines.periods import (
    PeriodKey,
    add_months,
    enumerate_periods,
    period_key,
    period_start,
)
from cashflow_engines.tracer import traced_engine
from cashflow_engines.variance import (
    VarianceAssessment,
    VarianceDirection,
    VarianceReporter,
    variance,
)

__all__ = [
    # Normalizer
    "CurrencyNormalizer",
    # Periods
    "PeriodKey",
    "period_key",
    "period_start",
    "add_months",
    "enumerate_periods",
    # Aggregator
    "LedgerAggregator",
    "PeriodAggregates",
    "is_settled",
    "is_unsettled",
    # Forecast
    "ForecastRow",
    "RollingForecastEngine",
    "rolling_forecast",
    "prefix_sum_forecast",
    # Variance
    "VarianceAssessment",
    "VarianceDirection",
    "VarianceReporter",
    "variance",
    # Tracing
    "traced_engine",
]
