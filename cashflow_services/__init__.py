"""
cashflow_services -- Imperative shell of the cash-flow forecaster.

Services own I/O (the single ledger read) and hand frozen data to the
engines in ``cashflow_engines``.
"""

from cashflow_services.forecast_service import (
    ForecastReport,
    ForecastRequest,
    ForecastService,
    LedgerSource,
)

__all__ = [
    "ForecastReport",
    "ForecastRequest",
    "ForecastService",
    "LedgerSource",
]
