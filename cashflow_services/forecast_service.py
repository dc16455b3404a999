"""
cashflow_services.forecast_service -- Forecast request orchestration.

Responsibility:
    Turn loosely-typed request parameters into a ``ForecastRequest``, read
    the ledger ONCE through a ``LedgerSource``, run the rolling forecast
    engine and assess every row's variance, returning a ``ForecastReport``.

Architecture position:
    Services -- imperative shell over the pure engines.  Owns the single
    read of the ledger; engines only see the frozen ``LedgerSnapshot``.

Invariants enforced:
    - One ``load_snapshot()`` call per forecast; every row of a report
      reflects the same point-in-time ledger state.
    - Request parameters are clamped or defaulted, never rejected.
    - No partial report: a failed read raises before any row is built.

Failure modes:
    - DataUnavailableError: the ledger source could not be read.
    - UnsupportedCurrencyError: a record's currency has no configured rate.

Usage:
    from cashflow_services import ForecastService

    with session_scope() as session:
        service = ForecastService(session, config=get_active_config())
        report = service.run_forecast({"months": "6", "include_budget": "1"})
        for line in report.lines:
            print(line.row.label, line.row.closing_forecast, line.indicator)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from sqlalchemy.orm import Session

from cashflow_config import get_active_config
from cashflow_config.schema import ForecastConfig
from cashflow_engines.forecast import ForecastRow, RollingForecastEngine
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_engines.periods import PeriodKey
from cashflow_engines.variance import VarianceAssessment, VarianceReporter
from cashflow_kernel.domain.clock import Clock, SystemClock
from cashflow_kernel.domain.records import LedgerSnapshot
from cashflow_kernel.domain.values import Money
from cashflow_kernel.logging_config import LogContext, get_logger
from cashflow_kernel.selectors.cash_ledger_selector import CashLedgerSelector

logger = get_logger("services.forecast")

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on", "y"})


@runtime_checkable
class LedgerSource(Protocol):
    """Anything that can produce one consistent ledger snapshot."""

    def load_snapshot(self) -> LedgerSnapshot: ...


def _parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite() or parsed < 0:
        return None
    return parsed


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_STRINGS


@dataclass(frozen=True)
class ForecastRequest:
    """
    Validated forecast parameters.

    Attributes:
        horizon_months: Clamped number of months to project.
        variance_threshold_minor_units: Highlight threshold in reporting
            currency minor units.
        include_budget: Whether planned budget flows feed the forecast track.
    """

    horizon_months: int
    variance_threshold_minor_units: int
    include_budget: bool = False

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any] | None,
        config: ForecastConfig,
    ) -> ForecastRequest:
        """
        Build a request from query-string style parameters.

        Recognised keys: ``months``, ``variance_threshold`` (MAJOR units),
        ``include_budget``.  Missing or non-numeric values fall back to the
        configured defaults; out-of-range months are clamped.
        """
        params = params or {}

        # "0" is a number: it clamps to the minimum instead of using the default.
        months = _parse_int(params.get("months"))
        effective_months = (
            config.horizon.default if months is None else config.horizon.clamp(months)
        )
        if months is not None and effective_months != months:
            logger.debug("request_months_clamped", extra={
                "requested": months,
                "effective": effective_months,
            })
        elif months is None and params.get("months") is not None:
            logger.debug("request_months_defaulted", extra={
                "raw": str(params.get("months")),
                "effective": effective_months,
            })

        # A zero threshold is kept and highlights every row.
        threshold = _parse_decimal(params.get("variance_threshold"))
        if threshold is None:
            if params.get("variance_threshold") is not None:
                logger.debug("request_threshold_defaulted", extra={
                    "raw": str(params.get("variance_threshold")),
                    "effective": str(config.default_variance_threshold),
                })
            threshold = config.default_variance_threshold

        return cls(
            horizon_months=effective_months,
            variance_threshold_minor_units=Money.from_major(
                threshold, config.reporting_currency
            ).minor_units,
            include_budget=_parse_bool(params.get("include_budget")),
        )


@dataclass(frozen=True)
class ForecastReport:
    """Ordered forecast rows with their variance assessments."""

    request: ForecastRequest
    base_period: PeriodKey
    reporting_currency: str
    lines: tuple[VarianceAssessment, ...]
    generated_at: datetime

    @property
    def rows(self) -> list[ForecastRow]:
        return [line.row for line in self.lines]

    @property
    def highlighted(self) -> list[VarianceAssessment]:
        return [line for line in self.lines if line.is_highlighted]

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_period": self.base_period.code,
            "reporting_currency": self.reporting_currency,
            "horizon_months": self.request.horizon_months,
            "include_budget": self.request.include_budget,
            "variance_threshold": self.request.variance_threshold_minor_units,
            "generated_at": self.generated_at.isoformat(),
            "rows": [
                {
                    **line.row.to_dict(),
                    "direction": line.direction.value,
                    "is_highlighted": line.is_highlighted,
                }
                for line in self.lines
            ],
        }


class ForecastService:
    """
    Runs forecasts against a ledger source.

    Contract:
        ``run_forecast`` reads the source once and returns a complete
        ``ForecastReport`` or raises.

    Non-goals:
        - Does NOT cache snapshots or reports between calls.
        - Does NOT retry failed reads.
        - Does NOT write to the ledger.
    """

    def __init__(
        self,
        source: LedgerSource | Session,
        config: ForecastConfig | None = None,
        clock: Clock | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        if isinstance(source, Session):
            source = CashLedgerSelector(source, clock=self._clock)
        self._source = source
        self._normalizer = CurrencyNormalizer.from_config(self._config)
        self._engine = RollingForecastEngine(
            self._normalizer,
            horizon=self._config.horizon,
            timezone=self._config.timezone,
            clock=self._clock,
        )
        self._reporter = VarianceReporter()

    @property
    def config(self) -> ForecastConfig:
        return self._config

    @property
    def normalizer(self) -> CurrencyNormalizer:
        return self._normalizer

    def build_request(self, params: Mapping[str, Any] | None = None) -> ForecastRequest:
        return ForecastRequest.from_params(params, self._config)

    def run_forecast(
        self,
        params: Mapping[str, Any] | ForecastRequest | None = None,
        *,
        today: date | datetime | None = None,
        request_id: str | None = None,
    ) -> ForecastReport:
        """
        Produce a forecast report.

        Args:
            params: A ``ForecastRequest`` or raw parameters for
                ``ForecastRequest.from_params``.
            today: Overrides the clock for the no-balance base month.
            request_id: Bound into the log context; generated when omitted.

        Raises:
            DataUnavailableError: If the ledger cannot be read.
        """
        request = params if isinstance(params, ForecastRequest) else self.build_request(params)

        with LogContext.bind(request_id=request_id or str(uuid4())):
            snapshot = self._source.load_snapshot()
            rows = self._engine.compute_forecast(
                snapshot,
                horizon_months=request.horizon_months,
                include_budget=request.include_budget,
                today=today,
            )
            lines = tuple(
                self._reporter.assess_all(rows, request.variance_threshold_minor_units)
            )

            logger.info("forecast_report_built", extra={
                "rows": len(lines),
                "highlighted": sum(1 for line in lines if line.is_highlighted),
                "include_budget": request.include_budget,
            })

        return ForecastReport(
            request=request,
            base_period=rows[0].period,
            reporting_currency=self._normalizer.reporting_currency,
            lines=lines,
            generated_at=self._clock.now_utc(),
        )
