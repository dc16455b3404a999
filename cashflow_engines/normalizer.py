"""
cashflow_engines.normalizer -- Convert minor-unit amounts into the reporting currency.

Responsibility:
    ``CurrencyNormalizer.to_reporting_currency`` turns an integer amount in
    any configured currency into an integer amount of reporting-currency
    minor units.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Rates are handed in at
    construction (normally from ``ForecastConfig``); nothing here reads the
    environment.

Invariants enforced:
    - Reporting-currency amounts pass through unchanged.
    - All arithmetic is Decimal; results are rounded half away from zero
      (``MONEY_ROUNDING``) to the reporting currency's minor unit.
    - Every effective rate is a finite, positive Decimal.

Failure modes:
    - A configured rate that is missing, non-numeric, non-finite or <= 0 is
      replaced by its fallback rate and logged at WARNING.
    - ``UnsupportedCurrencyError`` if a currency has neither a usable rate
      nor a fallback, or is not a known ISO 4217 code.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from cashflow_kernel.domain.currency import CurrencyRegistry
from cashflow_kernel.domain.values import MONEY_ROUNDING
from cashflow_kernel.exceptions import UnsupportedCurrencyError
from cashflow_kernel.logging_config import get_logger

if TYPE_CHECKING:
    from cashflow_config.schema import ForecastConfig

logger = get_logger("engines.normalizer")


def _coerce_rate(value: object) -> Decimal | None:
    """Return ``value`` as a finite positive Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


class CurrencyNormalizer:
    """
    Converts amounts into a single reporting currency.

    Rates are expressed as reporting-currency units per ONE unit of the
    source currency (e.g. ``{"GBP": "1.17"}`` with EUR reporting means
    1 GBP = 1.17 EUR).
    """

    def __init__(
        self,
        reporting_currency: str = "EUR",
        rates: Mapping[str, object] | None = None,
        fallback_rates: Mapping[str, object] | None = None,
    ):
        self._reporting = CurrencyRegistry.validate(reporting_currency)
        self._reporting_places = CurrencyRegistry.get_decimal_places(self._reporting)
        self._rates: dict[str, Decimal] = {}

        fallbacks = {
            code.upper(): _coerce_rate(value)
            for code, value in (fallback_rates or {}).items()
        }
        configured = {code.upper(): value for code, value in (rates or {}).items()}

        for code in sorted(set(configured) | set(fallbacks)):
            if code == self._reporting:
                continue
            rate = _coerce_rate(configured.get(code))
            if rate is None:
                fallback = fallbacks.get(code)
                if code in configured:
                    logger.warning("exchange_rate_fallback", extra={
                        "currency": code,
                        "configured_rate": str(configured[code]),
                        "fallback_rate": str(fallback) if fallback is not None else None,
                    })
                rate = fallback
            if rate is not None:
                self._rates[code] = rate

    @classmethod
    def from_config(cls, config: ForecastConfig) -> CurrencyNormalizer:
        return cls(
            reporting_currency=config.reporting_currency,
            rates=config.exchange_rates,
            fallback_rates=config.fallback_rates,
        )

    @property
    def reporting_currency(self) -> str:
        return self._reporting

    @property
    def rates(self) -> Mapping[str, Decimal]:
        """Effective rates after fallback substitution."""
        return dict(self._rates)

    def rate_for(self, currency: str) -> Decimal:
        """
        Effective rate for ``currency`` (``1`` for the reporting currency).

        Raises:
            UnsupportedCurrencyError: If no rate is available.
        """
        code = currency.upper() if isinstance(currency, str) else currency
        if code == self._reporting:
            return Decimal("1")
        if not CurrencyRegistry.is_valid(code) or code not in self._rates:
            raise UnsupportedCurrencyError(str(currency), self._reporting)
        return self._rates[code]

    def to_reporting_currency(self, amount_minor_units: int, source_currency: str) -> int:
        """
        Convert ``amount_minor_units`` of ``source_currency`` into reporting minor units.

        Raises:
            UnsupportedCurrencyError: If ``source_currency`` cannot be converted.
        """
        code = source_currency.upper() if isinstance(source_currency, str) else source_currency
        if code == self._reporting:
            return amount_minor_units

        rate = self.rate_for(code)
        source_places = CurrencyRegistry.get_decimal_places(code)
        major = Decimal(amount_minor_units).scaleb(-source_places)
        minor = (major * rate).scaleb(self._reporting_places)
        return int(minor.quantize(Decimal(1), rounding=MONEY_ROUNDING))
