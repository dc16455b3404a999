"""
Configuration schema (``cashflow_config.schema``).

``ForecastConfig`` is the only runtime configuration artifact.  It is a
frozen dataclass built by ``cashflow_config.loader`` and handed explicitly
to the normalizer, engines and services -- nothing reads environment
variables or files after it is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class HorizonBounds:
    """Allowed forecast horizon in months."""

    default: int = 12
    min: int = 1
    max: int = 36

    def __post_init__(self) -> None:
        if self.min < 1:
            raise ValueError("horizon min must be at least 1")
        if self.max < self.min:
            raise ValueError("horizon max must be >= min")
        if not self.min <= self.default <= self.max:
            raise ValueError(
                f"horizon default {self.default} outside [{self.min}, {self.max}]"
            )

    def clamp(self, months: int) -> int:
        return min(max(months, self.min), self.max)


@dataclass(frozen=True)
class ForecastConfig:
    """
    Resolved forecast configuration.

    Attributes:
        reporting_currency: ISO 4217 code every total is expressed in.
        exchange_rates: Reporting-currency units per one unit of the keyed
            currency, as configured (possibly invalid; the normalizer
            substitutes ``fallback_rates`` for bad values).
        fallback_rates: Documented defaults used when a configured rate is
            missing or not a finite positive number.
        timezone: IANA zone name used to bucket aware datetimes into months.
        horizon: Allowed and default forecast horizon.
        default_variance_threshold: Highlight threshold in MAJOR units.
        checksum: SHA-256 of the canonical merged configuration.
    """

    reporting_currency: str = "EUR"
    exchange_rates: Mapping[str, object] = field(
        default_factory=lambda: MappingProxyType({"GBP": Decimal("1.17")})
    )
    fallback_rates: Mapping[str, Decimal] = field(
        default_factory=lambda: MappingProxyType({"GBP": Decimal("1.17")})
    )
    timezone: str = "UTC"
    horizon: HorizonBounds = field(default_factory=HorizonBounds)
    default_variance_threshold: Decimal = Decimal("500")
    checksum: str = ""

    def __post_init__(self) -> None:
        if len(self.reporting_currency) != 3:
            raise ValueError("reporting_currency must be a 3-letter ISO 4217 code")
        object.__setattr__(self, "reporting_currency", self.reporting_currency.upper())
        object.__setattr__(
            self,
            "exchange_rates",
            MappingProxyType({k.upper(): v for k, v in self.exchange_rates.items()}),
        )
        object.__setattr__(
            self,
            "fallback_rates",
            MappingProxyType(
                {k.upper(): Decimal(str(v)) for k, v in self.fallback_rates.items()}
            ),
        )
