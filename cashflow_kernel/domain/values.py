"""
Values -- Immutable, self-validating money value objects.

Responsibility:
    Provides ``Currency`` and ``Money`` for every amount the forecaster
    touches.  Amounts are integer minor units (cents), never floats; the
    currency travels with the amount so it is always rendered with the
    right number of decimal places.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends only on ``cashflow_kernel.domain.currency``.

Failure modes:
    - InvalidCurrencyError on construction with an unknown currency code.
    - TypeError when the amount is not an integer (floats are rejected).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from cashflow_kernel.domain.currency import CurrencyRegistry
from cashflow_kernel.exceptions import InvalidCurrencyError

# Rounding rule for every conversion between major and minor units:
# half away from zero (Decimal's ROUND_HALF_UP rounds away from zero).
MONEY_ROUNDING = ROUND_HALF_UP


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Contract:
        Wraps a three-letter code, normalized to upper case and validated
        against ``CurrencyRegistry`` on construction.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(str(self.code))
        object.__setattr__(self, "code", normalized)

    @property
    def decimal_places(self) -> int:
        return CurrencyRegistry.get_decimal_places(self.code)

    @property
    def minor_unit_factor(self) -> int:
        return 10 ** self.decimal_places

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount in integer minor units.

    Contract:
        Pairs an ``int`` minor-unit amount with its ``Currency``.

    Guarantees:
        - Immutable and hashable.
        - ``minor_units`` is always an ``int`` (``bool`` and ``float`` rejected).
        - ``major`` is exact (``Decimal``), never rounded.

    Non-goals:
        - Does NOT convert between currencies (see
          ``cashflow_engines.normalizer.CurrencyNormalizer``).
    """

    minor_units: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"minor_units must be int, got {type(self.minor_units).__name__}"
            )
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, minor_units: int, currency: str | Currency) -> Money:
        """Factory method for creating Money from minor units."""
        return cls(minor_units=minor_units, currency=currency)

    @classmethod
    def from_major(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """
        Create Money from a major-unit amount (e.g. ``"12.345"`` EUR).

        Rounds half away from zero to the currency's minor unit.
        """
        if isinstance(currency, str):
            currency = Currency(currency)
        major = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        minor = (major * currency.minor_unit_factor).quantize(
            Decimal("1"), rounding=MONEY_ROUNDING
        )
        return cls(minor_units=int(minor), currency=currency)

    @property
    def major(self) -> Decimal:
        """Exact major-unit value (``12345`` EUR minor units -> ``Decimal('123.45')``)."""
        return Decimal(self.minor_units).scaleb(-self.currency.decimal_places)

    def format(self, with_code: bool = True) -> str:
        """Render as ``-1,234.56 EUR`` (``-1,234.56`` without the code)."""
        places = self.currency.decimal_places
        text = f"{self.major:,.{places}f}"
        return f"{text} {self.currency.code}" if with_code else text

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Money({self.minor_units!r}, {self.currency.code!r})"
