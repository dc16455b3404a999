"""
Typed exception hierarchy for the cashflow kernel.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe) and structured attributes
carrying the data that caused it.

    CashflowError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- UnsupportedCurrencyError
    |
    +-- RecordError
    |   +-- NegativeAmountError
    |   +-- DuplicateBudgetLineError
    |   +-- BalanceTotalMismatchError
    |
    +-- DataUnavailableError
    |
    +-- ConfigurationError

Category        | Code                     | When Raised
----------------|--------------------------|-----------------------------------------
Currency        | INVALID_CURRENCY         | Not a valid ISO 4217 code
                | UNSUPPORTED_CURRENCY     | No exchange rate to the reporting currency
----------------|--------------------------|-----------------------------------------
Record          | NEGATIVE_AMOUNT          | Scheduled flow or budget amount below zero
                | DUPLICATE_BUDGET_LINE    | Two budget lines for one (month, category)
                | BALANCE_TOTAL_MISMATCH   | Snapshot total != converted sub-balances
----------------|--------------------------|-----------------------------------------
Store           | DATA_UNAVAILABLE         | Ledger store read failed; no forecast
----------------|--------------------------|-----------------------------------------
Config          | CONFIGURATION_ERROR      | Config file missing or malformed

Invalid exchange rates and out-of-range request parameters are NOT errors:
they are recovered locally (fallback rate, clamped horizon) and logged.
"""

from datetime import date


class CashflowError(Exception):
    """
    Base exception for all cashflow kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "CASHFLOW_ERROR"


# Currency-related exceptions


class CurrencyError(CashflowError):
    """Base exception for currency errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is not a valid ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: {currency!r}")


class UnsupportedCurrencyError(CurrencyError):
    """No exchange rate is configured from this currency to the reporting currency."""

    code: str = "UNSUPPORTED_CURRENCY"

    def __init__(self, currency: str, reporting_currency: str):
        self.currency = currency
        self.reporting_currency = reporting_currency
        super().__init__(
            f"No exchange rate configured for {currency} -> {reporting_currency}"
        )


# Record-related exceptions


class RecordError(CashflowError):
    """Base exception for malformed ledger records."""

    code: str = "RECORD_ERROR"


class NegativeAmountError(RecordError):
    """Amounts on scheduled flows and budget lines are non-negative."""

    code: str = "NEGATIVE_AMOUNT"

    def __init__(self, field: str, amount: int):
        self.field = field
        self.amount = amount
        super().__init__(f"{field} must be non-negative, got {amount}")


class DuplicateBudgetLineError(RecordError):
    """At most one budget line may exist per (month, category)."""

    code: str = "DUPLICATE_BUDGET_LINE"

    def __init__(self, month: date, category: str):
        self.month = month
        self.category = category
        super().__init__(
            f"Duplicate budget line for {month:%Y-%m} / {category!r}"
        )


class BalanceTotalMismatchError(RecordError):
    """A snapshot's stored total disagrees with its converted sub-balances."""

    code: str = "BALANCE_TOTAL_MISMATCH"

    def __init__(self, month: date, stored_total: int, computed_total: int):
        self.month = month
        self.stored_total = stored_total
        self.computed_total = computed_total
        super().__init__(
            f"Balance snapshot {month:%Y-%m}: stored total {stored_total} "
            f"!= computed total {computed_total}"
        )


# Store-related exceptions


class DataUnavailableError(CashflowError):
    """
    The ledger store could not be read.

    Fatal for the current forecast request: no partial forecast is returned.
    """

    code: str = "DATA_UNAVAILABLE"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Ledger data unavailable from {source}: {reason}")


# Configuration exceptions


class ConfigurationError(CashflowError):
    """Configuration file is missing or structurally invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration {path}: {reason}")
