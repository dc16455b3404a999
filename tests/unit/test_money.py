"""
Unit tests for Money and Currency value objects.

Verifies:
- Integer minor units only (no float, no bool)
- Half-away-from-zero rounding from major units
- Display formatting
"""

from decimal import Decimal

import pytest

from cashflow_kernel.domain.values import Currency, Money
from cashflow_kernel.exceptions import InvalidCurrencyError


class TestCurrency:
    def test_normalizes_code(self):
        assert Currency("eur").code == "EUR"

    def test_invalid_code_raises_typed_error(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("ZZZ")
        assert exc_info.value.code == "INVALID_CURRENCY"
        assert exc_info.value.currency == "ZZZ"

    def test_minor_unit_factor(self):
        assert Currency("EUR").minor_unit_factor == 100
        assert Currency("JPY").minor_unit_factor == 1


class TestMoneyConstruction:
    def test_of(self):
        m = Money.of(12345, "EUR")
        assert m.minor_units == 12345
        assert m.currency == Currency("EUR")

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            Money(10.5, "EUR")

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            Money(True, "EUR")


class TestFromMajor:
    def test_exact(self):
        assert Money.from_major("1000.00", "EUR").minor_units == 100000

    def test_half_rounds_away_from_zero(self):
        assert Money.from_major("0.005", "EUR").minor_units == 1
        assert Money.from_major("-0.005", "EUR").minor_units == -1

    def test_below_half_rounds_down(self):
        assert Money.from_major("10.554", "EUR").minor_units == 1055

    def test_integer_major(self):
        assert Money.from_major(500, "EUR").minor_units == 50000

    def test_zero_decimal_currency(self):
        assert Money.from_major(Decimal("1234.5"), "JPY").minor_units == 1235


class TestDisplay:
    def test_major(self):
        assert Money.of(12345, "EUR").major == Decimal("123.45")

    def test_format(self):
        assert Money.of(123456, "EUR").format() == "1,234.56 EUR"

    def test_format_negative(self):
        assert str(Money.of(-123456, "EUR")) == "-1,234.56 EUR"

    def test_format_zero_decimal(self):
        assert Money.of(5000, "JPY").format() == "5,000 JPY"

    def test_format_without_code(self):
        assert Money.of(-123456, "EUR").format(with_code=False) == "-1,234.56"
