"""
Unit tests for the ISO 4217 currency registry.

Verifies:
- Known codes validate and normalize
- Decimal places per currency (2, 0, 3)
- Unknown codes are rejected
"""

from decimal import Decimal

import pytest

from cashflow_kernel.domain.currency import CurrencyRegistry


class TestCurrencyRegistry:
    """Tests for CurrencyRegistry lookups."""

    def test_reporting_and_secondary_currencies_are_valid(self):
        assert CurrencyRegistry.is_valid("EUR")
        assert CurrencyRegistry.is_valid("GBP")

    def test_lowercase_is_normalized(self):
        assert CurrencyRegistry.validate(" gbp ") == "GBP"

    def test_unknown_code_invalid(self):
        assert not CurrencyRegistry.is_valid("XXX")
        assert not CurrencyRegistry.is_valid("")
        assert not CurrencyRegistry.is_valid(None)

    def test_validate_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="3 characters"):
            CurrencyRegistry.validate("EURO")

    def test_validate_rejects_unknown(self):
        with pytest.raises(ValueError, match="ISO 4217"):
            CurrencyRegistry.validate("ABC")

    @pytest.mark.parametrize("code,places", [("EUR", 2), ("JPY", 0), ("KWD", 3)])
    def test_decimal_places(self, code, places):
        assert CurrencyRegistry.get_decimal_places(code) == places

    def test_unknown_currency_defaults_to_two_places(self):
        assert CurrencyRegistry.get_decimal_places("XXX") == 2

    def test_quantum(self):
        assert CurrencyRegistry.get_info("EUR").quantum == Decimal("0.01")
        assert CurrencyRegistry.get_info("JPY").quantum == Decimal("1")
        assert CurrencyRegistry.get_info("KWD").minor_unit_factor == 1000

    def test_all_codes_contains_gbp(self):
        assert "GBP" in CurrencyRegistry.all_codes()
