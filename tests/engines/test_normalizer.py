"""
Tests for CurrencyNormalizer.

Verifies:
- Reporting-currency amounts pass through unchanged
- Secondary-currency conversion and half-away-from-zero rounding
- Invalid configured rates fall back with a WARNING
- Unsupported currencies raise a typed error
"""

from decimal import Decimal

import pytest

from cashflow_config.schema import ForecastConfig
from cashflow_engines.normalizer import CurrencyNormalizer
from cashflow_kernel.exceptions import UnsupportedCurrencyError


class TestIdentity:
    def test_reporting_currency_unchanged(self, normalizer):
        assert normalizer.to_reporting_currency(123457, "EUR") == 123457

    def test_lowercase_reporting_code_unchanged(self, normalizer):
        assert normalizer.to_reporting_currency(-99, "eur") == -99

    def test_rate_for_reporting_is_one(self, normalizer):
        assert normalizer.rate_for("EUR") == Decimal("1")


class TestConversion:
    def test_gbp_to_eur(self, normalizer):
        assert normalizer.to_reporting_currency(10000, "GBP") == 11700

    def test_zero(self, normalizer):
        assert normalizer.to_reporting_currency(0, "GBP") == 0

    def test_half_rounds_away_from_zero(self):
        n = CurrencyNormalizer("EUR", rates={"GBP": "1.5"})
        assert n.to_reporting_currency(1, "GBP") == 2
        assert n.to_reporting_currency(-1, "GBP") == -2

    def test_below_half_rounds_down(self):
        n = CurrencyNormalizer("EUR", rates={"GBP": "1.17"})
        # 0.01 GBP -> 0.0117 EUR
        assert n.to_reporting_currency(1, "GBP") == 1

    def test_zero_decimal_source_currency(self):
        n = CurrencyNormalizer("EUR", rates={"JPY": "0.0062"})
        assert n.to_reporting_currency(10000, "JPY") == 6200

    def test_three_decimal_reporting_currency(self):
        n = CurrencyNormalizer("KWD", rates={"EUR": "0.33"})
        # 10.00 EUR -> 3.300 KWD
        assert n.to_reporting_currency(1000, "EUR") == 3300

    @pytest.mark.parametrize("amount", [1, 99, 12345, 1_000_001, 987654321])
    def test_inverse_rate_round_trip_within_one_minor_unit(self, amount):
        forward = CurrencyNormalizer("EUR", rates={"GBP": Decimal("1.17")})
        backward = CurrencyNormalizer("GBP", rates={"EUR": Decimal(1) / Decimal("1.17")})
        eur = forward.to_reporting_currency(amount, "GBP")
        assert abs(backward.to_reporting_currency(eur, "EUR") - amount) <= 1

    def test_from_config(self):
        config = ForecastConfig(exchange_rates={"GBP": "1.20"})
        n = CurrencyNormalizer.from_config(config)
        assert n.reporting_currency == "EUR"
        assert n.to_reporting_currency(10000, "GBP") == 12000


class TestFallback:
    @pytest.mark.parametrize("bad_rate", ["abc", "0", "-1.2", "inf", "NaN", "", None])
    def test_invalid_rate_uses_fallback(self, bad_rate):
        n = CurrencyNormalizer(
            "EUR", rates={"GBP": bad_rate}, fallback_rates={"GBP": "1.17"}
        )
        assert n.rates["GBP"] == Decimal("1.17")
        assert n.to_reporting_currency(10000, "GBP") == 11700

    def test_fallback_logged_at_warning(self, captured_logs):
        CurrencyNormalizer("EUR", rates={"GBP": "not-a-rate"}, fallback_rates={"GBP": "1.17"})
        record = next(r for r in captured_logs() if r["message"] == "exchange_rate_fallback")
        assert record["level"] == "WARNING"
        assert record["currency"] == "GBP"
        assert record["configured_rate"] == "not-a-rate"
        assert record["fallback_rate"] == "1.17"

    def test_missing_configured_rate_uses_fallback_silently(self, captured_logs):
        n = CurrencyNormalizer("EUR", rates={}, fallback_rates={"GBP": "1.17"})
        assert n.to_reporting_currency(100, "GBP") == 117
        assert not any(r["message"] == "exchange_rate_fallback" for r in captured_logs())

    def test_valid_rate_not_replaced(self):
        n = CurrencyNormalizer("EUR", rates={"GBP": "1.25"}, fallback_rates={"GBP": "1.17"})
        assert n.rates["GBP"] == Decimal("1.25")


class TestUnsupported:
    def test_no_rate_configured(self, normalizer):
        with pytest.raises(UnsupportedCurrencyError) as exc_info:
            normalizer.to_reporting_currency(100, "USD")
        assert exc_info.value.currency == "USD"
        assert exc_info.value.reporting_currency == "EUR"
        assert exc_info.value.code == "UNSUPPORTED_CURRENCY"

    def test_unknown_code(self, normalizer):
        with pytest.raises(UnsupportedCurrencyError):
            normalizer.to_reporting_currency(100, "XYZ")

    def test_invalid_rate_without_fallback(self):
        n = CurrencyNormalizer("EUR", rates={"USD": "-3"})
        with pytest.raises(UnsupportedCurrencyError):
            n.to_reporting_currency(100, "USD")
