"""Tests for the currency conversion boundary."""

import pytest
from decimal import Decimal

from conftest import FakeRateProvider
from incometax.currency.converter import CurrencyConverter, normalize_currency_code
from incometax.currency.exchangerate_api import ExchangeRateAPIProvider
from incometax.currency.provider import ExchangeRateProvider
from incometax.errors import InvalidCredential, InvalidCurrencyCode, ProviderError
from incometax.tax.flat_rate import FlatRateCalculator
from incometax.utils.money import floor_to_unit, percent_to_fraction, to_decimal


class FloatRateProvider(ExchangeRateProvider):
    """Provider returning the same raw value for every pair."""

    def __init__(self, rate):
        self.rate = rate

    def get_rate(self, source_currency, target_currency):
        return self.rate


class TestNormalizeCurrencyCode:
    """Tests for currency code normalization."""

    @pytest.mark.parametrize("code,expected", [("PLN", "PLN"), ("usd", "USD"), (" eur ", "EUR")])
    def test_valid_codes(self, code, expected):
        """Test valid codes are upper-cased."""
        assert normalize_currency_code(code) == expected

    @pytest.mark.parametrize("code", ["", "US", "EURO", "U5D", "ZŁO", None, 840])
    def test_invalid_codes(self, code):
        """Test malformed codes are rejected."""
        with pytest.raises(InvalidCurrencyCode):
            normalize_currency_code(code)


class TestCurrencyConverter:
    """Tests for CurrencyConverter."""

    def test_home_currency_is_identity(self, converter, rate_provider):
        """Test converting home currency returns the same amount."""
        assert converter.convert(Decimal("123.45"), "PLN") == Decimal("123.45")
        assert converter.convert(10, "pln") == Decimal("10")
        assert rate_provider.calls == []

    def test_same_source_and_target(self, converter, rate_provider):
        """Test explicit identical pair skips the provider."""
        assert converter.convert(5, "USD", "usd") == Decimal("5")
        assert rate_provider.calls == []

    def test_foreign_currency(self, converter, rate_provider):
        """Test foreign amount is multiplied by the rate."""
        assert converter.convert(100, "usd") == Decimal("400.00")
        assert rate_provider.calls == [("USD", "PLN")]

    def test_explicit_target(self, converter, rate_provider):
        """Test explicit target currency is passed to the provider."""
        converter.convert(100, "USD", "EUR")
        assert rate_provider.calls == [("USD", "EUR")]

    def test_is_home_currency(self, converter):
        """Test home currency check is case-insensitive."""
        assert converter.is_home_currency("pln")
        assert not converter.is_home_currency("USD")

    def test_malformed_code_skips_provider(self, converter, rate_provider):
        """Test malformed codes fail before any lookup."""
        with pytest.raises(InvalidCurrencyCode):
            converter.convert(100, "DOLLAR")
        assert rate_provider.calls == []

    def test_float_rate_from_provider(self):
        """Test a provider returning a plain float multiplier."""
        converter = CurrencyConverter(provider=FloatRateProvider(4.0), home_currency="PLN")

        assert converter.convert(100, "USD") == Decimal("400")
        assert FlatRateCalculator(converter=converter).calculate_tax(100, "USD") == 76

    def test_non_numeric_rate_from_provider(self):
        """Test an unusable rate is a provider error."""
        converter = CurrencyConverter(provider=FloatRateProvider(None), home_currency="PLN")

        with pytest.raises(ProviderError):
            converter.convert(100, "USD")

    @pytest.mark.parametrize("rate", ["0", "-1.5"])
    def test_non_positive_rate(self, rate):
        """Test non-positive rate is a provider error."""
        converter = CurrencyConverter(provider=FakeRateProvider({"USD": rate}), home_currency="PLN")

        with pytest.raises(ProviderError):
            converter.convert(100, "USD")

    @pytest.mark.parametrize(
        "error",
        [
            InvalidCurrencyCode("Invalid currency code"),
            InvalidCredential("Wrong API key"),
            ProviderError("Unknown error", status_code=500),
        ],
    )
    def test_provider_errors_propagate(self, error):
        """Test provider errors are not wrapped."""
        converter = CurrencyConverter(provider=FakeRateProvider(error=error), home_currency="PLN")

        with pytest.raises(type(error)) as exc_info:
            converter.convert(100, "USD")

        assert exc_info.value is error

    def test_provider_created_lazily(self):
        """Test home currency conversion never builds a provider."""
        converter = CurrencyConverter(home_currency="PLN")

        assert converter.convert(100, "PLN") == Decimal("100")
        assert converter._provider is None
        converter.close()

    def test_invalid_home_currency(self, rate_provider):
        """Test home currency is validated."""
        with pytest.raises(InvalidCurrencyCode):
            CurrencyConverter(provider=rate_provider, home_currency="PL")

    def test_from_settings(self, settings):
        """Test converter built from settings uses ExchangeRate-API."""
        custom = settings.model_copy(update={"home_currency": "EUR", "max_retries": 1})
        converter = CurrencyConverter.from_settings(custom)

        assert converter.home_currency == "EUR"
        assert isinstance(converter.provider, ExchangeRateAPIProvider)
        assert converter.provider.api_key == "test_key"
        assert converter.provider.retry_config.max_retries == 1
        converter.close()

    def test_close_closes_provider(self, converter, rate_provider):
        """Test close is forwarded to the provider."""
        converter.close()
        assert rate_provider.closed


class TestMoneyHelpers:
    """Tests for Decimal helpers."""

    def test_float_goes_through_str(self):
        """Test floats keep their printed value."""
        assert to_decimal(0.17) == Decimal("0.17")
        assert to_decimal(525.12) == Decimal("525.12")

    def test_int_and_str(self):
        """Test ints and strings are accepted."""
        assert to_decimal(85528) == Decimal("85528")
        assert to_decimal(" 12.5 ") == Decimal("12.5")

    @pytest.mark.parametrize("value", [True, "abc", float("nan"), float("inf"), None, [1]])
    def test_rejects_non_numbers(self, value):
        """Test non-numeric values raise TypeError."""
        with pytest.raises(TypeError):
            to_decimal(value)

    def test_percent_to_fraction(self):
        """Test percent is divided by 100."""
        assert percent_to_fraction(19) == Decimal("0.19")

    def test_floor_to_unit(self):
        """Test amounts are rounded down to int."""
        assert floor_to_unit(Decimal("324.88")) == 324
        assert floor_to_unit(Decimal("0.99")) == 0
        assert isinstance(floor_to_unit(Decimal("1.2")), int)
