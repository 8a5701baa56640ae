"""Currency conversion to the home currency."""

from incometax.currency.converter import CurrencyConverter, normalize_currency_code
from incometax.currency.exchangerate_api import ExchangeRateAPIProvider, RetryConfig
from incometax.currency.provider import ExchangeRateProvider

__all__ = [
    "CurrencyConverter",
    "ExchangeRateAPIProvider",
    "ExchangeRateProvider",
    "RetryConfig",
    "normalize_currency_code",
]
