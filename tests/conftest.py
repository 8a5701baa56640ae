"""Pytest configuration and fixtures."""

import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import Settings
from incometax.currency.converter import CurrencyConverter
from incometax.currency.provider import ExchangeRateProvider
from incometax.errors import InvalidCurrencyCode


class FakeRateProvider(ExchangeRateProvider):
    """Deterministic provider recording every lookup."""

    def __init__(self, rates: dict[str, str] | None = None, error: Exception | None = None):
        self.rates = {code: Decimal(rate) for code, rate in (rates or {}).items()}
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def get_rate(self, source_currency: str, target_currency: str) -> Decimal:
        self.calls.append((source_currency, target_currency))
        if self.error is not None:
            raise self.error
        if source_currency not in self.rates:
            raise InvalidCurrencyCode(f"Invalid currency code ({source_currency})")
        return self.rates[source_currency]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings():
    """Settings independent of the environment and .env file."""
    return Settings(_env_file=None, exchange_api_key="test_key", log_path="")


@pytest.fixture
def rate_provider():
    """Fake provider with fixed PLN rates."""
    return FakeRateProvider({"USD": "4.00", "EUR": "4.50", "GBP": "5.00"})


@pytest.fixture
def converter(rate_provider):
    """Converter into PLN backed by the fake provider."""
    return CurrencyConverter(provider=rate_provider, home_currency="PLN")
