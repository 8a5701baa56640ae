"""Conversion of salary amounts to the home currency."""

from decimal import Decimal

from loguru import logger

from config.settings import Settings, get_settings
from incometax.currency.exchangerate_api import ExchangeRateAPIProvider
from incometax.currency.provider import ExchangeRateProvider
from incometax.errors import InvalidCurrencyCode, ProviderError
from incometax.utils.money import to_decimal


def normalize_currency_code(code: str) -> str:
    """
    Normalize an ISO 4217 code to upper case.

    Raises:
        InvalidCurrencyCode: If the code is not three ASCII letters
    """
    if not isinstance(code, str):
        raise InvalidCurrencyCode(f"Invalid currency code: {code!r}")

    normalized = code.strip().upper()
    if len(normalized) != 3 or not (normalized.isascii() and normalized.isalpha()):
        raise InvalidCurrencyCode(f"Invalid currency code: {code!r}")
    return normalized


class CurrencyConverter:
    """Converts amounts to the home currency through an exchange rate provider.

    Converting a currency into itself never reaches the provider: a round trip
    through the provider is not guaranteed to return exactly 1.0, and it
    would waste an API call.
    """

    def __init__(
        self,
        provider: ExchangeRateProvider | None = None,
        home_currency: str | None = None,
    ) -> None:
        """
        Initialize converter.

        Args:
            provider: Rate provider (default: ExchangeRate-API built from
                settings on first foreign conversion)
            home_currency: Currency in which tax is assessed (default: from settings)
        """
        if home_currency is None:
            home_currency = get_settings().home_currency

        self.home_currency = normalize_currency_code(home_currency)
        self._provider = provider

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CurrencyConverter":
        """Create converter backed by ExchangeRate-API."""
        settings = settings or get_settings()
        return cls(
            provider=ExchangeRateAPIProvider.from_settings(settings),
            home_currency=settings.home_currency,
        )

    @property
    def provider(self) -> ExchangeRateProvider:
        """Rate provider, created from settings when first needed."""
        if self._provider is None:
            self._provider = ExchangeRateAPIProvider.from_settings()
        return self._provider

    def is_home_currency(self, currency: str) -> bool:
        """Check whether a currency code is the home currency."""
        return normalize_currency_code(currency) == self.home_currency

    def convert(
        self,
        amount: Decimal | float | int | str,
        source_currency: str,
        target_currency: str | None = None,
    ) -> Decimal:
        """
        Convert an amount between currencies.

        Args:
            amount: Amount in source currency
            source_currency: ISO 4217 code of the amount
            target_currency: ISO 4217 code to convert into (default: home currency)

        Returns:
            Amount in target currency

        Raises:
            InvalidCurrencyCode: Malformed or unsupported currency code
            InvalidCredential: Provider rejected the API key
            ProviderError: Any other provider failure
        """
        value = to_decimal(amount)
        source = normalize_currency_code(source_currency)
        target = (
            self.home_currency
            if target_currency is None
            else normalize_currency_code(target_currency)
        )

        if source == target:
            return value

        try:
            rate = to_decimal(self.provider.get_rate(source, target))
        except TypeError as e:
            raise ProviderError(f"Unusable conversion rate {source}/{target}: {e}") from e
        if rate <= 0:
            raise ProviderError(f"Non-positive conversion rate {source}/{target}: {rate}")

        converted = value * rate
        logger.debug(f"Converted {value} {source} -> {converted} {target} (rate {rate})")
        return converted

    def close(self) -> None:
        """Close the underlying provider if one was created."""
        if self._provider is not None:
            self._provider.close()
