"""Exchange rate provider contract."""

from abc import ABC, abstractmethod
from decimal import Decimal


class ExchangeRateProvider(ABC):
    """Source of conversion rates between two currencies.

    Implementations raise ``InvalidCurrencyCode``, ``InvalidCredential`` or
    ``ProviderError`` and nothing else.
    """

    @abstractmethod
    def get_rate(self, source_currency: str, target_currency: str) -> Decimal:
        """
        Get the multiplier converting source to target currency.

        Args:
            source_currency: ISO 4217 code of the amount's currency
            target_currency: ISO 4217 code to convert into

        Returns:
            Positive rate such that target_amount = source_amount * rate
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the provider."""
