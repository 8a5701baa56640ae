"""Flat rate income tax."""

from decimal import Decimal

from config.settings import Settings, get_settings
from incometax.currency.converter import CurrencyConverter
from incometax.tax.base import TaxCalculator
from incometax.utils.money import percent_to_fraction


class FlatRateCalculator(TaxCalculator):
    """Single tax rate applied to every salary.

    A rate of 0 represents a salary exempt from tax.
    """

    DEFAULT_TAX_RATE = 19.0  # %

    def __init__(
        self,
        tax_rate: Decimal | float | int = DEFAULT_TAX_RATE,
        converter: CurrencyConverter | None = None,
    ) -> None:
        """
        Initialize flat rate calculator.

        Args:
            tax_rate: Tax rate in percent (19 = 19%)
            converter: Converter to the home currency
        """
        super().__init__(converter)
        self.tax_rate = percent_to_fraction(tax_rate)
        if self.tax_rate < 0:
            raise ValueError(f"Tax rate cannot be negative: {tax_rate}")

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        converter: CurrencyConverter | None = None,
    ) -> "FlatRateCalculator":
        """Create calculator using the configured rate."""
        settings = settings or get_settings()
        return cls(
            tax_rate=settings.flat_tax_rate,
            converter=converter or CurrencyConverter.from_settings(settings),
        )

    def _tax_for_home_amount(self, amount: Decimal) -> Decimal:
        return amount * self.tax_rate

    def reset_fiscal_year(self) -> None:
        # Nothing accumulates between salaries
        pass
