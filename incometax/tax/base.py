"""Tax calculator interface and salary entries."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from loguru import logger

from incometax.currency.converter import CurrencyConverter, normalize_currency_code
from incometax.errors import InvalidSalary
from incometax.utils.money import floor_to_unit, to_decimal


def validate_salary(amount: Decimal) -> Decimal:
    """Raise InvalidSalary for negative amounts."""
    if amount < 0:
        raise InvalidSalary(amount)
    return amount


@dataclass(frozen=True)
class SalaryEntry:
    """Gross salary received in a single currency.

    The amount is checked before the currency code, so a negative salary is
    always reported as InvalidSalary.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", validate_salary(to_decimal(self.amount)))
        object.__setattr__(self, "currency", normalize_currency_code(self.currency))

    @classmethod
    def coerce(cls, entry: "SalaryEntry | tuple") -> "SalaryEntry":
        """Accept either a SalaryEntry or an (amount, currency) tuple."""
        if isinstance(entry, cls):
            return entry
        amount, currency = entry
        return cls(amount, currency)


class TaxCalculator(ABC):
    """
    Base class for income tax policies.

    Subclasses implement ``_tax_for_home_amount`` returning the unrounded tax
    for an amount already in the home currency. Rounding down to a whole unit
    happens once per call, so batches do not lose fractions per entry.
    """

    def __init__(self, converter: CurrencyConverter | None = None) -> None:
        self.converter = converter or CurrencyConverter()

    @property
    def home_currency(self) -> str:
        return self.converter.home_currency

    def close(self) -> None:
        """Close the converter and its rate provider."""
        self.converter.close()

    def __enter__(self) -> "TaxCalculator":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @abstractmethod
    def _tax_for_home_amount(self, amount: Decimal) -> Decimal:
        """Unrounded tax for a non-negative amount in the home currency."""

    @abstractmethod
    def reset_fiscal_year(self) -> None:
        """Start a new fiscal year."""

    def calculate_tax_in_home_currency(self, amount: Decimal | float | int | str) -> int:
        """
        Calculate tax for a salary paid in the home currency.

        Args:
            amount: Gross salary in the home currency

        Returns:
            Tax rounded down to a whole unit

        Raises:
            InvalidSalary: If the amount is negative
        """
        salary = validate_salary(to_decimal(amount))
        return floor_to_unit(self._tax_for_home_amount(salary))

    def calculate_tax(
        self,
        amount: Decimal | float | int | str,
        currency: str | None = None,
    ) -> int:
        """
        Calculate tax for a salary paid in any currency.

        Args:
            amount: Gross salary
            currency: ISO 4217 code (default: home currency)

        Returns:
            Tax in the home currency rounded down to a whole unit

        Raises:
            InvalidSalary: If the amount is negative
            CurrencyConversionError: If conversion to the home currency fails
        """
        entry = SalaryEntry(amount, self.home_currency if currency is None else currency)
        home_amount = self.converter.convert(entry.amount, entry.currency)
        return floor_to_unit(self._tax_for_home_amount(home_amount))

    def calculate_batch(self, entries: Iterable["SalaryEntry | tuple"]) -> int:
        """
        Calculate tax for salaries paid in multiple currencies.

        All amounts are validated and converted before any tax is computed, in
        list order. The unrounded tax of each entry is summed and the total is
        rounded down once.

        Args:
            entries: SalaryEntry objects or (amount, currency) tuples

        Returns:
            Total tax in the home currency rounded down to a whole unit

        Raises:
            InvalidSalary: If any amount is negative
            CurrencyConversionError: If any conversion fails
        """
        entries = list(entries)
        # Amounts first, so a negative salary anywhere wins over a bad code
        for entry in entries:
            if not isinstance(entry, SalaryEntry):
                validate_salary(to_decimal(entry[0]))
        salaries = [SalaryEntry.coerce(entry) for entry in entries]

        home_amounts = [
            self.converter.convert(salary.amount, salary.currency) for salary in salaries
        ]

        tax_due = Decimal(0)
        for home_amount in home_amounts:
            tax_due += self._tax_for_home_amount(home_amount)

        logger.debug(f"Batch of {len(salaries)} salaries: unrounded tax {tax_due}")
        return floor_to_unit(tax_due)
