"""Progressive income tax with two brackets and an annual deduction."""

from dataclasses import dataclass, replace
from decimal import Decimal

from loguru import logger

from config.settings import Settings, get_settings
from incometax.currency.converter import CurrencyConverter
from incometax.tax.base import TaxCalculator
from incometax.utils.money import to_decimal


@dataclass
class FiscalYearState:
    """Income and deduction noted so far in the current fiscal year."""

    cumulative_income: Decimal = Decimal(0)
    deducted_so_far: Decimal = Decimal(0)

    def reset(self) -> None:
        self.cumulative_income = Decimal(0)
        self.deducted_so_far = Decimal(0)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "cumulative_income": self.cumulative_income,
            "deducted_so_far": self.deducted_so_far,
        }


class ProgressiveBracketCalculator(TaxCalculator):
    """
    Progressive (or regressive, depending on the rates) tax with two brackets.

    Income below the ceiling is taxed at the first rate, income above it at
    the second rate. Brackets apply to income accumulated over the fiscal
    year, so the order of salaries matters. The tax deduction is consumed as
    tax accrues until the yearly limit is reached.

    Instances are not thread-safe; callers sharing one must serialize access.
    """

    DEFAULT_DEDUCTIBLE_TAX = 525.12
    DEFAULT_FIRST_BRACKET_RATE = 0.17
    DEFAULT_FIRST_BRACKET_MAX_INCOME = 85528
    DEFAULT_SECOND_BRACKET_RATE = 0.32

    def __init__(
        self,
        deductible_tax: Decimal | float | int = DEFAULT_DEDUCTIBLE_TAX,
        first_bracket_rate: Decimal | float | int = DEFAULT_FIRST_BRACKET_RATE,
        first_bracket_max_income: Decimal | float | int = DEFAULT_FIRST_BRACKET_MAX_INCOME,
        second_bracket_rate: Decimal | float | int = DEFAULT_SECOND_BRACKET_RATE,
        converter: CurrencyConverter | None = None,
    ) -> None:
        """
        Initialize progressive calculator.

        Args:
            deductible_tax: Tax deduction available per fiscal year
            first_bracket_rate: Tax rate of the first bracket as a fraction (0.17 = 17%)
            first_bracket_max_income: Income ceiling of the first bracket
            second_bracket_rate: Tax rate of the second bracket as a fraction
            converter: Converter to the home currency

        Raises:
            ValueError: If a parameter is negative or a rate is above 1
        """
        super().__init__(converter)
        self.deductible_tax_limit = to_decimal(deductible_tax)
        self.first_bracket_rate = to_decimal(first_bracket_rate)
        self.first_bracket_ceiling = to_decimal(first_bracket_max_income)
        self.second_bracket_rate = to_decimal(second_bracket_rate)

        for name, value in (
            ("deductible_tax", self.deductible_tax_limit),
            ("first_bracket_rate", self.first_bracket_rate),
            ("first_bracket_max_income", self.first_bracket_ceiling),
            ("second_bracket_rate", self.second_bracket_rate),
        ):
            if value < 0:
                raise ValueError(f"{name} cannot be negative: {value}")

        # Rates are fractions; 17 would mean 1700%
        for name, value in (
            ("first_bracket_rate", self.first_bracket_rate),
            ("second_bracket_rate", self.second_bracket_rate),
        ):
            if value > 1:
                raise ValueError(f"{name} must be a fraction between 0 and 1: {value}")

        self._state = FiscalYearState()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        converter: CurrencyConverter | None = None,
    ) -> "ProgressiveBracketCalculator":
        """Create calculator using the configured brackets."""
        settings = settings or get_settings()
        return cls(
            deductible_tax=settings.progressive_deductible_tax,
            first_bracket_rate=settings.progressive_first_bracket_rate,
            first_bracket_max_income=settings.progressive_first_bracket_max_income,
            second_bracket_rate=settings.progressive_second_bracket_rate,
            converter=converter or CurrencyConverter.from_settings(settings),
        )

    @property
    def state(self) -> FiscalYearState:
        """Snapshot of the fiscal year state."""
        return replace(self._state)

    @property
    def cumulative_income(self) -> Decimal:
        return self._state.cumulative_income

    @property
    def deducted_so_far(self) -> Decimal:
        return self._state.deducted_so_far

    def _bracket_tax(self, amount: Decimal) -> Decimal:
        """Tax before deduction, split against income noted so far."""
        noted = self._state.cumulative_income

        if noted > self.first_bracket_ceiling:
            # All of the new income is already in the second bracket
            return amount * self.second_bracket_rate

        if noted + amount < self.first_bracket_ceiling:
            return amount * self.first_bracket_rate

        in_first_bracket = self.first_bracket_ceiling - noted
        in_second_bracket = amount - in_first_bracket
        return (
            in_first_bracket * self.first_bracket_rate
            + in_second_bracket * self.second_bracket_rate
        )

    def _apply_deduction(self, due_tax: Decimal) -> Decimal:
        """Lower the tax by whatever deduction is left this year."""
        deduction_left = self.deductible_tax_limit - self._state.deducted_so_far

        if due_tax > deduction_left:
            self._state.deducted_so_far = self.deductible_tax_limit
            return due_tax - deduction_left

        self._state.deducted_so_far += due_tax
        return Decimal(0)

    def _tax_for_home_amount(self, amount: Decimal) -> Decimal:
        due_tax = self._bracket_tax(amount)
        self._state.cumulative_income += amount
        tax = self._apply_deduction(due_tax)

        logger.debug(
            f"Progressive tax on {amount}: bracket {due_tax}, after deduction {tax} "
            f"(income {self._state.cumulative_income}, deducted {self._state.deducted_so_far})"
        )
        return tax

    def reset_fiscal_year(self) -> None:
        """Zero noted income and used deduction for a new fiscal year."""
        self._state.reset()
        logger.info("Fiscal year reset")
