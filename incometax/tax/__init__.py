"""Income tax policies."""

from incometax.tax.base import SalaryEntry, TaxCalculator
from incometax.tax.flat_rate import FlatRateCalculator
from incometax.tax.progressive import FiscalYearState, ProgressiveBracketCalculator

__all__ = [
    "FiscalYearState",
    "FlatRateCalculator",
    "ProgressiveBracketCalculator",
    "SalaryEntry",
    "TaxCalculator",
]
