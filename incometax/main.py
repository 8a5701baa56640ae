"""Main entry point for the income tax calculator."""

import argparse
import sys

from loguru import logger

from config.settings import Settings, get_settings
from incometax.currency.converter import CurrencyConverter
from incometax.errors import IncomeTaxError
from incometax.tax.base import SalaryEntry, TaxCalculator
from incometax.tax.flat_rate import FlatRateCalculator
from incometax.tax.progressive import ProgressiveBracketCalculator


def setup_logging(settings: Settings) -> None:
    """Configure logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level,
    )
    if settings.log_path:
        logger.add(
            settings.log_path,
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
        )


def parse_salary(value: str, home_currency: str) -> SalaryEntry:
    """Parse AMOUNT or AMOUNT:CURRENCY."""
    amount, _, currency = value.partition(":")
    try:
        return SalaryEntry(amount, currency or home_currency)
    except TypeError as e:
        raise argparse.ArgumentTypeError(f"Invalid salary: {value}") from e


def build_calculator(policy: str, settings: Settings, converter: CurrencyConverter) -> TaxCalculator:
    """Create the calculator for a policy name."""
    if policy == "flat":
        return FlatRateCalculator.from_settings(settings, converter=converter)
    return ProgressiveBracketCalculator.from_settings(settings, converter=converter)


def run_demo(calculator: TaxCalculator, home_currency: str) -> None:
    """Print taxes for a sample fiscal year."""
    for amount in (5000, 100000, 100000, 100000):
        print(f"Tax from {amount} {home_currency}")
        print(calculator.calculate_tax_in_home_currency(amount))

    print("Reset of fiscal year")
    calculator.reset_fiscal_year()
    print(f"Tax from 100000 {home_currency}")
    print(calculator.calculate_tax_in_home_currency(100000))

    try:
        print(f"Tax from -100000 {home_currency}")
        print(calculator.calculate_tax_in_home_currency(-100000))
    except IncomeTaxError as e:
        print(e)


def main(argv: list[str] | None = None) -> int:
    """Run the calculator from the command line."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Calculate income tax on salaries")
    parser.add_argument(
        "salaries",
        nargs="*",
        help=f"Salaries as AMOUNT or AMOUNT:CURRENCY (default currency {settings.home_currency})",
    )
    parser.add_argument(
        "--policy",
        choices=["flat", "progressive"],
        default="progressive",
        help="Tax policy",
    )
    args = parser.parse_args(argv)

    setup_logging(settings)

    try:
        salaries = [parse_salary(value, settings.home_currency) for value in args.salaries]
    except (argparse.ArgumentTypeError, IncomeTaxError) as e:
        parser.error(str(e))

    converter = CurrencyConverter.from_settings(settings)
    calculator = build_calculator(args.policy, settings, converter)

    try:
        if not salaries:
            run_demo(calculator, settings.home_currency)
            return 0

        tax = calculator.calculate_batch(salaries)
        print(f"Tax due: {tax} {settings.home_currency}")
        return 0

    except IncomeTaxError as e:
        logger.error(f"Tax calculation failed: {e}")
        return 1

    finally:
        converter.close()


if __name__ == "__main__":
    sys.exit(main())
