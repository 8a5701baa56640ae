"""Exceptions raised by tax calculators and the currency boundary."""


class IncomeTaxError(Exception):
    """Base class for all income tax errors."""


class InvalidSalary(IncomeTaxError, ValueError):
    """Salary amount is negative."""

    def __init__(self, amount, message: str = "Salary cannot be less than 0") -> None:
        super().__init__(f"{message}: {amount}")
        self.amount = amount


class CurrencyConversionError(IncomeTaxError):
    """Base class for failures while converting to the home currency."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidCurrencyCode(CurrencyConversionError, ValueError):
    """Currency code is malformed or not supported by the provider."""


class InvalidCredential(CurrencyConversionError):
    """Provider rejected the API key."""


class ProviderError(CurrencyConversionError):
    """Any other provider or transport failure."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.is_retryable = is_retryable
