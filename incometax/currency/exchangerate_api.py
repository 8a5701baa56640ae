"""ExchangeRate-API (exchangerate-api.com v6) client."""

import random
import re
import time
from dataclasses import dataclass
from decimal import Decimal
from functools import wraps
from typing import Any, Callable, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config.settings import Settings, get_settings
from incometax.currency.provider import ExchangeRateProvider
from incometax.errors import (
    CurrencyConversionError,
    InvalidCredential,
    InvalidCurrencyCode,
    ProviderError,
)

# Type variable for generic return type
T = TypeVar("T")

# Retryable error codes (temporary errors)
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# "error-type" values documented by ExchangeRate-API
CURRENCY_ERROR_TYPES = {"unsupported-code", "malformed-request"}
CREDENTIAL_ERROR_TYPES = {"invalid-key", "inactive-account"}

CURRENCY_STATUS_CODES = {404}
CREDENTIAL_STATUS_CODES = {401, 403}

# Last number in a message, e.g. "(404) Not Found" -> 404
_STATUS_IN_MESSAGE = re.compile(r"(\d+)(?!.*\d)")


@dataclass
class RetryConfig:
    """Exponential backoff for transient provider failures."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (0-based)."""
        delay = min(self.base_delay * 2 ** attempt, self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.75, 1.25)
        return delay


def status_code_from_message(message: str) -> int | None:
    """Extract the status code embedded at the end of an error message."""
    match = _STATUS_IN_MESSAGE.search(message or "")
    if match is None:
        return None
    return int(match.group(1))


def classify_error(
    status_code: int | None = None,
    error_type: str | None = None,
    message: str = "",
) -> CurrencyConversionError:
    """
    Map a provider failure to one of the three conversion error kinds.

    Args:
        status_code: HTTP status code, if known
        error_type: ExchangeRate-API "error-type" field, if any
        message: Error message; its last number is used when status_code is unknown

    Returns:
        InvalidCurrencyCode, InvalidCredential or ProviderError
    """
    if status_code is None and error_type is None:
        status_code = status_code_from_message(message)

    detail = error_type or message or "unknown error"

    if error_type in CURRENCY_ERROR_TYPES or (
        error_type is None and status_code in CURRENCY_STATUS_CODES
    ):
        return InvalidCurrencyCode(f"Invalid currency code ({detail})", status_code=status_code)

    if error_type in CREDENTIAL_ERROR_TYPES or (
        error_type is None and status_code in CREDENTIAL_STATUS_CODES
    ):
        return InvalidCredential(f"Wrong API key ({detail})", status_code=status_code)

    is_retryable = error_type is None and status_code in RETRYABLE_STATUS_CODES
    return ProviderError(
        f"Unknown error occurred when converting currency ({detail})",
        status_code=status_code,
        is_retryable=is_retryable,
    )


def is_transient(error: httpx.HTTPError) -> bool:
    """Timeouts and connection failures are worth another attempt."""
    return isinstance(error, (httpx.TimeoutException, httpx.ConnectError))


def with_retry(func: Callable[..., T]) -> Callable[..., T]:
    """Retry a provider call while it fails with a retryable ProviderError."""

    @wraps(func)
    def wrapper(self: "ExchangeRateAPIProvider", *args: Any, **kwargs: Any) -> T:
        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            try:
                return func(self, *args, **kwargs)

            except ProviderError as e:
                if not e.is_retryable or attempt == attempts - 1:
                    logger.error(f"{func.__name__} failed after {attempt + 1} attempt(s): {e}")
                    raise

                delay = self.retry_config.get_delay(attempt)
                logger.warning(
                    f"{func.__name__} attempt {attempt + 1}/{attempts} failed: {e}. "
                    f"Retrying in {delay:.2f}s"
                )
                time.sleep(delay)

    return wrapper


class PairConversion(BaseModel):
    """Successful /pair response."""

    model_config = ConfigDict(extra="ignore")

    result: str
    base_code: str
    target_code: str
    conversion_rate: float = Field(gt=0)
    time_last_update_utc: str | None = None


class ExchangeRateAPIProvider(ExchangeRateProvider):
    """Exchange rate provider backed by exchangerate-api.com."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://v6.exchangerate-api.com/v6",
        retry_config: RetryConfig | None = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Initialize ExchangeRate-API client.

        Args:
            api_key: ExchangeRate-API key
            base_url: API base URL (without trailing slash)
            retry_config: Retry configuration (default: 3 retries with exponential backoff)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self._client = httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ExchangeRateAPIProvider":
        """Create a provider from application settings."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.exchange_api_key,
            base_url=settings.exchange_api_url,
            retry_config=RetryConfig(max_retries=settings.max_retries),
            timeout=settings.request_timeout,
        )

    def _request(self, path: str) -> dict[str, Any]:
        """Make request to the API and map failures to conversion errors."""
        # The key is part of the path, never log the full URL
        url = f"{self.base_url}/{self.api_key}{path}"

        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Request to ExchangeRate-API failed: {e}",
                is_retryable=is_transient(e),
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            body = {}

        error_type = body.get("error-type")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise classify_error(
                status_code=e.response.status_code, error_type=error_type
            ) from e

        if body.get("result") != "success":
            raise classify_error(
                status_code=response.status_code,
                error_type=error_type or "unexpected-response",
            )

        return body

    @with_retry
    def get_rate(self, source_currency: str, target_currency: str) -> Decimal:
        """
        Get conversion rate for a currency pair.

        Args:
            source_currency: ISO 4217 code to convert from (e.g., USD)
            target_currency: ISO 4217 code to convert into (e.g., PLN)

        Returns:
            Conversion rate as Decimal
        """
        if not self.api_key:
            raise InvalidCredential("ExchangeRate-API key is not configured")

        logger.info(f"Fetching exchange rate {source_currency}/{target_currency}")
        body = self._request(f"/pair/{source_currency}/{target_currency}")

        try:
            pair = PairConversion.model_validate(body)
        except ValidationError as e:
            raise ProviderError(f"Malformed ExchangeRate-API response: {e}") from e

        rate = Decimal(str(pair.conversion_rate))
        logger.debug(
            f"Exchange rate {pair.base_code}/{pair.target_code} = {rate} "
            f"(updated {pair.time_last_update_utc})"
        )
        return rate

    def close(self) -> None:
        """Close HTTP client."""
        self._client.close()

    def __enter__(self) -> "ExchangeRateAPIProvider":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
