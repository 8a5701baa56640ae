"""Application settings using Pydantic."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ExchangeRate-API
    exchange_api_key: str = Field(default="", description="ExchangeRate-API key")
    exchange_api_url: str = Field(
        default="https://v6.exchangerate-api.com/v6",
        description="ExchangeRate-API v6 base URL",
    )
    request_timeout: float = Field(default=10.0, description="HTTP timeout in seconds")
    max_retries: int = Field(default=3, description="Retries for transient provider errors")

    # Currency in which tax is assessed
    home_currency: str = Field(default="PLN", description="ISO 4217 home currency code")

    # Flat rate tax (percent)
    flat_tax_rate: float = Field(default=19.0, description="Flat tax rate (%)")

    # Progressive tax with two brackets
    progressive_deductible_tax: float = Field(
        default=525.12, description="Tax deduction available per fiscal year"
    )
    progressive_first_bracket_rate: float = Field(
        default=0.17, description="First bracket tax rate (fraction)"
    )
    progressive_first_bracket_max_income: float = Field(
        default=85528.0, description="Income ceiling of the first bracket"
    )
    progressive_second_bracket_rate: float = Field(
        default=0.32, description="Second bracket tax rate (fraction)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Console log level"
    )
    log_path: str = Field(
        default="logs/incometax_{time:YYYY-MM-DD}.log",
        description="Log file path (empty to disable file logging)",
    )

    @field_validator("home_currency")
    @classmethod
    def normalize_home_currency(cls, value: str) -> str:
        code = value.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid home currency code: {value!r}")
        return code


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
