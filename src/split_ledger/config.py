"""Configuration management for split-ledger."""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPLIT_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Integrity checks
    verify_integrity: bool = True  # Check split sums and zero-sum after folding

    # Settlement thresholds (minor units)
    settle_threshold: int = Field(default=1, ge=1)  # |balance| below this is settled
    payment_tolerance: int = Field(default=1, ge=0)  # Overpayment allowed for rounding

    # Percentage splits
    percentage_tolerance: Decimal = Decimal("0.01")

    # Currency
    default_currency: str = "USD"
    minor_unit_exponent: int = Field(default=2, ge=0)  # 2 = cents


def load_settings() -> Settings:
    """Load engine settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the SPLIT_LEDGER_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
