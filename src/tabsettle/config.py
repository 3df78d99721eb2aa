"""Configuration management for tabsettle."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .planner import SettlementStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TABSETTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display
    currency_code: str = "USD"

    # Settlement
    settlement_strategy: SettlementStrategy = SettlementStrategy.GREEDY_INSERTION_ORDER

    # Validation
    validate_splits: bool = True  # Reject expenses whose shares don't sum to total
    split_tolerance: int = 0  # Allowed split residual in minor units


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your TABSETTLE_* environment "
            f"variables or .env file.\n"
            f"Error: {e}"
        ) from e
