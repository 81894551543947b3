"""Engine configuration using Pydantic Settings.

Environment Variable Strategy:
- Every field has a default suitable for local use and tests
- Overrides come from BOOKKEEPING_* environment variables or a local .env file
"""

from datetime import date
from decimal import Decimal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bookkeeping.models.period import Granularity


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    All fields are optional; the defaults reproduce cent-precision
    statements with the usual em dash placeholder for zero cells.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKKEEPING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    debug: bool = Field(default=False, validation_alias=AliasChoices("BOOKKEEPING_DEBUG", "DEBUG"))
    log_level: str = "INFO"

    # Money handling
    money_quantum: Decimal = Decimal("0.01")
    significance_threshold: Decimal = Decimal("0.01")
    balance_tolerance: Decimal = Decimal("0.01")

    # Periods
    history_start: date = date(1900, 1, 1)
    default_granularity: Granularity = Granularity.MONTH

    # Display
    zero_placeholder: str = "—"
    percentage_places: int = 1

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


settings = Settings()
