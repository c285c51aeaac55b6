"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - period_adjust_reference_day is parsed into a MonthDay at load time (fail fast)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SPS_ prefix: every variable belongs to the surveillance pseudonym service
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from surveillance_pseudonym.core.domain_types import MonthDay


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SPS_", case_sensitive=False,
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://sps:sps@db:5432/sps"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Periods
    period_max_lifetime_in_years: int = Field(3, ge=1, le=100)
    period_adjust_reference_day: str = "--01-01"

    @field_validator("period_adjust_reference_day")
    @classmethod
    def check_month_day(cls, v: str) -> str:
        """Must be a --MM-DD day that exists in every year (e.g. --07-01)."""
        return str(MonthDay.parse(v))

    @property
    def adjust_reference_day(self) -> MonthDay:
        return MonthDay.parse(self.period_adjust_reference_day)

    # Hashing — Base64 pepper, validated when the hasher is built
    hash_pepper: str = ""

    # Feature flags
    individual_pseudonym: bool = True

    # Purger
    purger_batch_size: int = Field(1000, ge=1, le=100_000)
    purger_retention_years: int = Field(5, ge=1, le=50)
    purger_grace_minutes: int = Field(60, ge=0)

    # HTTP server
    api_host: str = "0.0.0.0"
    api_port: int = Field(8080, ge=1, le=65535)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
