"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Governance Dashboard"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Record source (Supabase / PostgREST)
    supabase_url: str | None = Field(default=None)
    supabase_key: str | None = Field(default=None)
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    fetch_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per fetch when the record source is unreachable",
    )

    # Aggregation
    rollup_limit: int = Field(
        default=8,
        ge=1,
        description="Maximum number of territory groups kept in a rollup",
    )
    memo_size: int = Field(
        default=128,
        ge=1,
        description="Filtered collections kept in the dashboard memo",
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        description="Number of calendar months in the trend window",
    )

    # Normalization defaults
    missing_territory_label: str = Field(default="Sem território")
    missing_secretary_label: str = Field(default="Não informado")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
