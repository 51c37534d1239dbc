"""
Application settings for Taskin.

Values are read from environment variables (prefix ``TASKIN_``) or a ``.env``
file. The OpenTelemetry variables keep their standard names so the same
environment can be shared with a collector.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Taskin configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TASKIN_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "Taskin"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./taskin.db"

    # Logging
    log_level: str | None = None
    log_json: bool = False

    # HTTP
    cors_origins: list[str] = ["http://localhost:4200", "https://localhost:4200"]

    # Insert demo data on startup when the database is empty
    seed_on_startup: bool = False

    # Telemetry (standard OTEL_* names, no prefix)
    otel_service_name: str = Field(default="taskin-api", validation_alias="OTEL_SERVICE_NAME")
    otel_exporter_otlp_endpoint: str | None = Field(
        default=None, validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )
    otel_resource_attributes: str = Field(default="", validation_alias="OTEL_RESOURCE_ATTRIBUTES")


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
