"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.sql.columns import TABLE_COLUMNS

AUDIT_COLUMNS = frozenset({"actor", "action", "target", "metadata"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    database_url: str = Field(alias="DATABASE_URL")
    db_timezone: str = Field(default="UTC", alias="DB_TIMEZONE")
    db_pool_max_size: int = Field(default=10, alias="DB_POOL_MAX_SIZE")

    app_env: str = Field(default="production", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    api_prefix: str = Field(default="/api/agent", alias="API_PREFIX")
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=5000, alias="API_PORT")

    agent_default_actor: str = Field(default="agent", alias="AGENT_DEFAULT_ACTOR")
    agent_read_limit: int = Field(default=100, alias="AGENT_READ_LIMIT")
    agent_audit_table: str = Field(default="hr_audit_log", alias="AGENT_AUDIT_TABLE")

    @field_validator("db_timezone")
    @classmethod
    def validate_db_timezone_is_utc(cls, value: str) -> str:
        """Stored timestamps are compared and echoed as UTC; any other timezone is rejected."""

        if value.upper() != "UTC":
            raise ValueError("DB_TIMEZONE must be UTC")
        return "UTC"

    @field_validator("agent_read_limit", "db_pool_max_size")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("agent_audit_table")
    @classmethod
    def validate_audit_table(cls, value: str) -> str:
        """The audit table must be allowlisted and carry the audit row columns."""

        audit_tables = sorted(
            table for table, columns in TABLE_COLUMNS.items() if AUDIT_COLUMNS <= columns
        )
        if value not in audit_tables:
            raise ValueError(f"AGENT_AUDIT_TABLE must be one of: {', '.join(audit_tables)}")
        return value

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
