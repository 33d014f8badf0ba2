"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DATABASE_SCHEMES = ("sqlite+aiosqlite://", "postgresql+asyncpg://", "postgresql://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CMS_AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CMS Role Authorization"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cms_authz.db",
        description="SQLAlchemy async URL (SQLite via aiosqlite or PostgreSQL via asyncpg).",
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10
    # Never enable in production, statements may contain user data
    database_echo: bool = False

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for environment requirements."""
        if self.environment == "production" and self.debug:
            raise ValueError("DEBUG mode cannot be enabled in production environment.")

        if self.environment == "production" and self.database_echo:
            raise ValueError("DATABASE_ECHO cannot be enabled in production environment.")

        if not self.database_url.startswith(SUPPORTED_DATABASE_SCHEMES):
            raise ValueError(
                "DATABASE_URL must start with one of: " + ", ".join(SUPPORTED_DATABASE_SCHEMES)
            )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        Plain ``postgresql://`` URLs are rewritten to use asyncpg, and the
        libpq ``sslmode`` parameter is converted to asyncpg's ``ssl``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            url = url.replace("sslmode=", "ssl=")
        return url

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
