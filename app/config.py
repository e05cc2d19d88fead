"""
OrganiJob - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    All settings can be overridden via environment variables with ORGANIJOB_ prefix.

    Storage Settings:
        ORGANIJOB_STORAGE_BACKEND=database  - "database" (SQLAlchemy) or "file" (JSON document)
        ORGANIJOB_DATABASE_URL=...          - Also read from DATABASE_URL
        ORGANIJOB_PGSSLMODE=require         - Also read from PGSSLMODE
        ORGANIJOB_DATA_FILE=...             - Path of the JSON document for the file backend

    Rate Limiting:
        ORGANIJOB_RATE_LIMIT_ENABLED=false  - Disable slowapi limits (tests, local use)
"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Storage backend selection
    storage_backend: str = Field("database", pattern="^(database|file)$")

    # Database
    database_url: str = Field(
        "sqlite:///./data/organijob.db",
        validation_alias=AliasChoices("ORGANIJOB_DATABASE_URL", "DATABASE_URL"),
    )
    pgsslmode: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ORGANIJOB_PGSSLMODE", "PGSSLMODE"),
    )

    # Database connection pool (PostgreSQL only)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    # Database retry settings
    db_retry_max_attempts: int = 3
    db_retry_base_delay: float = 0.1

    # Flat-file backend
    data_file: str = "./data/organijob.json"

    # Static front-end served for every non-API GET path
    public_dir: str = "./public"

    # CORS allowed origins (comma-separated, e.g. "http://localhost:3000,https://myapp.com")
    allowed_origins: str = "*"

    rate_limit_enabled: bool = True

    class Config:
        env_prefix = "ORGANIJOB_"
        env_file = ".env"
        extra = "ignore"

    @property
    def use_ssl(self) -> bool:
        """SSL is required by managed PostgreSQL hosts such as Render."""
        return self.pgsslmode == "require" or "render.com" in self.database_url


# Global settings instance
settings = Settings()
