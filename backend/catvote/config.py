"""
CatVote: Application Configuration
==================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the store, and the client data layer.
When:  Loaded once at module import time.

Every option has a hard-coded default, so the demo runs with no environment
at all. The variable names match the existing deployment (PORT,
DATABASE_PATH, EXPO_PUBLIC_API_URL, SENTRY_DSN).
"""

from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Store ─────────────────────────────────────────────────────────────
    # What: Path of the single SQLite file holding cats, votes and winners
    database_path: str = Field(
        default="./database.db",
        description="Filesystem path of the SQLite store",
    )

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the store file (aiosqlite driver)."""
        return f"sqlite+aiosqlite:///{self.database_path}"

    # ── Client ────────────────────────────────────────────────────────────
    # What: Base URL the client data layer uses to reach this API
    api_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("api_url", "expo_public_api_url"),
        description="Base URL of the CatVote API as seen by clients",
    )

    # What: External cat-image source, queried only when the store is empty
    cat_api_url: str = Field(default="https://api.thecatapi.com/v1/images/search")
    cat_api_limit: int = Field(default=10, ge=1, le=100)

    # What: Transport timeout for every outbound client request, in seconds
    http_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── Error Reporting ───────────────────────────────────────────────────
    # What: Sentry DSN; empty disables reporting entirely
    sentry_dsn: str = Field(default="")
    environment: str = Field(default="development")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, or "*" for any origin (mobile clients)
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_PATH and database_path both work
        "populate_by_name": True,
    }


# Singleton instance, imported throughout the application
settings = Settings()
