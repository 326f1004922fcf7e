"""
Registros API - Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory and the process entry point.
When:  Loaded once at module import time; tests build their own instances.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults, so the service starts with no
    configuration at all: a `registros.db` file in the working directory,
    listening on port 2229.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Async SQLAlchemy URL of the single-file database
    # Format: sqlite+aiosqlite:///<path> (three slashes = relative path)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./registros.db",
        description="Async SQLite connection URL",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=2229, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    # DEBUG also echoes every SQL statement.
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

    # ── Error Reporting ───────────────────────────────────────────────────
    # What: When true, 500 responses carry the raw driver message instead of
    # the generic one. Off by default; driver text can reveal schema details.
    expose_storage_errors: bool = Field(default=False)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
        "extra": "ignore",
    }


# Singleton instance used when create_app() is called without explicit settings
settings = Settings()
