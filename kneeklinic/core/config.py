"""
kneeklinic/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (backend URL, timeouts, storage location)
- Validates configuration on startup
- Environment-specific settings
"""

from pathlib import Path
from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # KneeKlinic backend
    API_BASE_URL: str = Field(
        default="http://localhost:5000",
        description="KneeKlinic backend base URL (without the /api suffix)"
    )
    API_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Backend request timeout in seconds"
    )

    # Local device storage
    STORAGE_PATH: Path = Field(
        default=Path.home() / ".kneeklinic" / "storage.json",
        description="JSON file holding the persisted token and user profile"
    )

    # Appointments
    BOOKING_URL: str = Field(
        default="https://cal.com/habibkhan-rajah-xo7wnk/30min",
        description="External booking page used to schedule consultations"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @field_validator("API_BASE_URL")
    @classmethod
    def validate_api_base_url(cls, v: str, info: ValidationInfo) -> str:
        """Strip trailing slashes and require https in production."""
        v = v.strip().rstrip("/")
        if info.data.get("ENVIRONMENT") == "production" and not v.startswith("https://"):
            raise ValueError("API_BASE_URL must use https in production environment")
        return v

    @property
    def api_url(self) -> str:
        """Base URL every service path is resolved against."""
        return f"{self.API_BASE_URL}/api"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings(config: Settings = settings) -> bool:
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not config.API_BASE_URL:
        errors.append("API_BASE_URL is required")

    if config.API_TIMEOUT_SECONDS <= 0:
        errors.append("API_TIMEOUT_SECONDS must be positive")

    if config.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL '{config.LOG_LEVEL}' is not a valid logging level")

    if config.is_production and config.DEBUG:
        errors.append("DEBUG must be disabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
