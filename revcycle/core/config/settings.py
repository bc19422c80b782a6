"""
Application settings module.

This module provides configuration for the security layer: logging and audit
file locations, database connection, encryption key location and RBAC cache
warm-up.
"""

# Standard Library Imports
import logging
from functools import lru_cache
from pathlib import Path
from typing import Self

# Third-Party Imports
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SUPPORTED_ENCRYPTION_ALGORITHMS = ("aes-256-gcm", "aes-192-gcm", "aes-128-gcm")


class Settings(BaseSettings):
    """Application settings using Pydantic for validation and environment variable loading."""

    # Application
    APP_NAME: str = "revcycle"
    ENVIRONMENT: str = "development"  # development, testing, production
    VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FORMAT_JSON: bool = True

    # Audit logging; 2555 days is seven years
    AUDIT_LOG_ENABLED: bool = True
    AUDIT_LOG_FILE: str = Field(default="logs/audit.log")
    AUDIT_LOG_ROTATION_WHEN: str = "midnight"
    AUDIT_LOG_RETENTION_DAYS: int = 2555
    AUDIT_QUERY_DEFAULT_LIMIT: int = 25
    AUDIT_QUERY_MAX_LIMIT: int = 100

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./revcycle.db"
    DATABASE_ECHO: bool = False

    # Encryption
    ENCRYPTION_KEY_PATH: str = "env:PHI_ENCRYPTION_KEY"
    ENCRYPTION_ALGORITHM: str = "aes-256-gcm"

    # RBAC
    RBAC_WARM_ROLES: list[str] = Field(
        default_factory=lambda: ["administrator", "financial_manager", "billing_specialist"]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the valid levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("ENCRYPTION_ALGORITHM")
    @classmethod
    def validate_encryption_algorithm(cls, v: str) -> str:
        if v.lower() not in SUPPORTED_ENCRYPTION_ALGORITHMS:
            raise ValueError(f"Encryption algorithm must be one of {SUPPORTED_ENCRYPTION_ALGORITHMS}")
        return v.lower()

    @field_validator("AUDIT_QUERY_MAX_LIMIT", "AUDIT_QUERY_DEFAULT_LIMIT")
    @classmethod
    def validate_positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Audit query limits must be positive")
        return v

    @model_validator(mode="after")
    def ensure_default_limit_within_max(self) -> Self:
        """Keep the default page size inside the maximum page size."""
        if self.AUDIT_QUERY_DEFAULT_LIMIT > self.AUDIT_QUERY_MAX_LIMIT:
            self.AUDIT_QUERY_DEFAULT_LIMIT = self.AUDIT_QUERY_MAX_LIMIT
        return self

    def ensure_log_directories(self) -> None:
        """Create the operational and audit log directories if missing."""
        for directory in {Path(self.LOG_DIR), Path(self.AUDIT_LOG_FILE).parent}:
            if directory and not directory.is_dir():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created logs directory: {directory}")


@lru_cache
def get_settings() -> Settings:
    """
    Factory function to get the application settings.

    Services take settings as a constructor argument; this cached factory is
    the default used at process start.

    Returns:
        The application settings instance
    """
    return Settings()
