"""
Logging Configuration Module.

This module builds the central logging configuration dictionary for the
application. Operational logs go to the console and a size-rotated file as
JSON; the audit trail goes to its own time-rotated file and never reaches the
operational handlers.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any

from revcycle.core.config.settings import Settings, get_settings
from revcycle.infrastructure.logging.logger import AUDIT_LOGGER_NAME


def build_logging_config(settings: Settings) -> dict[str, Any]:
    """Build a ``dictConfig`` dictionary from application settings."""
    log_level = settings.LOG_LEVEL
    log_dir = Path(settings.LOG_DIR)
    operational_formatter = "json" if settings.LOG_FORMAT_JSON else "detailed"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] [%(correlation_id)s] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "revcycle.infrastructure.logging.logger.StructuredFormatter",
                "service_name": settings.APP_NAME,
                "environment": settings.ENVIRONMENT,
            },
            "audit": {
                "format": "%(message)s",
            },
        },
        "filters": {
            "correlation_id": {
                "()": "revcycle.infrastructure.logging.logger.CorrelationIdFilter",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": operational_formatter,
                "filters": ["correlation_id"],
                "stream": "ext://sys.stdout",
            },
            "file_handler": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": log_level,
                "formatter": operational_formatter,
                "filters": ["correlation_id"],
                "filename": str(log_dir / "app.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 10,
                "encoding": "utf8",
            },
            "error_file_handler": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "ERROR",
                "formatter": operational_formatter,
                "filters": ["correlation_id"],
                "filename": str(log_dir / "error.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 10,
                "encoding": "utf8",
            },
            "audit_file_handler": {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "level": "INFO",
                "formatter": "audit",
                "filename": settings.AUDIT_LOG_FILE,
                "when": settings.AUDIT_LOG_ROTATION_WHEN,
                "backupCount": settings.AUDIT_LOG_RETENTION_DAYS,
                "encoding": "utf8",
                "utc": True,
                "delay": True,
            },
        },
        "loggers": {
            "revcycle": {
                "level": log_level,
                "handlers": ["console", "file_handler", "error_file_handler"],
                "propagate": False,
            },
            AUDIT_LOGGER_NAME: {
                "level": "INFO",
                "handlers": ["audit_file_handler"] if settings.AUDIT_LOG_ENABLED else [],
                "propagate": False,
            },
            "uvicorn": {
                "level": log_level,
                "handlers": ["console", "file_handler"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DATABASE_ECHO else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(config: dict[str, Any] | None = None, settings: Settings | None = None) -> None:
    """
    Configure the logging system with the provided configuration or default.

    Args:
        config: Optional logging configuration dictionary to use instead of the default
        settings: Settings used to build the default configuration
    """
    settings = settings or get_settings()
    if config is None:
        settings.ensure_log_directories()
        config = build_logging_config(settings)

    logging.config.dictConfig(config)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured successfully")
