"""
Logging helpers.

Structured JSON formatting for operational logs, a filter that stamps the
active correlation id on every record, and the dedicated audit trail logger
that writes one JSON document per line to a time-rotated file.
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from revcycle.core.config.settings import Settings
from revcycle.infrastructure.logging.context import get_correlation_id

AUDIT_LOGGER_NAME = "revcycle.audit"

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "correlation_id"}


class CorrelationIdFilter(logging.Filter):
    """Attach the active correlation id to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """
    Format records as single-line JSON documents.

    Fields passed through ``extra=`` are included as top-level keys without
    overwriting the standard ones.
    """

    def __init__(self, service_name: str = "revcycle", environment: str = "development") -> None:
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "correlation_id": getattr(record, "correlation_id", None) or get_correlation_id(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_audit_file_logger(settings: Settings) -> logging.Logger:
    """
    Return the dedicated audit trail logger.

    When logging has not been configured through ``setup_logging`` the logger
    is given its own rotating file handler here. Audit records never propagate
    to the operational loggers.
    """
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    audit_logger.propagate = False
    audit_logger.setLevel(logging.INFO)

    if not settings.AUDIT_LOG_ENABLED:
        audit_logger.disabled = True
        return audit_logger

    if not audit_logger.handlers:
        Path(settings.AUDIT_LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            settings.AUDIT_LOG_FILE,
            when=settings.AUDIT_LOG_ROTATION_WHEN,
            backupCount=settings.AUDIT_LOG_RETENTION_DAYS,
            encoding="utf-8",
            delay=True,
            utc=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        audit_logger.addHandler(handler)

    return audit_logger
