"""Logging infrastructure: formatters, correlation id context, audit sink."""

from revcycle.infrastructure.logging.context import (
    correlation_scope,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from revcycle.infrastructure.logging.logger import (
    AUDIT_LOGGER_NAME,
    CorrelationIdFilter,
    StructuredFormatter,
    get_audit_file_logger,
)

__all__ = [
    "AUDIT_LOGGER_NAME",
    "CorrelationIdFilter",
    "StructuredFormatter",
    "correlation_scope",
    "get_audit_file_logger",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
