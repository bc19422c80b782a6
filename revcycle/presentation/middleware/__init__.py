"""HTTP middleware."""

from revcycle.presentation.middleware.correlation_id import (
    CORRELATION_ID_HEADER,
    CorrelationIdMiddleware,
)

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdMiddleware"]
