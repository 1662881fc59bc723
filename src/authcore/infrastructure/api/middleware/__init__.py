"""HTTP middleware."""

from authcore.infrastructure.api.middleware.correlation_middleware import (
    CORRELATION_HEADER,
    CorrelationIdMiddleware,
)

__all__ = ["CORRELATION_HEADER", "CorrelationIdMiddleware"]
