"""Middleware binding a correlation ID to every request's log entries."""

import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from authcore.core.logging import bind_correlation_id, clear_context

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind ``X-Correlation-ID`` (or a generated ID) into the logging context."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"cid_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
