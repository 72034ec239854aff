"""Middleware for request correlation ID tracking and request logging."""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.error_handler import set_correlation_id, structured_logger


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and track correlation IDs for requests.

    Reuses an incoming ``X-Correlation-ID`` header when present, echoes the
    id back on the response and logs one line per completed request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers["X-Correlation-ID"] = correlation_id
        structured_logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return response
