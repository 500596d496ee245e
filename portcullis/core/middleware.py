"""
Middleware configuration for the application.
Includes Correlation ID setup and request logging middleware.
"""

import time
from typing import Callable

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with status and duration; health probes are skipped."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        logger.info(
            "Request completed",
            status_code=response.status_code,
            client_ip=request.client.host if request.client else "unknown",
            process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response


def setup_middleware(app):
    """Setup all middleware for the application."""
    # Starlette runs the last added middleware first: correlation id must wrap logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )
