"""
Correlation ID middleware.

Takes the caller's X-Request-ID (or X-Correlation-ID), generating one when
absent, binds it to every log line of the request, including the fan-out
tasks spawned for it, and echoes it back in the response.
"""

from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or uuid4().hex
        )

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        ):
            logger.info("Request started")
            response = await call_next(request)
            logger.info("Request completed", status_code=response.status_code)

        response.headers["X-Request-ID"] = correlation_id
        return response
