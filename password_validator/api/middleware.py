"""API middleware for request processing."""

import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from password_validator.logging_config import bind_request, get_logger
from password_validator.services.context import OKAPI_HEADER_TENANT

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses.

    Only the method, path and status are logged; request bodies carry
    passwords and are never read here.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())[:8]
        request.state.request_id = request_id
        bind_request(request_id, request.headers.get(OKAPI_HEADER_TENANT))

        start_time = time.time()
        logger.info(
            "Request started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Request completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        return response


def validate_pagination(offset: int, limit: int, max_limit: int = 500) -> tuple[int, int]:
    """Validate and normalize pagination parameters.

    Args:
        offset: The offset value
        limit: The limit value
        max_limit: Maximum allowed limit

    Returns:
        Tuple of (validated_offset, validated_limit)
    """
    validated_offset = max(0, offset)
    validated_limit = min(max(1, limit), max_limit)
    return validated_offset, validated_limit
