"""
LawHelper correlation ID middleware
===================================
Tags every request with an X-Correlation-ID (taken from the client when it
sends one) so that all log lines for a single HTTP call share the same
identifier, and echoes it back on the response.
"""
from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

_MAX_ID_LENGTH = 128


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        supplied = (request.headers.get("X-Correlation-ID") or "").strip()
        correlation_id = supplied[:_MAX_ID_LENGTH] or str(uuid.uuid4())

        # Available to handlers and exception handlers via request.state
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            "request method=%s path=%s status=%d duration_ms=%.1f correlation_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            correlation_id,
        )

        response.headers["X-Correlation-ID"] = correlation_id
        return response
