"""FastAPI middleware for request_id and trace_id."""
import time
import uuid
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shared.logging import clear_request_context, set_request_context

log = structlog.get_logger("http")


def get_request_id_from_headers(request: Request) -> str | None:
    """Extract X-Request-ID from request headers (lookup is case-insensitive)."""
    return request.headers.get("x-request-id")


def get_trace_id_from_headers(request: Request) -> str | None:
    return request.headers.get("x-trace-id")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind request_id/trace_id for the request, echo them back and log the outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id_from_headers(request) or str(uuid.uuid4())
        trace_id = get_trace_id_from_headers(request) or request_id
        set_request_context(request_id=request_id, trace_id=trace_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Trace-ID"] = trace_id
            log.info(
                "request_finished",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            clear_request_context()
