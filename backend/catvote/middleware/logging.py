"""
CatVote: Request Logging Middleware
===================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request ID and client IP.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Level by status: 5xx → ERROR, 4xx → WARNING, everything else → INFO.
A successful request slower than SLOW_REQUEST_MS is bumped to WARNING.
Request bodies are never logged. The health probe is skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from catvote.middleware.request_id import request_id_var

logger = logging.getLogger("catvote.access")

SLOW_REQUEST_MS = 1000.0


def access_log_level(status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or duration_ms > SLOW_REQUEST_MS:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log for every request except SKIPPED_PATHS."""

    SKIPPED_PATHS = {"/api/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": path,
            "client_ip": request.client.host if request.client else "unknown",
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.exception(
                "%s %s raised after %.1fms [%s]",
                fields["method"],
                path,
                fields["duration_ms"],
                fields["request_id"],
                extra=fields,
            )
            raise

        fields["status"] = response.status_code
        fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        logger.log(
            access_log_level(response.status_code, fields["duration_ms"]),
            "%s %s %d %.1fms [%s] from %s",
            fields["method"],
            path,
            fields["status"],
            fields["duration_ms"],
            fields["request_id"],
            fields["client_ip"],
            extra=fields,
        )
        return response
