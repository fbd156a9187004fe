"""
Request logging for the vectordex server.
"""

from __future__ import annotations

import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils.logging import get_logger

logger = get_logger("vectordex.server.access")

# Polled endpoints are logged at DEBUG to keep INFO readable
QUIET_PATHS = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request with method, path, status and duration,
    and report the duration in an ``X-Response-Time`` header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        path = request.url.path
        quiet = path.endswith(QUIET_PATHS) and response.status_code < 400
        logger.log(
            logging.DEBUG if quiet else logging.INFO,
            f"{request.method} {path} -> {response.status_code} "
            f"({elapsed_ms:.2f}ms)",
        )

        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response
