"""
Per-request access logging.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Logs ``METHOD path -> status (ms)`` for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"{method} {path} -> error {type(e).__name__} ({elapsed_ms:.1f} ms)")
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"{method} {path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
        return response
