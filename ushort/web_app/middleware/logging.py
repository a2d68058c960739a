"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Optional

from ...lib.common.logging_config import get_logger, log_event, REQUEST_COMPLETED
from .headers import client_ip_for


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or get_logger("web.access")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log one timing line per request."""
        start_time = time.perf_counter()
        client_ip = client_ip_for(request)

        response = await call_next(request)

        log_event(
            self.logger, logging.INFO, REQUEST_COMPLETED,
            endpoint=f"{request.method} {request.url.path}",
            responseTime=f"{(time.perf_counter() - start_time) * 1000:.2f}ms",
            status=response.status_code,
            clientIp=client_ip,
        )
        return response
