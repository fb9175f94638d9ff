"""Middleware for HTTP error logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure all HTTP errors are logged.

    - 4xx responses: logged at WARN level
    - 5xx responses: logged at ERROR level

    The request body is left untouched; multipart uploads are read once by
    the route.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log errors.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        details = {
            "http_status": response.status_code,
            "method": request.method,
            "path": request.url.path,
            "duration_ms": duration_ms,
        }

        if 400 <= response.status_code < 500:
            logger.warning("Client error response", extra=details)
        elif response.status_code >= 500:
            logger.error("Server error response", extra=details)

        return response
