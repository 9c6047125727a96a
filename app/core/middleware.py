"""
Request logging middleware.
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every API request with its status and duration."""

    def __init__(self, app, path_prefix: str = "/api"):
        super().__init__(app)
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        if request.url.path.startswith(self.path_prefix):
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {process_time * 1000:.0f}ms"
            )
        response.headers["X-Process-Time"] = str(process_time)
        return response
