"""
Logging middleware for the rollback trigger API.

Logs every request and response with timing, so a rollback triggered by a
scheduler or alarm webhook leaves an audit trail.
"""

import json
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key", "x-auth-token"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, enable_detailed_logging: bool = False):
        """
        Initialize the logging middleware.

        Args:
            app: FastAPI application instance
            enable_detailed_logging: Whether to log request details at DEBUG level
        """
        super().__init__(app)
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        should_log = self._should_log_request(request)

        if should_log:
            logger.info(f"📥 {request.method} {request.url.path} - {self._client_ip(request)}")
            if self.enable_detailed_logging:
                logger.debug(
                    f"📋 Request details: {json.dumps(self._extract_request_info(request), indent=2)}"
                )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"💥 {request.method} {request.url.path} - ERROR - {process_time:.3f}s - {str(e)}"
            )
            # Re-raise for the error handling middleware
            raise

        process_time = time.time() - start_time
        if should_log:
            logger.info(
                f"📤 {request.method} {request.url.path} - {response.status_code} - "
                f"{process_time:.3f}s"
            )

        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Timestamp"] = datetime.now().isoformat()
        return response

    def _client_ip(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _extract_request_info(self, request: Request) -> Dict[str, Any]:
        return {
            "method": request.method,
            "path": str(request.url.path),
            "query_params": dict(request.query_params),
            "client_ip": self._client_ip(request),
            "user_agent": request.headers.get("user-agent"),
            "headers": {
                k: v for k, v in request.headers.items() if k.lower() not in SENSITIVE_HEADERS
            },
            "timestamp": datetime.now().isoformat(),
        }

    def _should_log_request(self, request: Request) -> bool:
        # Liveness probes would drown out rollback traffic
        return request.url.path not in ("/health", "/favicon.ico")
