"""
Error handling middleware for the rollback trigger API.

Turns exceptions that escape a route into a consistent JSON ``ErrorResponse``.
"""

import logging
import traceback
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from rollback_engine.domain.errors import RollbackEngineError
from rollback_engine.schemas.rollback import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling."""

    def __init__(self, app, enable_error_logging: bool = True):
        """
        Initialize the error handling middleware.

        Args:
            app: FastAPI application instance
            enable_error_logging: Whether to log full tracebacks
        """
        super().__init__(app)
        self.enable_error_logging = enable_error_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except RollbackEngineError as e:
            # A collaborator failed outside the orchestrator's total boundary
            return self._error_response(request, e, status_code=502, error_code="BACKEND_ERROR", error=str(e))
        except Exception as e:
            return self._error_response(
                request, e, status_code=500, error_code="INTERNAL_ERROR", error="Internal server error"
            )

    def _error_response(
        self,
        request: Request,
        exc: Exception,
        status_code: int,
        error_code: str,
        error: str,
    ) -> JSONResponse:
        logger.error(f"💥 {error_code} for {request.method} {request.url.path}: {str(exc)}")
        if self.enable_error_logging:
            logger.error(f"📋 Full traceback:\n{traceback.format_exc()}")

        error_response = ErrorResponse(
            success=False,
            error=error,
            error_code=error_code,
            details={
                "path": str(request.url.path),
                "method": request.method,
                "error_type": type(exc).__name__,
            },
        )
        return JSONResponse(status_code=status_code, content=error_response.model_dump())
