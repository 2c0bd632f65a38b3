"""
Global error handler middleware for the FastAPI application.
Catches and formats all exceptions consistently.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import HTTPException, status

from app.config import settings
from app.domain.models.base import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolation,
    ConcurrentModificationError,
    UpstreamRenderError,
)

logger = logging.getLogger(__name__)


# Most specific first
DOMAIN_STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Bad Request"),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (BusinessRuleViolation, status.HTTP_409_CONFLICT, "Conflict"),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT, "Conflict"),
    (UpstreamRenderError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
)


def domain_status(exc: DomainException) -> tuple:
    """HTTP status code and reason for a domain exception."""
    for exc_type, status_code, reason in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code, reason
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"


def to_http_exception(exc: DomainException) -> HTTPException:
    """Translate a domain exception raised by a use case into an HTTP error."""
    status_code, _ = domain_status(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    return HTTPException(status_code=status_code, detail=exc.message)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = self.format_error_response(exc)

        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.get("status_code", 500),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        if isinstance(exc, DomainException):
            status_code, reason = domain_status(exc)
            return {
                "error": reason,
                "message": exc.message,
                "status_code": status_code
            }

        return {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }
