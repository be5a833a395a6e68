"""Error handling middleware."""

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_501_NOT_IMPLEMENTED,
    HTTP_502_BAD_GATEWAY,
)
from starlette.types import ASGIApp

from glooscap.core.errors import (
    BackendNotImplementedError,
    ConfigurationError,
    DecodeError,
    TransportError,
)
from glooscap.core.logging import get_logger

logger = get_logger()

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware to handle errors and provide consistent error responses."""

    def __init__(self, app: ASGIApp) -> None:
        """
        Initialize middleware with error mappings.

        Args:
        ----
            app: The ASGI application
        """
        super().__init__(app)
        self.error_mapping: ErrorMapping = {
            KeyError: HTTP_404_NOT_FOUND,
            ValueError: HTTP_422_UNPROCESSABLE_ENTITY,
            ConfigurationError: HTTP_500_INTERNAL_SERVER_ERROR,
            BackendNotImplementedError: HTTP_501_NOT_IMPLEMENTED,
            TransportError: HTTP_502_BAD_GATEWAY,
            DecodeError: HTTP_502_BAD_GATEWAY,
            HTTPException: None,  # Use its own status_code
        }

    def _get_error_detail(self, exc: Exception) -> tuple[str, int]:
        """Get error detail and status code from exception."""
        if isinstance(exc, HTTPException):
            return str(exc.detail), exc.status_code
        if isinstance(exc, KeyError):
            return f"'{exc.args[0]}'" if exc.args else str(exc), HTTP_404_NOT_FOUND

        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        for exc_type in type(exc).__mro__:
            mapped_status = self.error_mapping.get(exc_type)
            if mapped_status is not None:
                status_code = mapped_status
                break
        return str(exc.args[0] if exc.args else str(exc)), status_code

    def _create_error_response(
        self,
        error_type: str,
        detail: str,
        status_code: int,
        correlation_id: str | None,
    ) -> JSONResponse:
        """Create JSON error response with optional correlation ID."""
        response = JSONResponse(
            status_code=status_code,
            content={
                "error": error_type,
                "message": detail,
                "status_code": status_code,
                "correlation_id": correlation_id if correlation_id else "unknown",
            },
            media_type="application/json",
        )
        if correlation_id:
            response.headers["X-Request-ID"] = correlation_id
        return response

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle any exception and return a JSON response.

        Args:
        ----
            request: The request that caused the exception
            exc: The exception to handle

        Returns:
        -------
            A JSON response with error details
        """
        correlation_id = getattr(request.state, "correlation_id", None)
        error_type = exc.__class__.__name__
        detail, status_code = self._get_error_detail(exc)

        logger.error(
            "request_error",
            error_type=error_type,
            error_message=detail,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
            correlation_id=correlation_id,
        )
        return self._create_error_response(
            error_type, detail, status_code, correlation_id
        )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)
