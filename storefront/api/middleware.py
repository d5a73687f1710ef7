"""API middleware for the storefront.

Provides:
- Request ID correlation
- Cache-Control headers for catalog reads
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from storefront.api.schemas import ErrorDetail, ErrorResponse
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON error in the standard ErrorResponse shape.

    Args:
        request: Request being answered (supplies the request ID).
        status_code: HTTP status.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Optional field-level details.
        headers: Extra response headers.

    Returns:
        JSON response.
    """
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details or [],
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(),
        headers=headers,
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attaches a correlation ID to every request.

    A client-supplied ID is reused when it is short and printable;
    anything else is replaced with a fresh UUID. The ID is stored on
    ``request.state``, bound into the structlog context and echoed back
    in the response headers.
    """

    HEADER_NAME = "X-Request-ID"
    MAX_LENGTH = 128

    @classmethod
    def resolve_request_id(cls, supplied: str | None) -> str:
        """Pick the request ID for an incoming request.

        Args:
            supplied: Header value sent by the client, if any.

        Returns:
            The supplied ID when acceptable, otherwise a new UUID.
        """
        if supplied and len(supplied) <= cls.MAX_LENGTH and supplied.isprintable():
            return supplied
        return str(uuid4())

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID."""
        request_id = self.resolve_request_id(request.headers.get(self.HEADER_NAME))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                query=request.url.query or None,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Cache-Control Middleware
# ============================================================================


class CatalogCacheMiddleware(BaseHTTPMiddleware):
    """Marks catalog reads as publicly cacheable.

    Successful GETs under ``prefix`` get ``public, max-age``; every other
    response under the prefix gets ``no-store`` so a 404 or 503 is never
    served from a shared cache.
    """

    def __init__(self, app: ASGIApp, max_age: int, prefix: str = "/content") -> None:
        """Initialize middleware.

        Args:
            app: Wrapped application.
            max_age: Seconds a successful response may be cached (0 disables).
            prefix: Path prefix of catalog routes.
        """
        super().__init__(app)
        self.max_age = max_age
        self.prefix = prefix

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Set Cache-Control on catalog responses."""
        response = await call_next(request)

        if request.method != "GET" or not request.url.path.startswith(self.prefix):
            return response

        if response.status_code == status.HTTP_200_OK and self.max_age > 0:
            response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        else:
            response.headers["Cache-Control"] = "no-store"
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions that escaped every handler into a standard 500."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    The last middleware added runs first.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)

    # Outside the error handler, so 500s are marked no-store too
    app.add_middleware(CatalogCacheMiddleware, max_age=settings.cache_max_age_seconds)

    app.add_middleware(RequestIdMiddleware)
