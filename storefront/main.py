"""Storefront API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.catalog import router as catalog_router
from storefront.api.health import router as health_router
from storefront.api.middleware import error_response, setup_middleware
from storefront.domain.exceptions import CatalogUnavailableError
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import engine
from storefront.infrastructure.logging import configure_logging

logger = structlog.get_logger()

RETRY_AFTER_SECONDS = 5


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    configure_logging()
    logger.info(
        "Starting Storefront API",
        version=settings.api_version,
        debug=settings.debug,
        store_timeout_seconds=settings.store_timeout_seconds,
    )

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Shutting down Storefront API")


app = FastAPI(
    title="Storefront API",
    description="Catalog browsing backend: category trees, breadcrumbs and item listings",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_origin],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, cache headers, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(catalog_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "ERROR"
        message = str(detail)

    return error_response(
        request,
        exc.status_code,
        error_code,
        message,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(CatalogUnavailableError)
async def catalog_unavailable_handler(
    request: Request, exc: CatalogUnavailableError
) -> JSONResponse:
    """Map store failures to a retryable 503."""
    logger.error(
        "Catalog unavailable",
        path=request.url.path,
        operation=exc.details.get("operation"),
        reason=exc.details.get("reason"),
    )

    return error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        exc.error_code,
        "The catalog is temporarily unavailable, please retry",
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
