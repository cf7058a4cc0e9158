"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.storefront import router as storefront_router
from storefront.api.v1.router import api_router
from storefront.core.auth import TokenVerifier
from storefront.core.config import Settings, get_settings
from storefront.core.database import Database
from storefront.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    SlugUnavailableError,
    StorefrontError,
    ValidationError,
)
from storefront.core.logging_config import (
    generate_request_id,
    request_id_var,
    setup_logging,
)
from storefront.core.rate_limit import limiter
from storefront.core.tenancy import TenantRoutingMiddleware

logger = logging.getLogger(__name__)

_DOMAIN_ERROR_STATUS: list[tuple[type[StorefrontError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
]


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-derived settings.
        database: Pre-built database; defaults to one built from
            ``settings.database_url``.
    """
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        setup_logging(debug=settings.debug)
        logger.info("Starting %s v%s", settings.project_name, settings.version)
        logger.info("Environment: %s (base domain %s)", settings.environment, settings.base_domain)
        yield
        logger.info("Shutting down...")
        await database.dispose()

    # Sentry/GlitchTip init (before middleware)
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # Process-wide collaborators, built once and reached through app.state
    app.state.settings = settings
    app.state.database = database
    app.state.token_verifier = TokenVerifier(settings)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)

    # Subdomain -> /store/<tenant> rewrites and canonical redirects
    app.add_middleware(
        TenantRoutingMiddleware,
        base_domain=settings.base_domain,
        excluded_host_markers=settings.tenant_excluded_host_markers,
        reserved_prefixes=settings.tenant_reserved_prefixes,
        skip_prefixes=settings.tenant_skip_prefixes,
    )

    # CORS: the dashboard origins are listed; storefront subdomains are matched
    # by pattern.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=rf"https://([a-z0-9-]+\.)?{settings.base_domain.replace('.', r'\.')}",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Response:
        rid = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(rid)
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    # Include API routes
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(storefront_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render HTTP errors as ``{"error": ...}``."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed input is a client error: 400 with the first problem found."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(StorefrontError)
    async def storefront_exception_handler(_request: Request, exc: StorefrontError) -> JSONResponse:
        """Translate domain errors raised by services into HTTP responses."""
        status_code = next(
            (code for error_type, code in _DOMAIN_ERROR_STATUS if isinstance(exc, error_type)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        content: dict[str, Any] = {"error": exc.message}
        if isinstance(exc, SlugUnavailableError):
            content["suggestions"] = exc.suggestions
        return JSONResponse(status_code=status_code, content=content)

    # Global exception handler to ensure CORS headers are present on 500 errors
    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions with proper JSON response."""
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Internal server error"},
        )

    # Redirect /docs to versioned docs URL
    @app.get("/docs", include_in_schema=False)
    async def docs_redirect() -> RedirectResponse:
        return RedirectResponse(url=f"{settings.api_v1_prefix}/docs")

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": f"{settings.api_v1_prefix}/docs",
            "health": f"{settings.api_v1_prefix}/health",
        }

    return app


app = create_app()
