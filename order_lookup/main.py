"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from order_lookup.api.v1.router import api_router
from order_lookup.core.config import Settings, get_settings
from order_lookup.core.errors import OrderLookupError
from order_lookup.core.logging_config import (
    generate_request_id,
    request_id_var,
    setup_logging,
)
from order_lookup.services.lookup_service import build_lookup_service

logger = logging.getLogger(__name__)


def _check_configuration(settings: Settings) -> None:
    """Log configuration gaps once at startup; requests still fail closed."""
    if not settings.backend_configured:
        logger.error("SHOPIFY_SHOP / SHOPIFY_ADMIN_API_ACCESS_TOKEN not set; lookups will fail")
    if settings.trust_mode == "signed_proxy" and not settings.proxy_signing_secret:
        logger.error("PROXY_SIGNING_SECRET not set; every signed request will be rejected")
    if settings.trust_mode == "cors" and not settings.allowed_origins:
        logger.warning("ALLOWED_ORIGINS is empty; every browser request will be rejected")
    if not settings.captcha_enabled:
        logger.info("RECAPTCHA_SECRET not set; CAPTCHA check disabled")
    if not settings.rate_limit_enabled:
        logger.info("RATE_LIMIT_REDIS_URL not set; rate limiting disabled")


def _response_headers(request: Request) -> dict[str, str]:
    headers: dict[str, str] = getattr(request.state, "response_headers", {})
    return headers


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        setup_logging(debug=settings.debug)
        logger.info("Starting %s v%s", settings.project_name, settings.version)
        logger.info("Environment: %s, trust mode: %s", settings.environment, settings.trust_mode)
        _check_configuration(settings)
        yield
        logger.info("Shutting down...")
        rate_limiter = app.state.lookup_service.rate_limiter
        if rate_limiter is not None:
            await rate_limiter.redis.aclose()

    # Sentry/GlitchTip init (before middleware)
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
            send_default_pii=False,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # One immutable configuration and one pipeline per process
    app.state.settings = settings
    app.state.lookup_service = build_lookup_service(settings)

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

    @app.exception_handler(OrderLookupError)
    async def lookup_error_handler(request: Request, exc: OrderLookupError) -> JSONResponse:
        """Render a pipeline failure as a short JSON error."""
        logger.info("Lookup rejected: %s (%d)", type(exc).__name__, exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers={**_response_headers(request), **exc.headers},
        )

    # Global exception handler to keep the error contract on unexpected failures
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions with proper JSON response."""
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error"},
            headers=_response_headers(request),
        )

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
