"""
FastAPI application for MulaBoard.

Routes live in ``api.routes``; this module wires middleware, error
mapping and startup/shutdown around them. Run with
``uvicorn mulaboard.api.app:create_app --factory`` or ``mulaboard serve``.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mulaboard import __version__
from mulaboard.api.dependencies import cleanup_dependencies
from mulaboard.api.middleware.timeout import TimeoutMiddleware
from mulaboard.api.routes import admin, feedback, health, users
from mulaboard.config.settings import get_settings
from mulaboard.feedback.service import FeedbackError, SubmissionRejected
from mulaboard.observability.tracing import is_tracing_enabled, request_span, setup_tracing

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("MulaBoard API starting", environment=settings.environment)

    if settings.tracing_enabled:
        setup_tracing(
            service_name=settings.otel_service_name,
            otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        )

    yield

    # Pools are opened lazily by the dependency providers.
    await cleanup_dependencies()
    logger.info("MulaBoard API stopped")


def create_app() -> FastAPI:
    """Build the API. Middleware is added innermost first."""
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "feedback", "description": "Anonymous submission and the public wall"},
        {"name": "users", "description": "Received feedback, statistics and badges"},
        {"name": "admin", "description": "Moderation and abuse analysis"},
    ]

    app = FastAPI(
        title="MulaBoard API",
        description="""
Anonymous 360-degree feedback with Mula ratings.

## Tiers

- **Golden Mula**: average score 4.5 or above
- **Fresh Carrot**: average score from 3.0 up to 4.5
- **Rotten Tomato**: average score below 3.0

## Authentication

Anonymous submission, the eligibility check, the public wall and `/health`
are open. Every other route requires the `X-API-KEY` header and, where it
acts for a user, `X-User-ID`.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # CORS (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    # Inside the request-context middleware, so a 504 is still logged with its request_id
    if settings.request_timeout_seconds > 0:
        app.add_middleware(
            TimeoutMiddleware,
            timeout_seconds=settings.request_timeout_seconds,
        )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        try:
            if is_tracing_enabled():
                with request_span(request.method, request.url.path, request_id) as span:
                    response = await call_next(request)
                    span.set_attribute("http.status_code", response.status_code)
            else:
                response = await call_next(request)

            response.headers["X-Request-ID"] = request_id
            # Query strings may carry user ids; log the path only.
            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    # Rate limiting (opt-in via RATE_LIMIT_ENABLED=true)
    if settings.rate_limit_enabled:
        from slowapi import _rate_limit_exceeded_handler
        from slowapi.errors import RateLimitExceeded
        from slowapi.middleware import SlowAPIMiddleware

        from mulaboard.api.rate_limit import limiter

        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(FeedbackError)
    async def feedback_error_handler(request: Request, exc: FeedbackError):
        error_type = exc.reason if isinstance(exc, SubmissionRejected) else "feedback_error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_type": error_type},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(feedback.router, tags=["feedback"])
    app.include_router(users.router, tags=["users"])
    app.include_router(admin.router, tags=["admin"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "MulaBoard API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
