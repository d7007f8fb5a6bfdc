"""
Job Board API - Main Application Entry Point

This module builds the FastAPI application with:
- Store client (Database) and identity provider created once per app
- Optional Redis identity cache and rate limiter
- CORS, security headers, rate limit, timeout and Prometheus middleware
- Error handlers mapping the error taxonomy to HTTP responses
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (create tables / dispose engines)
    ├── Middleware (CORS, security headers, rate limit, request timeout, Prometheus)
    └── API Router (/api)
        ├── /auth          - Sign-up, sign-in, sign-out, current user
        ├── /profiles      - Profile read/update, resume URL
        ├── /jobs          - Job listings and recruiter postings
        ├── /applications  - Apply, review, withdraw
        ├── /saved-jobs    - Bookmarks
        ├── /notifications - Per-user notifications
        └── /admin         - Moderation and statistics
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.api import api_router
from jobboard.config import Settings, get_settings
from jobboard.database import Database
from jobboard.errors import AppError
from jobboard.middleware import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    TimeoutMiddleware,
    setup_metrics,
)
from jobboard.services.identity import LocalIdentityProvider
from jobboard.services.session_cache import IdentityCache

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid input")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = Database.from_settings(settings)
    identity_cache = (
        IdentityCache(settings.redis_url, ttl=settings.identity_cache_ttl_seconds)
        if settings.redis_url
        else None
    )
    rate_limiter = (
        FixedWindowRateLimiter.from_url(
            settings.redis_url,
            settings.rate_limit_requests,
            settings.rate_limit_window_seconds,
        )
        if settings.redis_url and settings.rate_limit_requests > 0
        else None
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
            1. Create tables if missing
        Shutdown:
            1. Close the Redis clients
            2. Dispose store engines
        """
        await database.init()
        logger.info("Job board API started")
        yield
        if identity_cache is not None:
            await identity_cache.close()
        if rate_limiter is not None:
            await rate_limiter.close()
        await database.dispose()

    app = FastAPI(
        title="Job Board API",
        description="Job search, postings and applications",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.identity_cache = identity_cache
    app.state.identity_provider = LocalIdentityProvider(
        database.session_factory,
        settings.jwt_secret,
        expire_minutes=settings.access_token_expire_minutes,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)
    if settings.enable_metrics:
        setup_metrics(app)
    if rate_limiter is not None:
        app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
