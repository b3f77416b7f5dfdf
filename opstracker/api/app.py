"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from opstracker.api.deps import TrackerDep, close_tracker, init_tracker
from opstracker.api.routes import admin_settings, operations, stats
from opstracker.core.config import get_settings
from opstracker.core.errors import StorageError
from opstracker.core.logging import get_logger, setup_logging
from opstracker.storage.redis_client import close_redis_pool, init_redis_pool

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()

    # Startup
    setup_logging(settings)
    logger.info(
        "Starting application",
        app_name=settings.app_name,
        version=settings.app_version,
        storage_backend=settings.storage_backend,
    )

    if settings.storage_backend == "redis":
        await init_redis_pool(settings)
        logger.info(
            "Redis connection pool initialized",
            max_connections=settings.redis_max_connections,
        )
    init_tracker(settings)

    yield

    # Shutdown
    logger.info("Shutting down application")
    await close_tracker()
    await close_redis_pool()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Operation usage tracking and alerting",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(operations.router, prefix="/api/v1")
    app.include_router(stats.router, prefix="/api/v1")
    app.include_router(admin_settings.router, prefix="/api/v1")
    app.mount("/metrics", make_asgi_app())

    # Error response handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        content = {
            "code": exc.status_code,
            "message": detail if isinstance(detail, str) else "HTTP error",
            "data": None if isinstance(detail, str) else detail,
        }
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "code": 422,
                "message": "Validation error",
                "data": jsonable_errors(exc),
            },
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(
            "Storage write failed",
            key=exc.key,
            error=str(exc),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=503,
            content={
                "code": 503,
                "message": "Storage unavailable",
                "data": str(exc) if settings.debug else None,
            },
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=500,
            content={
                "code": 500,
                "message": "Internal server error",
                "data": str(exc) if settings.debug else None,
            },
        )

    @app.get("/health")
    async def health_check(tracker: TrackerDep) -> dict:
        """Health check endpoint. Storage outages degrade, they do not fail."""
        storage_ok = await tracker.storage_available()
        return {
            "status": "ok" if storage_ok else "degraded",
            "storage": settings.storage_backend if storage_ok else "unreachable",
            "version": settings.app_version,
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the non-serializable ``ctx`` payloads."""
    return [{key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()]


# Application instance for uvicorn
app = create_app()
