"""vidshare API - Main Application."""

import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidshare.channels.router import router as channels_router
from vidshare.channels.service import ChannelService
from vidshare.comments.router import router as comments_router
from vidshare.comments.service import CommentService
from vidshare.config import get_settings
from vidshare.core.context import get_request_id
from vidshare.core.database import init_async_cassandra, shutdown_async_cassandra
from vidshare.core.errors import STORE_EXCEPTIONS, VidshareError, status_for
from vidshare.core.logging import configure_structlog, get_logger
from vidshare.core.middleware import RequestContextMiddleware
from vidshare.core.redis import init_redis, shutdown_redis
from vidshare.health import router as health_router
from vidshare.reactions.router import router as reactions_router
from vidshare.reactions.service import EngagementService
from vidshare.videos.catalog import VideoCatalog
from vidshare.videos.router import router as videos_router
from vidshare.videos.service import VideoService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Initialize Redis (non-critical - counters are read from Cassandra)
    redis_client = None
    try:
        redis_client = await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - engagement cache disabled",
        )

    try:
        session = await init_async_cassandra()
        app.state.cassandra_session = session
        logger.info("cassandra_initialized")

        keyspace = settings.cassandra_keyspace

        app.state.engagement_service = EngagementService(
            session=session,
            keyspace=keyspace,
            redis=redis_client,
            max_attempts=settings.toggle_max_attempts,
            cache_ttl=settings.engagement_cache_ttl,
        )
        app.state.channel_service = ChannelService(
            session=session,
            keyspace=keyspace,
            engagement_service=app.state.engagement_service,
        )
        app.state.comment_service = CommentService(
            session=session,
            keyspace=keyspace,
            channel_service=app.state.channel_service,
        )
        app.state.video_service = VideoService(
            session=session,
            keyspace=keyspace,
            channel_service=app.state.channel_service,
            comment_service=app.state.comment_service,
            engagement_service=app.state.engagement_service,
            rng=random.Random(settings.random_seed),
            catalog=VideoCatalog.load(settings.video_catalog_path),
            min_per_page=settings.video_min_per_page,
            comment_limit=settings.video_comment_limit,
            sample_size=settings.video_random_sample_size,
            max_duration=settings.video_max_duration,
        )
        logger.info("services_initialized", redis_enabled=redis_client is not None)
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug=False keeps Starlette's ServerErrorMiddleware from rendering
    # stack traces; the handlers below log details and return safe messages.
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Video sharing API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id()

    def _error_response(
        request: Request, status_code: int, message: str, **extra
    ) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status_code,
            content={
                "error": True,
                "message": message,
                "status_code": status_code,
                "request_id": _get_request_id_safe(request),
                **extra,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return _error_response(request, exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle validation errors with safe error messages."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            details=[
                {
                    "field": ".".join(str(loc) for loc in err.get("loc", [])),
                    "message": err.get("msg", "Invalid value"),
                }
                for err in exc.errors()
            ],
        )

    @app.exception_handler(VidshareError)
    async def service_exception_handler(
        request: Request, exc: VidshareError
    ) -> ORJSONResponse:
        """Map service errors to HTTP status codes."""
        status_code = status_for(exc)
        log = (
            logger.error
            if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
            else logger.info
        )
        log(
            "service_error",
            code=exc.code,
            error_message=exc.message,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
        )
        return _error_response(request, status_code, exc.message, code=exc.code)

    async def store_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Driver failures outside the engagement path."""
        logger.error(
            "store_unavailable",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Storage temporarily unavailable",
            code="store_error",
        )

    for exc_class in STORE_EXCEPTIONS:
        app.add_exception_handler(exc_class, store_exception_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Never expose stack traces or internal error details to users.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred. Please try again later.",
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(channels_router)
    app.include_router(videos_router)
    app.include_router(comments_router)
    app.include_router(reactions_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "vidshare API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()
