from contextlib import asynccontextmanager
from typing import Annotated, AsyncGenerator

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy.exc import SQLAlchemyError

from fitcoach.config.settings import settings
from fitcoach.core.exceptions import DataConsistencyError, DomainError
from fitcoach.core.observability import capture_exception, init_observability
from fitcoach.core.storage import LocalObjectStorage, get_local_storage
from fitcoach.domains.auth.router import router as auth_router
from fitcoach.domains.clients.router import router as clients_router
from fitcoach.domains.trainers.router import router as trainers_router
from fitcoach.domains.workouts.router import router as workouts_router
from fitcoach.domains.workouts.router import uploads_router

logger = structlog.get_logger(__name__)

LocalStorageDep = Annotated[LocalObjectStorage, Depends(get_local_storage)]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info("app_starting", app_name=settings.APP_NAME, environment=settings.APP_ENV)

    try:
        from fitcoach.config.database import init_db
        await init_db()
        logger.info("database_initialized")
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_init_failed", error=str(e), type=type(e).__name__)
        # Re-raise in production to prevent unhealthy startup
        if settings.is_production:
            raise

    yield
    logger.info("app_shutting_down", app_name=settings.APP_NAME)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render every domain error as {"detail", "code"} with its status."""
    if isinstance(exc, DataConsistencyError):
        logger.error("data_consistency_fault", path=request.url.path, error=exc.message)
        capture_exception(exc, tags={"fault": "data_consistency"})
    elif exc.status_code >= 500:
        logger.error("domain_error", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def _add_local_storage_routes(app: FastAPI) -> None:
    """Serve presigned targets of the local storage backend (development only)."""
    route = f"{settings.LOCAL_STORAGE_URL.rstrip('/')}/{{key:path}}"

    @app.put(route, include_in_schema=False)
    async def local_upload(key: str, request: Request, storage: LocalStorageDep) -> Response:
        await storage.write(key, await request.body())
        return Response(status_code=200)

    @app.get(route, include_in_schema=False)
    async def local_download(key: str, storage: LocalStorageDep) -> Response:
        path = storage.resolve(key)
        if not path.is_file():
            return JSONResponse(status_code=404, content={"detail": "Object not found"})
        return FileResponse(path)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    # Initialize observability (GlitchTip/Sentry)
    init_observability()

    app = FastAPI(
        title=settings.APP_NAME,
        description="FitCoach trainer/client programming API",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
        # Disable automatic trailing slash redirects - they lose Authorization headers
        redirect_slashes=False,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)

    # Include routers
    app.include_router(auth_router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["Authentication"])
    app.include_router(trainers_router, prefix=f"{settings.API_V1_PREFIX}/trainer", tags=["Trainer"])
    app.include_router(workouts_router, prefix=f"{settings.API_V1_PREFIX}/workouts", tags=["Exercises"])
    app.include_router(clients_router, prefix=f"{settings.API_V1_PREFIX}/client", tags=["Client"])
    app.include_router(uploads_router, prefix=f"{settings.API_V1_PREFIX}/assignments", tags=["Videos"])

    if settings.STORAGE_PROVIDER == "local":
        _add_local_storage_routes(app)

    # Health check endpoint
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
        }

    # Scalar API Reference - Modern API documentation
    @app.get("/reference", include_in_schema=False)
    async def scalar_html():
        return get_scalar_api_reference(
            openapi_url=app.openapi_url,
            title=f"{settings.APP_NAME} - API Reference",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fitcoach.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
