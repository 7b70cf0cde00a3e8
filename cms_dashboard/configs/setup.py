from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette import status
from starlette.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference

from cms_dashboard.schemas.response import ApiError, ErrorDetail, HealthCheck
from cms_dashboard.configs.settings import settings
from cms_dashboard.core.exceptions import AppError
from cms_dashboard.utils import setup_logging, get_logger
from cms_dashboard.middlewares import init_sentry
from cms_dashboard.api import auth_router, folder_router, dashboard_router, media_router
from cms_dashboard.dependencies import get_media_store, get_state_persistence
from cms_dashboard.services import MediaStoreService, StatePersistence, redis_service

logger = get_logger(__name__)

APP_VERSION = "1.0.0"

VERSIONED_ROUTERS = [
    (auth_router, "auth"),
    (folder_router, "folders"),
    (dashboard_router, "dashboard"),
]


def _configure_logging() -> None:
    is_prod = settings.APP_ENV == "prod"
    setup_logging(
        level="DEBUG" if settings.APP_DEBUG else "INFO",
        app_name=settings.APP_NAME,
        enable_json=is_prod,
        log_file="logs/app.log" if is_prod else None
    )


def _configure_sentry() -> None:
    """Error reporting, production only"""
    if settings.APP_ENV != "prod":
        return
    if not settings.SENTRY_DSN:
        logger.warning("SENTRY_DSN is not set, error reporting disabled")
        return

    try:
        init_sentry(
            dsn=settings.SENTRY_DSN,
            environment=settings.APP_ENV,
            release=settings.RELEASE,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
            send_default_pii=settings.SENTRY_SEND_DEFAULT_PII
        )
        logger.info("Sentry error reporting enabled")
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {str(e)}")


async def _check_stores() -> None:
    """Probe Redis and prepare the media bucket; the API starts either way"""
    if await redis_service.ping():
        logger.info("Session store ready")
    else:
        logger.warning("Redis unreachable, dashboard state falls back to defaults")

    try:
        await get_media_store().ensure_bucket()
        logger.info(f"Media bucket {settings.MINIO_BUCKET} ready")
    except Exception as e:
        logger.error(f"Media bucket {settings.MINIO_BUCKET} unavailable: {str(e)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    _configure_sentry()
    logger.info(f"Starting {settings.APP_NAME} {APP_VERSION} against {settings.ORCHARD_BASE_URL}")
    await _check_stores()

    try:
        yield
    finally:
        await redis_service.close()
        logger.info(f"{settings.APP_NAME} stopped")


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    """Render AppError as ApiError, keeping its code and details"""
    errors = list(exc.errors or [])
    if exc.field:
        errors.append({
            "code": exc.code,
            "message": exc.message,
            "field": exc.field
        })

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed with {exc.code}: {exc.message}")

    body = ApiError(
        message=exc.message,
        code=exc.code,
        errors=[ErrorDetail(**e) for e in errors] or None,
        details=exc.details
    ).model_dump(mode="json", exclude_none=True)

    return JSONResponse(content=body, status_code=exc.status_code)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ApiError(message=str(exc.detail)).model_dump(mode="json", exclude_none=True)
    return JSONResponse(content=body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body, query, path and header errors as one 422 ApiError"""
    errors = [
        ErrorDetail(
            code=error.get("type", "validation_error"),
            message=error.get("msg", ""),
            field=".".join(str(part) for part in error.get("loc", []) if part != "body") or None,
        )
        for error in exc.errors()
    ]

    body = ApiError(
        message="Validation error",
        code="validation_error",
        errors=errors
    ).model_dump(mode="json", exclude_none=True)

    return JSONResponse(content=body, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


def install_cors_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
        expose_headers=settings.CORS_EXPOSE_HEADERS,
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.exception_handler(AppError)(_handle_app_error)
    app.exception_handler(StarletteHTTPException)(_handle_http_exception)
    app.exception_handler(RequestValidationError)(_handle_validation_error)


def include_routers(app: FastAPI) -> None:
    """Mount /api/v1/{auth,folders,dashboard}, the /api/media proxy, /health and the dev docs"""
    for router, name in VERSIONED_ROUTERS:
        app.include_router(router, prefix=f"/api/v1/{name}")

    # the media proxy keeps its unversioned path
    app.include_router(media_router, prefix="/api/media")

    if settings.APP_ENV == "dev":
        @app.get("/scalar", include_in_schema=False)
        async def scalar_html():
            return get_scalar_api_reference(
                openapi_url=app.openapi_url,
                title=settings.APP_NAME,
            )

    @app.get("/health", response_model=HealthCheck, tags=["Health"])
    async def health(
        persistence: StatePersistence = Depends(get_state_persistence),
        media_store: MediaStoreService = Depends(get_media_store),
    ):
        session_up = await persistence.redis.ping()
        media_up = await media_store.is_available()
        return HealthCheck(
            status="ok" if session_up and media_up else "degraded",
            session_store="up" if session_up else "down",
            media_store="up" if media_up else "down",
            version=APP_VERSION,
        )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Folder browsing, breadcrumbs and media uploads over an OrchardCore CMS",
        version=APP_VERSION,
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
    )

    install_cors_middleware(app)
    install_exception_handlers(app)
    include_routers(app)
    return app
