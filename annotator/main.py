"""Main FastAPI application for the image annotation service."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from annotator.core.config import settings
from annotator.core.errors import ServiceError
from annotator.core.logging_config import setup_logging, get_logger
from annotator.repositories import get_store
from annotator.api.routes import comments, export, health, images, metrics, users
from annotator.api.middleware import RequestLoggingMiddleware, PerformanceLoggingMiddleware, PrometheusMiddleware
from annotator.api.exception_handlers import (
    service_error_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)


# Initialize logging system (MUST be done before any logging calls)
setup_logging(debug=settings.is_debug_mode, json_logs=settings.use_json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the store on startup and release it on shutdown."""
    logger.info(
        "application_startup",
        service=settings.SERVICE_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug_mode=settings.is_debug_mode,
        log_level=settings.LOG_LEVEL,
        store_backend=settings.STORE_BACKEND,
        upload_dir=settings.UPLOAD_DIR,
    )

    store = get_store()
    await store.init()
    logger.info("store_initialized", backend=settings.STORE_BACKEND)

    yield

    logger.info("application_shutdown_initiated")
    await store.close()
    logger.info("application_shutdown", graceful=True)


app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Image sharing and annotation service",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Middleware stack (first added is executed last)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PerformanceLoggingMiddleware, slow_request_threshold_ms=1000.0)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(images.router)
app.include_router(comments.router)
app.include_router(export.router)
app.include_router(metrics.router)

# Uploaded images are served as static files
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR),
    name="uploads"
)


@app.get("/")
async def root():
    """Service metadata and useful links."""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "documentation": "/docs",
        "health_check": "/api/health",
        "uploads": settings.UPLOAD_URL_PREFIX,
        "store_backend": settings.STORE_BACKEND,
    }
