"""
FastAPI exception handlers.

Every error leaves the service as ``{"error": <message>}``; service errors
add their ``code``. Each one is logged with request context.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from annotator.core.errors import ServiceError, ErrorCode
from annotator.core.logging_config import get_logger


logger = get_logger(__name__)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle business errors raised by the service layer."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "service_error",
        method=request.method,
        path=str(request.url.path),
        status_code=exc.status_code,
        error_code=exc.code.value,
        error_message=exc.message,
        details=exc.details,
        client_host=_client_host(request),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code.value},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised outside the service layer (404s, 405s...)."""
    logger.warning(
        "http_exception",
        method=request.method,
        path=str(request.url.path),
        status_code=exc.status_code,
        detail=exc.detail,
        client_host=_client_host(request),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors like any other: 400."""
    errors = exc.errors()

    logger.warning(
        "validation_error",
        method=request.method,
        path=str(request.url.path),
        error_count=len(errors),
        errors=[{"loc": e.get("loc"), "msg": e.get("msg")} for e in errors],
        client_host=_client_host(request),
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "请求格式错误", "code": ErrorCode.VAL_MALFORMED_BODY.value},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions; the message never leaks internals."""
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=str(request.url.path),
        error_type=type(exc).__name__,
        error_message=str(exc),
        client_host=_client_host(request),
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "服务器内部错误"},
    )
