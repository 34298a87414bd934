"""
FastAPI middleware for request tracing, logging and metrics.
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from annotator.core.config import settings
from annotator.core.logging_config import get_logger, set_trace_id, clear_trace_id


logger = get_logger(__name__)


UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Metric label for a handled request.

    Uses the matched route template, so label values are bounded by the
    routes the app defines. Uploaded files share one label and anything
    no route matched shares another.
    """
    route = request.scope.get("route")
    if route is not None:
        return route.path
    if request.url.path.startswith(settings.UPLOAD_URL_PREFIX + "/"):
        return settings.UPLOAD_URL_PREFIX + "/{name}"
    return UNMATCHED_ENDPOINT


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a trace ID to each request and logs start and completion.

    An incoming ``X-Trace-ID`` header is reused; otherwise a UUID is minted.
    The ID is echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())
        set_trace_id(trace_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_host=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent", "unknown"),
            query_params=dict(request.query_params) if request.query_params else {},
        )

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Trace-ID"] = trace_id
            return response

        except Exception as exc:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error_type=type(exc).__name__,
                error_message=str(exc),
                exc_info=True,
            )
            raise

        finally:
            clear_trace_id()


class PerformanceLoggingMiddleware(BaseHTTPMiddleware):
    """Logs a warning for requests slower than the threshold."""

    def __init__(self, app: ASGIApp, slow_request_threshold_ms: float = 1000.0):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                "slow_request_detected",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
                threshold_ms=self.slow_request_threshold_ms,
                status_code=response.status_code,
            )

        return response


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collects request count, duration, in-flight and error metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Import here to avoid circular imports
        from annotator.api.routes.metrics import (
            http_requests_total,
            http_request_duration_seconds,
            http_requests_in_progress,
            errors_total,
        )

        method = request.method

        # Skip metrics for /metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        http_requests_in_progress.labels(service=settings.SERVICE_NAME, method=method).inc()

        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response

        except Exception as exc:
            errors_total.labels(
                service=settings.SERVICE_NAME,
                error_type=type(exc).__name__,
                endpoint=endpoint_label(request)
            ).inc()
            raise

        finally:
            duration = time.time() - start_time
            # Route is only known once the router has run
            endpoint = endpoint_label(request)

            http_requests_in_progress.labels(service=settings.SERVICE_NAME, method=method).dec()
            http_requests_total.labels(
                service=settings.SERVICE_NAME,
                method=method,
                endpoint=endpoint,
                status=status_code
            ).inc()
            http_request_duration_seconds.labels(
                service=settings.SERVICE_NAME,
                method=method,
                endpoint=endpoint
            ).observe(duration)
