"""Prometheus metrics endpoint and metric definitions."""

from fastapi import APIRouter, Response
from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

from annotator.core.config import settings


router = APIRouter(tags=["metrics"])


service_info = Info(
    'service',
    'Service information',
    registry=REGISTRY
)
service_info.info({
    'name': settings.SERVICE_NAME,
    'version': settings.VERSION,
    'environment': settings.ENVIRONMENT,
})


# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['service', 'method', 'endpoint', 'status'],
    registry=REGISTRY
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['service', 'method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
    registry=REGISTRY
)

http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'HTTP requests currently in progress',
    ['service', 'method'],
    registry=REGISTRY
)


# Domain Metrics
users_registered_total = Counter(
    'users_registered_total',
    'Accounts created',
    ['service', 'role'],
    registry=REGISTRY
)

logins_total = Counter(
    'logins_total',
    'Successful logins',
    ['service', 'role'],
    registry=REGISTRY
)

images_uploaded_total = Counter(
    'images_uploaded_total',
    'Images stored',
    ['service'],
    registry=REGISTRY
)

comments_submitted_total = Counter(
    'comments_submitted_total',
    'Comments stored',
    ['service'],
    registry=REGISTRY
)

comment_exports_total = Counter(
    'comment_exports_total',
    'CSV exports served',
    ['service'],
    registry=REGISTRY
)


# Error Tracking Metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['service', 'error_type', 'endpoint'],
    registry=REGISTRY
)


@router.get("/metrics")
async def metrics():
    """Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )
