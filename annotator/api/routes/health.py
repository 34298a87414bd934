"""Health check endpoint."""

from fastapi import APIRouter

from annotator.core.clock import utc_isoformat
from annotator.core.config import settings


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness probe for load balancers and the dev proxy."""
    return {
        "status": "OK",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "timestamp": utc_isoformat(),
    }
