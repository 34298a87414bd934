"""CSV export of all comments."""

from fastapi import APIRouter, Depends, Response

from annotator.api.dependencies import get_export_service
from annotator.api.routes.metrics import comment_exports_total
from annotator.core.config import settings
from annotator.services import ExportService


router = APIRouter(prefix="/api", tags=["export"])


@router.get("/export-comments")
async def export_comments(service: ExportService = Depends(get_export_service)):
    """Download every comment joined with its image file name."""
    export = await service.export_csv()
    comment_exports_total.labels(service=settings.SERVICE_NAME).inc()
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )
