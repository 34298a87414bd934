"""Image upload and listing endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from annotator.api.dependencies import get_media_service, verify_content_length
from annotator.api.routes.metrics import images_uploaded_total
from annotator.core.config import settings
from annotator.core.logging_config import get_logger
from annotator.services import MediaService


logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["images"])


@router.post("/upload")
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    uploaded_by: Optional[str] = Form(None, alias="uploadedBy"),
    content_length: Optional[int] = Depends(verify_content_length),
    service: MediaService = Depends(get_media_service),
):
    """Upload one or more images (multipart field ``images``).

    Args:
        images: Image files, at most MAX_FILES_PER_UPLOAD
        uploaded_by: Name of the uploader
        content_length: Pre-validated request size (via dependency)
        service: Media service (via dependency injection)

    Returns:
        dict: ``{message, count, images}``

    Raises:
        ValidationError: 400 if no files or too many files
        PayloadTooLarge: 400 if a file exceeds the size limit
        UnsupportedMediaType: 400 if a file is not an image
    """
    logger.info(
        "upload_request_received",
        file_count=len(images or []),
        uploaded_by=uploaded_by,
        content_length=content_length,
    )

    created = await service.upload(images or [], uploaded_by)
    images_uploaded_total.labels(service=settings.SERVICE_NAME).inc(len(created))

    return {
        "message": f"成功上传 {len(created)} 张图片",
        "count": len(created),
        "images": [image.to_wire() for image in created],
    }


@router.get("/images")
async def list_images(service: MediaService = Depends(get_media_service)):
    """All images in upload order."""
    return [image.to_wire() for image in await service.list_images()]
