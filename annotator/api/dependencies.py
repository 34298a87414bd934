"""FastAPI dependencies wiring the store and file storage into the services."""

from typing import Optional

from fastapi import Depends, Header

from annotator.core.config import settings
from annotator.core.errors import ErrorCode, PayloadTooLarge
from annotator.core.logging_config import get_logger
from annotator.repositories import Store, get_store
from annotator.storage import StorageBackend, get_storage
from annotator.services import CommentService, ExportService, IdentityService, MediaService


logger = get_logger(__name__)

# Multipart framing on top of the files themselves
_MULTIPART_OVERHEAD = 1024 * 1024


async def verify_content_length(content_length: Optional[int] = Header(None)) -> Optional[int]:
    """Reject uploads that cannot fit the limits before reading the body.

    The per-file limit is enforced again by MediaService once files are read.

    Raises:
        PayloadTooLarge: Declared length exceeds the largest acceptable batch
    """
    max_size = settings.max_upload_size_bytes * settings.MAX_FILES_PER_UPLOAD + _MULTIPART_OVERHEAD
    if content_length and content_length > max_size:
        logger.warning("upload_content_length_rejected", content_length=content_length, max_size=max_size)
        raise PayloadTooLarge(
            code=ErrorCode.UPLOAD_FILE_TOO_LARGE,
            message="文件大小超过限制",
            details={"content_length": content_length},
        )
    return content_length


def get_identity_service(store: Store = Depends(get_store)) -> IdentityService:
    return IdentityService(store)


def get_media_service(
    store: Store = Depends(get_store),
    storage: StorageBackend = Depends(get_storage),
) -> MediaService:
    return MediaService(store, storage)


def get_comment_service(store: Store = Depends(get_store)) -> CommentService:
    return CommentService(store)


def get_export_service(store: Store = Depends(get_store)) -> ExportService:
    return ExportService(store)
