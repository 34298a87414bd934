"""
Media Service - image uploads.

The whole batch is validated before anything touches disk or the store, so
a rejected upload leaves no trace.
"""
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional, Sequence
from uuid import uuid4

import magic
from fastapi import UploadFile

from annotator.repositories.protocol import Store
from annotator.storage.protocol import StorageBackend
from annotator.core.clock import local_timestamp
from annotator.core.config import settings
from annotator.core.errors import (
    ErrorCode,
    PayloadTooLarge,
    StorageError,
    UnsupportedMediaType,
    ValidationError,
)
from annotator.core.logging_config import get_logger
from annotator.schemas import Image

logger = get_logger(__name__)


@dataclass
class _AcceptedFile:
    original_name: str
    data: bytes


def storage_name_for(original_name: str) -> str:
    """Unique on-disk name: ``<epoch ms>-<random>-<basename>``."""
    basename = PurePosixPath(original_name.replace("\\", "/")).name or "image"
    if basename in (".", ".."):
        basename = "image"
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{basename}"


class MediaService:
    """
    Accepts image uploads and lists stored images.

    Responsibilities:
    - enforce count, size and type limits
    - write binaries through the storage backend
    - append Image records to the store
    """

    def __init__(
        self,
        store: Store,
        storage: StorageBackend,
        max_file_size: Optional[int] = None,
        max_files: Optional[int] = None,
    ):
        self.store = store
        self.storage = storage
        self.max_file_size = max_file_size or settings.max_upload_size_bytes
        self.max_files = max_files or settings.MAX_FILES_PER_UPLOAD

    async def _validate(self, file: UploadFile) -> _AcceptedFile:
        data = await file.read()
        name = file.filename or ""

        if len(data) > self.max_file_size:
            logger.warning(
                "upload_rejected",
                filename=name,
                reason="too_large",
                size=len(data),
                max_size=self.max_file_size,
            )
            raise PayloadTooLarge(
                code=ErrorCode.UPLOAD_FILE_TOO_LARGE,
                message="文件大小超过限制",
                details={"filename": name, "max_size_mb": self.max_file_size // (1024 * 1024)},
            )

        # Never trust the declared type alone; check the magic bytes as well
        declared = file.content_type or ""
        detected = magic.from_buffer(data[:2048], mime=True) if data else ""
        prefix = settings.ALLOWED_MIME_PREFIX
        if not declared.startswith(prefix) or not detected.startswith(prefix):
            logger.warning(
                "upload_rejected",
                filename=name,
                reason="not_an_image",
                declared_content_type=declared,
                detected_mime=detected,
            )
            raise UnsupportedMediaType(
                code=ErrorCode.UPLOAD_INVALID_TYPE,
                message="只允许上传图片文件",
                details={"filename": name, "content_type": declared},
            )

        return _AcceptedFile(original_name=name, data=data)

    async def upload(self, files: Sequence[UploadFile], uploaded_by: Optional[str]) -> List[Image]:
        """
        Store a batch of images.

        Args:
            files: Uploaded files with their original names
            uploaded_by: Name of the uploader, recorded as given

        Returns:
            One Image per file, in the order received

        Raises:
            ValidationError: No files, or more than the per-request limit
            PayloadTooLarge: A file exceeds the size limit
            UnsupportedMediaType: A file is not an image
            StorageError: Writing to disk failed
        """
        if not files:
            raise ValidationError(code=ErrorCode.VAL_NO_FILES, message="没有选择文件")
        if len(files) > self.max_files:
            raise ValidationError(
                code=ErrorCode.VAL_TOO_MANY_FILES,
                message=f"一次最多上传 {self.max_files} 张图片",
                details={"max_files": self.max_files, "received": len(files)},
            )

        accepted = [await self._validate(f) for f in files]

        saved: List[str] = []
        images: List[Image] = []
        try:
            for item in accepted:
                name = await self.storage.save(item.data, storage_name_for(item.original_name))
                saved.append(name)
                images.append(Image(
                    id=str(uuid4()),
                    file_name=item.original_name,
                    url=self.storage.get_url(name),
                    uploaded_by=uploaded_by or "",
                    upload_time=local_timestamp(),
                ))
        except Exception as e:
            logger.error("storage_save_failed", saved_count=len(saved), error=str(e))
            for name in saved:
                try:
                    await self.storage.delete(name)
                except OSError as cleanup_error:
                    logger.warning("upload_cleanup_failed", name=name, error=str(cleanup_error))
            raise StorageError(
                code=ErrorCode.STORAGE_WRITE_FAILED,
                message="上传失败: " + str(e),
            )

        async with self.store.lock:
            await self.store.add_images(images)

        logger.info(
            "images_uploaded",
            count=len(images),
            uploaded_by=uploaded_by,
            image_ids=[i.id for i in images],
        )
        return images

    async def list_images(self) -> List[Image]:
        return await self.store.list_images()
