"""File storage for uploaded images."""

from functools import lru_cache
from annotator.core.config import settings
from .protocol import StorageBackend
from .local import LocalStorageBackend


@lru_cache()
def get_storage() -> StorageBackend:
    """Factory function for the upload storage backend."""
    return LocalStorageBackend(settings.UPLOAD_DIR, url_prefix=settings.UPLOAD_URL_PREFIX)


__all__ = ["get_storage", "StorageBackend", "LocalStorageBackend"]
