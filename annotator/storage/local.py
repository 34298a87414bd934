"""Local filesystem storage backend."""

import aiofiles
from pathlib import Path

from annotator.core.logging_config import get_logger


logger = get_logger(__name__)


class LocalStorageBackend:
    """Stores every upload flat in one directory.

    The directory is mounted by the app as static files under ``url_prefix``.
    """

    def __init__(self, base_path: str, url_prefix: str = "/uploads"):
        """Initialize local storage backend.

        Args:
            base_path: Directory uploads are written to
            url_prefix: URL path the directory is served under
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.url_prefix = url_prefix.rstrip("/")

    def get_local_path(self, name: str) -> Path:
        """Absolute path for a storage name.

        Raises:
            ValueError: If the name would resolve outside the base directory
        """
        if not name or Path(name).name != name or name in (".", ".."):
            raise ValueError(f"Invalid storage name: {name!r}")
        return self.base_path / name

    async def save(self, data: bytes, name: str) -> str:
        full_path = self.get_local_path(name)

        logger.debug(
            "local_storage_save_started",
            name=name,
            full_path=str(full_path),
        )

        try:
            async with aiofiles.open(full_path, 'wb') as f:
                await f.write(data)
        except Exception as exc:
            logger.error(
                "local_storage_save_failed",
                name=name,
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )
            raise

        logger.info(
            "local_storage_save_success",
            name=name,
            bytes_written=len(data),
        )
        return name

    async def delete(self, name: str) -> None:
        full_path = self.get_local_path(name)

        if full_path.exists():
            full_path.unlink()
            logger.info("local_storage_delete_success", name=name)
        else:
            logger.warning("local_storage_delete_not_found", name=name, full_path=str(full_path))

    def get_url(self, name: str) -> str:
        """URL path for serving via FastAPI StaticFiles."""
        return f"{self.url_prefix}/{name}"
