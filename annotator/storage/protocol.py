"""Storage backend protocol definition."""

from pathlib import Path
from typing import Protocol


class StorageBackend(Protocol):
    """Interface for where uploaded image binaries are written."""

    async def save(self, data: bytes, name: str) -> str:
        """Save file to storage.

        Args:
            data: File contents
            name: Storage name, unique per upload

        Returns:
            str: Storage name actually used
        """
        ...

    async def delete(self, name: str) -> None:
        """Delete file from storage."""
        ...

    def get_url(self, name: str) -> str:
        """Public URL path the file is served under."""
        ...

    def get_local_path(self, name: str) -> Path:
        ...
