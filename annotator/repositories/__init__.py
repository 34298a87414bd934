"""Store backends for users, images and comments."""

from functools import lru_cache
from annotator.core.config import settings
from .protocol import Store
from .memory import InMemoryStore
# SQL backend imported lazily when needed


@lru_cache()
def get_store() -> Store:
    """Factory function for the store backend.

    Returns the same instance for the lifetime of the process so every
    request sees every earlier write.

    Raises:
        ValueError: If unknown store backend is configured
    """
    if settings.STORE_BACKEND == "memory":
        return InMemoryStore()
    elif settings.STORE_BACKEND == "sqlite":
        from .sql import SqlStore
        return SqlStore(settings.database_url, echo=settings.is_debug_mode)
    else:
        raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND}")


__all__ = ["get_store", "Store", "InMemoryStore"]
