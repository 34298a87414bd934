"""
Pytest configuration and shared fixtures.

This module provides:
- an isolated in-memory store per test
- file storage in a temporary directory
- a TestClient with the store and storage dependencies overridden
- sample image payloads and UploadFile factories
"""

import base64
import os
import tempfile
from io import BytesIO
from pathlib import Path

# Must be set before the app (and its settings) are imported
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="annotator-uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import Headers, UploadFile

from annotator.main import app
from annotator.core.config import settings
from annotator.repositories import InMemoryStore, get_store
from annotator.storage import LocalStorageBackend, get_storage


# ============================================================================
# Store and storage fixtures
# ============================================================================

@pytest.fixture
def store() -> InMemoryStore:
    """A fresh, empty store for each test."""
    return InMemoryStore()


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorageBackend:
    """Upload storage in a per-test temporary directory."""
    return LocalStorageBackend(base_path=str(tmp_path / "uploads"))


# ============================================================================
# API Client fixtures
# ============================================================================

@pytest.fixture
def client(store: InMemoryStore) -> TestClient:
    """Test client wired to the per-test store.

    Uploads go to the directory the app serves under /uploads so tests can
    fetch them back.
    """
    served_storage = LocalStorageBackend(
        base_path=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
    )
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_storage] = lambda: served_storage

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# ============================================================================
# Test data fixtures
# ============================================================================

@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """Minimal valid JPEG (1x1 pixel, red)."""
    return bytes.fromhex(
        'ffd8ffe000104a46494600010100000100010000ffdb00430003020202020203'
        '020203030304060404040404080606050609080a0a090809090a0c0f0c0a0b'
        '0e0b09090d110d0e0f101011100a0c12131210130f101010ffc90011080001'
        '0001030122000211010311010fffc40015000101000000000000000000000000'
        '0000000001ffda000c03010002110311003f00bf800000ffd9'
    )


@pytest.fixture
def sample_png_bytes() -> bytes:
    """Minimal valid PNG (1x1 pixel)."""
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def make_upload():
    """Factory for UploadFile objects as FastAPI hands them to services."""
    def _make(filename: str, data: bytes, content_type: str = "image/png") -> UploadFile:
        return UploadFile(
            file=BytesIO(data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )
    return _make


# ============================================================================
# Utility functions
# ============================================================================

def assert_valid_uuid(value: str) -> None:
    """Assert that a string is a valid UUID."""
    from uuid import UUID
    try:
        UUID(value)
    except (ValueError, AttributeError):
        pytest.fail(f"'{value}' is not a valid UUID")


def assert_iso_timestamp(value: str) -> None:
    """Assert that a string is a valid ISO 8601 timestamp."""
    from datetime import datetime
    try:
        datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        pytest.fail(f"'{value}' is not a valid ISO 8601 timestamp")
