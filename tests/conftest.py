"""
Travel Crew Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Tests run against a real DocumentStore on a throwaway SQLite file
       (aiosqlite) and an in-memory asset store, so no database server or
       Cloudinary account is needed.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:      Settings pointing at tmp_path
    ├── document_store:     DocumentStore with tables created
    ├── fake_assets:        FakeAssetStore recording uploads/destroys
    ├── test_client:        HTTPX AsyncClient for the app (fake assets)
    ├── local_client:       HTTPX AsyncClient for the app (LocalAssetStore)
    └── sample_image_bytes: Tiny JPEG payload
"""

import os
import tempfile
from typing import List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ASSET_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="travelcrew_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from travelcrew.config import Settings  # noqa: E402
from travelcrew.database import DocumentStore  # noqa: E402
from travelcrew.exceptions import AssetStoreError  # noqa: E402
from travelcrew.main import create_app  # noqa: E402
from travelcrew.services.asset_base import AssetStore, DestroyResult, UploadedAsset  # noqa: E402
from travelcrew.services.local_asset_service import LocalAssetStore  # noqa: E402


class FakeAssetStore(AssetStore):
    """
    In-memory asset store.

    Flip `fail_upload` / `fail_destroy` to simulate the image host failing.
    """

    def __init__(self):
        self.uploads: List[UploadedAsset] = []
        self.destroyed: List[str] = []
        self.fail_upload = False
        self.fail_destroy = False
        self.healthy = True

    async def upload(self, content: bytes, mime_type: str, folder: str) -> UploadedAsset:
        if self.fail_upload:
            raise AssetStoreError(
                message="Image upload failed: quota exceeded",
                context={"folder": folder},
            )
        asset_id = f"{folder}/fake-{len(self.uploads) + 1}"
        asset = UploadedAsset(url=f"https://images.test/{asset_id}.jpg", asset_id=asset_id)
        self.uploads.append(asset)
        return asset

    async def destroy(self, asset_id: str) -> DestroyResult:
        self.destroyed.append(asset_id)
        if self.fail_destroy:
            return DestroyResult(asset_id=asset_id, released=False, detail="host error")
        return DestroyResult(asset_id=asset_id, released=True)

    async def health_check(self) -> bool:
        return self.healthy


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'travelcrew.db'}",
        asset_backend="local",
        storage_root=str(tmp_path / "storage"),
        public_base_url="http://test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def document_store(test_settings):
    """A DocumentStore on a fresh SQLite file with all tables created."""
    store = DocumentStore(test_settings.database_url)
    await store.create_all()
    yield store
    await store.dispose()


@pytest.fixture
def fake_assets():
    return FakeAssetStore()


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: Start of Image (FFD8) + JFIF marker + End of Image (FFD9).
    Only the declared content type is checked, so this is enough.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(test_settings, document_store, fake_assets):
    """
    HTTPX AsyncClient talking to an app with injected clients.

    ASGITransport does not run the lifespan, which is why the document
    store and asset store are passed to create_app directly.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/tours")
            assert response.status_code == 200
    """
    app = create_app(test_settings, document_store=document_store, asset_store=fake_assets)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def local_client(test_settings, document_store):
    """Like test_client, but images are written to disk by LocalAssetStore."""
    assets = LocalAssetStore.from_settings(test_settings)
    app = create_app(test_settings, document_store=document_store, asset_store=assets)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
