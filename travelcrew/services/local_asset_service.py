"""
Travel Crew Backend — Local Disk Asset Store
==============================================

What:  AssetStore that keeps images on the local file system.
Who:   Selected with ASSET_BACKEND=local for development and demos; files are
       served back by GET /api/files/{asset_id}.
How:   Files are written with aiofiles under STORAGE_ROOT/<folder>/<uuid><ext>.
       The relative path doubles as the asset id; the public URL is
       PUBLIC_BASE_URL/api/files/<asset id>.

Directory Structure:
    storage/
    ├── tours/
    │   └── 3f2a...c1.jpg
    └── gallery/
        └── 9b7e...04.png
"""

import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from travelcrew.exceptions import AssetStoreError, ValidationError
from travelcrew.services.asset_base import AssetStore, DestroyResult, UploadedAsset

logger = logging.getLogger(__name__)

KNOWN_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


def extension_for(mime_type: str) -> str:
    return KNOWN_EXTENSIONS.get(mime_type) or mimetypes.guess_extension(mime_type) or ".img"


class LocalAssetStore(AssetStore):
    """Images stored below a single root directory."""

    def __init__(self, storage_root: str, public_base_url: str):
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        logger.info("LocalAssetStore initialized with storage_root=%s", self.storage_root)

    @classmethod
    def from_settings(cls, settings) -> "LocalAssetStore":
        return cls(settings.storage_root, settings.public_base_url)

    def resolve(self, asset_id: str) -> Path:
        """
        Map an asset id to its absolute path.

        Raises:
            ValidationError if the id points outside the storage root
            (e.g. "../../etc/passwd").
        """
        path = (self.storage_root / asset_id).resolve()
        if not path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path", field="path")
        return path

    def url_for(self, asset_id: str) -> str:
        return f"{self.public_base_url}/api/files/{asset_id}"

    async def upload(self, content: bytes, mime_type: str, folder: str) -> UploadedAsset:
        asset_id = f"{folder}/{uuid.uuid4()}{extension_for(mime_type)}"
        path = self.resolve(asset_id)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", path, str(e))
            raise AssetStoreError(
                message="Failed to save uploaded image. Please try again.",
                context={"folder": folder, "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", asset_id, len(content))
        return UploadedAsset(url=self.url_for(asset_id), asset_id=asset_id)

    async def destroy(self, asset_id: str) -> DestroyResult:
        try:
            path = self.resolve(asset_id)
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return DestroyResult(asset_id=asset_id, released=False, detail="not found")
        except (OSError, ValidationError) as e:
            return DestroyResult(asset_id=asset_id, released=False, detail=str(e))

        logger.info("Removed image %s", asset_id)
        return DestroyResult(asset_id=asset_id, released=True)

    async def health_check(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)

    def find_file(self, asset_id: str) -> Optional[Path]:
        """Return the stored file for `asset_id`, or None when it does not exist."""
        path = self.resolve(asset_id)
        return path if path.is_file() else None
