"""
Travel Crew Backend — Abstract Asset Store Interface
======================================================

What:  Contract for the external image host that owns every resource image.
How:   Concrete stores (Cloudinary, local disk) inherit from AssetStore.
       ResourceService only talks to this interface, and tests substitute an
       in-memory implementation.

Contract:
    upload()   returns the hosted URL and the asset identifier, or raises
               AssetStoreError. Nothing is persisted by the caller on failure.
    destroy()  never raises. It reports the outcome in a DestroyResult so the
               caller decides explicitly what to do with a failed release.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    asset_id: str


@dataclass(frozen=True)
class DestroyResult:
    """
    Outcome of a best-effort release.

    Attributes:
        asset_id: The identifier that was asked to be released
        released: True when the host confirmed the asset is gone
        detail:   Host response or error text when not released
    """

    asset_id: str
    released: bool
    detail: Optional[str] = None


class AssetStore(ABC):
    """
    Abstract interface for the image host.

    Implementations:
        - CloudinaryAssetStore: hosted images through the Cloudinary upload API
        - LocalAssetStore: files on disk served by /api/files (development)
    """

    @abstractmethod
    async def upload(self, content: bytes, mime_type: str, folder: str) -> UploadedAsset:
        """
        Store an image and return where it can be retrieved.

        Args:
            content:   Raw image bytes (already size/type checked at the boundary)
            mime_type: Image media type, e.g. "image/jpeg"
            folder:    Per-kind grouping, e.g. "tours"

        Raises:
            AssetStoreError: network failure, quota, or rejected payload.
        """
        ...

    @abstractmethod
    async def destroy(self, asset_id: str) -> DestroyResult:
        """Release a previously uploaded asset. Must not raise."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the store is reachable."""
        ...

    async def aclose(self) -> None:
        """Release network or file handles. Called at application shutdown."""
        return None
