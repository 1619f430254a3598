"""
Travel Crew Backend — Resource Service (CRUD + Asset Lifecycle)
=================================================================

What:  Orchestrates validate → resolve → asset step → persist → respond for
       one resource kind. Instantiated once per ResourceKind.
Who:   Called by the routers generated in routes/resources.py.

Request state machine (terminal on first failure):

    ┌──────────┐   ┌──────────────┐   ┌──────────────┐   ┌──────────┐
    │ Validate │──▶│ Resolve prior│──▶│  Asset step  │──▶│ Persist  │
    │  (400)   │   │ (404, upd/del)│  │ upload/destroy│  │  (500)   │
    └──────────┘   └──────────────┘   └──────────────┘   └──────────┘

Asset step per operation:
    create  image mandatory (400 before any asset call); upload failure → 400
    update  with image: release old asset (best-effort), then upload new one;
            upload failure → 500, document untouched. Without image: carried over.
    delete  release asset (best-effort), then remove the document.

Consistency gaps (accepted, not mitigated):
    - If persisting fails after an upload, the new asset is released again,
      but a crash between upload and persist leaves it orphaned.
    - On update the old asset is released before the new upload; if the
      upload then fails the document still points at the released asset.
    - Concurrent updates of one document are last-write-wins.
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from travelcrew.database import Base, DocumentStore
from travelcrew.exceptions import AssetStoreError, DatabaseError, NotFoundError, ValidationError
from travelcrew.kinds import ResourceKind
from travelcrew.services.asset_base import AssetStore, UploadedAsset
from travelcrew.services.upload_service import ImagePayload
from travelcrew.services.validators import parse_document_id, validate_create, validate_update

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Generic controller for one resource kind.

    Holds no per-request state; the document store and asset store are
    shared, long-lived clients injected at startup.
    """

    def __init__(self, kind: ResourceKind, store: DocumentStore, assets: AssetStore):
        self.kind = kind
        self.store = store
        self.assets = assets

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list(self) -> List[Base]:
        """All documents of this kind, newest first where the kind asks for it."""
        return await self.store.find(self.kind.model, newest_first=self.kind.newest_first)

    async def get(self, raw_id: str) -> Base:
        document_id = parse_document_id(raw_id, self.kind)
        return await self._fetch(document_id)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(
        self,
        raw_fields: Mapping[str, Any],
        image: Optional[ImagePayload],
    ) -> Base:
        """
        Create a document from form fields and a mandatory image.

        Raises:
            ValidationError: invalid field or missing image (nothing uploaded)
            AssetStoreError: upload failed (status 400, nothing persisted)
            DatabaseError:   persisting failed (uploaded asset released again)
        """
        values = validate_create(self.kind, raw_fields)
        if image is None:
            raise ValidationError(message="image is required", field="image")

        try:
            asset = await self.assets.upload(image.content, image.mime_type, self.kind.folder)
        except AssetStoreError as e:
            e.status_code = 400
            logger.error("Create %s aborted: upload failed: %s", self.kind.name, e.message)
            raise

        values.update(image=asset.url, asset_id=asset.asset_id)
        document = await self._persist_or_release(
            asset,
            self.store.create(self.kind.model, values),
            operation="create",
        )
        logger.info("%s %s created (asset=%s)", self.kind.name, document.id, asset.asset_id)
        return document

    async def update(
        self,
        raw_id: str,
        raw_fields: Mapping[str, Any],
        image: Optional[ImagePayload],
    ) -> Base:
        """
        Apply a partial update, optionally swapping the image.

        Omitted fields (and, without a new image, the image fields) keep
        their stored values.

        Raises:
            ValidationError: malformed id or invalid field (nothing changed)
            NotFoundError:   id does not resolve
            AssetStoreError: new image could not be uploaded (status 500)
        """
        document_id = parse_document_id(raw_id, self.kind)
        changes: Dict[str, Any] = validate_update(self.kind, raw_fields)
        existing = await self._fetch(document_id)

        new_asset: Optional[UploadedAsset] = None
        if image is not None:
            if existing.asset_id:
                await self._release_asset(existing.asset_id, document_id)
            try:
                new_asset = await self.assets.upload(
                    image.content, image.mime_type, self.kind.folder
                )
            except AssetStoreError as e:
                e.status_code = 500
                logger.error(
                    "Update %s %s aborted: upload failed: %s",
                    self.kind.name,
                    document_id,
                    e.message,
                )
                raise
            changes.update(image=new_asset.url, asset_id=new_asset.asset_id)

        updated = await self._persist_or_release(
            new_asset,
            self.store.find_by_id_and_update(self.kind.model, document_id, changes),
            operation="update",
        )
        if updated is None:
            # Deleted by a concurrent request between fetch and update
            if new_asset is not None:
                await self._release_asset(new_asset.asset_id, document_id)
            raise NotFoundError(resource=self.kind.name, resource_id=str(document_id))

        logger.info(
            "%s %s updated (fields=%s)",
            self.kind.name,
            document_id,
            ",".join(sorted(changes)) or "-",
        )
        return updated

    async def delete(self, raw_id: str) -> str:
        """Release the document's asset, remove the document, return a confirmation."""
        document_id = parse_document_id(raw_id, self.kind)
        existing = await self._fetch(document_id)

        if existing.asset_id:
            await self._release_asset(existing.asset_id, document_id)

        deleted = await self.store.find_by_id_and_delete(self.kind.model, document_id)
        if deleted is None:
            raise NotFoundError(resource=self.kind.name, resource_id=str(document_id))

        logger.info("%s %s deleted", self.kind.name, document_id)
        return f"{self.kind.name} deleted successfully"

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _fetch(self, document_id: uuid.UUID) -> Base:
        document = await self.store.find_by_id(self.kind.model, document_id)
        if document is None:
            raise NotFoundError(resource=self.kind.name, resource_id=str(document_id))
        return document

    async def _persist_or_release(self, asset: Optional[UploadedAsset], write, operation: str):
        """Await a store write; if it fails, release the asset uploaded for it."""
        try:
            return await write
        except DatabaseError:
            if asset is not None:
                logger.error(
                    "%s %s failed after upload; releasing asset %s",
                    operation.capitalize(),
                    self.kind.name,
                    asset.asset_id,
                )
                await self._release_asset(asset.asset_id, None)
            raise

    async def _release_asset(self, asset_id: str, document_id: Optional[uuid.UUID]) -> None:
        """
        Best-effort release of a hosted image.

        A failed release is logged as a warning and not raised; the
        create/update/delete that triggered it carries on.
        """
        result = await self.assets.destroy(asset_id)
        if not result.released:
            logger.warning(
                "Could not release asset %s of %s %s: %s",
                asset_id,
                self.kind.name,
                document_id or "-",
                result.detail,
            )
