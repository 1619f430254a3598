"""
Travel Crew Backend — Shared Document Columns
===============================================

What:  Columns common to every resource document.
How:   A declarative mixin; SQLAlchemy copies each mapped_column onto the
       concrete table.

Column notes:
    - id:         UUID assigned on insert (Python-side default, portable to SQLite)
    - image:      Fully-qualified URL returned by the asset store, never bytes
    - asset_id:   Asset store identifier used to destroy/replace the image
    - created_at: Set once on insert (UTC; SQLite reads it back naive, the
                  response schemas reattach UTC)
    - updated_at: Refreshed on every UPDATE through onupdate
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetDocumentMixin:
    """Identifier, hosted image and timestamps shared by all resource kinds."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    image: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Public URL of the hosted image",
    )

    asset_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Asset store identifier of the hosted image",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, asset_id='{self.asset_id}')>"
