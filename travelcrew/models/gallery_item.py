"""Gallery item documents (`gallery_items` table)."""

from sqlalchemy import Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelcrew.database import Base
from travelcrew.models.mixins import AssetDocumentMixin


class GalleryItem(AssetDocumentMixin, Base):
    """A photo shown in the site gallery. Listed newest first."""

    __tablename__ = "gallery_items"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    # e.g. "wildlife", "beach"
    type: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("idx_gallery_items_created_at", "created_at"),
    )
