"""Tour documents (`tours` table)."""

from typing import List

from sqlalchemy import JSON, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelcrew.database import Base
from travelcrew.models.mixins import AssetDocumentMixin


class Tour(AssetDocumentMixin, Base):
    """A guided tour offered on the site."""

    __tablename__ = "tours"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Free text, e.g. "3 days"
    duration: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    includes: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
