"""Holiday package documents (`packages` table)."""

from typing import List, Optional

from sqlalchemy import JSON, Float, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelcrew.database import Base
from travelcrew.models.mixins import AssetDocumentMixin


class Package(AssetDocumentMixin, Base):
    """
    A bundled holiday package.

    Only `name` and `price` are mandatory; the remaining descriptive
    fields are optional.
    """

    __tablename__ = "packages"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    destinations: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    includes: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    highlights: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
