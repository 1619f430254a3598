"""Car rental documents (`car_rentals` table)."""

from typing import List

from sqlalchemy import JSON, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelcrew.database import Base
from travelcrew.models.mixins import AssetDocumentMixin


class CarRental(AssetDocumentMixin, Base):
    """A vehicle available for hire."""

    __tablename__ = "car_rentals"

    vehicle_name: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(Text, nullable=False)
    seats: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    fuel: Mapped[str] = mapped_column(Text, nullable=False)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
