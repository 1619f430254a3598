"""
Travel Crew Backend — Resource Response Schemas
=================================================

What:  The serialized shape of each resource document.
How:   Models validate straight from ORM objects (from_attributes) using the
       snake_case attribute names, and serialize with camelCase aliases
       (maxParticipants, vehicleName, assetId, createdAt, ...), which is the
       wire format the site frontend consumes.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ResourceResponse(BaseModel):
    """Fields every resource document exposes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: uuid.UUID = Field(description="Store-assigned identifier")
    image: str = Field(description="Public URL of the hosted image")
    asset_id: Optional[str] = Field(default=None, description="Asset store identifier")
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class TourResponse(ResourceResponse):
    title: str
    description: str
    duration: str
    price: float
    max_participants: int
    includes: List[str] = Field(default_factory=list)


class CarRentalResponse(ResourceResponse):
    vehicle_name: str
    vehicle_type: str
    seats: int
    description: str
    fuel: str
    features: List[str] = Field(default_factory=list)
    available: bool = True


class PackageResponse(ResourceResponse):
    name: str
    price: float
    description: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    destinations: List[str] = Field(default_factory=list)
    includes: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)


class GalleryItemResponse(ResourceResponse):
    title: str
    type: str
    description: str
