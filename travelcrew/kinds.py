"""
Travel Crew Backend — Resource Kind Descriptors
=================================================

What:  Declarative description of each resource kind: its ORM model,
       response schema, form fields, asset folder, URL prefix and list order.
How:   The validators, ResourceService and the router factory all read a
       ResourceKind instead of hard-coding per-kind logic, so the
       CRUD + asset lifecycle exists once and is instantiated four times.

Adding a kind:
    1. Create the ORM model and response schema
    2. Declare a ResourceKind below and append it to RESOURCE_KINDS
    3. Add an Alembic revision for the new table
"""

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from travelcrew.database import Base
from travelcrew.models import CarRental, GalleryItem, Package, Tour
from travelcrew.schemas.resources import (
    CarRentalResponse,
    GalleryItemResponse,
    PackageResponse,
    TourResponse,
)


class FieldType(str, enum.Enum):
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    LIST = "list"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FormField:
    """
    One form field of a resource kind.

    Attributes:
        attr:     ORM attribute name (snake_case)
        type:     How the raw form string is parsed
        required: TEXT/NUMBER/INTEGER only; must be present on create and
                  may not be blanked on update
        minimum:  Lower bound for NUMBER/INTEGER fields
    """

    attr: str
    type: FieldType = FieldType.TEXT
    required: bool = True
    minimum: Optional[float] = None

    @property
    def wire_name(self) -> str:
        """Name used in multipart forms, JSON bodies and error messages."""
        return to_camel(self.attr)


@dataclass(frozen=True)
class ResourceKind:
    name: str
    model: Type[Base]
    response_model: Type[BaseModel]
    fields: Tuple[FormField, ...]
    folder: str
    prefix: str
    newest_first: bool = False

    @property
    def tag(self) -> str:
        return f"{self.name}s"


TOUR = ResourceKind(
    name="Tour",
    model=Tour,
    response_model=TourResponse,
    folder="tours",
    prefix="/api/tours",
    fields=(
        FormField("title"),
        FormField("description"),
        FormField("duration"),
        FormField("price", FieldType.NUMBER, minimum=0),
        FormField("max_participants", FieldType.INTEGER, minimum=1),
        FormField("includes", FieldType.LIST, required=False),
    ),
)

CAR_RENTAL = ResourceKind(
    name="CarRental",
    model=CarRental,
    response_model=CarRentalResponse,
    folder="rentals",
    prefix="/api/rentals",
    fields=(
        FormField("vehicle_name"),
        FormField("vehicle_type"),
        FormField("seats", FieldType.INTEGER, minimum=1),
        FormField("description"),
        FormField("fuel"),
        FormField("features", FieldType.LIST, required=False),
        FormField("available", FieldType.BOOLEAN, required=False),
    ),
)

PACKAGE = ResourceKind(
    name="Package",
    model=Package,
    response_model=PackageResponse,
    folder="packages",
    prefix="/api/packages",
    fields=(
        FormField("name"),
        FormField("price", FieldType.NUMBER, minimum=0),
        FormField("description", required=False),
        FormField("duration", required=False),
        FormField("category", required=False),
        FormField("destinations", FieldType.LIST, required=False),
        FormField("includes", FieldType.LIST, required=False),
        FormField("highlights", FieldType.LIST, required=False),
    ),
)

GALLERY_ITEM = ResourceKind(
    name="GalleryItem",
    model=GalleryItem,
    response_model=GalleryItemResponse,
    folder="gallery",
    prefix="/api/gallery",
    newest_first=True,
    fields=(
        FormField("title"),
        FormField("type"),
        FormField("description"),
    ),
)

RESOURCE_KINDS: Tuple[ResourceKind, ...] = (TOUR, CAR_RENTAL, PACKAGE, GALLERY_ITEM)
