"""
Travel Crew Backend — ORM Models
==================================

One table per resource kind. Every model mixes in AssetDocumentMixin, which
supplies the identifier, the hosted image fields and the timestamps.
"""

from travelcrew.models.car_rental import CarRental
from travelcrew.models.gallery_item import GalleryItem
from travelcrew.models.mixins import AssetDocumentMixin
from travelcrew.models.package import Package
from travelcrew.models.tour import Tour

__all__ = ["AssetDocumentMixin", "CarRental", "GalleryItem", "Package", "Tour"]
