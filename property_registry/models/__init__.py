"""Domain models for the property registry."""

from property_registry.models.base import Event
from property_registry.models.enums import ListingType, RentalPeriod
from property_registry.models.listing import Listing
from property_registry.models.property import Property, PropertyPatch

__all__ = [
    "Event",
    "Listing",
    "ListingType",
    "Property",
    "PropertyPatch",
    "RentalPeriod",
]
