"""Derived sale/rent listing model."""

from dataclasses import dataclass
from datetime import datetime

from property_registry.models.enums import ListingType, RentalPeriod


@dataclass(frozen=True)
class Listing:
    """Sale or rent projection of a property, keyed by its identifier."""

    property_id: int
    listing_type: ListingType
    price: int  # Property price at last sync
    rental_period: RentalPeriod | None  # Only set for RENT listings
    listed_at: datetime
    featured_until: datetime | None = None
