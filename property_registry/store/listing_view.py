"""Sale/rent projection derived from property records."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from property_registry.models import Event, Listing, ListingType, Property, RentalPeriod
from property_registry.serialization import to_dict

logger = logging.getLogger(__name__)

EVENT_SOURCE = "property-registry"
LISTING_UPSERTED = "listing.upserted"
LISTING_REMOVED = "listing.removed"


@dataclass
class ListingView:
    """Listings keyed by property identifier, kept in sync with the store."""

    _listings: dict[int, Listing] = field(default_factory=dict)

    def sync(self, prop: Property, now: datetime) -> Event | None:
        """Recompute the listing for a property from its current flags.

        Sale takes priority over rent. A property that is neither for
        sale nor for rent loses its listing.

        Parameters
        ----------
        prop : Property
            Property in its post-mutation state.
        now : datetime
            Timestamp stamped as ``listed_at``.

        Returns
        -------
        Event | None
            The resulting change, or None if there was nothing to remove.
        """
        if prop.is_for_sale:
            listing = Listing(
                property_id=prop.property_id,
                listing_type=ListingType.SALE,
                price=prop.price,
                rental_period=None,
                listed_at=now,
            )
        elif prop.is_for_rent:
            listing = Listing(
                property_id=prop.property_id,
                listing_type=ListingType.RENT,
                price=prop.price,
                rental_period=RentalPeriod.MONTHLY,
                listed_at=now,
            )
        else:
            removed = self._listings.pop(prop.property_id, None)
            if removed is None:
                return None
            logger.debug("Listing removed for property %d", prop.property_id)
            return self._event(LISTING_REMOVED, prop.property_id, now, to_dict(removed))

        self._listings[prop.property_id] = listing
        logger.debug(
            "Listing %s for property %d at %d",
            listing.listing_type.value,
            prop.property_id,
            listing.price,
        )
        return self._event(LISTING_UPSERTED, prop.property_id, now, to_dict(listing))

    def get(self, property_id: int) -> Listing | None:
        """Get the listing for a property, if it is listed."""
        return self._listings.get(property_id)

    def list_all(self) -> list[Listing]:
        """Get every materialized listing in storage order."""
        return list(self._listings.values())

    def entries(self) -> list[tuple[int, Listing]]:
        """Flatten the view into ordered (id, listing) pairs."""
        return list(self._listings.items())

    @classmethod
    def from_entries(cls, entries: list[tuple[int, Listing]]) -> "ListingView":
        """Rebuild a view from flattened pairs."""
        return cls(_listings=dict(entries))

    def __len__(self) -> int:
        return len(self._listings)

    @staticmethod
    def _event(event_type: str, property_id: int, now: datetime, data: dict) -> Event:
        return Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            event_time=now,
            source=EVENT_SOURCE,
            subject=str(property_id),
            data=data,
        )
