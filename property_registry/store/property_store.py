"""Authoritative property store with owner and listing indexes."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Iterable

from property_registry.models import Event, Property, PropertyPatch
from property_registry.store.listing_view import ListingView
from property_registry.store.owner_index import OwnerIndex

logger = logging.getLogger(__name__)

FIRST_PROPERTY_ID = 1


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class PropertyStore:
    """In-memory store for property records with relationship tracking.

    Every mutation updates the owner index and the listing view in the
    same call, so the three structures never disagree between calls.
    Listing changes produced by a mutation are queued on
    ``pending_events`` for the caller to drain.
    """

    properties: dict[int, Property] = field(default_factory=dict)
    owner_index: OwnerIndex = field(default_factory=OwnerIndex)
    listings: ListingView = field(default_factory=ListingView)
    next_id: int = FIRST_PROPERTY_ID
    clock: Callable[[], datetime] = utc_now
    pending_events: list[Event] = field(default_factory=list)

    def create(
        self,
        address: str,
        description: str,
        price: int,
        is_for_sale: bool,
        is_for_rent: bool,
        images: Iterable[str],
        owner: str,
    ) -> int:
        """Store a new property and return its identifier."""
        property_id = self.next_id
        self.next_id += 1
        now = self.clock()

        prop = Property(
            property_id=property_id,
            owner=owner,
            address=address,
            description=description,
            price=price,
            is_for_sale=is_for_sale,
            is_for_rent=is_for_rent,
            images=tuple(images),
            created_at=now,
            updated_at=now,
        )
        self.properties[property_id] = prop
        self.owner_index.record_creation(owner, property_id)
        self._sync_listing(prop, now)

        logger.debug("Created property %d for owner %s", property_id, owner)
        return property_id

    def get(self, property_id: int) -> Property | None:
        """Get a property by identifier."""
        return self.properties.get(property_id)

    def update(self, property_id: int, caller: str, patch: PropertyPatch) -> bool:
        """Apply a partial update on behalf of the property's owner.

        Returns False, leaving the record untouched, when the property
        does not exist or ``caller`` is not its owner. The two cases are
        deliberately indistinguishable to the caller.
        """
        current = self.properties.get(property_id)
        if current is None or current.owner != caller:
            return False

        now = self.clock()
        updated = replace(current, **patch.provided(), updated_at=now)
        self.properties[property_id] = updated

        if patch.touches_listing():
            self._sync_listing(updated, now)

        logger.debug("Updated property %d: %s", property_id, sorted(patch.provided()))
        return True

    def search(self, term: str) -> list[Property]:
        """Find properties whose address or description contains ``term``.

        Matching is case-insensitive; results follow identifier order.
        """
        needle = term.lower()
        return [
            prop
            for prop in self.properties.values()
            if needle in prop.address.lower() or needle in prop.description.lower()
        ]

    def list_by_owner(self, owner: str) -> list[Property]:
        """Get all properties created by an owner, oldest first."""
        props = []
        for property_id in self.owner_index.list_for(owner):
            prop = self.properties.get(property_id)
            if prop is not None:
                props.append(prop)
        return props

    def drain_events(self) -> list[Event]:
        """Return and clear the listing changes queued by mutations."""
        events, self.pending_events = self.pending_events, []
        return events

    def is_empty(self) -> bool:
        """Whether nothing has ever been created in this store."""
        return not self.properties and self.next_id == FIRST_PROPERTY_ID

    def summary(self) -> dict[str, int]:
        """Return summary counts of the store."""
        return {
            "properties": len(self.properties),
            "owners": len(self.owner_index),
            "listings": len(self.listings),
            "next_id": self.next_id,
        }

    def _sync_listing(self, prop: Property, now: datetime) -> None:
        event = self.listings.sync(prop, now)
        if event is not None:
            self.pending_events.append(event)
