"""Flatten-to-entries / rebuild-from-entries persistence of a property store."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from property_registry.exceptions import SnapshotError
from property_registry.models import Listing, ListingType, Property, RentalPeriod
from property_registry.serialization import to_dict_fast
from property_registry.store.listing_view import ListingView
from property_registry.store.owner_index import OwnerIndex
from property_registry.store.property_store import FIRST_PROPERTY_ID, PropertyStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


@dataclass
class RegistrySnapshot:
    """Ordered entry lists of every live structure plus the id counter."""

    properties: list[tuple[int, Property]] = field(default_factory=list)
    owner_index: list[tuple[str, list[int]]] = field(default_factory=list)
    listings: list[tuple[int, Listing]] = field(default_factory=list)
    next_id: int = FIRST_PROPERTY_ID

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready document."""
        return {
            "version": SNAPSHOT_VERSION,
            "next_id": self.next_id,
            "properties": [[pid, to_dict_fast(prop)] for pid, prop in self.properties],
            "owner_index": [[owner, list(ids)] for owner, ids in self.owner_index],
            "listings": [[pid, to_dict_fast(listing)] for pid, listing in self.listings],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegistrySnapshot":
        """Parse a document produced by ``to_dict``.

        Raises
        ------
        SnapshotError
            If the document is missing fields or has the wrong version.
        """
        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {version!r}")

        try:
            return cls(
                properties=[(int(pid), _property_from_dict(raw)) for pid, raw in data["properties"]],
                owner_index=[(str(owner), [int(i) for i in ids]) for owner, ids in data["owner_index"]],
                listings=[(int(pid), _listing_from_dict(raw)) for pid, raw in data["listings"]],
                next_id=int(data["next_id"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed snapshot document: {e}") from e


def _property_from_dict(raw: dict[str, Any]) -> Property:
    _require_object("property", raw)
    return Property(
        property_id=int(raw["property_id"]),
        owner=raw["owner"],
        address=raw["address"],
        description=raw["description"],
        price=int(raw["price"]),
        is_for_sale=bool(raw["is_for_sale"]),
        is_for_rent=bool(raw["is_for_rent"]),
        images=tuple(raw["images"]),
        created_at=datetime.fromisoformat(raw["created_at"]),
        updated_at=datetime.fromisoformat(raw["updated_at"]),
    )


def _listing_from_dict(raw: dict[str, Any]) -> Listing:
    _require_object("listing", raw)
    rental_period = raw.get("rental_period")
    featured_until = raw.get("featured_until")
    return Listing(
        property_id=int(raw["property_id"]),
        listing_type=ListingType(raw["listing_type"]),
        price=int(raw["price"]),
        rental_period=RentalPeriod(rental_period) if rental_period else None,
        listed_at=datetime.fromisoformat(raw["listed_at"]),
        featured_until=datetime.fromisoformat(featured_until) if featured_until else None,
    )


def _require_object(kind: str, raw: Any) -> None:
    if not isinstance(raw, dict):
        raise TypeError(f"{kind} entry must be an object, got {type(raw).__name__}")


class PersistenceSnapshot:
    """Snapshot and restore the structures of a ``PropertyStore``.

    Neither operation locks; the owner of the store must keep every
    other operation out while one of them runs.
    """

    def __init__(self, store: PropertyStore) -> None:
        self.store = store

    def snapshot(self) -> RegistrySnapshot:
        """Flatten the store into ordered entry lists."""
        snap = RegistrySnapshot(
            properties=list(self.store.properties.items()),
            owner_index=self.store.owner_index.entries(),
            listings=self.store.listings.entries(),
            next_id=self.store.next_id,
        )
        logger.info(
            "Snapshot taken: %d properties, %d owners, %d listings, next_id=%d",
            len(snap.properties),
            len(snap.owner_index),
            len(snap.listings),
            snap.next_id,
        )
        return snap

    def restore(self, snap: RegistrySnapshot) -> None:
        """Rebuild the store from a snapshot.

        The snapshot is fully validated before anything is replaced, so
        a rejected snapshot leaves the store as it was.

        Raises
        ------
        SnapshotError
            If the entries violate the store invariants.
        """
        properties = _validate_properties(snap)
        _validate_owner_index(snap, properties)
        _validate_listings(snap, properties)

        self.store.properties = properties
        self.store.owner_index = OwnerIndex.from_entries(snap.owner_index)
        self.store.listings = ListingView.from_entries(snap.listings)
        self.store.next_id = snap.next_id
        self.store.pending_events = []

        logger.info(
            "Restored %d properties, %d owners, %d listings, next_id=%d",
            len(properties),
            len(snap.owner_index),
            len(snap.listings),
            snap.next_id,
        )


def _validate_properties(snap: RegistrySnapshot) -> dict[int, Property]:
    properties: dict[int, Property] = {}
    for pid, prop in snap.properties:
        if pid != prop.property_id:
            raise SnapshotError(f"Property entry {pid} holds record {prop.property_id}")
        if pid in properties:
            raise SnapshotError(f"Duplicate property entry {pid}")
        if pid < FIRST_PROPERTY_ID or pid >= snap.next_id:
            raise SnapshotError(f"Property {pid} outside allocated range (next_id={snap.next_id})")
        properties[pid] = prop
    if snap.next_id < FIRST_PROPERTY_ID:
        raise SnapshotError(f"Invalid next_id {snap.next_id}")
    return properties


def _validate_owner_index(snap: RegistrySnapshot, properties: dict[int, Property]) -> None:
    seen_owners: set[str] = set()
    indexed: set[int] = set()
    for owner, ids in snap.owner_index:
        if owner in seen_owners:
            raise SnapshotError(f"Duplicate owner entry {owner!r}")
        seen_owners.add(owner)
        for pid in ids:
            prop = properties.get(pid)
            if prop is None:
                raise SnapshotError(f"Owner {owner!r} indexes unknown property {pid}")
            if prop.owner != owner:
                raise SnapshotError(f"Property {pid} indexed under {owner!r} but owned by {prop.owner!r}")
            if pid in indexed:
                raise SnapshotError(f"Property {pid} indexed twice")
            indexed.add(pid)

    missing = properties.keys() - indexed
    if missing:
        raise SnapshotError(f"Properties missing from owner index: {sorted(missing)}")


def _validate_listings(snap: RegistrySnapshot, properties: dict[int, Property]) -> None:
    listed: set[int] = set()
    for pid, listing in snap.listings:
        if pid != listing.property_id:
            raise SnapshotError(f"Listing entry {pid} holds listing for {listing.property_id}")
        prop = properties.get(pid)
        if prop is None:
            raise SnapshotError(f"Listing for unknown property {pid}")
        if not prop.is_listed:
            raise SnapshotError(f"Listing for property {pid} which is neither for sale nor rent")
        if prop.is_for_sale and listing.listing_type != ListingType.SALE:
            raise SnapshotError(f"Property {pid} is for sale but listed as {listing.listing_type.value}")
        if not prop.is_for_sale and listing.listing_type != ListingType.RENT:
            raise SnapshotError(f"Property {pid} is only for rent but listed as {listing.listing_type.value}")
        if (listing.rental_period is not None) != (listing.listing_type == ListingType.RENT):
            raise SnapshotError(
                f"Listing {pid} has rental period {listing.rental_period!r} "
                f"for a {listing.listing_type.value} listing"
            )
        if pid in listed:
            raise SnapshotError(f"Duplicate listing entry {pid}")
        listed.add(pid)

    unlisted = {pid for pid, prop in properties.items() if prop.is_listed} - listed
    if unlisted:
        raise SnapshotError(f"Listed properties without a listing: {sorted(unlisted)}")
