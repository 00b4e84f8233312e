"""In-memory stores for properties, owners and listings."""

from property_registry.store.listing_view import ListingView
from property_registry.store.owner_index import OwnerIndex
from property_registry.store.property_store import PropertyStore
from property_registry.store.snapshot import PersistenceSnapshot, RegistrySnapshot

__all__ = ["ListingView", "OwnerIndex", "PersistenceSnapshot", "PropertyStore", "RegistrySnapshot"]
